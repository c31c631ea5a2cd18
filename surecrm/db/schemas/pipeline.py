import uuid
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


HEX_COLOR_PATTERN = r"^#[0-9a-fA-F]{6}$"


class PipelineStageCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    color: str = Field(default="#64748b", pattern=HEX_COLOR_PATTERN)
    sort_order: int | None = None


class PipelineStage(BaseModel):
    id: uuid.UUID
    agent_id: uuid.UUID
    name: str
    sort_order: int
    color: str
    is_default: bool
    model_config = ConfigDict(from_attributes=True)


class StageChange(BaseModel):
    stage_id: uuid.UUID
    reason: str | None = None
    notes: str | None = None


class ClientStageHistory(BaseModel):
    id: uuid.UUID
    client_id: uuid.UUID
    agent_id: uuid.UUID
    from_stage_id: uuid.UUID | None = None
    to_stage_id: uuid.UUID | None = None
    reason: str | None = None
    notes: str | None = None
    changed_at: datetime
    model_config = ConfigDict(from_attributes=True)
