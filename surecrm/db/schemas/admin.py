import uuid
from datetime import datetime
from typing import Any, Dict
from pydantic import BaseModel, ConfigDict


class AdminSetting(BaseModel):
    id: uuid.UUID
    key: str
    value: Any = None
    description: str | None = None
    is_active: bool
    updated_by_id: uuid.UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    model_config = ConfigDict(from_attributes=True)


class AdminStats(BaseModel):
    stat_type: str
    stat_data: Dict[str, Any]
    calculated_at: datetime
    expires_at: datetime
    model_config = ConfigDict(from_attributes=True)


class AuditLogStats(BaseModel):
    total: int
    today: int
    errors: int
    unauthorized: int
    unique_actors: int
