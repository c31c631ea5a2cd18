import uuid
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator

from surecrm.privacy import PrivacyLevel
from .pipeline import HEX_COLOR_PATTERN


def _clean_tag_name(value):
    if value is None:
        return value
    value = value.strip()
    if not value:
        raise ValueError("name must not be blank")
    return value


class TagCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    name: str = Field(min_length=1, max_length=50)
    color: str = Field(default="#3b82f6", pattern=HEX_COLOR_PATTERN)
    description: str | None = None
    privacy_level: PrivacyLevel = PrivacyLevel.PUBLIC

    _strip_name = field_validator("name")(_clean_tag_name)


class TagUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    name: str | None = Field(default=None, min_length=1, max_length=50)
    color: str | None = Field(default=None, pattern=HEX_COLOR_PATTERN)
    description: str | None = None
    privacy_level: PrivacyLevel | None = None

    _strip_name = field_validator("name")(_clean_tag_name)


class Tag(BaseModel):
    id: uuid.UUID
    agent_id: uuid.UUID
    name: str
    color: str
    description: str | None = None
    privacy_level: str
    is_active: bool
    created_at: datetime | None = None
    usage_count: int = 0
    model_config = ConfigDict(from_attributes=True)


class TagAssignment(BaseModel):
    id: uuid.UUID
    client_id: uuid.UUID
    tag_id: uuid.UUID
    assigned_by: uuid.UUID | None = None
    assigned_at: datetime
    model_config = ConfigDict(from_attributes=True)
