import uuid
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator

from surecrm.db.models.base import as_utc
from surecrm.privacy import PrivacyLevel


class ContactMethod(str, Enum):
    phone = "phone"
    email = "email"
    kakao = "kakao"
    sms = "sms"
    in_person = "in_person"
    video_call = "video_call"


class ContactHistoryBase(BaseModel):
    contact_method: ContactMethod
    subject: str | None = Field(default=None, max_length=200)
    content: str | None = None
    duration: int | None = Field(default=None, ge=0)
    outcome: str | None = None
    next_action: str | None = None
    next_action_date: datetime | None = None
    contacted_at: datetime | None = None
    privacy_level: PrivacyLevel = PrivacyLevel.RESTRICTED

    @field_validator("next_action_date", "contacted_at")
    @classmethod
    def _to_utc(cls, value):
        return as_utc(value)


class ContactHistoryCreate(ContactHistoryBase):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)


class ContactHistoryUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    contact_method: ContactMethod | None = None
    subject: str | None = Field(default=None, max_length=200)
    content: str | None = None
    duration: int | None = Field(default=None, ge=0)
    outcome: str | None = None
    next_action: str | None = None
    next_action_date: datetime | None = None
    contacted_at: datetime | None = None
    privacy_level: PrivacyLevel | None = None

    @field_validator("next_action_date", "contacted_at")
    @classmethod
    def _to_utc(cls, value):
        return as_utc(value)


class ContactHistory(ContactHistoryBase):
    id: uuid.UUID
    client_id: uuid.UUID
    agent_id: uuid.UUID
    contact_method: str
    privacy_level: str
    contacted_at: datetime
    created_at: datetime | None = None
    model_config = ConfigDict(from_attributes=True)
