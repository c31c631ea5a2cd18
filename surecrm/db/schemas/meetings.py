import uuid
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from surecrm.db.models.base import as_utc


class MeetingType(str, Enum):
    first_consultation = "first_consultation"
    product_explanation = "product_explanation"
    contract_review = "contract_review"
    follow_up = "follow_up"
    other = "other"


class MeetingStatus(str, Enum):
    scheduled = "scheduled"
    completed = "completed"
    cancelled = "cancelled"
    rescheduled = "rescheduled"


class MeetingBase(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = None
    start_time: datetime
    end_time: datetime
    location: str | None = None
    meeting_type: MeetingType = MeetingType.first_consultation
    status: MeetingStatus = MeetingStatus.scheduled
    notes: str | None = None

    # Naive times are taken as UTC so mixed inputs stay comparable.
    @field_validator("start_time", "end_time")
    @classmethod
    def _to_utc(cls, value):
        return as_utc(value)


class MeetingCreate(MeetingBase):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    @model_validator(mode="after")
    def _end_after_start(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class MeetingUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    location: str | None = None
    meeting_type: MeetingType | None = None
    status: MeetingStatus | None = None
    notes: str | None = None

    @field_validator("start_time", "end_time")
    @classmethod
    def _to_utc(cls, value):
        return as_utc(value)

    @model_validator(mode="after")
    def _end_after_start(self):
        if self.start_time and self.end_time and self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class Meeting(MeetingBase):
    id: uuid.UUID
    client_id: uuid.UUID
    agent_id: uuid.UUID
    meeting_type: str
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    model_config = ConfigDict(from_attributes=True)
