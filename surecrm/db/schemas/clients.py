import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List
from pydantic import BaseModel, ConfigDict, Field

from surecrm.privacy import PrivacyLevel
from .documents import Document
from .insurance import InsurancePolicy
from .meetings import Meeting


class Importance(str, Enum):
    high = "high"
    medium = "medium"
    low = "low"


class ClientBase(BaseModel):
    full_name: str = Field(min_length=1, max_length=200)
    phone: str = Field(min_length=1, max_length=50)
    email: str | None = None
    telecom_provider: str | None = None
    address: str | None = None
    occupation: str | None = None
    has_driving_license: bool | None = None
    height: int | None = Field(default=None, gt=0)
    weight: int | None = Field(default=None, gt=0)
    importance: Importance = Importance.medium
    current_stage_id: uuid.UUID | None = None
    referred_by_id: uuid.UUID | None = None
    notes: str | None = None
    custom_fields: Dict[str, Any] | None = None
    privacy_level: PrivacyLevel = PrivacyLevel.PRIVATE


class ClientCreate(ClientBase):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)


class ClientUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    full_name: str | None = Field(default=None, min_length=1, max_length=200)
    phone: str | None = Field(default=None, min_length=1, max_length=50)
    email: str | None = None
    telecom_provider: str | None = None
    address: str | None = None
    occupation: str | None = None
    has_driving_license: bool | None = None
    height: int | None = Field(default=None, gt=0)
    weight: int | None = Field(default=None, gt=0)
    importance: Importance | None = None
    current_stage_id: uuid.UUID | None = None
    referred_by_id: uuid.UUID | None = None
    notes: str | None = None
    custom_fields: Dict[str, Any] | None = None
    privacy_level: PrivacyLevel | None = None


class Client(ClientBase):
    id: uuid.UUID
    agent_id: uuid.UUID
    # Masked display values are shorter than the validation bounds allow
    full_name: str
    phone: str
    importance: str
    privacy_level: str
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None
    model_config = ConfigDict(from_attributes=True)


class ClientSummary(BaseModel):
    id: uuid.UUID
    full_name: str
    phone: str
    importance: str
    privacy_level: str
    model_config = ConfigDict(from_attributes=True)


class TagBadge(BaseModel):
    id: uuid.UUID
    name: str
    color: str
    model_config = ConfigDict(from_attributes=True)


class ClientListItem(Client):
    stage_name: str | None = None
    tags: List[TagBadge] = []


class PaginatedClients(BaseModel):
    items: List[ClientListItem]
    total_count: int
    page: int
    page_size: int
    total_pages: int


class ClientStats(BaseModel):
    total: int
    active: int
    inactive: int
    by_importance: Dict[str, int]
    by_stage: Dict[str, int] = {}


class ClientDetail(ClientListItem):
    referred_by: ClientSummary | None = None
    referrals: List[ClientSummary] = []
    insurance_policies: List[InsurancePolicy] = []
    upcoming_meetings: List[Meeting] = []
    documents: List[Document] = []
