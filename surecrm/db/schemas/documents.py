import uuid
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field

from surecrm.privacy import PrivacyLevel


class DocumentType(str, Enum):
    policy = "policy"
    id_card = "id_card"
    vehicle_registration = "vehicle_registration"
    vehicle_photo = "vehicle_photo"
    dashboard_photo = "dashboard_photo"
    license_plate_photo = "license_plate_photo"
    blackbox_photo = "blackbox_photo"
    insurance_policy_photo = "insurance_policy_photo"
    other = "other"


class DocumentCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    document_type: DocumentType = DocumentType.other
    file_name: str = Field(min_length=1, max_length=300)
    file_path: str = Field(min_length=1)
    mime_type: str | None = None
    size: int = Field(default=0, ge=0)
    description: str | None = None
    insurance_policy_id: uuid.UUID | None = None
    privacy_level: PrivacyLevel = PrivacyLevel.PRIVATE


class DocumentUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    document_type: DocumentType | None = None
    description: str | None = None
    privacy_level: PrivacyLevel | None = None


class Document(BaseModel):
    id: uuid.UUID
    client_id: uuid.UUID
    insurance_policy_id: uuid.UUID | None = None
    agent_id: uuid.UUID
    document_type: str
    file_name: str
    file_path: str
    mime_type: str | None = None
    size: int
    description: str | None = None
    privacy_level: str
    is_active: bool
    created_at: datetime | None = None
    model_config = ConfigDict(from_attributes=True)
