import uuid
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict
from pydantic import BaseModel, ConfigDict, Field

from surecrm.privacy import PrivacyLevel


class InsuranceType(str, Enum):
    life = "life"
    health = "health"
    auto = "auto"
    prenatal = "prenatal"
    property = "property"
    other = "other"


class PolicyStatus(str, Enum):
    draft = "draft"
    active = "active"
    cancelled = "cancelled"
    expired = "expired"
    suspended = "suspended"


class InsurancePolicyBase(BaseModel):
    insurance_type: InsuranceType
    product_name: str = Field(min_length=1, max_length=200)
    insurance_company: str = Field(min_length=1, max_length=200)
    policy_number: str | None = None
    contractor_name: str | None = None
    insured_name: str | None = None
    beneficiary_name: str | None = None
    contract_date: date | None = None
    effective_date: date | None = None
    expiration_date: date | None = None
    monthly_premium: Decimal | None = Field(default=None, ge=0)
    coverage_amount: Decimal | None = Field(default=None, ge=0)
    status: PolicyStatus = PolicyStatus.active
    details: Dict[str, Any] | None = None
    privacy_level: PrivacyLevel = PrivacyLevel.PRIVATE


class InsurancePolicyCreate(InsurancePolicyBase):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)


class InsurancePolicyUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    insurance_type: InsuranceType | None = None
    product_name: str | None = Field(default=None, min_length=1, max_length=200)
    insurance_company: str | None = Field(default=None, min_length=1, max_length=200)
    policy_number: str | None = None
    contractor_name: str | None = None
    insured_name: str | None = None
    beneficiary_name: str | None = None
    contract_date: date | None = None
    effective_date: date | None = None
    expiration_date: date | None = None
    monthly_premium: Decimal | None = Field(default=None, ge=0)
    coverage_amount: Decimal | None = Field(default=None, ge=0)
    status: PolicyStatus | None = None
    details: Dict[str, Any] | None = None
    privacy_level: PrivacyLevel | None = None


class InsurancePolicy(InsurancePolicyBase):
    id: uuid.UUID
    client_id: uuid.UUID
    agent_id: uuid.UUID
    insurance_type: str
    status: str
    privacy_level: str
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None
    model_config = ConfigDict(from_attributes=True)
