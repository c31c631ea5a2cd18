import uuid
from sqlalchemy import (
    Column,
    String,
    Text,
    Boolean,
    Date,
    DateTime,
    Numeric,
    ForeignKey,
    Index,
    CheckConstraint,
)
from sqlalchemy.dialects.postgresql import UUID, JSONB
from .base import Base, now_utc


class InsurancePolicy(Base):
    __tablename__ = 'insurance_policies'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    client_id = Column(UUID(as_uuid=True), ForeignKey('clients.id', ondelete='CASCADE'), nullable=False)
    agent_id = Column(UUID(as_uuid=True), ForeignKey('users.id'), nullable=False)
    insurance_type = Column(String(20), nullable=False)
    product_name = Column(String(200), nullable=False)
    insurance_company = Column(String(200), nullable=False)
    policy_number = Column(String(100), nullable=True)
    contractor_name = Column(String(200), nullable=True)
    insured_name = Column(String(200), nullable=True)
    beneficiary_name = Column(String(200), nullable=True)
    contract_date = Column(Date, nullable=True)
    effective_date = Column(Date, nullable=True)
    expiration_date = Column(Date, nullable=True)
    monthly_premium = Column(Numeric(12, 2), nullable=True)
    coverage_amount = Column(Numeric(15, 2), nullable=True)
    status = Column(String(20), nullable=False, default='active')
    details = Column(JSONB, nullable=True)
    privacy_level = Column(String(20), nullable=False, default='private')
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    __table_args__ = (
        Index('ix_insurance_policies_client_id', 'client_id'),
        CheckConstraint(
            "insurance_type in ('life','health','auto','prenatal','property','other')",
            name='ck_insurance_policies_type',
        ),
        CheckConstraint(
            "status in ('draft','active','cancelled','expired','suspended')",
            name='ck_insurance_policies_status',
        ),
    )
