import uuid
from sqlalchemy import (
    Column,
    String,
    Text,
    Integer,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    CheckConstraint,
)
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import relationship
from .base import Base, now_utc


class Client(Base):
    __tablename__ = 'clients'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    agent_id = Column(UUID(as_uuid=True), ForeignKey('users.id'), nullable=False)
    full_name = Column(String(200), nullable=False)
    email = Column(String, nullable=True)
    phone = Column(String(50), nullable=False)
    telecom_provider = Column(String(50), nullable=True)
    address = Column(Text, nullable=True)
    occupation = Column(String(100), nullable=True)
    has_driving_license = Column(Boolean, nullable=True)
    height = Column(Integer, nullable=True)
    weight = Column(Integer, nullable=True)
    # 'high'|'medium'|'low'
    importance = Column(String(10), nullable=False, default='medium')
    current_stage_id = Column(UUID(as_uuid=True), ForeignKey('pipeline_stages.id', ondelete='SET NULL'), nullable=True)
    referred_by_id = Column(UUID(as_uuid=True), ForeignKey('clients.id', ondelete='SET NULL'), nullable=True)
    notes = Column(Text, nullable=True)
    custom_fields = Column(JSONB, nullable=True)
    # 'public'|'restricted'|'private'|'confidential'
    privacy_level = Column(String(20), nullable=False, default='private')
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    agent = relationship("User")
    current_stage = relationship("PipelineStage")
    referred_by = relationship("Client", remote_side=[id], foreign_keys=[referred_by_id])
    tag_assignments = relationship("TagAssignment", back_populates="client", cascade="all, delete-orphan")

    __table_args__ = (
        Index('ix_clients_agent_id_is_active', 'agent_id', 'is_active'),
        Index('ix_clients_agent_id_phone', 'agent_id', 'phone'),
        Index('ix_clients_referred_by_id', 'referred_by_id'),
        CheckConstraint("importance in ('high','medium','low')", name='ck_clients_importance'),
        CheckConstraint(
            "privacy_level in ('public','restricted','private','confidential')",
            name='ck_clients_privacy_level',
        ),
        CheckConstraint("height IS NULL OR height > 0", name='ck_clients_height_positive'),
        CheckConstraint("weight IS NULL OR weight > 0", name='ck_clients_weight_positive'),
    )
