import uuid
from sqlalchemy import Column, String, Text, Integer, Boolean, DateTime, ForeignKey, Index, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID
from .base import Base, now_utc


class Document(Base):
    __tablename__ = 'documents'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    client_id = Column(UUID(as_uuid=True), ForeignKey('clients.id', ondelete='CASCADE'), nullable=False)
    insurance_policy_id = Column(
        UUID(as_uuid=True), ForeignKey('insurance_policies.id', ondelete='SET NULL'), nullable=True
    )
    agent_id = Column(UUID(as_uuid=True), ForeignKey('users.id'), nullable=False)
    document_type = Column(String(40), nullable=False, default='other')
    file_name = Column(String(300), nullable=False)
    file_path = Column(Text, nullable=False)
    mime_type = Column(String(100), nullable=True)
    size = Column(Integer, nullable=False, default=0)
    description = Column(Text, nullable=True)
    privacy_level = Column(String(20), nullable=False, default='private')
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    __table_args__ = (
        Index('ix_documents_client_id', 'client_id'),
        CheckConstraint('size >= 0', name='ck_documents_size_non_negative'),
    )
