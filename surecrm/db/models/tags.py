import uuid
from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, Index, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from .base import Base, now_utc


class Tag(Base):
    __tablename__ = 'tags'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    agent_id = Column(UUID(as_uuid=True), ForeignKey('users.id'), nullable=False)
    name = Column(String(50), nullable=False)
    color = Column(String(7), nullable=False, default='#3b82f6')
    description = Column(Text, nullable=True)
    privacy_level = Column(String(20), nullable=False, default='public')
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    assignments = relationship("TagAssignment", back_populates="tag", cascade="all, delete-orphan")

    __table_args__ = (
        Index('ix_tags_agent_id_is_active', 'agent_id', 'is_active'),
    )


class TagAssignment(Base):
    __tablename__ = 'tag_assignments'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    client_id = Column(UUID(as_uuid=True), ForeignKey('clients.id', ondelete='CASCADE'), nullable=False)
    tag_id = Column(UUID(as_uuid=True), ForeignKey('tags.id', ondelete='CASCADE'), nullable=False)
    assigned_by = Column(UUID(as_uuid=True), ForeignKey('users.id'), nullable=True)
    assigned_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)

    client = relationship("Client", back_populates="tag_assignments")
    tag = relationship("Tag", back_populates="assignments")

    __table_args__ = (
        UniqueConstraint('client_id', 'tag_id', name='uq_tag_assignments_client_tag'),
    )
