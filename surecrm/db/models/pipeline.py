import uuid
from sqlalchemy import Column, String, Text, Integer, Boolean, DateTime, ForeignKey, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from .base import Base, now_utc


DEFAULT_STAGES = (
    ("Prospect", "#64748b"),
    ("Contacted", "#0ea5e9"),
    ("Proposal", "#f59e0b"),
    ("Contract", "#8b5cf6"),
    ("Closed", "#22c55e"),
)


class PipelineStage(Base):
    __tablename__ = 'pipeline_stages'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    agent_id = Column(UUID(as_uuid=True), ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    name = Column(String(100), nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)
    color = Column(String(7), nullable=False, default='#64748b')
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=now_utc)

    __table_args__ = (
        Index('ix_pipeline_stages_agent_id_sort_order', 'agent_id', 'sort_order'),
    )


class ClientStageHistory(Base):
    __tablename__ = 'client_stage_history'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    client_id = Column(UUID(as_uuid=True), ForeignKey('clients.id', ondelete='CASCADE'), nullable=False)
    agent_id = Column(UUID(as_uuid=True), ForeignKey('users.id'), nullable=False)
    from_stage_id = Column(UUID(as_uuid=True), ForeignKey('pipeline_stages.id', ondelete='SET NULL'), nullable=True)
    to_stage_id = Column(UUID(as_uuid=True), ForeignKey('pipeline_stages.id', ondelete='SET NULL'), nullable=True)
    reason = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    changed_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)

    from_stage = relationship("PipelineStage", foreign_keys=[from_stage_id])
    to_stage = relationship("PipelineStage", foreign_keys=[to_stage_id])

    __table_args__ = (
        Index('ix_client_stage_history_client_id_changed_at', 'client_id', 'changed_at'),
    )
