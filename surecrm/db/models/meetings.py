import uuid
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Index, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID
from .base import Base, now_utc


class Meeting(Base):
    __tablename__ = 'meetings'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    client_id = Column(UUID(as_uuid=True), ForeignKey('clients.id', ondelete='CASCADE'), nullable=False)
    agent_id = Column(UUID(as_uuid=True), ForeignKey('users.id'), nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)
    location = Column(String(300), nullable=True)
    meeting_type = Column(String(30), nullable=False, default='first_consultation')
    status = Column(String(20), nullable=False, default='scheduled')
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    __table_args__ = (
        Index('ix_meetings_client_id_start_time', 'client_id', 'start_time'),
        Index('ix_meetings_agent_id_start_time', 'agent_id', 'start_time'),
        CheckConstraint('end_time > start_time', name='ck_meetings_end_after_start'),
        CheckConstraint(
            "meeting_type in ('first_consultation','product_explanation','contract_review','follow_up','other')",
            name='ck_meetings_type',
        ),
        CheckConstraint(
            "status in ('scheduled','completed','cancelled','rescheduled')",
            name='ck_meetings_status',
        ),
    )
