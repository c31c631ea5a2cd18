import uuid
from sqlalchemy import Column, String, Text, Integer, DateTime, ForeignKey, Index, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID
from .base import Base, now_utc


class ContactHistory(Base):
    """A logged call, message or visit with a client."""
    __tablename__ = 'client_contact_history'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    client_id = Column(UUID(as_uuid=True), ForeignKey('clients.id', ondelete='CASCADE'), nullable=False)
    agent_id = Column(UUID(as_uuid=True), ForeignKey('users.id'), nullable=False)
    contact_method = Column(String(20), nullable=False)
    subject = Column(String(200), nullable=True)
    content = Column(Text, nullable=True)
    # minutes
    duration = Column(Integer, nullable=True)
    outcome = Column(Text, nullable=True)
    next_action = Column(Text, nullable=True)
    next_action_date = Column(DateTime(timezone=True), nullable=True)
    contacted_at = Column(DateTime(timezone=True), nullable=False, default=now_utc)
    privacy_level = Column(String(20), nullable=False, default='restricted')
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    __table_args__ = (
        Index('ix_client_contact_history_client_id_contacted_at', 'client_id', 'contacted_at'),
        CheckConstraint(
            "contact_method in ('phone','email','kakao','sms','in_person','video_call')",
            name='ck_client_contact_history_method',
        ),
        CheckConstraint('duration IS NULL OR duration >= 0', name='ck_client_contact_history_duration'),
    )
