"""
Meeting repository functions.

Meetings are hard deleted; the rest of the client record is soft deleted.
"""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session

from surecrm.db import models, schemas
from surecrm.db.models import now_utc


def get_meeting(db: Session, meeting_id: uuid.UUID):
    return db.query(models.Meeting).filter(models.Meeting.id == meeting_id).first()


def get_client_meetings(
    db: Session,
    client_id: uuid.UUID,
    *,
    upcoming_only: bool = False,
    now: Optional[datetime] = None,
    limit: Optional[int] = None,
):
    q = db.query(models.Meeting).filter(models.Meeting.client_id == client_id)
    if upcoming_only:
        q = q.filter(
            models.Meeting.start_time >= (now or now_utc()),
            models.Meeting.status == "scheduled",
        )
    q = q.order_by(models.Meeting.start_time.asc())
    if limit:
        q = q.limit(limit)
    return q.all()


def create_meeting(
    db: Session,
    *,
    client_id: uuid.UUID,
    agent_id: uuid.UUID,
    meeting: schemas.MeetingCreate,
):
    db_meeting = models.Meeting(**meeting.model_dump(), client_id=client_id, agent_id=agent_id)
    db.add(db_meeting)
    db.commit()
    db.refresh(db_meeting)
    return db_meeting


def update_meeting(db: Session, meeting_id: uuid.UUID, meeting: schemas.MeetingUpdate):
    db_meeting = get_meeting(db, meeting_id)
    if db_meeting:
        for key, value in meeting.model_dump(exclude_unset=True).items():
            setattr(db_meeting, key, value)
        db.commit()
        db.refresh(db_meeting)
    return db_meeting


def delete_meeting(db: Session, meeting_id: uuid.UUID):
    db_meeting = get_meeting(db, meeting_id)
    if db_meeting:
        db.delete(db_meeting)
        db.commit()
    return db_meeting
