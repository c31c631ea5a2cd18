"""
Client contact history repository functions.

Entries are hard deleted and listed newest contact first.
"""
from __future__ import annotations

import uuid
from typing import Optional
from sqlalchemy.orm import Session

from surecrm.db import models, schemas


def get_contact(db: Session, contact_id: uuid.UUID):
    return db.query(models.ContactHistory).filter(models.ContactHistory.id == contact_id).first()


def get_client_contacts(db: Session, client_id: uuid.UUID, *, limit: Optional[int] = None):
    q = (
        db.query(models.ContactHistory)
        .filter(models.ContactHistory.client_id == client_id)
        .order_by(models.ContactHistory.contacted_at.desc(), models.ContactHistory.created_at.desc())
    )
    if limit:
        q = q.limit(limit)
    return q.all()


def create_contact(
    db: Session,
    *,
    client_id: uuid.UUID,
    agent_id: uuid.UUID,
    contact: schemas.ContactHistoryCreate,
):
    data = contact.model_dump(exclude_none=True)
    db_contact = models.ContactHistory(**data, client_id=client_id, agent_id=agent_id)
    db.add(db_contact)
    db.commit()
    db.refresh(db_contact)
    return db_contact


def update_contact(db: Session, contact_id: uuid.UUID, contact: schemas.ContactHistoryUpdate):
    db_contact = get_contact(db, contact_id)
    if db_contact:
        for key, value in contact.model_dump(exclude_unset=True).items():
            setattr(db_contact, key, value)
        db.commit()
        db.refresh(db_contact)
    return db_contact


def delete_contact(db: Session, contact_id: uuid.UUID):
    db_contact = get_contact(db, contact_id)
    if db_contact:
        db.delete(db_contact)
        db.commit()
    return db_contact
