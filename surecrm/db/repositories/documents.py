"""
Client document repository functions.

Only document metadata is stored here; file bytes live in external storage.
"""
from __future__ import annotations

import uuid
from sqlalchemy.orm import Session

from surecrm.db import models, schemas


def get_document(db: Session, document_id: uuid.UUID):
    return (
        db.query(models.Document)
        .filter(models.Document.id == document_id, models.Document.is_active.is_(True))
        .first()
    )


def get_client_documents(db: Session, client_id: uuid.UUID):
    return (
        db.query(models.Document)
        .filter(models.Document.client_id == client_id, models.Document.is_active.is_(True))
        .order_by(models.Document.created_at.desc())
        .all()
    )


def create_document(
    db: Session,
    *,
    client_id: uuid.UUID,
    agent_id: uuid.UUID,
    document: schemas.DocumentCreate,
):
    db_document = models.Document(**document.model_dump(), client_id=client_id, agent_id=agent_id)
    db.add(db_document)
    db.commit()
    db.refresh(db_document)
    return db_document


def update_document(db: Session, document_id: uuid.UUID, document: schemas.DocumentUpdate):
    db_document = get_document(db, document_id)
    if db_document:
        for key, value in document.model_dump(exclude_unset=True).items():
            setattr(db_document, key, value)
        db.commit()
        db.refresh(db_document)
    return db_document


def soft_delete_document(db: Session, document_id: uuid.UUID):
    db_document = get_document(db, document_id)
    if db_document:
        db_document.is_active = False
        db.commit()
        db.refresh(db_document)
    return db_document
