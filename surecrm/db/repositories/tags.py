"""
Tag repository functions.

Implements per-agent tag CRUD, client assignments and usage counts.
"""
from __future__ import annotations

import uuid
from typing import Dict, Iterable, List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from surecrm.db import models, schemas


def get_tag(db: Session, tag_id: uuid.UUID):
    return db.query(models.Tag).filter(models.Tag.id == tag_id, models.Tag.is_active.is_(True)).first()


def get_active_tag_by_name(
    db: Session,
    agent_id: uuid.UUID,
    name: str,
    *,
    exclude_id: Optional[uuid.UUID] = None,
):
    q = db.query(models.Tag).filter(
        models.Tag.agent_id == agent_id,
        models.Tag.is_active.is_(True),
        func.lower(models.Tag.name) == name.strip().lower(),
    )
    if exclude_id is not None:
        q = q.filter(models.Tag.id != exclude_id)
    return q.first()


def get_tags(db: Session, agent_id: uuid.UUID) -> List[models.Tag]:
    return (
        db.query(models.Tag)
        .filter(models.Tag.agent_id == agent_id, models.Tag.is_active.is_(True))
        .order_by(models.Tag.name)
        .all()
    )


def get_tag_usage_counts(db: Session, tag_ids: Iterable[uuid.UUID]) -> Dict[uuid.UUID, int]:
    ids = list(tag_ids)
    if not ids:
        return {}
    rows = (
        db.query(models.TagAssignment.tag_id, func.count(models.TagAssignment.id))
        .join(models.Client, models.Client.id == models.TagAssignment.client_id)
        .filter(models.TagAssignment.tag_id.in_(ids), models.Client.is_active.is_(True))
        .group_by(models.TagAssignment.tag_id)
        .all()
    )
    return {tag_id: int(count) for tag_id, count in rows}


def create_tag(db: Session, agent_id: uuid.UUID, tag: schemas.TagCreate):
    data = tag.model_dump()
    data["name"] = data["name"].strip()
    db_tag = models.Tag(**data, agent_id=agent_id)
    db.add(db_tag)
    db.commit()
    db.refresh(db_tag)
    return db_tag


def update_tag(db: Session, tag_id: uuid.UUID, tag: schemas.TagUpdate):
    db_tag = get_tag(db, tag_id)
    if db_tag:
        for key, value in tag.model_dump(exclude_unset=True).items():
            if key == "name" and value:
                value = value.strip()
            setattr(db_tag, key, value)
        db.commit()
        db.refresh(db_tag)
    return db_tag


def delete_tag(db: Session, tag_id: uuid.UUID):
    """Deactivate the tag and drop every assignment of it."""
    db_tag = get_tag(db, tag_id)
    if not db_tag:
        return None
    try:
        db.query(models.TagAssignment).filter(models.TagAssignment.tag_id == tag_id).delete(
            synchronize_session=False
        )
        db_tag.is_active = False
        db.commit()
        db.refresh(db_tag)
        return db_tag
    except Exception as e:
        db.rollback()
        raise RuntimeError(f"Failed to delete tag {tag_id}: {str(e)}")


def get_assignment(db: Session, client_id: uuid.UUID, tag_id: uuid.UUID):
    return (
        db.query(models.TagAssignment)
        .filter(models.TagAssignment.client_id == client_id, models.TagAssignment.tag_id == tag_id)
        .first()
    )


def assign_tag(db: Session, *, client_id: uuid.UUID, tag_id: uuid.UUID, assigned_by: Optional[uuid.UUID] = None):
    db_assignment = models.TagAssignment(client_id=client_id, tag_id=tag_id, assigned_by=assigned_by)
    db.add(db_assignment)
    db.commit()
    db.refresh(db_assignment)
    return db_assignment


def unassign_tag(db: Session, client_id: uuid.UUID, tag_id: uuid.UUID):
    db_assignment = get_assignment(db, client_id, tag_id)
    if db_assignment:
        db.delete(db_assignment)
        db.commit()
    return db_assignment


def get_client_tags(db: Session, client_id: uuid.UUID) -> List[models.Tag]:
    return (
        db.query(models.Tag)
        .join(models.TagAssignment, models.TagAssignment.tag_id == models.Tag.id)
        .filter(models.TagAssignment.client_id == client_id, models.Tag.is_active.is_(True))
        .order_by(models.Tag.name)
        .all()
    )


def get_tags_for_clients(db: Session, client_ids: Iterable[uuid.UUID]) -> Dict[uuid.UUID, List[models.Tag]]:
    ids = list(client_ids)
    result: Dict[uuid.UUID, List[models.Tag]] = {cid: [] for cid in ids}
    if not ids:
        return result
    rows = (
        db.query(models.TagAssignment.client_id, models.Tag)
        .join(models.Tag, models.Tag.id == models.TagAssignment.tag_id)
        .filter(models.TagAssignment.client_id.in_(ids), models.Tag.is_active.is_(True))
        .order_by(models.Tag.name)
        .all()
    )
    for client_id, tag in rows:
        result.setdefault(client_id, []).append(tag)
    return result
