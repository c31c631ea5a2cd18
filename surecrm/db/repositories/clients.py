"""
Client repository functions.

Implements client CRUD with the agent-scoped list query (filters, sorting,
pagination), soft delete and referral lookups.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple
from sqlalchemy import case, func, or_
from sqlalchemy.orm import Session

from surecrm.db import models, schemas

SORTABLE_FIELDS = ("full_name", "created_at", "updated_at", "importance")

_IMPORTANCE_RANK = case(
    (models.Client.importance == "low", 1),
    (models.Client.importance == "medium", 2),
    (models.Client.importance == "high", 3),
    else_=0,
)


def get_client(db: Session, client_id: uuid.UUID):
    return db.query(models.Client).filter(models.Client.id == client_id).first()


def get_active_client(db: Session, client_id: uuid.UUID):
    return (
        db.query(models.Client)
        .filter(models.Client.id == client_id, models.Client.is_active.is_(True))
        .first()
    )


def get_active_client_by_phone(
    db: Session,
    agent_id: uuid.UUID,
    phone: str,
    *,
    exclude_id: Optional[uuid.UUID] = None,
):
    q = db.query(models.Client).filter(
        models.Client.agent_id == agent_id,
        models.Client.phone == phone,
        models.Client.is_active.is_(True),
    )
    if exclude_id is not None:
        q = q.filter(models.Client.id != exclude_id)
    return q.first()


def get_clients(
    db: Session,
    *,
    agent_id: uuid.UUID,
    search: Optional[str] = None,
    stage_id: Optional[uuid.UUID] = None,
    importance: Optional[str] = None,
    privacy_level: Optional[str] = None,
    tag_id: Optional[uuid.UUID] = None,
    include_confidential: bool = False,
    sort_by: str = "updated_at",
    sort_order: str = "desc",
    skip: int = 0,
    limit: int = 20,
) -> Tuple[List[models.Client], int]:
    """Return one page of the agent's active clients and the total match count."""
    q = db.query(models.Client).filter(
        models.Client.agent_id == agent_id,
        models.Client.is_active.is_(True),
    )
    if search:
        term = search.strip()
        q = q.filter(
            or_(
                models.Client.full_name.icontains(term, autoescape=True),
                models.Client.phone.icontains(term, autoescape=True),
                models.Client.email.icontains(term, autoescape=True),
                models.Client.occupation.icontains(term, autoescape=True),
            )
        )
    if stage_id:
        q = q.filter(models.Client.current_stage_id == stage_id)
    if importance:
        q = q.filter(models.Client.importance == importance)
    if privacy_level:
        q = q.filter(models.Client.privacy_level == privacy_level)
    if not include_confidential:
        q = q.filter(models.Client.privacy_level != "confidential")
    if tag_id:
        q = q.join(models.TagAssignment, models.TagAssignment.client_id == models.Client.id).filter(
            models.TagAssignment.tag_id == tag_id
        )

    total = q.count()

    if sort_by not in SORTABLE_FIELDS:
        sort_by = "updated_at"
    sort_column = _IMPORTANCE_RANK if sort_by == "importance" else getattr(models.Client, sort_by)
    ordering = sort_column.asc() if sort_order == "asc" else sort_column.desc()
    items = q.order_by(ordering, models.Client.id).offset(skip).limit(limit).all()
    return items, total


def create_client(db: Session, agent_id: uuid.UUID, client: schemas.ClientCreate):
    db_client = models.Client(**client.model_dump(), agent_id=agent_id)
    db.add(db_client)
    db.commit()
    db.refresh(db_client)
    return db_client


def update_client(db: Session, client_id: uuid.UUID, changes: Dict[str, object]):
    db_client = get_client(db, client_id)
    if db_client:
        for key, value in changes.items():
            setattr(db_client, key, value)
        db.commit()
        db.refresh(db_client)
    return db_client


def soft_delete_client(db: Session, client_id: uuid.UUID, reason: Optional[str] = None):
    """Deactivate the client and append a deletion note."""
    db_client = get_client(db, client_id)
    if not db_client:
        return None
    try:
        stamp = datetime.now(timezone.utc).isoformat()
        note = f"[deleted {stamp}] reason: {reason or 'not specified'}"
        db_client.notes = f"{db_client.notes}\n{note}" if db_client.notes else note
        db_client.is_active = False
        db.commit()
        db.refresh(db_client)
        return db_client
    except Exception as e:
        db.rollback()
        raise RuntimeError(f"Failed to delete client {client_id}: {str(e)}")


def get_referrals(db: Session, client_id: uuid.UUID):
    return (
        db.query(models.Client)
        .filter(models.Client.referred_by_id == client_id, models.Client.is_active.is_(True))
        .order_by(models.Client.created_at.desc())
        .all()
    )


def get_client_stats(db: Session, agent_id: uuid.UUID) -> Dict[str, object]:
    base = db.query(models.Client).filter(models.Client.agent_id == agent_id)
    total = base.count()
    active = base.filter(models.Client.is_active.is_(True)).count()
    importance_rows = (
        db.query(models.Client.importance, func.count(models.Client.id))
        .filter(models.Client.agent_id == agent_id, models.Client.is_active.is_(True))
        .group_by(models.Client.importance)
        .all()
    )
    by_importance = {"high": 0, "medium": 0, "low": 0}
    by_importance.update({level: int(count) for level, count in importance_rows})
    stage_rows = (
        db.query(models.PipelineStage.name, func.count(models.Client.id))
        .join(models.Client, models.Client.current_stage_id == models.PipelineStage.id)
        .filter(models.Client.agent_id == agent_id, models.Client.is_active.is_(True))
        .group_by(models.PipelineStage.name)
        .all()
    )
    return {
        "total": total,
        "active": active,
        "inactive": total - active,
        "by_importance": by_importance,
        "by_stage": {name: int(count) for name, count in stage_rows},
    }


def count_clients(db: Session, *, active_only: bool = False) -> int:
    q = db.query(models.Client)
    if active_only:
        q = q.filter(models.Client.is_active.is_(True))
    return q.count()
