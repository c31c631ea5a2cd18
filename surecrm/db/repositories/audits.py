"""
Audit log repository functions.

Implements create and query functions for audit logs, including the
backoffice search and summary counters.
"""
from __future__ import annotations

import uuid
from datetime import datetime, time
from typing import Optional
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from surecrm.db import schemas, models
from surecrm.db.models import now_utc


def create_audit_log(db: Session, audit_log: schemas.AuditLogCreate, actor_user_id: Optional[uuid.UUID]):
    data = audit_log.model_dump()
    metadata_payload = data.pop('metadata', None)
    db_audit_log = models.AuditLog(
        **data,
        actor_user_id=actor_user_id,
        metadata_json=metadata_payload,
    )
    db.add(db_audit_log)
    db.commit()
    db.refresh(db_audit_log)
    return db_audit_log


def get_audit_logs(
    db: Session,
    user_id: Optional[uuid.UUID] = None,
    action_type: Optional[str] = None,
    target_type: Optional[str] = None,
    target_id: Optional[uuid.UUID] = None,
    status: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
):
    query = db.query(models.AuditLog)
    if user_id:
        query = query.filter(models.AuditLog.actor_user_id == user_id)
    if action_type:
        query = query.filter(models.AuditLog.action_type == action_type)
    if target_type:
        query = query.filter(models.AuditLog.target_type == target_type)
    if target_id:
        query = query.filter(models.AuditLog.target_id == target_id)
    if status:
        query = query.filter(models.AuditLog.status == status)
    return query.order_by(models.AuditLog.created_at.desc()).offset(skip).limit(limit).all()


def search_audit_logs(
    db: Session,
    *,
    search: Optional[str] = None,
    action: Optional[str] = None,
    limit: int = 50,
):
    """Most recent rows whose action (or target type) contains both filters."""
    query = db.query(models.AuditLog)
    if search:
        query = query.filter(
            or_(
                models.AuditLog.action_type.icontains(search, autoescape=True),
                models.AuditLog.target_type.icontains(search, autoescape=True),
            )
        )
    if action:
        query = query.filter(models.AuditLog.action_type.icontains(action, autoescape=True))
    return query.order_by(models.AuditLog.created_at.desc()).limit(limit).all()


def get_audit_log_stats(db: Session, *, now: Optional[datetime] = None) -> dict:
    current = now or now_utc()
    start_of_day = datetime.combine(current.date(), time.min, tzinfo=current.tzinfo)
    base = db.query(models.AuditLog)
    unique_actors = (
        db.query(func.count(func.distinct(models.AuditLog.actor_user_id)))
        .filter(models.AuditLog.actor_user_id.isnot(None))
        .scalar()
    )
    return {
        "total": base.count(),
        "today": base.filter(models.AuditLog.created_at >= start_of_day).count(),
        "errors": base.filter(models.AuditLog.action_type.like("%ERROR%")).count(),
        "unauthorized": base.filter(models.AuditLog.action_type.like("%UNAUTHORIZED%")).count(),
        "unique_actors": int(unique_actors or 0),
    }
