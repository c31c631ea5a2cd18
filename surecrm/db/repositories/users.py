"""
User (agent profile) repository functions.
"""
from __future__ import annotations

import uuid
from typing import Optional
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from surecrm.db import models


def get_user(db: Session, user_id: uuid.UUID):
    return db.query(models.User).filter(models.User.id == user_id).first()


def get_user_by_email(db: Session, email: str):
    return db.query(models.User).filter(models.User.email == email).first()


def get_users(db: Session, *, search: Optional[str] = None, skip: int = 0, limit: int = 100):
    q = db.query(models.User)
    if search:
        q = q.filter(
            or_(
                models.User.email.icontains(search, autoescape=True),
                models.User.full_name.icontains(search, autoescape=True),
            )
        )
    return q.order_by(models.User.created_at.desc()).offset(skip).limit(limit).all()


def set_user_active(db: Session, user_id: uuid.UUID, is_active: bool):
    user = get_user(db, user_id)
    if user:
        user.is_active = is_active
        db.commit()
        db.refresh(user)
    return user


def count_users(db: Session, *, active_only: bool = False) -> int:
    q = db.query(models.User)
    if active_only:
        q = q.filter(models.User.is_active.is_(True))
    return q.count()


def count_users_by_role(db: Session) -> dict:
    rows = db.query(models.User.role, func.count(models.User.id)).group_by(models.User.role).all()
    return {role: int(count) for role, count in rows}
