"""
Backoffice repository functions: system settings and the stats cache.
"""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, Optional
from sqlalchemy.orm import Session

from surecrm.db import models
from surecrm.db.models import now_utc


def get_settings(db: Session):
    return db.query(models.AdminSetting).order_by(models.AdminSetting.updated_at.desc()).all()


def get_setting(db: Session, setting_id: uuid.UUID):
    return db.query(models.AdminSetting).filter(models.AdminSetting.id == setting_id).first()


def get_setting_by_key(db: Session, key: str):
    return db.query(models.AdminSetting).filter(models.AdminSetting.key == key).first()


def create_setting(
    db: Session,
    *,
    key: str,
    value: Any,
    description: Optional[str] = None,
    updated_by_id: Optional[uuid.UUID] = None,
):
    db_setting = models.AdminSetting(
        key=key,
        value=value,
        description=description,
        updated_by_id=updated_by_id,
    )
    db.add(db_setting)
    db.commit()
    db.refresh(db_setting)
    return db_setting


def update_setting(
    db: Session,
    setting_id: uuid.UUID,
    *,
    value: Any,
    description: Optional[str] = None,
    updated_by_id: Optional[uuid.UUID] = None,
):
    db_setting = get_setting(db, setting_id)
    if db_setting:
        db_setting.value = value
        if description is not None:
            db_setting.description = description
        db_setting.updated_by_id = updated_by_id
        db_setting.updated_at = now_utc()
        db.commit()
        db.refresh(db_setting)
    return db_setting


def get_stats_cache(db: Session, stat_type: str):
    return db.query(models.AdminStatsCache).filter(models.AdminStatsCache.stat_type == stat_type).first()


def upsert_stats_cache(db: Session, *, stat_type: str, stat_data: Dict[str, Any], expires_at: datetime):
    entry = get_stats_cache(db, stat_type)
    if entry is None:
        entry = models.AdminStatsCache(stat_type=stat_type)
        db.add(entry)
    entry.stat_data = stat_data
    entry.calculated_at = now_utc()
    entry.expires_at = expires_at
    db.commit()
    db.refresh(entry)
    return entry
