"""
Backoffice summary statistics with a database-backed cache.

Each stat type is computed on demand and stored in ``admin_stats_cache``
until it expires (``ADMIN_STATS_CACHE_MINUTES``, default 30).
"""
import logging
import os
from datetime import timedelta
from typing import Any, Callable, Dict

from sqlalchemy.orm import Session

from surecrm.db import crud
from surecrm.db.models import as_utc, now_utc

logger = logging.getLogger(__name__)

DEFAULT_CACHE_MINUTES = 30


class UnknownStatType(ValueError):
    pass


def cache_minutes() -> int:
    raw = os.getenv("ADMIN_STATS_CACHE_MINUTES", "")
    try:
        value = int(raw)
    except ValueError:
        return DEFAULT_CACHE_MINUTES
    return value if value > 0 else DEFAULT_CACHE_MINUTES


def _users_summary(db: Session) -> Dict[str, Any]:
    total = crud.count_users(db)
    active = crud.count_users(db, active_only=True)
    return {
        "total": total,
        "active": active,
        "inactive": total - active,
        "by_role": crud.count_users_by_role(db),
    }


def _clients_summary(db: Session) -> Dict[str, Any]:
    total = crud.count_clients(db)
    active = crud.count_clients(db, active_only=True)
    return {"total": total, "active": active, "deleted": total - active}


STAT_CALCULATORS: Dict[str, Callable[[Session], Dict[str, Any]]] = {
    "users_summary": _users_summary,
    "clients_summary": _clients_summary,
}


def get_stats(db: Session, stat_type: str, *, force_refresh: bool = False):
    """Return the cache entry for ``stat_type``, recomputing it when stale."""
    calculator = STAT_CALCULATORS.get(stat_type)
    if calculator is None:
        raise UnknownStatType(stat_type)
    now = now_utc()
    entry = crud.get_admin_stats_cache(db, stat_type)
    if entry is not None and not force_refresh and as_utc(entry.expires_at) > now:
        return entry
    logger.debug("admin_stats_refresh: %s", stat_type)
    return crud.upsert_admin_stats_cache(
        db,
        stat_type=stat_type,
        stat_data=calculator(db),
        expires_at=now + timedelta(minutes=cache_minutes()),
    )


def get_dashboard_stats(db: Session) -> Dict[str, Dict[str, Any]]:
    return {stat_type: get_stats(db, stat_type).stat_data for stat_type in STAT_CALCULATORS}
