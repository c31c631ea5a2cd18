"""
Authentication helpers and identity resolution.

Parses reverse-proxy headers, normalizes emails, and upserts agent profiles
while supporting system-admin elevation via environment configuration.
"""
import os
from typing import Optional, Tuple
from sqlalchemy.orm import Session

from surecrm.db import models
from surecrm.db.models import now_utc
from surecrm.utils.roles import ROLE_AGENT, ROLE_SYSTEM_ADMIN


def _normalize_email(email: Optional[str]) -> Optional[str]:
    if not email:
        return None
    return email.strip().lower()


def _normalize_list_env(var_name: str) -> set:
    raw = os.getenv(var_name, "")
    values = set()
    for entry in raw.split(","):
        cleaned = entry.strip().strip('"').strip("'")
        if cleaned:
            values.add(cleaned.lower())
    return values


def _admin_emails() -> set:
    return _normalize_list_env("ADMIN_EMAILS")


def resolve_identity_from_headers(
    x_auth_request_user: Optional[str],
    x_auth_request_email: Optional[str],
    x_forwarded_user: Optional[str],
    x_forwarded_email: Optional[str],
) -> Tuple[Optional[str], Optional[str]]:
    user = x_auth_request_user or x_forwarded_user
    email = _normalize_email(x_auth_request_email or x_forwarded_email)
    return user, email


def get_or_create_user(db: Session, email: str, full_name: Optional[str] = None) -> models.User:
    user = db.query(models.User).filter(models.User.email == email).first()
    admins = _admin_emails()
    if not user:
        user = models.User(
            email=email,
            full_name=full_name or email.split("@")[0],
            role=ROLE_SYSTEM_ADMIN if email in admins else ROLE_AGENT,
            last_login_at=now_utc(),
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    # Existing users might predate a new ADMIN_EMAILS value; promote them when necessary.
    if email in admins and user.role != ROLE_SYSTEM_ADMIN:
        user.role = ROLE_SYSTEM_ADMIN
        try:
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(user)
    return user
