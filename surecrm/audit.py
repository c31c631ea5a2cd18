"""
Audit logging helpers and enums.

Centralized helpers to persist normalized audit records for client data
access and backoffice administration; includes convenience wrappers per
target type.
"""
from __future__ import annotations

import logging
import uuid
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Optional

from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session

from surecrm.db import crud, schemas
from surecrm.utils.feature_flags import audit_logging_enabled

logger = logging.getLogger(__name__)


class AuditAction(str, Enum):
    # Client records
    CLIENT_LIST = "client_list"
    CLIENT_VIEW = "client_view"
    CLIENT_CREATE = "client_create"
    CLIENT_UPDATE = "client_update"
    CLIENT_DELETE = "client_delete"
    CLIENT_STAGE_CHANGE = "client_stage_change"
    # Insurance policies
    INSURANCE_VIEW = "insurance_view"
    INSURANCE_CREATE = "insurance_create"
    INSURANCE_UPDATE = "insurance_update"
    INSURANCE_DELETE = "insurance_delete"
    # Meetings
    MEETING_VIEW = "meeting_view"
    MEETING_CREATE = "meeting_create"
    MEETING_UPDATE = "meeting_update"
    MEETING_DELETE = "meeting_delete"
    # Documents
    DOCUMENT_VIEW = "document_view"
    DOCUMENT_CREATE = "document_create"
    DOCUMENT_UPDATE = "document_update"
    DOCUMENT_DELETE = "document_delete"
    # Contact history
    CONTACT_VIEW = "contact_view"
    CONTACT_CREATE = "contact_create"
    CONTACT_UPDATE = "contact_update"
    CONTACT_DELETE = "contact_delete"
    # Tags
    TAG_CREATE = "tag_create"
    TAG_UPDATE = "tag_update"
    TAG_DELETE = "tag_delete"
    TAG_ASSIGN = "tag_assign"
    TAG_UNASSIGN = "tag_unassign"
    # Backoffice pages
    VIEW_ADMIN_DASHBOARD = "VIEW_ADMIN_DASHBOARD"
    VIEW_ADMIN_SETTINGS = "VIEW_ADMIN_SETTINGS"
    VIEW_ADMIN_AUDIT_LOGS = "VIEW_ADMIN_AUDIT_LOGS"
    VIEW_ADMIN_USERS = "VIEW_ADMIN_USERS"
    ERROR_ADMIN_DASHBOARD = "ERROR_ADMIN_DASHBOARD"
    ERROR_ADMIN_SETTINGS = "ERROR_ADMIN_SETTINGS"
    ERROR_ADMIN_AUDIT_LOGS = "ERROR_ADMIN_AUDIT_LOGS"
    ERROR_ADMIN_USERS = "ERROR_ADMIN_USERS"
    # Backoffice settings
    START_CREATE_SETTING = "START_CREATE_SETTING"
    SUCCESS_CREATE_SETTING = "SUCCESS_CREATE_SETTING"
    ERROR_CREATE_SETTING = "ERROR_CREATE_SETTING"
    START_UPDATE_SETTING = "START_UPDATE_SETTING"
    SUCCESS_UPDATE_SETTING = "SUCCESS_UPDATE_SETTING"
    ERROR_UPDATE_SETTING = "ERROR_UPDATE_SETTING"
    UNAUTHORIZED_MODIFY_SETTINGS = "UNAUTHORIZED_MODIFY_SETTINGS"
    # Backoffice users
    START_TOGGLE_USER_STATUS = "START_TOGGLE_USER_STATUS"
    SUCCESS_TOGGLE_USER_STATUS = "SUCCESS_TOGGLE_USER_STATUS"
    ERROR_TOGGLE_USER_STATUS = "ERROR_TOGGLE_USER_STATUS"
    UNAUTHORIZED_MODIFY_USER = "UNAUTHORIZED_MODIFY_USER"


class AuditStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    DENIED = "denied"


class AccessType(str, Enum):
    VIEW = "view"
    EDIT = "edit"
    EXPORT = "export"
    SHARE = "share"
    DELETE = "delete"


def _enum_value(value):
    if value is None:
        return None
    return value.value if isinstance(value, Enum) else str(value)


def log(
    db: Session,
    *,
    action: AuditAction | str,
    status: AuditStatus | str = AuditStatus.SUCCESS,
    target_type: str,
    target_id: Optional[uuid.UUID] = None,
    actor_user_id: Optional[uuid.UUID],
    access_type: AccessType | str | None = None,
    accessed_fields: Optional[Iterable[str]] = None,
    privacy_level: Optional[str] = None,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
    old_values: Optional[Dict[str, Any]] = None,
    new_values: Optional[Dict[str, Any]] = None,
    reason: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
):
    """Central audit logging helper.

    Persists one row and returns it, or returns None when audit logging is
    switched off through ``FEATURE_AUDIT_LOGGING_ENABLED``.
    """
    if not audit_logging_enabled():
        return None
    audit_log = schemas.AuditLogCreate(
        action_type=_enum_value(action),
        status=_enum_value(status),
        target_type=target_type,
        target_id=target_id,
        access_type=_enum_value(access_type),
        accessed_fields=list(accessed_fields) if accessed_fields is not None else None,
        privacy_level=_enum_value(privacy_level),
        ip_address=ip_address,
        user_agent=user_agent,
        old_values=jsonable_encoder(old_values) if old_values is not None else None,
        new_values=jsonable_encoder(new_values) if new_values is not None else None,
        reason=reason,
        metadata=jsonable_encoder(metadata or {}),
    )
    return crud.create_audit_log(db, audit_log=audit_log, actor_user_id=actor_user_id)


def record_safely(db: Session, write: Callable[[], Any]):
    """Run an audit write without letting its failure reach the caller."""
    try:
        return write()
    except Exception as exc:
        db.rollback()
        logger.warning("audit_write_failed: %s", exc)
        return None


def log_data_access(
    db: Session,
    *,
    actor_user_id: uuid.UUID,
    client_id: Optional[uuid.UUID],
    access_type: AccessType | str,
    action: AuditAction | str,
    accessed_fields: Optional[Iterable[str]] = None,
    privacy_level: Optional[str] = None,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
    target_type: str = "client",
    metadata: Optional[Dict[str, Any]] = None,
):
    """Record who accessed which client data. Never raises."""
    return record_safely(
        db,
        lambda: log(
            db,
            action=action,
            status=AuditStatus.SUCCESS,
            target_type=target_type,
            target_id=client_id,
            actor_user_id=actor_user_id,
            access_type=access_type,
            accessed_fields=accessed_fields,
            privacy_level=privacy_level,
            ip_address=ip_address,
            user_agent=user_agent,
            metadata=metadata,
        ),
    )


def log_change(
    db: Session,
    *,
    actor_user_id: uuid.UUID,
    target_type: str,
    target_id: Optional[uuid.UUID],
    action: AuditAction | str,
    access_type: AccessType | str = AccessType.EDIT,
    old_values: Optional[Dict[str, Any]] = None,
    new_values: Optional[Dict[str, Any]] = None,
    reason: Optional[str] = None,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
):
    """Record a create/update/delete on a CRM record. Never raises."""
    fields = sorted(set((old_values or {}).keys()) | set((new_values or {}).keys())) or None
    return record_safely(
        db,
        lambda: log(
            db,
            action=action,
            status=AuditStatus.SUCCESS,
            target_type=target_type,
            target_id=target_id,
            actor_user_id=actor_user_id,
            access_type=access_type,
            accessed_fields=fields,
            ip_address=ip_address,
            user_agent=user_agent,
            old_values=old_values,
            new_values=new_values,
            reason=reason,
        ),
    )


def _status_for_admin_action(action: str) -> AuditStatus:
    if action.startswith("UNAUTHORIZED_"):
        return AuditStatus.DENIED
    if action.startswith("ERROR_"):
        return AuditStatus.FAILURE
    return AuditStatus.SUCCESS


def log_admin_action(
    db: Session,
    *,
    actor_user_id: Optional[uuid.UUID],
    action: AuditAction | str,
    table_name: Optional[str] = None,
    target_id: Optional[uuid.UUID] = None,
    old_values: Optional[Dict[str, Any]] = None,
    new_values: Optional[Dict[str, Any]] = None,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
    reason: Optional[str] = None,
):
    """Record a backoffice action and echo it to the application log. Never raises."""
    action_value = _enum_value(action)
    logger.info(
        "admin_audit: %s %s on %s:%s",
        actor_user_id,
        action_value,
        table_name or "-",
        target_id or "-",
    )
    return record_safely(
        db,
        lambda: log(
            db,
            action=action_value,
            status=_status_for_admin_action(action_value),
            target_type=table_name or "admin",
            target_id=target_id,
            actor_user_id=actor_user_id,
            ip_address=ip_address,
            user_agent=user_agent,
            old_values=old_values,
            new_values=new_values,
            reason=reason,
        ),
    )


__all__ = [
    "AuditAction",
    "AuditStatus",
    "AccessType",
    "log",
    "record_safely",
    "log_data_access",
    "log_change",
    "log_admin_action",
]
