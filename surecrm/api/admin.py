"""
Backoffice pages for system administrators.

Server-rendered jinja2 pages (dashboard, settings, audit logs, users) with
form posts, plus JSON twins under ``/admin/api``. Every page view and form
submission is written to the audit trail; form handlers report failures on
the page instead of raising.
"""
import json
import logging
import uuid
from pathlib import Path
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Request, status
from fastapi.templating import Jinja2Templates
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from surecrm.audit import AuditAction, log_admin_action
from surecrm.db import crud, schemas
from surecrm.db.database import get_db
from surecrm.api.deps import get_current_user_context, get_request_metadata, require_admin
from surecrm.privacy import mask_email, mask_phone
from surecrm.services import admin_stats
from surecrm.utils.feature_flags import backoffice_enabled

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

AUDIT_LOG_PAGE_SIZE = 50


def require_backoffice_enabled() -> None:
    if not backoffice_enabled():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")


router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_backoffice_enabled)])


def parse_setting_value(raw: str) -> Any:
    """Decode a submitted setting as JSON, keeping the raw text when it is not JSON."""
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def _render(request: Request, template: str, context: dict, status_code: int = 200):
    return templates.TemplateResponse(request, template, context, status_code=status_code)


def _masked_users(users) -> List[dict]:
    return [
        {
            "id": u.id,
            "email": mask_email(u.email),
            "full_name": u.full_name,
            "phone": mask_phone(u.phone),
            "role": u.role,
            "is_active": u.is_active,
            "created_at": u.created_at,
        }
        for u in users
    ]


def _audit(db: Session, user, meta, action: AuditAction, **kwargs):
    return log_admin_action(
        db,
        actor_user_id=user.id if user is not None else None,
        action=action,
        ip_address=meta.ip_address,
        user_agent=meta.user_agent,
        **kwargs,
    )


def _page_error(request: Request, db: Session, user, meta, action: AuditAction, template: str, exc: Exception):
    db.rollback()
    logger.error("admin_page_failed: %s %s", action.value, exc)
    _audit(db, user, meta, action, reason=str(exc))
    return _render(
        request,
        template,
        {"user": user, "error": "Something went wrong while loading this page."},
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

@router.get("/")
def dashboard(
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(require_admin),
    meta=Depends(get_request_metadata),
):
    user, _current_user = user_context
    try:
        stats = admin_stats.get_dashboard_stats(db)
        recent_logs = crud.search_audit_logs(db, limit=10)
    except SQLAlchemyError as exc:
        return _page_error(request, db, user, meta, AuditAction.ERROR_ADMIN_DASHBOARD, "admin/dashboard.html", exc)
    _audit(db, user, meta, AuditAction.VIEW_ADMIN_DASHBOARD, table_name="admin_stats_cache")
    return _render(request, "admin/dashboard.html", {"user": user, "stats": stats, "recent_logs": recent_logs})


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

@router.get("/settings")
def settings_page(
    request: Request,
    db: Session = Depends(get_db),
    user_context=Depends(require_admin),
    meta=Depends(get_request_metadata),
):
    user, _current_user = user_context
    try:
        settings = crud.get_admin_settings(db)
    except SQLAlchemyError as exc:
        return _page_error(request, db, user, meta, AuditAction.ERROR_ADMIN_SETTINGS, "admin/settings.html", exc)
    _audit(db, user, meta, AuditAction.VIEW_ADMIN_SETTINGS, table_name="admin_settings")
    return _render(request, "admin/settings.html", {"user": user, "settings": settings})


def _create_setting(db: Session, user, meta, *, key: str, raw_value: str, description: Optional[str]):
    _audit(db, user, meta, AuditAction.START_CREATE_SETTING, table_name="admin_settings",
           new_values={"key": key, "value": raw_value})
    if not key or not raw_value:
        _audit(db, user, meta, AuditAction.ERROR_CREATE_SETTING, table_name="admin_settings",
               reason="key and value are required")
        return None, "Key and value are required."
    if crud.get_admin_setting_by_key(db, key):
        _audit(db, user, meta, AuditAction.ERROR_CREATE_SETTING, table_name="admin_settings",
               reason=f"duplicate key {key}")
        return None, f"A setting named '{key}' already exists."
    value = parse_setting_value(raw_value)
    try:
        created = crud.create_admin_setting(
            db, key=key, value=value, description=description, updated_by_id=user.id
        )
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("admin_setting_create_failed: %s", exc)
        _audit(db, user, meta, AuditAction.ERROR_CREATE_SETTING, table_name="admin_settings", reason=str(exc))
        return None, "The setting could not be saved."
    _audit(db, user, meta, AuditAction.SUCCESS_CREATE_SETTING, table_name="admin_settings",
           target_id=created.id, new_values={"key": key, "value": value, "description": description})
    return created, None


def _update_setting(db: Session, user, meta, *, setting_id: Optional[str], key: str, raw_value: str,
                    description: Optional[str]):
    setting = None
    if setting_id:
        try:
            setting = crud.get_admin_setting(db, uuid.UUID(setting_id))
        except ValueError:
            setting = None
    elif key:
        setting = crud.get_admin_setting_by_key(db, key)
    _audit(db, user, meta, AuditAction.START_UPDATE_SETTING, table_name="admin_settings",
           target_id=setting.id if setting else None, new_values={"key": key, "value": raw_value})
    if setting is None:
        _audit(db, user, meta, AuditAction.ERROR_UPDATE_SETTING, table_name="admin_settings",
               reason="setting not found")
        return None, "Setting not found."
    if not raw_value:
        _audit(db, user, meta, AuditAction.ERROR_UPDATE_SETTING, table_name="admin_settings",
               target_id=setting.id, reason="value is required")
        return None, "Key and value are required."
    old_values = {"key": setting.key, "value": setting.value, "description": setting.description}
    value = parse_setting_value(raw_value)
    try:
        updated = crud.update_admin_setting(
            db, setting.id, value=value, description=description, updated_by_id=user.id
        )
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("admin_setting_update_failed: %s", exc)
        _audit(db, user, meta, AuditAction.ERROR_UPDATE_SETTING, table_name="admin_settings",
               target_id=setting.id, reason=str(exc))
        return None, "The setting could not be saved."
    _audit(db, user, meta, AuditAction.SUCCESS_UPDATE_SETTING, table_name="admin_settings",
           target_id=updated.id, old_values=old_values,
           new_values={"key": updated.key, "value": value, "description": updated.description})
    return updated, None


@router.post("/settings")
def submit_settings_form(
    request: Request,
    action: str = Form(...),
    key: str = Form(""),
    value: str = Form(""),
    description: Optional[str] = Form(None),
    setting_id: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
    meta=Depends(get_request_metadata),
):
    user, current_user = user_context
    if not current_user.get("is_admin"):
        _audit(db, user, meta, AuditAction.UNAUTHORIZED_MODIFY_SETTINGS, table_name="admin_settings",
               new_values={"action": action, "key": key})
        return _render(
            request,
            "admin/settings.html",
            {"user": user, "settings": [], "error": "Only system administrators can change settings."},
            status_code=status.HTTP_403_FORBIDDEN,
        )

    key = key.strip()
    description = description.strip() if description else None
    if action == "create_setting":
        result, error = _create_setting(db, user, meta, key=key, raw_value=value, description=description)
        message = f"Setting '{key}' created." if result else None
    elif action == "update_setting":
        result, error = _update_setting(
            db, user, meta, setting_id=setting_id, key=key, raw_value=value, description=description
        )
        message = f"Setting '{result.key}' updated." if result else None
    else:
        error, message = f"Unknown action: {action}", None

    return _render(
        request,
        "admin/settings.html",
        {"user": user, "settings": crud.get_admin_settings(db), "error": error, "message": message},
        status_code=status.HTTP_400_BAD_REQUEST if error else status.HTTP_200_OK,
    )


# ---------------------------------------------------------------------------
# Audit logs
# ---------------------------------------------------------------------------

@router.get("/audit-logs")
def audit_logs_page(
    request: Request,
    search: str = "",
    action: str = "",
    db: Session = Depends(get_db),
    user_context=Depends(require_admin),
    meta=Depends(get_request_metadata),
):
    user, _current_user = user_context
    _audit(db, user, meta, AuditAction.VIEW_ADMIN_AUDIT_LOGS, table_name="audit_logs")
    try:
        stats = crud.get_audit_log_stats(db)
        logs = crud.search_audit_logs(db, search=search or None, action=action or None, limit=AUDIT_LOG_PAGE_SIZE)
    except SQLAlchemyError as exc:
        return _page_error(request, db, user, meta, AuditAction.ERROR_ADMIN_AUDIT_LOGS, "admin/audit_logs.html", exc)
    return _render(
        request,
        "admin/audit_logs.html",
        {"user": user, "stats": stats, "logs": logs, "search": search, "action": action},
    )


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

@router.get("/users")
def users_page(
    request: Request,
    search: str = "",
    db: Session = Depends(get_db),
    user_context=Depends(require_admin),
    meta=Depends(get_request_metadata),
):
    user, _current_user = user_context
    try:
        users = crud.get_users(db, search=search or None)
    except SQLAlchemyError as exc:
        return _page_error(request, db, user, meta, AuditAction.ERROR_ADMIN_USERS, "admin/users.html", exc)
    _audit(db, user, meta, AuditAction.VIEW_ADMIN_USERS, table_name="users")
    return _render(request, "admin/users.html", {"user": user, "users": _masked_users(users), "search": search})


@router.post("/users")
def submit_users_form(
    request: Request,
    action: str = Form(...),
    user_id: str = Form(""),
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
    meta=Depends(get_request_metadata),
):
    user, current_user = user_context
    if not current_user.get("is_admin"):
        _audit(db, user, meta, AuditAction.UNAUTHORIZED_MODIFY_USER, table_name="users",
               new_values={"action": action, "user_id": user_id})
        return _render(
            request,
            "admin/users.html",
            {"user": user, "users": [], "error": "Only system administrators can manage users."},
            status_code=status.HTTP_403_FORBIDDEN,
        )

    error = message = None
    if action != "toggle_user_status":
        error = f"Unknown action: {action}"
    else:
        try:
            target = crud.get_user(db, uuid.UUID(user_id))
        except ValueError:
            target = None
        _audit(db, user, meta, AuditAction.START_TOGGLE_USER_STATUS, table_name="users",
               target_id=target.id if target else None)
        if target is None:
            error = "User not found."
        elif target.id == user.id:
            error = "You cannot deactivate your own account."
        if error:
            _audit(db, user, meta, AuditAction.ERROR_TOGGLE_USER_STATUS, table_name="users",
                   target_id=target.id if target else None, reason=error)
        else:
            previous = target.is_active
            try:
                updated = crud.set_user_active(db, target.id, not previous)
            except SQLAlchemyError as exc:
                db.rollback()
                logger.error("admin_user_toggle_failed: %s", exc)
                _audit(db, user, meta, AuditAction.ERROR_TOGGLE_USER_STATUS, table_name="users",
                       target_id=target.id, reason=str(exc))
                error = "The user could not be updated."
            else:
                _audit(db, user, meta, AuditAction.SUCCESS_TOGGLE_USER_STATUS, table_name="users",
                       target_id=updated.id, old_values={"is_active": previous},
                       new_values={"is_active": updated.is_active})
                state = "activated" if updated.is_active else "deactivated"
                message = f"User {mask_email(updated.email)} {state}."

    return _render(
        request,
        "admin/users.html",
        {"user": user, "users": _masked_users(crud.get_users(db)), "error": error, "message": message},
        status_code=status.HTTP_400_BAD_REQUEST if error else status.HTTP_200_OK,
    )


# ---------------------------------------------------------------------------
# JSON twins
# ---------------------------------------------------------------------------

@router.get("/api/settings", response_model=List[schemas.AdminSetting])
def api_settings(
    db: Session = Depends(get_db),
    user_context=Depends(require_admin),
):
    return crud.get_admin_settings(db)


@router.get("/api/audit-logs")
def api_audit_logs(
    search: str = "",
    action: str = "",
    db: Session = Depends(get_db),
    user_context=Depends(require_admin),
):
    stats = schemas.AuditLogStats(**crud.get_audit_log_stats(db))
    logs = crud.search_audit_logs(db, search=search or None, action=action or None, limit=AUDIT_LOG_PAGE_SIZE)
    return {
        "stats": stats,
        "logs": [schemas.AuditLog.model_validate(log) for log in logs],
    }


@router.get("/api/stats/{stat_type}", response_model=schemas.AdminStats)
def api_stats(
    stat_type: str,
    refresh: bool = False,
    db: Session = Depends(get_db),
    user_context=Depends(require_admin),
):
    try:
        return admin_stats.get_stats(db, stat_type, force_refresh=refresh)
    except admin_stats.UnknownStatType:
        raise HTTPException(status_code=404, detail=f"Unknown stat type: {stat_type}")
