"""
API dependency helpers.

Provides the dependency-resolved user context, request metadata used by the
audit trail, and the "show confidential" view toggle.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from fastapi import Depends, Header, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from surecrm.db.database import get_db
from surecrm.api.auth import resolve_identity_from_headers, get_or_create_user
from surecrm.utils.roles import get_role_permissions, role_can_access_backoffice
from surecrm.utils.runtime import dev_identity, dev_mode_active


# Contract:
# Returns (sqlalchemy User model, current_user_context_dict)
# Raises 401 if identity cannot be resolved, 403 for deactivated users.
def get_current_user_context(
    db: Session = Depends(get_db),
    x_auth_request_user: Optional[str] = Header(default=None),
    x_auth_request_email: Optional[str] = Header(default=None),
    x_forwarded_user: Optional[str] = Header(default=None),
    x_forwarded_email: Optional[str] = Header(default=None),
) -> Tuple[Any, Dict[str, Any]]:
    if dev_mode_active():
        name, email = dev_identity()
    else:
        name, email = resolve_identity_from_headers(
            x_auth_request_user=x_auth_request_user,
            x_auth_request_email=x_auth_request_email,
            x_forwarded_user=x_forwarded_user,
            x_forwarded_email=x_forwarded_email,
        )
        if not email:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    user = get_or_create_user(db, email=email, full_name=name)
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is deactivated")

    current_user = {
        "id": user.id,
        "email": user.email,
        "full_name": user.full_name,
        "role": user.role,
        "is_admin": role_can_access_backoffice(user.role),
        "permissions": get_role_permissions(user.role),
    }
    return user, current_user


def require_admin(user_context=Depends(get_current_user_context)) -> Tuple[Any, Dict[str, Any]]:
    user, current_user = user_context
    if not current_user.get("is_admin"):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="System administrator role required")
    return user, current_user


@dataclass(frozen=True)
class RequestMetadata:
    ip_address: Optional[str]
    user_agent: Optional[str]


def client_ip_from_request(request: Request) -> Optional[str]:
    """Resolve the caller IP behind Cloudflare / nginx style proxies."""
    h = request.headers
    for header in ("cf-connecting-ip", "x-real-ip"):
        value = (h.get(header) or "").strip()
        if value:
            return value
    forwarded = (h.get("x-forwarded-for") or "").strip()
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return request.client.host if request.client else None


def get_request_metadata(request: Request) -> RequestMetadata:
    return RequestMetadata(
        ip_address=client_ip_from_request(request),
        user_agent=request.headers.get("user-agent"),
    )


@dataclass(frozen=True)
class ViewOptions:
    show_confidential: bool = False


def get_view_options(
    show_confidential: Optional[bool] = Query(default=None),
    x_show_confidential: Optional[str] = Header(default=None),
) -> ViewOptions:
    if show_confidential is not None:
        return ViewOptions(show_confidential=bool(show_confidential))
    header_value = (x_show_confidential or "").strip().lower()
    return ViewOptions(show_confidential=header_value in {"1", "true", "yes", "on"})
