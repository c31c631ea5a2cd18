"""
Permission checks for client record access.

Key helpers:
- can_read_client(client, current_user)
- can_write_client(client, current_user)
- get_readable_client / get_writable_client: load + 404/403 in one call
- get_managed_client_record: owner check for policies, meetings, documents and contact notes
"""
import uuid
from typing import Any, Dict, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from surecrm.db import crud


def _is_owner(client, current_user: Optional[Dict[str, Any]]) -> bool:
    if not current_user or client is None:
        return False
    return client.agent_id == current_user.get("id")


def can_read_client(client, current_user: Optional[Dict[str, Any]]) -> bool:
    if _is_owner(client, current_user):
        return True
    perms = (current_user or {}).get("permissions") or {}
    return bool(perms.get("can_read_all_clients"))


def can_write_client(client, current_user: Optional[Dict[str, Any]]) -> bool:
    """Only the owning agent edits a client, administrators included."""
    return _is_owner(client, current_user)


def get_readable_client(db: Session, client_id: uuid.UUID, current_user: Dict[str, Any]):
    client = crud.get_active_client(db, client_id)
    if not client:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")
    if not can_read_client(client, current_user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return client


def get_writable_client(db: Session, client_id: uuid.UUID, current_user: Dict[str, Any]):
    client = crud.get_active_client(db, client_id)
    if not client:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")
    if not can_write_client(client, current_user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return client


def can_manage_record(record, current_user: Optional[Dict[str, Any]]) -> bool:
    """Insurance, meeting, document and tag rows belong to the agent that created them."""
    if not current_user or record is None:
        return False
    return record.agent_id == current_user.get("id")


def get_managed_client_record(db: Session, record, current_user: Dict[str, Any], *, not_found: str):
    """Owner check for a client sub-record; records of a deleted client read as missing."""
    if record is None or not crud.get_active_client(db, record.client_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=not_found)
    if not can_manage_record(record, current_user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return record
