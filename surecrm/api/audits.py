"""
Audit log API endpoints.

Agents read their own trail; system administrators may query anyone's and
see the access history of any client.
"""
from typing import Optional, List
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from surecrm.db.database import get_db
from surecrm.db import schemas, crud
from surecrm.api.deps import get_current_user_context
from surecrm.api.permissions import can_read_client

router = APIRouter(prefix="/audits", tags=["audits"])


@router.get("/", response_model=List[schemas.AuditLog])
def list_audit_logs(
    user_id: Optional[uuid.UUID] = None,
    action_type: Optional[str] = None,
    target_type: Optional[str] = None,
    status: Optional[str] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, current_user = user_context
    if current_user.get("is_admin"):
        actor_filter = user_id
    else:
        if user_id and user_id != user.id:
            raise HTTPException(status_code=403, detail="Forbidden")
        actor_filter = user.id
    return crud.get_audit_logs(
        db,
        user_id=actor_filter,
        action_type=action_type,
        target_type=target_type,
        status=status,
        skip=skip,
        limit=limit,
    )


@router.get("/clients/{client_id}", response_model=List[schemas.AuditLog])
def list_client_access_history(
    client_id: uuid.UUID,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    client = crud.get_client(db, client_id)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    if not can_read_client(client, current_user):
        raise HTTPException(status_code=403, detail="Forbidden")
    return crud.get_audit_logs(db, target_type="client", target_id=client.id, skip=skip, limit=limit)
