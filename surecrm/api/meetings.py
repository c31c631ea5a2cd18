"""
Meeting endpoints for a client's consultation schedule.
"""
import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from surecrm.audit import AccessType, AuditAction, log_change, log_data_access
from surecrm.db import crud, schemas
from surecrm.db.database import get_db
from surecrm.db.models import as_utc
from surecrm.api.deps import get_current_user_context, get_request_metadata
from surecrm.api.permissions import get_managed_client_record, get_readable_client, get_writable_client

router = APIRouter(tags=["meetings"])


def _get_managed_meeting(db: Session, meeting_id: uuid.UUID, current_user: dict):
    meeting = crud.get_meeting(db, meeting_id)
    return get_managed_client_record(db, meeting, current_user, not_found="Meeting not found")


@router.get("/clients/{client_id}/meetings", response_model=List[schemas.Meeting])
def list_client_meetings(
    client_id: uuid.UUID,
    upcoming_only: bool = False,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
    meta=Depends(get_request_metadata),
):
    user, current_user = user_context
    client = get_readable_client(db, client_id, current_user)
    meetings = crud.get_client_meetings(db, client.id, upcoming_only=upcoming_only)
    if meetings:
        log_data_access(
            db,
            actor_user_id=user.id,
            client_id=client.id,
            access_type=AccessType.VIEW,
            action=AuditAction.MEETING_VIEW,
            accessed_fields=["title", "start_time", "location", "notes"],
            privacy_level=client.privacy_level,
            ip_address=meta.ip_address,
            user_agent=meta.user_agent,
            metadata={"meeting_ids": [str(m.id) for m in meetings], "upcoming_only": upcoming_only},
        )
    return meetings


@router.post("/clients/{client_id}/meetings", response_model=schemas.Meeting, status_code=status.HTTP_201_CREATED)
def create_client_meeting(
    client_id: uuid.UUID,
    meeting: schemas.MeetingCreate,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
    meta=Depends(get_request_metadata),
):
    user, current_user = user_context
    client = get_writable_client(db, client_id, current_user)
    created = crud.create_meeting(db, client_id=client.id, agent_id=user.id, meeting=meeting)
    log_change(
        db,
        actor_user_id=user.id,
        target_type="meeting",
        target_id=created.id,
        action=AuditAction.MEETING_CREATE,
        new_values={"client_id": client.id, "title": created.title, "start_time": meeting.start_time},
        ip_address=meta.ip_address,
        user_agent=meta.user_agent,
    )
    return created


@router.patch("/meetings/{meeting_id}", response_model=schemas.Meeting)
def update_meeting(
    meeting_id: uuid.UUID,
    meeting_update: schemas.MeetingUpdate,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
    meta=Depends(get_request_metadata),
):
    user, current_user = user_context
    meeting = _get_managed_meeting(db, meeting_id, current_user)
    changes = meeting_update.model_dump(exclude_unset=True)
    for field in ("title", "start_time", "end_time", "meeting_type", "status"):
        if field in changes and changes[field] is None:
            raise HTTPException(status_code=422, detail=f"{field} cannot be null")
    start = as_utc(changes.get("start_time") or meeting.start_time)
    end = as_utc(changes.get("end_time") or meeting.end_time)
    if end <= start:
        raise HTTPException(status_code=422, detail="end_time must be after start_time")
    old_values = {key: getattr(meeting, key) for key in changes}
    updated = crud.update_meeting(db, meeting.id, meeting_update)
    log_change(
        db,
        actor_user_id=user.id,
        target_type="meeting",
        target_id=updated.id,
        action=AuditAction.MEETING_UPDATE,
        old_values=old_values,
        new_values=changes,
        ip_address=meta.ip_address,
        user_agent=meta.user_agent,
    )
    return updated


@router.delete("/meetings/{meeting_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_meeting(
    meeting_id: uuid.UUID,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
    meta=Depends(get_request_metadata),
):
    user, current_user = user_context
    meeting = _get_managed_meeting(db, meeting_id, current_user)
    snapshot = {"client_id": meeting.client_id, "title": meeting.title, "start_time": meeting.start_time}
    crud.delete_meeting(db, meeting.id)
    log_change(
        db,
        actor_user_id=user.id,
        target_type="meeting",
        target_id=meeting_id,
        action=AuditAction.MEETING_DELETE,
        access_type=AccessType.DELETE,
        old_values=snapshot,
        ip_address=meta.ip_address,
        user_agent=meta.user_agent,
    )
    return None
