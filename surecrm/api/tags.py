"""
Tag endpoints.

Create, update and delete an agent's tags and attach them to clients.
"""
import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from surecrm.audit import AccessType, AuditAction, log_change
from surecrm.db import crud, schemas
from surecrm.db.database import get_db
from surecrm.api.deps import get_current_user_context, get_request_metadata
from surecrm.api.permissions import can_manage_record, get_readable_client, get_writable_client

router = APIRouter(tags=["tags"])


def _get_owned_tag(db: Session, tag_id: uuid.UUID, current_user: dict):
    tag = crud.get_tag(db, tag_id)
    if not tag:
        raise HTTPException(status_code=404, detail="Tag not found")
    if not can_manage_record(tag, current_user):
        raise HTTPException(status_code=403, detail="Forbidden")
    return tag


def _with_counts(db: Session, tags) -> List[schemas.Tag]:
    counts = crud.get_tag_usage_counts(db, [t.id for t in tags])
    return [
        schemas.Tag.model_validate(t).model_copy(update={"usage_count": counts.get(t.id, 0)})
        for t in tags
    ]


@router.get("/tags/", response_model=List[schemas.Tag])
def list_tags(
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _current_user = user_context
    return _with_counts(db, crud.get_tags(db, user.id))


@router.post("/tags/", response_model=schemas.Tag, status_code=status.HTTP_201_CREATED)
def create_tag(
    tag: schemas.TagCreate,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
    meta=Depends(get_request_metadata),
):
    user, _current_user = user_context
    if crud.get_active_tag_by_name(db, user.id, tag.name):
        raise HTTPException(status_code=409, detail="Tag already exists")
    created = crud.create_tag(db, user.id, tag)
    log_change(
        db,
        actor_user_id=user.id,
        target_type="tag",
        target_id=created.id,
        action=AuditAction.TAG_CREATE,
        new_values={"name": created.name, "color": created.color},
        ip_address=meta.ip_address,
        user_agent=meta.user_agent,
    )
    return created


@router.patch("/tags/{tag_id}", response_model=schemas.Tag)
def update_tag(
    tag_id: uuid.UUID,
    tag_update: schemas.TagUpdate,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
    meta=Depends(get_request_metadata),
):
    user, current_user = user_context
    tag = _get_owned_tag(db, tag_id, current_user)
    changes = tag_update.model_dump(exclude_unset=True)
    for field in ("name", "color", "privacy_level"):
        if field in changes and changes[field] is None:
            raise HTTPException(status_code=422, detail=f"{field} cannot be null")
    if changes.get("name") and crud.get_active_tag_by_name(db, user.id, changes["name"], exclude_id=tag.id):
        raise HTTPException(status_code=409, detail="Tag already exists")
    old_values = {key: getattr(tag, key) for key in changes}
    updated = crud.update_tag(db, tag.id, tag_update)
    log_change(
        db,
        actor_user_id=user.id,
        target_type="tag",
        target_id=updated.id,
        action=AuditAction.TAG_UPDATE,
        old_values=old_values,
        new_values=changes,
        ip_address=meta.ip_address,
        user_agent=meta.user_agent,
    )
    return _with_counts(db, [updated])[0]


@router.delete("/tags/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_tag(
    tag_id: uuid.UUID,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
    meta=Depends(get_request_metadata),
):
    user, current_user = user_context
    tag = _get_owned_tag(db, tag_id, current_user)
    crud.delete_tag(db, tag.id)
    log_change(
        db,
        actor_user_id=user.id,
        target_type="tag",
        target_id=tag.id,
        action=AuditAction.TAG_DELETE,
        access_type=AccessType.DELETE,
        old_values={"name": tag.name, "is_active": True},
        new_values={"is_active": False},
        ip_address=meta.ip_address,
        user_agent=meta.user_agent,
    )
    return None


@router.get("/clients/{client_id}/tags", response_model=List[schemas.Tag])
def list_client_tags(
    client_id: uuid.UUID,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    client = get_readable_client(db, client_id, current_user)
    return _with_counts(db, crud.get_client_tags(db, client.id))


@router.post(
    "/clients/{client_id}/tags/{tag_id}",
    response_model=schemas.TagAssignment,
    status_code=status.HTTP_201_CREATED,
)
def assign_tag(
    client_id: uuid.UUID,
    tag_id: uuid.UUID,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
    meta=Depends(get_request_metadata),
):
    user, current_user = user_context
    client = get_writable_client(db, client_id, current_user)
    tag = _get_owned_tag(db, tag_id, current_user)
    if crud.get_tag_assignment(db, client.id, tag.id):
        raise HTTPException(status_code=409, detail="Tag already assigned to this client")
    assignment = crud.assign_tag(db, client_id=client.id, tag_id=tag.id, assigned_by=user.id)
    log_change(
        db,
        actor_user_id=user.id,
        target_type="client",
        target_id=client.id,
        action=AuditAction.TAG_ASSIGN,
        new_values={"tag_id": tag.id, "tag_name": tag.name},
        ip_address=meta.ip_address,
        user_agent=meta.user_agent,
    )
    return assignment


@router.delete("/clients/{client_id}/tags/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
def unassign_tag(
    client_id: uuid.UUID,
    tag_id: uuid.UUID,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
    meta=Depends(get_request_metadata),
):
    user, current_user = user_context
    client = get_writable_client(db, client_id, current_user)
    if not crud.unassign_tag(db, client.id, tag_id):
        raise HTTPException(status_code=404, detail="Tag is not assigned to this client")
    log_change(
        db,
        actor_user_id=user.id,
        target_type="client",
        target_id=client.id,
        action=AuditAction.TAG_UNASSIGN,
        old_values={"tag_id": tag_id},
        ip_address=meta.ip_address,
        user_agent=meta.user_agent,
    )
    return None
