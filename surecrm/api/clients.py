"""
Clients API endpoints.

List, inspect, create, update and soft delete an agent's clients. Display
fields are masked per the client's privacy level and every read or change
leaves an audit row.
"""
import math
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from surecrm.audit import AccessType, AuditAction, log_change, log_data_access
from surecrm.db import crud, schemas
from surecrm.db.database import get_db
from surecrm.api.deps import get_current_user_context, get_request_metadata, get_view_options
from surecrm.api.permissions import get_readable_client, get_writable_client
from surecrm.api.presenters import (
    CLIENT_MASKED_FIELDS,
    present_client,
    present_client_summary,
    present_documents,
    present_policies,
)
from surecrm.privacy import PrivacyLevel, filter_visible

router = APIRouter(prefix="/clients", tags=["clients"])

_NON_NULLABLE_FIELDS = ("full_name", "phone", "importance", "privacy_level")
_DETAIL_FIELDS = ("full_name", "phone", "email", "address", "occupation", "notes", "custom_fields")
_UPCOMING_MEETINGS_LIMIT = 5


def _stage_names(db: Session, agent_id: uuid.UUID) -> dict:
    return {stage.id: stage.name for stage in crud.get_pipeline_stages(db, agent_id)}


def _validate_stage(db: Session, stage_id: uuid.UUID, agent_id: uuid.UUID):
    stage = crud.get_pipeline_stage(db, stage_id)
    if not stage or stage.agent_id != agent_id:
        raise HTTPException(status_code=422, detail="Pipeline stage not found")
    return stage


def _validate_referrer(db: Session, referrer_id: uuid.UUID, agent_id: uuid.UUID, *, client_id=None):
    if client_id is not None and referrer_id == client_id:
        raise HTTPException(status_code=422, detail="A client cannot refer themselves")
    referrer = crud.get_active_client(db, referrer_id)
    if not referrer or referrer.agent_id != agent_id:
        raise HTTPException(status_code=422, detail="Referrer must be one of your active clients")
    return referrer


@router.get("/", response_model=schemas.PaginatedClients)
def list_clients(
    search: Optional[str] = None,
    stage_id: Optional[uuid.UUID] = None,
    importance: Optional[schemas.Importance] = None,
    privacy_level: Optional[PrivacyLevel] = None,
    tag_id: Optional[uuid.UUID] = None,
    sort_by: str = Query("updated_at", pattern="^(full_name|created_at|updated_at|importance)$"),
    sort_order: str = Query("desc", pattern="^(asc|desc)$"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
    view=Depends(get_view_options),
    meta=Depends(get_request_metadata),
):
    user, current_user = user_context
    clients, total = crud.get_clients(
        db,
        agent_id=user.id,
        search=search,
        stage_id=stage_id,
        importance=importance.value if importance else None,
        privacy_level=privacy_level.value if privacy_level else None,
        tag_id=tag_id,
        include_confidential=view.show_confidential,
        sort_by=sort_by,
        sort_order=sort_order,
        skip=(page - 1) * page_size,
        limit=page_size,
    )
    stage_names = _stage_names(db, user.id)
    tags_by_client = crud.get_tags_for_clients(db, [c.id for c in clients])
    items = [
        present_client(
            c,
            view.show_confidential,
            tags=tags_by_client.get(c.id, []),
            stage_name=stage_names.get(c.current_stage_id),
        )
        for c in clients
    ]
    if items:
        log_data_access(
            db,
            actor_user_id=user.id,
            client_id=None,
            target_type="client_list",
            access_type=AccessType.VIEW,
            action=AuditAction.CLIENT_LIST,
            accessed_fields=list(CLIENT_MASKED_FIELDS),
            ip_address=meta.ip_address,
            user_agent=meta.user_agent,
            metadata={
                "count": len(items),
                "page": page,
                "client_ids": [str(c.id) for c in clients],
                "show_confidential": view.show_confidential,
            },
        )
    return schemas.PaginatedClients(
        items=items,
        total_count=total,
        page=page,
        page_size=page_size,
        total_pages=math.ceil(total / page_size) if total else 0,
    )


@router.get("/stats", response_model=schemas.ClientStats)
def client_stats(
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _current_user = user_context
    return crud.get_client_stats(db, user.id)


@router.get("/{client_id}", response_model=schemas.ClientDetail)
def get_client_detail(
    client_id: uuid.UUID,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
    view=Depends(get_view_options),
    meta=Depends(get_request_metadata),
):
    user, current_user = user_context
    client = get_readable_client(db, client_id, current_user)
    show = view.show_confidential

    tags = crud.get_client_tags(db, client.id)
    stage = crud.get_pipeline_stage(db, client.current_stage_id) if client.current_stage_id else None
    policies = crud.get_client_insurance_policies(db, client.id, active_status_only=True)
    meetings = crud.get_client_meetings(db, client.id, upcoming_only=True, limit=_UPCOMING_MEETINGS_LIMIT)
    documents = crud.get_client_documents(db, client.id)
    referrer = crud.get_active_client(db, client.referred_by_id) if client.referred_by_id else None
    referrals = filter_visible(crud.get_referrals(db, client.id), show)

    detail = present_client(
        client,
        show,
        tags=tags,
        stage_name=stage.name if stage else None,
        schema=schemas.ClientDetail,
    )
    detail = detail.model_copy(
        update={
            "referred_by": present_client_summary(referrer, show) if referrer else None,
            "referrals": [present_client_summary(r, show) for r in referrals],
            "insurance_policies": present_policies(policies, show),
            "upcoming_meetings": [schemas.Meeting.model_validate(m) for m in meetings],
            "documents": present_documents(documents, show),
        }
    )

    accessed = [field for field in _DETAIL_FIELDS if getattr(client, field) is not None]
    if policies:
        accessed.append("insurance_policies")
    if meetings:
        accessed.append("meetings")
    if documents:
        accessed.append("documents")
    log_data_access(
        db,
        actor_user_id=user.id,
        client_id=client.id,
        access_type=AccessType.VIEW,
        action=AuditAction.CLIENT_VIEW,
        accessed_fields=accessed,
        privacy_level=client.privacy_level,
        ip_address=meta.ip_address,
        user_agent=meta.user_agent,
        metadata={"show_confidential": show},
    )
    return detail


@router.post("/", response_model=schemas.ClientListItem, status_code=status.HTTP_201_CREATED)
def create_client(
    client: schemas.ClientCreate,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
    view=Depends(get_view_options),
    meta=Depends(get_request_metadata),
):
    user, _current_user = user_context
    if crud.get_active_client_by_phone(db, user.id, client.phone):
        raise HTTPException(status_code=409, detail="A client with this phone number already exists")
    if client.referred_by_id:
        _validate_referrer(db, client.referred_by_id, user.id)
    if client.current_stage_id:
        stage = _validate_stage(db, client.current_stage_id, user.id)
    else:
        stage = crud.get_first_pipeline_stage(db, user.id)
        client = client.model_copy(update={"current_stage_id": stage.id if stage else None})

    created = crud.create_client(db, user.id, client)
    log_change(
        db,
        actor_user_id=user.id,
        target_type="client",
        target_id=created.id,
        action=AuditAction.CLIENT_CREATE,
        new_values=client.model_dump(),
        ip_address=meta.ip_address,
        user_agent=meta.user_agent,
    )
    return present_client(created, view.show_confidential, stage_name=stage.name if stage else None)


@router.patch("/{client_id}", response_model=schemas.ClientListItem)
def update_client(
    client_id: uuid.UUID,
    client_update: schemas.ClientUpdate,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
    view=Depends(get_view_options),
    meta=Depends(get_request_metadata),
):
    user, current_user = user_context
    client = get_writable_client(db, client_id, current_user)
    changes = client_update.model_dump(exclude_unset=True)

    for field in _NON_NULLABLE_FIELDS:
        if field in changes and changes[field] is None:
            raise HTTPException(status_code=422, detail=f"{field} cannot be null")
    if "phone" in changes and changes["phone"] != client.phone:
        if crud.get_active_client_by_phone(db, user.id, changes["phone"], exclude_id=client.id):
            raise HTTPException(status_code=409, detail="A client with this phone number already exists")
    if changes.get("referred_by_id"):
        _validate_referrer(db, changes["referred_by_id"], user.id, client_id=client.id)

    old_values = {}
    new_values = {}
    target_stage_id = changes.pop("current_stage_id", client.current_stage_id)
    for key, value in changes.items():
        if getattr(client, key) != value:
            old_values[key] = getattr(client, key)
            new_values[key] = value
    if target_stage_id != client.current_stage_id:
        if target_stage_id is not None:
            _validate_stage(db, target_stage_id, user.id)
        old_values["current_stage_id"] = client.current_stage_id
        new_values["current_stage_id"] = target_stage_id

    stage_changed = "current_stage_id" in new_values
    field_changes = {k: v for k, v in new_values.items() if k != "current_stage_id"}
    if field_changes:
        client = crud.update_client(db, client.id, field_changes)
    if stage_changed:
        if target_stage_id is None:
            client = crud.update_client(db, client.id, {"current_stage_id": None})
        else:
            crud.change_client_stage(db, client, to_stage_id=target_stage_id, agent_id=user.id)

    if new_values:
        log_change(
            db,
            actor_user_id=user.id,
            target_type="client",
            target_id=client.id,
            action=AuditAction.CLIENT_UPDATE,
            old_values=old_values,
            new_values=new_values,
            ip_address=meta.ip_address,
            user_agent=meta.user_agent,
        )
    stage = crud.get_pipeline_stage(db, client.current_stage_id) if client.current_stage_id else None
    return present_client(
        client,
        view.show_confidential,
        tags=crud.get_client_tags(db, client.id),
        stage_name=stage.name if stage else None,
    )


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_client(
    client_id: uuid.UUID,
    reason: Optional[str] = None,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
    meta=Depends(get_request_metadata),
):
    user, current_user = user_context
    client = get_writable_client(db, client_id, current_user)
    crud.soft_delete_client(db, client.id, reason)
    log_change(
        db,
        actor_user_id=user.id,
        target_type="client",
        target_id=client.id,
        action=AuditAction.CLIENT_DELETE,
        access_type=AccessType.DELETE,
        old_values={"is_active": True},
        new_values={"is_active": False},
        reason=reason,
        ip_address=meta.ip_address,
        user_agent=meta.user_agent,
    )
    return None


@router.post("/{client_id}/stage", response_model=schemas.ClientStageHistory)
def change_client_stage(
    client_id: uuid.UUID,
    payload: schemas.StageChange,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
    meta=Depends(get_request_metadata),
):
    user, current_user = user_context
    client = get_writable_client(db, client_id, current_user)
    _validate_stage(db, payload.stage_id, user.id)
    previous_stage_id = client.current_stage_id
    history = crud.change_client_stage(
        db,
        client,
        to_stage_id=payload.stage_id,
        agent_id=user.id,
        reason=payload.reason,
        notes=payload.notes,
    )
    log_change(
        db,
        actor_user_id=user.id,
        target_type="client",
        target_id=client.id,
        action=AuditAction.CLIENT_STAGE_CHANGE,
        old_values={"current_stage_id": previous_stage_id},
        new_values={"current_stage_id": payload.stage_id},
        reason=payload.reason,
        ip_address=meta.ip_address,
        user_agent=meta.user_agent,
    )
    return history


@router.get("/{client_id}/referrals", response_model=List[schemas.ClientSummary])
def list_referrals(
    client_id: uuid.UUID,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
    view=Depends(get_view_options),
):
    _user, current_user = user_context
    client = get_readable_client(db, client_id, current_user)
    referrals = filter_visible(crud.get_referrals(db, client.id), view.show_confidential)
    return [present_client_summary(r, view.show_confidential) for r in referrals]


@router.get("/{client_id}/stage-history", response_model=List[schemas.ClientStageHistory])
def list_stage_history(
    client_id: uuid.UUID,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    _user, current_user = user_context
    client = get_readable_client(db, client_id, current_user)
    return crud.get_client_stage_history(db, client.id)
