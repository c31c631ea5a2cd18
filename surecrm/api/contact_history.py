"""
Contact history endpoints.

Calls, messages and visits logged against a client. Notes are masked per
the entry's own privacy level.
"""
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from surecrm.audit import AccessType, AuditAction, log_change, log_data_access
from surecrm.db import crud, schemas
from surecrm.db.database import get_db
from surecrm.api.deps import get_current_user_context, get_request_metadata, get_view_options
from surecrm.api.permissions import get_managed_client_record, get_readable_client, get_writable_client
from surecrm.api.presenters import CONTACT_MASKED_FIELDS, present_contact, present_contacts

router = APIRouter(tags=["contact-history"])


def _get_managed_contact(db: Session, contact_id: uuid.UUID, current_user: dict):
    contact = crud.get_contact(db, contact_id)
    return get_managed_client_record(db, contact, current_user, not_found="Contact history entry not found")


@router.get("/clients/{client_id}/contact-history", response_model=List[schemas.ContactHistory])
def list_client_contacts(
    client_id: uuid.UUID,
    limit: Optional[int] = Query(None, ge=1, le=200),
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
    view=Depends(get_view_options),
    meta=Depends(get_request_metadata),
):
    user, current_user = user_context
    client = get_readable_client(db, client_id, current_user)
    contacts = crud.get_client_contacts(db, client.id, limit=limit)
    if contacts:
        log_data_access(
            db,
            actor_user_id=user.id,
            client_id=client.id,
            access_type=AccessType.VIEW,
            action=AuditAction.CONTACT_VIEW,
            accessed_fields=list(CONTACT_MASKED_FIELDS),
            privacy_level=client.privacy_level,
            ip_address=meta.ip_address,
            user_agent=meta.user_agent,
            metadata={"contact_ids": [str(c.id) for c in contacts]},
        )
    return present_contacts(contacts, view.show_confidential)


@router.post(
    "/clients/{client_id}/contact-history",
    response_model=schemas.ContactHistory,
    status_code=status.HTTP_201_CREATED,
)
def create_client_contact(
    client_id: uuid.UUID,
    contact: schemas.ContactHistoryCreate,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
    view=Depends(get_view_options),
    meta=Depends(get_request_metadata),
):
    user, current_user = user_context
    client = get_writable_client(db, client_id, current_user)
    created = crud.create_contact(db, client_id=client.id, agent_id=user.id, contact=contact)
    log_change(
        db,
        actor_user_id=user.id,
        target_type="contact_history",
        target_id=created.id,
        action=AuditAction.CONTACT_CREATE,
        new_values={
            "client_id": client.id,
            "contact_method": created.contact_method,
            "contacted_at": created.contacted_at,
        },
        ip_address=meta.ip_address,
        user_agent=meta.user_agent,
    )
    return present_contact(created, view.show_confidential)


@router.patch("/contact-history/{contact_id}", response_model=schemas.ContactHistory)
def update_contact(
    contact_id: uuid.UUID,
    contact_update: schemas.ContactHistoryUpdate,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
    view=Depends(get_view_options),
    meta=Depends(get_request_metadata),
):
    user, current_user = user_context
    contact = _get_managed_contact(db, contact_id, current_user)
    changes = contact_update.model_dump(exclude_unset=True)
    for field in ("contact_method", "contacted_at", "privacy_level"):
        if field in changes and changes[field] is None:
            raise HTTPException(status_code=422, detail=f"{field} cannot be null")
    # Note text stays out of the audit trail; only the changed field names are kept.
    updated = crud.update_contact(db, contact.id, contact_update)
    log_change(
        db,
        actor_user_id=user.id,
        target_type="contact_history",
        target_id=updated.id,
        action=AuditAction.CONTACT_UPDATE,
        new_values={"updated_fields": sorted(changes)},
        ip_address=meta.ip_address,
        user_agent=meta.user_agent,
    )
    return present_contact(updated, view.show_confidential)


@router.delete("/contact-history/{contact_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_contact(
    contact_id: uuid.UUID,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
    meta=Depends(get_request_metadata),
):
    user, current_user = user_context
    contact = _get_managed_contact(db, contact_id, current_user)
    snapshot = {"client_id": contact.client_id, "contact_method": contact.contact_method}
    crud.delete_contact(db, contact.id)
    log_change(
        db,
        actor_user_id=user.id,
        target_type="contact_history",
        target_id=contact_id,
        action=AuditAction.CONTACT_DELETE,
        access_type=AccessType.DELETE,
        old_values=snapshot,
        ip_address=meta.ip_address,
        user_agent=meta.user_agent,
    )
    return None
