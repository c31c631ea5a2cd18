"""
Client document endpoints.

Only metadata records are managed here; the file name and storage path are
masked per the document's privacy level.
"""
import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from surecrm.audit import AccessType, AuditAction, log_change, log_data_access
from surecrm.db import crud, schemas
from surecrm.db.database import get_db
from surecrm.api.deps import get_current_user_context, get_request_metadata, get_view_options
from surecrm.api.permissions import get_managed_client_record, get_readable_client, get_writable_client
from surecrm.api.presenters import present_document, present_documents

router = APIRouter(tags=["documents"])


def _get_managed_document(db: Session, document_id: uuid.UUID, current_user: dict):
    document = crud.get_document(db, document_id)
    return get_managed_client_record(db, document, current_user, not_found="Document not found")


@router.get("/clients/{client_id}/documents", response_model=List[schemas.Document])
def list_client_documents(
    client_id: uuid.UUID,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
    view=Depends(get_view_options),
    meta=Depends(get_request_metadata),
):
    user, current_user = user_context
    client = get_readable_client(db, client_id, current_user)
    documents = crud.get_client_documents(db, client.id)
    if documents:
        log_data_access(
            db,
            actor_user_id=user.id,
            client_id=client.id,
            access_type=AccessType.VIEW,
            action=AuditAction.DOCUMENT_VIEW,
            accessed_fields=["file_name", "file_path", "document_type"],
            privacy_level=client.privacy_level,
            ip_address=meta.ip_address,
            user_agent=meta.user_agent,
            metadata={"document_ids": [str(d.id) for d in documents]},
        )
    return present_documents(documents, view.show_confidential)


@router.post("/clients/{client_id}/documents", response_model=schemas.Document, status_code=status.HTTP_201_CREATED)
def create_client_document(
    client_id: uuid.UUID,
    document: schemas.DocumentCreate,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
    view=Depends(get_view_options),
    meta=Depends(get_request_metadata),
):
    user, current_user = user_context
    client = get_writable_client(db, client_id, current_user)
    if document.insurance_policy_id:
        policy = crud.get_insurance_policy(db, document.insurance_policy_id)
        if not policy or policy.client_id != client.id:
            raise HTTPException(status_code=422, detail="Insurance policy does not belong to this client")
    created = crud.create_document(db, client_id=client.id, agent_id=user.id, document=document)
    log_change(
        db,
        actor_user_id=user.id,
        target_type="document",
        target_id=created.id,
        action=AuditAction.DOCUMENT_CREATE,
        new_values={"client_id": client.id, "document_type": created.document_type, "size": created.size},
        ip_address=meta.ip_address,
        user_agent=meta.user_agent,
    )
    return present_document(created, view.show_confidential)


@router.patch("/documents/{document_id}", response_model=schemas.Document)
def update_document(
    document_id: uuid.UUID,
    document_update: schemas.DocumentUpdate,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
    view=Depends(get_view_options),
    meta=Depends(get_request_metadata),
):
    user, current_user = user_context
    document = _get_managed_document(db, document_id, current_user)
    changes = document_update.model_dump(exclude_unset=True)
    for field in ("document_type", "privacy_level"):
        if field in changes and changes[field] is None:
            raise HTTPException(status_code=422, detail=f"{field} cannot be null")
    old_values = {key: getattr(document, key) for key in changes}
    updated = crud.update_document(db, document.id, document_update)
    log_change(
        db,
        actor_user_id=user.id,
        target_type="document",
        target_id=updated.id,
        action=AuditAction.DOCUMENT_UPDATE,
        old_values=old_values,
        new_values=changes,
        ip_address=meta.ip_address,
        user_agent=meta.user_agent,
    )
    return present_document(updated, view.show_confidential)


@router.delete("/documents/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_document(
    document_id: uuid.UUID,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
    meta=Depends(get_request_metadata),
):
    user, current_user = user_context
    document = _get_managed_document(db, document_id, current_user)
    crud.delete_document(db, document.id)
    log_change(
        db,
        actor_user_id=user.id,
        target_type="document",
        target_id=document.id,
        action=AuditAction.DOCUMENT_DELETE,
        access_type=AccessType.DELETE,
        old_values={"is_active": True},
        new_values={"is_active": False},
        ip_address=meta.ip_address,
        user_agent=meta.user_agent,
    )
    return None
