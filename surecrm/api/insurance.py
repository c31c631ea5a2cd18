"""
Insurance policy endpoints.

Policies hang off a client; identifying fields are masked per the policy's
own privacy level.
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
from surecrm.api.presenters import POLICY_MASKED_FIELDS, present_policies, present_policy

router = APIRouter(tags=["insurance"])


def _get_managed_policy(db: Session, policy_id: uuid.UUID, current_user: dict):
    policy = crud.get_insurance_policy(db, policy_id)
    return get_managed_client_record(db, policy, current_user, not_found="Insurance policy not found")


@router.get("/clients/{client_id}/insurance-policies", response_model=List[schemas.InsurancePolicy])
def list_client_policies(
    client_id: uuid.UUID,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
    view=Depends(get_view_options),
    meta=Depends(get_request_metadata),
):
    user, current_user = user_context
    client = get_readable_client(db, client_id, current_user)
    policies = crud.get_client_insurance_policies(db, client.id)
    if policies:
        log_data_access(
            db,
            actor_user_id=user.id,
            client_id=client.id,
            access_type=AccessType.VIEW,
            action=AuditAction.INSURANCE_VIEW,
            accessed_fields=list(POLICY_MASKED_FIELDS),
            privacy_level=client.privacy_level,
            ip_address=meta.ip_address,
            user_agent=meta.user_agent,
            metadata={"policy_ids": [str(p.id) for p in policies]},
        )
    return present_policies(policies, view.show_confidential)


@router.post(
    "/clients/{client_id}/insurance-policies",
    response_model=schemas.InsurancePolicy,
    status_code=status.HTTP_201_CREATED,
)
def create_client_policy(
    client_id: uuid.UUID,
    policy: schemas.InsurancePolicyCreate,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
    view=Depends(get_view_options),
    meta=Depends(get_request_metadata),
):
    user, current_user = user_context
    client = get_writable_client(db, client_id, current_user)
    created = crud.create_insurance_policy(db, client_id=client.id, agent_id=user.id, policy=policy)
    log_change(
        db,
        actor_user_id=user.id,
        target_type="insurance_policy",
        target_id=created.id,
        action=AuditAction.INSURANCE_CREATE,
        new_values={"client_id": client.id, "product_name": created.product_name, "status": created.status},
        ip_address=meta.ip_address,
        user_agent=meta.user_agent,
    )
    return present_policy(created, view.show_confidential)


@router.patch("/insurance-policies/{policy_id}", response_model=schemas.InsurancePolicy)
def update_policy(
    policy_id: uuid.UUID,
    policy_update: schemas.InsurancePolicyUpdate,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
    view=Depends(get_view_options),
    meta=Depends(get_request_metadata),
):
    user, current_user = user_context
    policy = _get_managed_policy(db, policy_id, current_user)
    changes = policy_update.model_dump(exclude_unset=True)
    for field in ("insurance_type", "product_name", "insurance_company", "status", "privacy_level"):
        if field in changes and changes[field] is None:
            raise HTTPException(status_code=422, detail=f"{field} cannot be null")
    old_values = {key: getattr(policy, key) for key in changes}
    updated = crud.update_insurance_policy(db, policy.id, policy_update)
    log_change(
        db,
        actor_user_id=user.id,
        target_type="insurance_policy",
        target_id=updated.id,
        action=AuditAction.INSURANCE_UPDATE,
        old_values=old_values,
        new_values=changes,
        ip_address=meta.ip_address,
        user_agent=meta.user_agent,
    )
    return present_policy(updated, view.show_confidential)


@router.delete("/insurance-policies/{policy_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_policy(
    policy_id: uuid.UUID,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
    meta=Depends(get_request_metadata),
):
    user, current_user = user_context
    policy = _get_managed_policy(db, policy_id, current_user)
    crud.delete_insurance_policy(db, policy.id)
    log_change(
        db,
        actor_user_id=user.id,
        target_type="insurance_policy",
        target_id=policy.id,
        action=AuditAction.INSURANCE_DELETE,
        access_type=AccessType.DELETE,
        old_values={"is_active": True},
        new_values={"is_active": False},
        ip_address=meta.ip_address,
        user_agent=meta.user_agent,
    )
    return None
