"""
Insurance policy repository functions.
"""
from __future__ import annotations

import uuid
from sqlalchemy.orm import Session

from surecrm.db import models, schemas


def get_policy(db: Session, policy_id: uuid.UUID):
    return (
        db.query(models.InsurancePolicy)
        .filter(models.InsurancePolicy.id == policy_id, models.InsurancePolicy.is_active.is_(True))
        .first()
    )


def get_client_policies(db: Session, client_id: uuid.UUID, *, active_status_only: bool = False):
    q = db.query(models.InsurancePolicy).filter(
        models.InsurancePolicy.client_id == client_id,
        models.InsurancePolicy.is_active.is_(True),
    )
    if active_status_only:
        q = q.filter(models.InsurancePolicy.status == "active")
    return q.order_by(models.InsurancePolicy.created_at.desc()).all()


def create_policy(
    db: Session,
    *,
    client_id: uuid.UUID,
    agent_id: uuid.UUID,
    policy: schemas.InsurancePolicyCreate,
):
    db_policy = models.InsurancePolicy(**policy.model_dump(), client_id=client_id, agent_id=agent_id)
    db.add(db_policy)
    db.commit()
    db.refresh(db_policy)
    return db_policy


def update_policy(db: Session, policy_id: uuid.UUID, policy: schemas.InsurancePolicyUpdate):
    db_policy = get_policy(db, policy_id)
    if db_policy:
        for key, value in policy.model_dump(exclude_unset=True).items():
            setattr(db_policy, key, value)
        db.commit()
        db.refresh(db_policy)
    return db_policy


def soft_delete_policy(db: Session, policy_id: uuid.UUID):
    db_policy = get_policy(db, policy_id)
    if db_policy:
        db_policy.is_active = False
        db.commit()
        db.refresh(db_policy)
    return db_policy
