"""
Pipeline stage repository functions.

Stages are per agent; the default set is created lazily the first time an
agent's stages are read.
"""
from __future__ import annotations

import uuid
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from surecrm.db import models, schemas


def ensure_default_stages(db: Session, agent_id: uuid.UUID) -> List[models.PipelineStage]:
    existing = (
        db.query(models.PipelineStage)
        .filter(models.PipelineStage.agent_id == agent_id)
        .order_by(models.PipelineStage.sort_order)
        .all()
    )
    if existing:
        return existing
    stages = [
        models.PipelineStage(
            agent_id=agent_id,
            name=name,
            color=color,
            sort_order=index,
            is_default=True,
        )
        for index, (name, color) in enumerate(models.DEFAULT_STAGES)
    ]
    db.add_all(stages)
    db.commit()
    for stage in stages:
        db.refresh(stage)
    return stages


def get_stages(db: Session, agent_id: uuid.UUID) -> List[models.PipelineStage]:
    return ensure_default_stages(db, agent_id)


def get_stage(db: Session, stage_id: uuid.UUID):
    return db.query(models.PipelineStage).filter(models.PipelineStage.id == stage_id).first()


def get_first_stage(db: Session, agent_id: uuid.UUID):
    stages = ensure_default_stages(db, agent_id)
    return stages[0] if stages else None


def create_stage(db: Session, agent_id: uuid.UUID, stage: schemas.PipelineStageCreate):
    sort_order = stage.sort_order
    if sort_order is None:
        current_max = (
            db.query(func.max(models.PipelineStage.sort_order))
            .filter(models.PipelineStage.agent_id == agent_id)
            .scalar()
        )
        sort_order = 0 if current_max is None else current_max + 1
    db_stage = models.PipelineStage(
        agent_id=agent_id,
        name=stage.name,
        color=stage.color,
        sort_order=sort_order,
        is_default=False,
    )
    db.add(db_stage)
    db.commit()
    db.refresh(db_stage)
    return db_stage


def change_client_stage(
    db: Session,
    client: models.Client,
    *,
    to_stage_id: uuid.UUID,
    agent_id: uuid.UUID,
    reason: Optional[str] = None,
    notes: Optional[str] = None,
):
    history = models.ClientStageHistory(
        client_id=client.id,
        agent_id=agent_id,
        from_stage_id=client.current_stage_id,
        to_stage_id=to_stage_id,
        reason=reason,
        notes=notes,
    )
    client.current_stage_id = to_stage_id
    db.add(history)
    db.commit()
    db.refresh(history)
    db.refresh(client)
    return history


def get_stage_history(db: Session, client_id: uuid.UUID):
    return (
        db.query(models.ClientStageHistory)
        .filter(models.ClientStageHistory.client_id == client_id)
        .order_by(models.ClientStageHistory.changed_at.desc())
        .all()
    )
