"""
Pipeline stage endpoints.

Every agent owns an ordered list of sales stages; the defaults are created
on first read.
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from surecrm.db import crud, schemas
from surecrm.db.database import get_db
from surecrm.api.deps import get_current_user_context

router = APIRouter(prefix="/pipeline-stages", tags=["pipeline"])


@router.get("/", response_model=List[schemas.PipelineStage])
def list_pipeline_stages(
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _current_user = user_context
    return crud.get_pipeline_stages(db, user.id)


@router.post("/", response_model=schemas.PipelineStage, status_code=status.HTTP_201_CREATED)
def create_pipeline_stage(
    stage: schemas.PipelineStageCreate,
    db: Session = Depends(get_db),
    user_context=Depends(get_current_user_context),
):
    user, _current_user = user_context
    existing = crud.get_pipeline_stages(db, user.id)
    if any(s.name.lower() == stage.name.strip().lower() for s in existing):
        raise HTTPException(status_code=409, detail="Pipeline stage already exists")
    return crud.create_pipeline_stage(db, user.id, stage)
