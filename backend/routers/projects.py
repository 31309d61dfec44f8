import logging

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

import crud
import models
import schemas
from schemas import MAX_ID
from auth.dependencies import get_current_user
from database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/projects", tags=["projects"])


@router.get("", response_model=schemas.ProjectListResponse)
def list_projects(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List the caller's projects."""
    projects = crud.list_projects(db, current_user)
    data = [schemas.Project.model_validate(p) for p in projects]
    return schemas.ProjectListResponse(count=len(data), data=data)


@router.get("/{project_id}", response_model=schemas.ProjectResponse)
def get_project(
    project_id: int = Path(..., ge=1, le=MAX_ID),
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    project = crud.get_project(db, project_id, current_user)
    return schemas.ProjectResponse(data=schemas.Project.model_validate(project))


@router.post("", response_model=schemas.ProjectResponse, status_code=status.HTTP_201_CREATED)
def create_project(
    project: schemas.ProjectCreate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create a project owned by the caller."""
    created = crud.create_project(db, project, current_user)
    return schemas.ProjectResponse(data=schemas.Project.model_validate(created))


@router.put("/{project_id}", response_model=schemas.ProjectResponse)
def update_project(
    *,
    project_id: int = Path(..., ge=1, le=MAX_ID),
    project_update: schemas.ProjectUpdate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update title and/or description (owner only)."""
    project = crud.update_project(db, project_id, project_update, current_user)
    return schemas.ProjectResponse(data=schemas.Project.model_validate(project))


@router.delete("/{project_id}", response_model=schemas.DeletedResponse)
def delete_project(
    project_id: int = Path(..., ge=1, le=MAX_ID),
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete project (owner only). Tasks of the project are not deleted."""
    crud.delete_project(db, project_id, current_user)
    return schemas.DeletedResponse()
