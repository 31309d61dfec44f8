import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session

import crud
import models
import schemas
from schemas import MAX_ID
from auth.dependencies import get_current_user
from database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/tasks", tags=["tasks"])


def _task_list(tasks) -> schemas.TaskListResponse:
    data = [schemas.Task.model_validate(t) for t in tasks]
    return schemas.TaskListResponse(count=len(data), data=data)


@router.get("", response_model=schemas.TaskListResponse)
def list_tasks(
    current_user: models.User = Depends(get_current_user),
    status: Optional[models.TaskStatus] = Query(None),
    priority: Optional[models.TaskPriority] = Query(None),
    project: Optional[int] = Query(None, ge=1, le=MAX_ID, description="Only tasks of this project"),
    due_before: Optional[datetime] = Query(None, alias="dueBefore", description="Due on or before this date"),
    due_after: Optional[datetime] = Query(None, alias="dueAfter", description="Due on or after this date"),
    search: Optional[str] = Query(None, description="Case-insensitive match on title or description"),
    db: Session = Depends(get_db)
):
    """List the caller's tasks, soonest due first, then by priority (high first)."""
    logger.debug(
        f"User {current_user.id} listing tasks: status={status}, priority={priority}, project={project}, "
        f"due_before={due_before}, due_after={due_after}, search={search}"
    )
    filters = schemas.TaskFilters(
        status=status,
        priority=priority,
        project_id=project,
        due_before=due_before,
        due_after=due_after,
        search=search,
    )
    return _task_list(crud.list_tasks(db, current_user, filters))


@router.get("/project/{project_id}", response_model=schemas.TaskListResponse)
def list_project_tasks(
    project_id: int = Path(..., ge=1, le=MAX_ID),
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return _task_list(crud.list_project_tasks(db, project_id, current_user))


@router.get("/{task_id}", response_model=schemas.TaskResponse)
def get_task(
    task_id: int = Path(..., ge=1, le=MAX_ID),
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    task = crud.get_task(db, task_id, current_user)
    return schemas.TaskResponse(data=schemas.Task.model_validate(task))


@router.post("", response_model=schemas.TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    task: schemas.TaskCreate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create a task in one of the caller's projects."""
    created = crud.create_task(db, task, current_user)
    return schemas.TaskResponse(data=schemas.Task.model_validate(created))


@router.put("/{task_id}", response_model=schemas.TaskResponse)
def update_task(
    *,
    task_id: int = Path(..., ge=1, le=MAX_ID),
    task_update: schemas.TaskUpdate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update any subset of a task's fields; fields not sent are left alone."""
    task = crud.update_task(db, task_id, task_update, current_user)
    return schemas.TaskResponse(data=schemas.Task.model_validate(task))


@router.delete("/{task_id}", response_model=schemas.DeletedResponse)
def delete_task(
    task_id: int = Path(..., ge=1, le=MAX_ID),
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    crud.delete_task(db, task_id, current_user)
    return schemas.DeletedResponse()
