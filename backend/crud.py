"""
Project and task operations.

Each operation runs the ownership guard before touching an existing record,
attaches the caller as owner on create, and enforces that a task's project
belongs to the same user. Routers stay thin and only shape responses.
"""

import logging
from typing import List

from sqlalchemy.orm import Session

import models
import schemas
from auth.ownership import require_project_owner, require_task_owner, require_referenced_project
from queries import build_task_query

logger = logging.getLogger(__name__)


# ============== Projects ==============

def list_projects(db: Session, user: models.User) -> List[models.Project]:
    logger.debug(f"User {user.id} listing projects")
    projects = (
        db.query(models.Project)
        .filter(models.Project.owner_id == user.id)
        .order_by(models.Project.id)
        .all()
    )
    logger.info(f"User {user.id} retrieved {len(projects)} projects")
    return projects


def get_project(db: Session, project_id: int, user: models.User) -> models.Project:
    logger.debug(f"User {user.id} requesting project {project_id}")
    return require_project_owner(db, project_id, user)


def create_project(db: Session, data: schemas.ProjectCreate, user: models.User) -> models.Project:
    logger.debug(f"User {user.id} creating project: {data.title}")

    project_data = data.model_dump()
    project_data["owner_id"] = user.id  # Always the authenticated user

    project = models.Project(**project_data)
    db.add(project)
    db.commit()
    db.refresh(project)

    logger.info(f"Project created: {project.title} (ID: {project.id}) by user {user.id}")
    return project


def update_project(
    db: Session, project_id: int, patch: schemas.ProjectUpdate, user: models.User
) -> models.Project:
    logger.debug(f"User {user.id} updating project {project_id}")

    project = require_project_owner(db, project_id, user)

    update_data = patch.model_dump(exclude_unset=True)
    for key, value in update_data.items():
        setattr(project, key, value)

    db.commit()
    db.refresh(project)

    logger.info(f"Project updated: {project.title} (ID: {project_id}), fields: {sorted(update_data)}")
    return project


def delete_project(db: Session, project_id: int, user: models.User) -> None:
    """Hard-delete a project. Its tasks are left in place."""
    logger.debug(f"User {user.id} deleting project {project_id}")

    project = require_project_owner(db, project_id, user)
    title = project.title
    db.delete(project)
    db.commit()

    logger.info(f"Project deleted: {title} (ID: {project_id})")


# ============== Tasks ==============

def list_tasks(db: Session, user: models.User, filters: schemas.TaskFilters) -> List[models.Task]:
    logger.debug(f"User {user.id} listing tasks")
    tasks = build_task_query(db, user.id, filters).all()
    logger.info(f"list_tasks completed successfully: returned {len(tasks)} tasks")
    return tasks


def list_project_tasks(db: Session, project_id: int, user: models.User) -> List[models.Task]:
    logger.debug(f"User {user.id} listing tasks of project {project_id}")

    require_project_owner(db, project_id, user)
    tasks = build_task_query(db, user.id, schemas.TaskFilters(project_id=project_id)).all()

    logger.info(f"Project {project_id} has {len(tasks)} tasks for user {user.id}")
    return tasks


def get_task(db: Session, task_id: int, user: models.User) -> models.Task:
    logger.debug(f"User {user.id} requesting task {task_id}")
    return require_task_owner(db, task_id, user)


def create_task(db: Session, data: schemas.TaskCreate, user: models.User) -> models.Task:
    logger.info(f"User {user.id} creating task: {data.title} in project {data.project_id}")

    # Nothing is written unless the project exists and is the caller's
    require_referenced_project(db, data.project_id, user)

    task_data = data.model_dump()
    task_data["owner_id"] = user.id  # Never trust ownership from the request

    task = models.Task(**task_data)
    db.add(task)
    db.commit()
    db.refresh(task)

    logger.info(f"Task created successfully: id={task.id}")
    return task


def update_task(db: Session, task_id: int, patch: schemas.TaskUpdate, user: models.User) -> models.Task:
    logger.info(f"User {user.id} updating task {task_id}")

    task = require_task_owner(db, task_id, user)

    update_data = patch.model_dump(exclude_unset=True)

    if "project_id" in update_data:
        require_referenced_project(db, update_data["project_id"], user)

    for key, value in update_data.items():
        setattr(task, key, value)

    db.commit()
    db.refresh(task)

    logger.info(f"Task {task_id} updated successfully, fields: {sorted(update_data)}")
    return task


def delete_task(db: Session, task_id: int, user: models.User) -> None:
    logger.debug(f"User {user.id} deleting task {task_id}")

    task = require_task_owner(db, task_id, user)
    db.delete(task)
    db.commit()

    logger.info(f"Task {task_id} deleted by user {user.id}")
