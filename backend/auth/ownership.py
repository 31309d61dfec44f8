"""
Ownership checks for projects and tasks.

Every project and task carries its owner directly, so authorization is a
comparison between the resource's owner_id and the caller. The check itself
is a pure function returning an Ownership outcome; the require_* helpers load
the resource, run the check and raise the matching typed error.

Two flavours of rejection exist:

- Direct access to a project or task owned by someone else is Forbidden.
- A project *referenced* by a task (task create, or an update that moves the
  task) that is missing or foreign is NotFound, so callers cannot probe for
  other users' project ids.
"""

import enum
import logging
from typing import Optional

from sqlalchemy.orm import Session

from errors import ForbiddenError, NotFoundError
from models import User, Project, Task

logger = logging.getLogger(__name__)


class Ownership(str, enum.Enum):
    authorized = "authorized"
    not_found = "not_found"
    forbidden = "forbidden"


def check_ownership(resource: Optional[object], user_id: int) -> Ownership:
    """
    Compare a resource's owner with the requesting user.

    Args:
        resource: Any object with an owner_id attribute, or None if it was not found
        user_id: ID of the authenticated caller

    Returns:
        Ownership.not_found if resource is None,
        Ownership.forbidden if it belongs to someone else,
        Ownership.authorized otherwise

    Example:
        >>> check_ownership(project, user.id)
        <Ownership.authorized: 'authorized'>
    """
    if resource is None:
        return Ownership.not_found
    if resource.owner_id != user_id:
        return Ownership.forbidden
    return Ownership.authorized


def require_project_owner(db: Session, project_id: int, user: User) -> Project:
    """
    Load a project the caller wants to read or modify.

    Raises:
        NotFoundError: 404 if the project does not exist
        ForbiddenError: 403 if the project belongs to another user
    """
    logger.debug(f"Checking ownership of project {project_id} for user {user.id}")

    project = db.query(Project).filter(Project.id == project_id).first()
    outcome = check_ownership(project, user.id)

    if outcome is Ownership.not_found:
        logger.info(f"Project {project_id} not found")
        raise NotFoundError(f"Project not found with id of {project_id}")
    if outcome is Ownership.forbidden:
        logger.info(f"User {user.id} is not the owner of project {project_id}")
        raise ForbiddenError("User not authorized to access this project")

    return project


def require_task_owner(db: Session, task_id: int, user: User) -> Task:
    """
    Load a task the caller wants to read or modify.

    Raises:
        NotFoundError: 404 if the task does not exist
        ForbiddenError: 403 if the task belongs to another user
    """
    logger.debug(f"Checking ownership of task {task_id} for user {user.id}")

    task = db.query(Task).filter(Task.id == task_id).first()
    outcome = check_ownership(task, user.id)

    if outcome is Ownership.not_found:
        logger.info(f"Task {task_id} not found")
        raise NotFoundError(f"Task not found with id of {task_id}")
    if outcome is Ownership.forbidden:
        logger.info(f"User {user.id} is not the owner of task {task_id}")
        raise ForbiddenError("User not authorized to access this task")

    return task


def require_referenced_project(db: Session, project_id: int, user: User) -> Project:
    """
    Resolve the project a task points at.

    Missing and foreign projects are reported identically.

    Raises:
        NotFoundError: 404 unless the project exists and is owned by the caller
    """
    logger.debug(f"Resolving referenced project {project_id} for user {user.id}")

    project = db.query(Project).filter(Project.id == project_id).first()
    outcome = check_ownership(project, user.id)

    if outcome is not Ownership.authorized:
        # Same response whether the project is missing or someone else's
        logger.info(f"Referenced project {project_id} rejected for user {user.id}: {outcome.value}")
        raise NotFoundError(f"No project found with id {project_id}")

    return project
