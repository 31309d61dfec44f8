"""
Tests for the ownership guard.

Covers:
- The pure check (authorized / not_found / forbidden)
- require_project_owner and require_task_owner error mapping
- Referenced projects reporting missing and foreign projects identically
"""

import logging
from datetime import datetime, timezone

import pytest
from sqlalchemy.orm import Session

import models
from auth.ownership import (
    Ownership,
    check_ownership,
    require_project_owner,
    require_task_owner,
    require_referenced_project,
)
from errors import ForbiddenError, NotFoundError
from tests.conftest import make_task

logger = logging.getLogger(__name__)

DUE = datetime(2030, 1, 1, tzinfo=timezone.utc)


# ============== check_ownership ==============


def test_check_missing_resource_is_not_found(owner: models.User):
    assert check_ownership(None, owner.id) is Ownership.not_found


def test_check_foreign_resource_is_forbidden(project: models.Project, other_user: models.User):
    assert check_ownership(project, other_user.id) is Ownership.forbidden


def test_check_own_resource_is_authorized(project: models.Project, owner: models.User):
    assert check_ownership(project, owner.id) is Ownership.authorized
    logger.info("✓ check_ownership returns the expected outcomes")


# ============== require_* helpers ==============


def test_require_project_owner_returns_project(test_db: Session, project: models.Project, owner: models.User):
    assert require_project_owner(test_db, project.id, owner).id == project.id


def test_require_project_owner_missing(test_db: Session, owner: models.User):
    with pytest.raises(NotFoundError):
        require_project_owner(test_db, 9999, owner)


def test_require_project_owner_foreign(test_db: Session, other_project: models.Project, owner: models.User):
    with pytest.raises(ForbiddenError) as exc_info:
        require_project_owner(test_db, other_project.id, owner)
    assert exc_info.value.status_code == 403


def test_require_task_owner(
    test_db: Session,
    project: models.Project,
    owner: models.User,
    other_user: models.User
):
    task = make_task(test_db, project, "Guarded", DUE)

    assert require_task_owner(test_db, task.id, owner).id == task.id
    with pytest.raises(ForbiddenError):
        require_task_owner(test_db, task.id, other_user)
    with pytest.raises(NotFoundError):
        require_task_owner(test_db, task.id + 100, owner)
    logger.info("✓ require_task_owner maps outcomes to typed errors")


def test_referenced_project_hides_foreign_projects(
    test_db: Session,
    other_project: models.Project,
    owner: models.User
):
    """A foreign project and a missing one produce the same NotFound message shape."""
    with pytest.raises(NotFoundError) as foreign:
        require_referenced_project(test_db, other_project.id, owner)
    with pytest.raises(NotFoundError) as missing:
        require_referenced_project(test_db, 424242, owner)

    assert foreign.value.message == f"No project found with id {other_project.id}"
    assert missing.value.message == "No project found with id 424242"
    logger.info("✓ Referenced project check does not leak existence")
