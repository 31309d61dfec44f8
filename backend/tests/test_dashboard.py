"""
Tests for dashboard aggregation (/api/v1/dashboard).

Covers:
- Zero-fill when the caller has no tasks
- Independent counters and total == completed + inProgress + todo
- dueThisWeek window boundaries, regardless of status
- Per-project status breakdown (absent statuses omitted, counts sum up)
"""

import logging
from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

import models
from stats import compute_dashboard, compute_project_stats
from time_utils import utc_now
from tests.conftest import make_project, make_task

logger = logging.getLogger(__name__)

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


# ============== Dashboard stats ==============


def test_dashboard_zero_fills(client: TestClient, owner: models.User, owner_headers: dict):
    response = client.get("/api/v1/dashboard/stats", headers=owner_headers)

    assert response.status_code == 200, response.json()
    assert response.json() == {
        "success": True,
        "data": {
            "total": 0,
            "completed": 0,
            "inProgress": 0,
            "todo": 0,
            "highPriority": 0,
            "dueThisWeek": 0,
        },
    }
    logger.info("✓ Empty dashboard returns explicit zeros")


def test_due_this_week_boundaries(test_db: Session, owner: models.User, project: models.Project):
    make_task(test_db, project, "Inside", datetime(2024, 6, 3, tzinfo=timezone.utc))
    make_task(test_db, project, "Past day seven", datetime(2024, 6, 9, tzinfo=timezone.utc))
    make_task(test_db, project, "Exactly now", NOW)
    make_task(test_db, project, "Exactly seven days", NOW + timedelta(days=7))
    make_task(test_db, project, "Yesterday", NOW - timedelta(days=1))

    stats = compute_dashboard(test_db, owner.id, NOW)

    assert stats.due_this_week == 3, "now, 06-03 and now+7d are in the window"
    assert stats.total == 5
    logger.info("✓ dueThisWeek window is [now, now + 7 days] inclusive")


def test_due_this_week_ignores_status(test_db: Session, owner: models.User, project: models.Project):
    for task_status in models.TaskStatus:
        make_task(test_db, project, f"Due {task_status.value}", NOW + timedelta(days=2), status=task_status)

    assert compute_dashboard(test_db, owner.id, NOW).due_this_week == 3


def test_counters_are_independent(
    test_db: Session,
    owner: models.User,
    other_user: models.User,
    project: models.Project,
    other_project: models.Project
):
    soon = NOW + timedelta(days=1)
    later = NOW + timedelta(days=30)
    make_task(test_db, project, "A", soon, status=models.TaskStatus.completed, priority=models.TaskPriority.high)
    make_task(test_db, project, "B", later, status=models.TaskStatus.in_progress, priority=models.TaskPriority.high)
    make_task(test_db, project, "C", later, status=models.TaskStatus.todo, priority=models.TaskPriority.low)
    make_task(test_db, project, "D", soon, status=models.TaskStatus.todo)
    make_task(test_db, other_project, "Not counted", soon, priority=models.TaskPriority.high)

    stats = compute_dashboard(test_db, owner.id, NOW)

    assert stats.total == 4
    assert stats.completed == 1
    assert stats.in_progress == 1
    assert stats.todo == 2
    assert stats.high_priority == 2
    assert stats.due_this_week == 2
    assert stats.total == stats.completed + stats.in_progress + stats.todo


def test_dashboard_endpoint_uses_current_time(
    client: TestClient,
    test_db: Session,
    project: models.Project,
    owner_headers: dict
):
    now = utc_now()
    make_task(test_db, project, "Soon", now + timedelta(days=2), priority=models.TaskPriority.high)
    make_task(test_db, project, "Far", now + timedelta(days=20), status=models.TaskStatus.completed)

    response = client.get("/api/v1/dashboard/stats", headers=owner_headers)

    assert response.status_code == 200, response.json()
    data = response.json()["data"]
    assert data["total"] == 2
    assert data["completed"] == 1
    assert data["todo"] == 1
    assert data["highPriority"] == 1
    assert data["dueThisWeek"] == 1


def test_dashboard_requires_authentication(client: TestClient):
    assert client.get("/api/v1/dashboard/stats").status_code == 401


# ============== Project stats ==============


def test_project_stats_omits_absent_statuses(
    test_db: Session,
    owner: models.User,
    project: models.Project
):
    make_task(test_db, project, "One", NOW)
    make_task(test_db, project, "Two", NOW)
    make_task(test_db, project, "Three", NOW, status=models.TaskStatus.completed)

    stats = compute_project_stats(test_db, owner.id, project.id)
    counts = {entry.status: entry.count for entry in stats}

    assert counts == {models.TaskStatus.todo: 2, models.TaskStatus.completed: 1}
    assert sum(counts.values()) == 3
    logger.info("✓ Project stats only include statuses that occur")


def test_project_stats_endpoint(
    client: TestClient,
    test_db: Session,
    owner: models.User,
    project: models.Project,
    owner_headers: dict
):
    elsewhere = make_project(test_db, owner, "Elsewhere")
    make_task(test_db, project, "Active", NOW, status=models.TaskStatus.in_progress)
    make_task(test_db, elsewhere, "Other project", NOW, status=models.TaskStatus.todo)

    response = client.get(f"/api/v1/dashboard/projects/{project.id}/stats", headers=owner_headers)

    assert response.status_code == 200, response.json()
    assert response.json() == {"success": True, "data": [{"status": "in-progress", "count": 1}]}


def test_project_stats_for_foreign_project_is_empty(
    client: TestClient,
    test_db: Session,
    other_project: models.Project,
    owner_headers: dict
):
    make_task(test_db, other_project, "Private", NOW)

    response = client.get(f"/api/v1/dashboard/projects/{other_project.id}/stats", headers=owner_headers)

    assert response.status_code == 200, response.json()
    assert response.json()["data"] == []
    logger.info("✓ Project stats never count another user's tasks")
