"""
Dashboard aggregation.

compute_dashboard counts a user's tasks along several independent dimensions
in a single aggregate query; compute_project_stats groups one project's tasks
by status.
"""

import logging
from datetime import datetime
from typing import List

from sqlalchemy import and_, case, func
from sqlalchemy.orm import Session

import models
import schemas
from time_utils import due_this_week_window

logger = logging.getLogger(__name__)


def _count_where(condition):
    # SUM over zero rows is NULL
    return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)


def compute_dashboard(db: Session, owner_id: int, now: datetime) -> schemas.DashboardStats:
    """
    Summary counters over every task owned by owner_id.

    A task can contribute to several counters. dueThisWeek covers
    [now, now + 7 days] inclusive, whatever the task's status. With no tasks
    every counter is 0.

    Args:
        db: Database session
        owner_id: Owner whose tasks are counted
        now: Reference instant for the due-this-week window
    """
    week_start, week_end = due_this_week_window(now)
    logger.debug(f"Computing dashboard for owner {owner_id}, window {week_start} -> {week_end}")

    row = (
        db.query(
            func.count(models.Task.id).label("total"),
            _count_where(models.Task.status == models.TaskStatus.completed).label("completed"),
            _count_where(models.Task.status == models.TaskStatus.in_progress).label("in_progress"),
            _count_where(models.Task.status == models.TaskStatus.todo).label("todo"),
            _count_where(models.Task.priority == models.TaskPriority.high).label("high_priority"),
            _count_where(
                and_(models.Task.due_date >= week_start, models.Task.due_date <= week_end)
            ).label("due_this_week"),
        )
        .filter(models.Task.owner_id == owner_id)
        .one()
    )

    stats = schemas.DashboardStats(
        total=int(row.total or 0),
        completed=int(row.completed or 0),
        in_progress=int(row.in_progress or 0),
        todo=int(row.todo or 0),
        high_priority=int(row.high_priority or 0),
        due_this_week=int(row.due_this_week or 0),
    )
    logger.info(f"Dashboard for owner {owner_id}: {stats.total} tasks, {stats.due_this_week} due this week")
    return stats


def compute_project_stats(db: Session, owner_id: int, project_id: int) -> List[schemas.StatusCount]:
    """
    Task counts per status for one project of one owner.

    Only statuses that actually occur are returned; order is not guaranteed.
    """
    logger.debug(f"Computing status breakdown for owner {owner_id}, project {project_id}")

    rows = (
        db.query(models.Task.status, func.count(models.Task.id))
        .filter(
            models.Task.owner_id == owner_id,
            models.Task.project_id == project_id,
        )
        .group_by(models.Task.status)
        .all()
    )

    return [schemas.StatusCount(status=task_status, count=count) for task_status, count in rows]
