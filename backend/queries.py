"""
Task listing queries.

Turns a TaskFilters object into an owner-scoped SQLAlchemy query and applies
the listing order: soonest due date first, then most urgent priority.
"""

import logging

from sqlalchemy import case, or_
from sqlalchemy.orm import Query, Session, joinedload

import models
from schemas import TaskFilters

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "\\"

# high > medium > low when sorted descending
priority_rank = case(
    (models.Task.priority == models.TaskPriority.high, 3),
    (models.Task.priority == models.TaskPriority.medium, 2),
    else_=1,
)


def _contains_pattern(term: str) -> str:
    """Build a LIKE pattern matching term literally anywhere in the value."""
    escaped = (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def apply_task_filters(query: Query, owner_id: int, filters: TaskFilters) -> Query:
    """
    Constrain a Task query to one owner plus any provided criteria.

    All criteria are ANDed together; the search term matches title OR description.
    Date bounds are inclusive.
    """
    query = query.filter(models.Task.owner_id == owner_id)

    if filters.status is not None:
        query = query.filter(models.Task.status == filters.status)
    if filters.priority is not None:
        query = query.filter(models.Task.priority == filters.priority)
    if filters.project_id is not None:
        query = query.filter(models.Task.project_id == filters.project_id)

    if filters.due_after is not None:
        query = query.filter(models.Task.due_date >= filters.due_after)
    if filters.due_before is not None:
        query = query.filter(models.Task.due_date <= filters.due_before)

    search = (filters.search or "").strip()
    if search:
        pattern = _contains_pattern(search)
        query = query.filter(
            or_(
                models.Task.title.ilike(pattern, escape=LIKE_ESCAPE),
                models.Task.description.ilike(pattern, escape=LIKE_ESCAPE),
            )
        )

    return query


def order_tasks(query: Query) -> Query:
    # Task.id keeps ties deterministic
    return query.order_by(
        models.Task.due_date.asc(),
        priority_rank.desc(),
        models.Task.id.asc(),
    )


def build_task_query(db: Session, owner_id: int, filters: TaskFilters) -> Query:
    """
    Owner-scoped, filtered and ordered task query with display joins loaded.

    Args:
        db: Database session
        owner_id: The caller; always applied, no cross-user visibility
        filters: Optional criteria

    Example:
        >>> tasks = build_task_query(db, user.id, TaskFilters(status="todo")).all()
    """
    logger.debug(f"Building task query for owner {owner_id}: {filters.model_dump(exclude_none=True)}")

    query = db.query(models.Task).options(
        joinedload(models.Task.project),
        joinedload(models.Task.owner),
    )
    query = apply_task_filters(query, owner_id, filters)
    return order_tasks(query)
