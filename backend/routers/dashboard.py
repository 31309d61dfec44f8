import logging

from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

import models
import schemas
from schemas import MAX_ID
from auth.dependencies import get_current_user
from database import get_db
from stats import compute_dashboard, compute_project_stats
from time_utils import utc_now

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=schemas.DashboardStatsResponse)
def get_dashboard_stats(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Aggregate counts over all of the caller's tasks.

    Returns total, completed, inProgress, todo, highPriority and dueThisWeek
    (due within the next 7 days). Every counter is present, 0 when empty.
    """
    logger.debug(f"User {current_user.id} requesting dashboard stats")
    return schemas.DashboardStatsResponse(data=compute_dashboard(db, current_user.id, utc_now()))


@router.get("/projects/{project_id}/stats", response_model=schemas.ProjectStatsResponse)
def get_project_stats(
    project_id: int = Path(..., ge=1, le=MAX_ID),
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Task count per status for one of the caller's projects.

    Statuses without tasks are omitted. Scoped by owner, so another user's
    project simply yields an empty list.
    """
    logger.debug(f"User {current_user.id} requesting stats for project {project_id}")
    return schemas.ProjectStatsResponse(data=compute_project_stats(db, current_user.id, project_id))
