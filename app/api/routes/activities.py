from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session
from typing import Optional
from app.core.database import get_db
from app.core.exceptions import ValidationError
from app.models.user import User
from app.schemas.activity import (
    ActivityPageResponse, ActivityStatsResponse, CleanupResponse, RecentActivityResponse
)
from app.services.activity_service import activity_service
from app.api.deps import get_current_user, get_ceo_user

router = APIRouter(prefix="/activities", tags=["Activities"])


@router.get("/", response_model=ActivityPageResponse)
async def list_activities(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    user_id: Optional[int] = None,
    board_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Activity history. Employees only see their own entries."""
    return activity_service.list_activities(db, current_user, page, limit, user_id, board_id)


@router.get("/recent", response_model=RecentActivityResponse)
async def recent_activities(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    activities = activity_service.recent(db, current_user)
    return {"count": len(activities), "activities": activities}


@router.get("/stats/employees", response_model=ActivityStatsResponse)
async def activity_stats_by_employee(
    period: str = "weekly",
    db: Session = Depends(get_db),
    current_user: User = Depends(get_ceo_user)
):
    if period not in ("daily", "weekly", "monthly"):
        raise ValidationError("Invalid period. Must be one of: daily, weekly, monthly")
    return {"period": period, "stats": activity_service.stats_by_employee(db, period)}


@router.delete("/cleanup", response_model=CleanupResponse)
async def cleanup_activities(
    request: Request,
    days_old: Optional[int] = Query(None, ge=0),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_ceo_user)
):
    """Delete activity records older than ``days_old`` days (retention setting by default)."""
    if days_old is None:
        days_old = request.app.state.settings.ACTIVITY_RETENTION_DAYS
    deleted = activity_service.purge(db, days_old)
    return {"message": f"Deleted {deleted} activities older than {days_old} days", "deleted_count": deleted}
