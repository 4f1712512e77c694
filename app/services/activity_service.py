from datetime import datetime, timedelta
from typing import Dict, List, Optional, Union
from pydantic import BaseModel
from sqlalchemy.orm import Session
from app.core.dates import rolling_window_start, utcnow
from app.models.activity import Activity, ActivityAction, TargetType
from app.models.user import User, UserRole
from app.schemas.activity import ACTION_DETAILS
import logging
import math

logger = logging.getLogger(__name__)

# Actions counted in the per-employee histogram
STAT_ACTIONS = (
    ActivityAction.CREATED_BOARD,
    ActivityAction.CREATED_LIST,
    ActivityAction.CREATED_CARD,
    ActivityAction.UPDATED_CARD,
    ActivityAction.MOVED_CARD,
    ActivityAction.CHANGED_CARD_STATUS,
)


class ActivityService:
    """Append-only audit log of board, list and card mutations."""

    def log_activity(
        self,
        db: Session,
        user_id: int,
        action: ActivityAction,
        target_type: TargetType,
        target_id: int,
        target_name: str,
        details: Optional[Union[BaseModel, Dict]] = None,
        board_id: Optional[int] = None,
        board_name: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> Optional[Activity]:
        """Record an activity.

        Best effort: the mutation being described has already been committed,
        so any failure here is rolled back and logged, never raised.
        """
        try:
            user = db.query(User).filter(User.id == user_id).first()
            if not user:
                logger.error(f"Activity not logged: user {user_id} not found ({action.value})")
                return None

            details_model = ACTION_DETAILS[action]
            if isinstance(details, details_model):
                payload = details.model_dump()
            else:
                payload = details_model.model_validate(details or {}).model_dump()

            activity = Activity(
                user_id=user.id,
                user_name=user.name,
                user_role=user.display_role,
                action=action.value,
                target_type=target_type.value,
                target_id=target_id,
                target_name=target_name,
                details=payload,
                board_id=board_id,
                board_name=board_name,
                created_at=now or utcnow()
            )
            db.add(activity)
            db.commit()
            return activity
        except Exception as e:
            db.rollback()
            logger.error(f"Error logging activity {getattr(action, 'value', action)}: {e}")
            return None

    def list_activities(
        self,
        db: Session,
        current_user: User,
        page: int = 1,
        limit: int = 50,
        user_id: Optional[int] = None,
        board_id: Optional[int] = None
    ) -> Dict:
        """Paginated history; employees only ever see their own records."""
        query = db.query(Activity)
        if not current_user.is_ceo:
            query = query.filter(Activity.user_id == current_user.id)
        elif user_id:
            query = query.filter(Activity.user_id == user_id)
        if board_id:
            query = query.filter(Activity.board_id == board_id)

        total_count = query.count()
        activities = query.order_by(Activity.created_at.desc(), Activity.id.desc()).offset(
            (page - 1) * limit
        ).limit(limit).all()

        return {
            "count": len(activities),
            "total_count": total_count,
            "page": page,
            "total_pages": math.ceil(total_count / limit) if limit else 0,
            "activities": activities,
        }

    def recent(self, db: Session, current_user: User, now: Optional[datetime] = None, limit: int = 20) -> List[Activity]:
        since = (now or utcnow()) - timedelta(hours=24)
        query = db.query(Activity).filter(Activity.created_at >= since)
        if not current_user.is_ceo:
            query = query.filter(Activity.user_id == current_user.id)
        return query.order_by(Activity.created_at.desc(), Activity.id.desc()).limit(limit).all()

    def stats_by_employee(self, db: Session, period: str = "weekly", now: Optional[datetime] = None) -> List[Dict]:
        """Action-type histogram per employee over a daily/weekly/monthly window."""
        start_date = rolling_window_start(period, now)
        employees = db.query(User).filter(User.role == UserRole.EMPLOYEE.value).order_by(User.id).all()

        stats = []
        for employee in employees:
            activities = db.query(Activity).filter(
                Activity.user_id == employee.id,
                Activity.created_at >= start_date
            ).order_by(Activity.created_at.desc()).all()

            action_counts = {action.value: 0 for action in STAT_ACTIONS}
            for activity in activities:
                if activity.action in action_counts:
                    action_counts[activity.action] += 1
            action_counts["total"] = len(activities)

            stats.append({
                "employee": {
                    "id": employee.id,
                    "name": employee.name,
                    "email": employee.email,
                    "role": employee.sub_role,
                },
                "action_counts": action_counts,
                "last_activity": activities[0].created_at if activities else None,
            })
        return stats

    def purge(self, db: Session, days_old: int = 90, now: Optional[datetime] = None) -> int:
        """Delete records created strictly before now - days_old."""
        cutoff = (now or utcnow()) - timedelta(days=days_old)
        deleted = db.query(Activity).filter(Activity.created_at < cutoff).delete(synchronize_session=False)
        db.commit()
        logger.info(f"Purged {deleted} activities older than {days_old} days")
        return deleted


# Singleton instance
activity_service = ActivityService()
