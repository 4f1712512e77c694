from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple
from sqlalchemy import case, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload
from app.core.dates import has_explicit_bounds, shift_months, start_of_day, utcnow
from app.core.exceptions import ConflictError, NotFoundError
from app.models.attendance import Attendance
from app.models.user import User
import logging
import math

logger = logging.getLogger(__name__)


class AttendanceService:
    """Punch in/out sessions and attendance statistics."""

    def get_open_session(self, db: Session, user_id: int) -> Optional[Attendance]:
        return db.query(Attendance).filter(
            Attendance.user_id == user_id,
            Attendance.punch_out_time.is_(None)
        ).first()

    def punch_in(self, db: Session, user_id: int, now: Optional[datetime] = None) -> Attendance:
        """Open a new session; at most one may be open per user."""
        if self.get_open_session(db, user_id):
            raise ConflictError("Already punched in!")

        attendance = Attendance(
            user_id=user_id,
            punch_in_time=now or utcnow(),
            punch_out_time=None,
            duration=0
        )
        db.add(attendance)
        try:
            db.commit()
        except IntegrityError:
            # Lost a race against a concurrent punch-in for the same user
            db.rollback()
            raise ConflictError("Already punched in!")

        db.refresh(attendance)
        logger.info(f"User {user_id} punched in at {attendance.punch_in_time.isoformat()}")
        return attendance

    def punch_out(self, db: Session, user_id: int, now: Optional[datetime] = None) -> Tuple[Attendance, float]:
        """Close the open session and return it with its duration in seconds."""
        attendance = self.get_open_session(db, user_id)
        if not attendance:
            raise NotFoundError("No active session found!")

        punch_out_time = now or utcnow()
        attendance.punch_out_time = punch_out_time
        attendance.duration = (punch_out_time - attendance.punch_in_time).total_seconds()

        db.commit()
        db.refresh(attendance)
        logger.info(f"User {user_id} punched out after {attendance.duration:.0f}s")
        return attendance, attendance.duration

    def list_all(self, db: Session, page: int = 1, limit: int = 100) -> Dict:
        query = db.query(Attendance)
        total_count = query.count()
        records = query.options(joinedload(Attendance.user)).order_by(
            Attendance.punch_in_time.desc()
        ).offset((page - 1) * limit).limit(limit).all()

        return {
            "count": len(records),
            "total_count": total_count,
            "page": page,
            "total_pages": math.ceil(total_count / limit) if limit else 0,
            "records": records,
        }

    def user_records(self, db: Session, user_id: int, start_date: Optional[datetime] = None,
                     end_date: Optional[datetime] = None, limit: int = 50) -> Dict:
        """Records for one user plus duration statistics over those records."""
        query = db.query(Attendance).filter(Attendance.user_id == user_id)
        if start_date:
            query = query.filter(Attendance.punch_in_time >= start_date)
        if end_date:
            query = query.filter(Attendance.punch_in_time <= end_date)

        records = query.order_by(Attendance.punch_in_time.desc()).limit(limit).all()

        total_hours = round(sum(r.duration or 0 for r in records) / 3600, 2)
        completed = len([r for r in records if r.punch_out_time is not None])

        return {
            "count": len(records),
            "records": records,
            "statistics": {
                "total_hours": total_hours,
                "total_sessions": len(records),
                "completed_sessions": completed,
                "active_sessions": len(records) - completed,
                "average_hours_per_day": round(total_hours / len(records), 2) if records else 0,
            },
        }

    def stats_window(self, time_range: str = "monthly", start_date: Optional[datetime] = None,
                     end_date: Optional[datetime] = None,
                     now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
        if has_explicit_bounds(start_date, end_date):
            return start_date, end_date
        now = now or utcnow()
        if time_range == "daily":
            return start_of_day(now), now
        if time_range == "weekly":
            return now - timedelta(days=7), now
        return shift_months(now, -1), now

    def stats(self, db: Session, start_date: datetime, end_date: datetime) -> Dict:
        """Per-user session counts and hours for sessions punched in within the window."""
        rows = db.query(
            Attendance.user_id,
            User.name,
            User.email,
            User.sub_role,
            func.count(Attendance.id).label("total_sessions"),
            func.coalesce(func.sum(Attendance.duration), 0).label("total_duration"),
            func.sum(case((Attendance.punch_out_time.isnot(None), 1), else_=0)).label("completed_sessions"),
            func.sum(case((Attendance.punch_out_time.is_(None), 1), else_=0)).label("active_sessions"),
        ).join(User, User.id == Attendance.user_id).filter(
            Attendance.punch_in_time >= start_date,
            Attendance.punch_in_time <= end_date
        ).group_by(Attendance.user_id, User.name, User.email, User.sub_role).all()

        employee_stats: List[Dict] = []
        for row in rows:
            total_hours = row.total_duration / 3600
            employee_stats.append({
                "user_id": row.user_id,
                "name": row.name,
                "email": row.email,
                "sub_role": row.sub_role,
                "total_sessions": row.total_sessions,
                "completed_sessions": int(row.completed_sessions or 0),
                "active_sessions": int(row.active_sessions or 0),
                "total_hours": round(total_hours, 2),
                "average_hours_per_session": round(total_hours / row.total_sessions, 2),
            })
        employee_stats.sort(key=lambda s: s["total_hours"], reverse=True)

        total_hours = sum(s["total_hours"] for s in employee_stats)
        summary = {
            "total_employees": len(employee_stats),
            "total_sessions": sum(s["total_sessions"] for s in employee_stats),
            "total_hours": round(total_hours, 2),
            "average_hours_per_employee": round(total_hours / len(employee_stats), 2) if employee_stats else 0,
        }
        return {"summary": summary, "employee_stats": employee_stats}

    def today(self, db: Session, now: Optional[datetime] = None) -> Dict:
        today = start_of_day(now or utcnow())
        tomorrow = today + timedelta(days=1)

        records = db.query(Attendance).options(joinedload(Attendance.user)).filter(
            Attendance.punch_in_time >= today,
            Attendance.punch_in_time < tomorrow
        ).order_by(Attendance.punch_in_time.desc()).all()

        active = len([r for r in records if r.punch_out_time is None])
        return {
            "date": today.date().isoformat(),
            "summary": {
                "total": len(records),
                "active": active,
                "completed": len(records) - active,
            },
            "records": records,
        }

    def delete(self, db: Session, attendance_id: int):
        attendance = db.query(Attendance).filter(Attendance.id == attendance_id).first()
        if not attendance:
            raise NotFoundError("Attendance record not found")
        db.delete(attendance)
        db.commit()


# Singleton instance
attendance_service = AttendanceService()
