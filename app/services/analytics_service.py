from datetime import datetime
from typing import Dict, List, Optional, Tuple
from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload
from app.core.dates import (
    format_date_range_display, format_hours, has_explicit_bounds, resolve_date_range, end_of_day, start_of_day
)
from app.models.attendance import Attendance
from app.models.board import BoardList
from app.models.card import Card
from app.models.task import Task
from app.models.user import User, UserRole
from app.services.card_service import STATUS_KEYS, breakdown_by_board
import logging

logger = logging.getLogger(__name__)


def _status_counts() -> Dict[str, int]:
    return {"total": 0, "completed": 0, "in_progress": 0, "pending": 0, "on_hold": 0}


def _add_status(counts: Dict[str, int], status: str, count: int):
    counts["total"] += count
    key = STATUS_KEYS.get(status)
    if key:
        counts[key] += count


class AnalyticsService:
    """Per-employee task, card and attendance aggregates over a calendar window.

    Tasks assigned to a department (no specific user) count toward every
    employee of that sub-role.
    """

    def resolve_window(
        self,
        time_range: str = "monthly",
        date: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None
    ) -> Tuple[datetime, datetime]:
        if has_explicit_bounds(start_date, end_date):
            return start_of_day(start_date), end_of_day(end_date)
        return resolve_date_range(time_range, date)

    def date_range(self, time_range: str, start: datetime, end: datetime) -> Dict:
        return {
            "start_date": start,
            "end_date": end,
            "display": format_date_range_display(time_range, start, end),
        }

    def _employees(self, db: Session, employee_id: Optional[int] = None) -> List[User]:
        query = db.query(User).filter(User.role == UserRole.EMPLOYEE.value)
        if employee_id:
            query = query.filter(User.id == employee_id)
        return query.order_by(User.id).all()

    def _task_stats(self, db: Session, employees: List[User], start: datetime, end: datetime) -> List:
        employee_ids = [e.id for e in employees]
        sub_roles = sorted({e.sub_role for e in employees if e.sub_role})
        return db.query(
            Task.assigned_user_id,
            Task.assigned_sub_role,
            Task.status,
            func.count(Task.id).label("count")
        ).filter(
            Task.created_at >= start,
            Task.created_at <= end,
            or_(
                Task.assigned_user_id.in_(employee_ids),
                (Task.assigned_user_id.is_(None)) & (Task.assigned_sub_role.in_(sub_roles))
            )
        ).group_by(Task.assigned_user_id, Task.assigned_sub_role, Task.status).all()

    def _attendance_stats(self, db: Session, employees: List[User], start: datetime, end: datetime) -> Dict[int, Tuple[float, int]]:
        rows = db.query(
            Attendance.user_id,
            func.coalesce(func.sum(Attendance.duration), 0).label("total_duration"),
            func.count(Attendance.id).label("attendance_days")
        ).filter(
            Attendance.user_id.in_([e.id for e in employees]),
            Attendance.punch_in_time >= start,
            Attendance.punch_in_time <= end
        ).group_by(Attendance.user_id).all()
        return {row.user_id: (row.total_duration, row.attendance_days) for row in rows}

    def _card_stats(self, db: Session, employees: List[User], start: datetime, end: datetime) -> List:
        return db.query(
            Card.assigned_to_id,
            Card.status,
            func.count(Card.id).label("count"),
            func.coalesce(func.sum(Card.total_minutes), 0).label("total_minutes")
        ).filter(
            Card.assigned_to_id.in_([e.id for e in employees]),
            Card.created_at >= start,
            Card.created_at <= end
        ).group_by(Card.assigned_to_id, Card.status).all()

    def _task_counts_for(self, employee: User, task_stats: List) -> Dict[str, int]:
        counts = _status_counts()
        for row in task_stats:
            matches_user = row.assigned_user_id is not None and row.assigned_user_id == employee.id
            matches_sub_role = row.assigned_user_id is None and row.assigned_sub_role == employee.sub_role
            if matches_user or matches_sub_role:
                _add_status(counts, row.status, row.count)
        return counts

    def get_all_analytics(self, db: Session, start: datetime, end: datetime,
                          employee_id: Optional[int] = None) -> Dict:
        """Task counts and attendance per employee, plus a grand summary."""
        employees = self._employees(db, employee_id)
        if not employees:
            return {"employee_stats": [], "summary": {
                "total_employees": 0, "total_tasks": 0, "completed_tasks": 0, "total_hours_worked": 0
            }}

        task_stats = self._task_stats(db, employees, start, end)
        attendance = self._attendance_stats(db, employees, start, end)

        employee_stats = []
        for employee in employees:
            tasks = self._task_counts_for(employee, task_stats)
            total_duration, attendance_days = attendance.get(employee.id, (0, 0))
            employee_stats.append({
                "employee_id": employee.id,
                "name": employee.name,
                "email": employee.email,
                "sub_role": employee.sub_role or "N/A",
                "total_tasks": tasks["total"],
                "completed_tasks": tasks["completed"],
                "in_progress_tasks": tasks["in_progress"],
                "on_hold_tasks": tasks["on_hold"],
                "pending_tasks": tasks["pending"],
                "total_hours_worked": format_hours(total_duration),
                "attendance_days": attendance_days,
            })

        summary = {
            "total_employees": len(employees),
            "total_tasks": sum(e["total_tasks"] for e in employee_stats),
            "completed_tasks": sum(e["completed_tasks"] for e in employee_stats),
            "total_hours_worked": round(sum(e["total_hours_worked"] for e in employee_stats), 2),
        }
        return {"employee_stats": employee_stats, "summary": summary}

    def get_comprehensive(self, db: Session, start: datetime, end: datetime,
                          employee_id: Optional[int] = None) -> Dict:
        """Cards, tasks, attendance and per-board breakdown per employee."""
        employees = self._employees(db, employee_id)
        if not employees:
            return {"employee_stats": [], "summary": {
                "total_employees": 0, "total_trello_cards": 0, "completed_trello_cards": 0,
                "total_regular_tasks": 0, "completed_regular_tasks": 0, "total_trello_minutes": 0,
                "total_trello_hours": 0, "total_attendance_hours": 0
            }}

        card_stats = self._card_stats(db, employees, start, end)
        task_stats = self._task_stats(db, employees, start, end)
        attendance = self._attendance_stats(db, employees, start, end)

        cards = db.query(Card).options(
            joinedload(Card.board_list).joinedload(BoardList.board)
        ).filter(
            Card.assigned_to_id.in_([e.id for e in employees]),
            Card.created_at >= start,
            Card.created_at <= end
        ).all()
        cards_by_employee: Dict[int, List[Card]] = {}
        for card in cards:
            cards_by_employee.setdefault(card.assigned_to_id, []).append(card)

        employee_stats = []
        for employee in employees:
            trello = _status_counts()
            trello["total_minutes"] = 0
            for row in card_stats:
                if row.assigned_to_id == employee.id:
                    _add_status(trello, row.status, row.count)
                    trello["total_minutes"] += int(row.total_minutes or 0)
            trello["total_hours"] = trello["total_minutes"] // 60

            total_duration, attendance_days = attendance.get(employee.id, (0, 0))
            hours_worked = format_hours(total_duration)

            employee_stats.append({
                "employee_id": employee.id,
                "name": employee.name,
                "email": employee.email,
                "sub_role": employee.sub_role or "N/A",
                "trello_cards": trello,
                "regular_tasks": self._task_counts_for(employee, task_stats),
                "attendance": {
                    "total_hours_worked": hours_worked,
                    "attendance_days": attendance_days,
                },
                "board_breakdown": breakdown_by_board(cards_by_employee.get(employee.id, [])),
                "time_tracking": {
                    "trello_minutes": trello["total_minutes"],
                    "trello_hours": trello["total_hours"],
                    "trello_remaining_minutes": trello["total_minutes"] % 60,
                    "attendance_hours": hours_worked,
                    "attendance_days": attendance_days,
                },
            })

        total_minutes = sum(e["trello_cards"]["total_minutes"] for e in employee_stats)
        summary = {
            "total_employees": len(employees),
            "total_trello_cards": sum(e["trello_cards"]["total"] for e in employee_stats),
            "completed_trello_cards": sum(e["trello_cards"]["completed"] for e in employee_stats),
            "total_regular_tasks": sum(e["regular_tasks"]["total"] for e in employee_stats),
            "completed_regular_tasks": sum(e["regular_tasks"]["completed"] for e in employee_stats),
            "total_trello_minutes": total_minutes,
            "total_trello_hours": total_minutes // 60,
            "total_attendance_hours": round(
                sum(e["attendance"]["total_hours_worked"] for e in employee_stats), 2
            ),
        }
        return {"employee_stats": employee_stats, "summary": summary}

    def export_rows(self, employee_stats: List[Dict], start: datetime, end: datetime) -> List[Dict]:
        """Flatten per-employee analytics into spreadsheet rows, one per employee."""
        return [
            {
                "Employee": e["name"],
                "Email": e["email"],
                "Role": e["sub_role"],
                "Total Tasks": e["total_tasks"],
                "Completed": e["completed_tasks"],
                "In Progress": e["in_progress_tasks"],
                "On Hold": e["on_hold_tasks"],
                "Pending": e["pending_tasks"],
                "Hours Worked": e["total_hours_worked"],
                "Attendance Days": e["attendance_days"],
                "Period Start": start,
                "Period End": end,
            }
            for e in employee_stats
        ]


# Singleton instance
analytics_service = AnalyticsService()
