from pydantic import BaseModel
from typing import Dict, List
from app.schemas.attendance import DateRange
from app.schemas.card import StatusBreakdown


class EmployeeAnalytics(BaseModel):
    employee_id: int
    name: str
    email: str
    sub_role: str
    total_tasks: int = 0
    completed_tasks: int = 0
    in_progress_tasks: int = 0
    on_hold_tasks: int = 0
    pending_tasks: int = 0
    total_hours_worked: float = 0
    attendance_days: int = 0


class AnalyticsSummary(BaseModel):
    total_employees: int
    total_tasks: int
    completed_tasks: int
    total_hours_worked: float


class AnalyticsResponse(BaseModel):
    time_range: str
    date_range: DateRange
    employee_stats: List[EmployeeAnalytics]
    summary: AnalyticsSummary


class CardCounts(BaseModel):
    total: int = 0
    completed: int = 0
    in_progress: int = 0
    pending: int = 0
    on_hold: int = 0
    total_minutes: int = 0
    total_hours: int = 0


class TaskCounts(BaseModel):
    total: int = 0
    completed: int = 0
    in_progress: int = 0
    pending: int = 0
    on_hold: int = 0


class AttendanceBlock(BaseModel):
    total_hours_worked: float = 0
    attendance_days: int = 0


class TimeTracking(BaseModel):
    trello_minutes: int = 0
    trello_hours: int = 0
    trello_remaining_minutes: int = 0
    attendance_hours: float = 0
    attendance_days: int = 0


class ComprehensiveEmployeeAnalytics(BaseModel):
    employee_id: int
    name: str
    email: str
    sub_role: str
    trello_cards: CardCounts
    regular_tasks: TaskCounts
    attendance: AttendanceBlock
    board_breakdown: Dict[str, StatusBreakdown]
    time_tracking: TimeTracking


class ComprehensiveSummary(BaseModel):
    total_employees: int
    total_trello_cards: int
    completed_trello_cards: int
    total_regular_tasks: int
    completed_regular_tasks: int
    total_trello_minutes: int
    total_trello_hours: int
    total_attendance_hours: float


class ComprehensiveAnalyticsResponse(BaseModel):
    time_range: str
    date_range: DateRange
    employee_stats: List[ComprehensiveEmployeeAnalytics]
    summary: ComprehensiveSummary
