from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime
from app.schemas.user import UserSummary


class AttendanceResponse(BaseModel):
    id: int
    user_id: int
    punch_in_time: datetime
    punch_out_time: Optional[datetime] = None
    duration: float = 0

    class Config:
        from_attributes = True


class AttendanceWithUser(AttendanceResponse):
    user: Optional[UserSummary] = None


class PunchOutResponse(BaseModel):
    message: str
    duration: float
    attendance: AttendanceResponse


class CurrentSessionResponse(BaseModel):
    is_active: bool
    punch_in_time: Optional[datetime] = None
    session: Optional[AttendanceResponse] = None


class AttendanceListResponse(BaseModel):
    count: int
    total_count: int
    page: int
    total_pages: int
    records: List[AttendanceWithUser]


class AttendanceStatistics(BaseModel):
    total_hours: float
    total_sessions: int
    completed_sessions: int
    active_sessions: int
    average_hours_per_day: float


class UserAttendanceResponse(BaseModel):
    count: int
    records: List[AttendanceResponse]
    statistics: AttendanceStatistics


class EmployeeAttendanceStats(BaseModel):
    user_id: int
    name: str
    email: str
    sub_role: Optional[str] = None
    total_sessions: int
    completed_sessions: int
    active_sessions: int
    total_hours: float
    average_hours_per_session: float


class AttendanceStatsSummary(BaseModel):
    total_employees: int
    total_sessions: int
    total_hours: float
    average_hours_per_employee: float


class DateRange(BaseModel):
    start_date: datetime
    end_date: datetime
    display: Optional[str] = None


class AttendanceStatsResponse(BaseModel):
    time_range: str
    date_range: DateRange
    summary: AttendanceStatsSummary
    employee_stats: List[EmployeeAttendanceStats]


class TodaySummary(BaseModel):
    total: int
    active: int
    completed: int


class TodayAttendanceResponse(BaseModel):
    date: str
    summary: TodaySummary
    records: List[AttendanceWithUser]
