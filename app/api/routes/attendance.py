from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from datetime import datetime
from app.core.database import get_db
from app.core.dates import format_long_date, format_span
from app.models.user import User
from app.schemas.attendance import (
    AttendanceListResponse, AttendanceResponse, AttendanceStatsResponse, CurrentSessionResponse,
    PunchOutResponse, TodayAttendanceResponse, UserAttendanceResponse
)
from app.services.attendance_service import attendance_service
from app.api.deps import get_current_user, get_ceo_user

router = APIRouter(prefix="/attendance", tags=["Attendance"])


@router.post("/punchin", status_code=status.HTTP_201_CREATED)
async def punch_in(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Open an attendance session."""
    attendance = attendance_service.punch_in(db, current_user.id)
    return {
        "message": "Punched in successfully",
        "attendance": AttendanceResponse.model_validate(attendance),
    }


@router.post("/punchout", response_model=PunchOutResponse)
async def punch_out(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Close the open session and report its duration in seconds."""
    attendance, duration = attendance_service.punch_out(db, current_user.id)
    return {"message": "Punched out successfully", "duration": duration, "attendance": attendance}


@router.get("/current", response_model=CurrentSessionResponse)
async def get_current_session(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    session = attendance_service.get_open_session(db, current_user.id)
    if not session:
        return CurrentSessionResponse(is_active=False)
    return {"is_active": True, "punch_in_time": session.punch_in_time, "session": session}


@router.get("/all", response_model=AttendanceListResponse)
async def get_all_attendance(
    page: int = Query(1, ge=1),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Every attendance record, newest first."""
    return attendance_service.list_all(db, page=page, limit=limit)


@router.get("/stats", response_model=AttendanceStatsResponse)
async def get_attendance_stats(
    time_range: str = "monthly",
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Per-employee session statistics over a rolling or explicit window."""
    start, end = attendance_service.stats_window(time_range, start_date, end_date)
    stats = attendance_service.stats(db, start, end)
    return {
        "time_range": time_range,
        "date_range": {
            "start_date": start,
            "end_date": end,
            "display": format_long_date(start) if start.date() == end.date() else format_span(start, end),
        },
        **stats,
    }


@router.get("/today", response_model=TodayAttendanceResponse)
async def get_today_attendance(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return attendance_service.today(db)


@router.get("/user/{user_id}", response_model=UserAttendanceResponse)
async def get_user_attendance(
    user_id: int,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Records for one user with duration statistics."""
    return attendance_service.user_records(db, user_id, start_date, end_date, limit)


@router.delete("/{attendance_id}")
async def delete_attendance(
    attendance_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_ceo_user)
):
    attendance_service.delete(db, attendance_id)
    return {"message": "Attendance record deleted successfully"}
