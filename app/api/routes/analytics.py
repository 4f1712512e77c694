from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session
from typing import Optional
from datetime import datetime
from app.core.database import get_db
from app.core.dates import utcnow
from app.core.exceptions import ValidationError
from app.models.user import User
from app.schemas.analytics import AnalyticsResponse, ComprehensiveAnalyticsResponse
from app.services.analytics_service import analytics_service
from app.services.export_service import export_service
from app.services.pdf_service import pdf_service
from app.api.deps import get_ceo_user
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analytics", tags=["Analytics"])

EXPORT_FORMATS = {
    "csv": "text/csv",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


class WindowParams:
    """Common query parameters selecting the reporting window."""

    def __init__(
        self,
        time_range: str = "monthly",
        date: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None
    ):
        self.time_range = time_range
        try:
            self.start, self.end = analytics_service.resolve_window(time_range, date, start_date, end_date)
        except ValueError:
            raise ValidationError("Invalid date. Use YYYY-MM-DD")
        self.date_range = analytics_service.date_range(time_range, self.start, self.end)


@router.get("/all", response_model=AnalyticsResponse)
async def get_all_analytics(
    window: WindowParams = Depends(),
    employee_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_ceo_user)
):
    """Task and attendance totals per employee."""
    logger.info(f"Analytics request: {window.time_range} {window.start} - {window.end}")
    result = analytics_service.get_all_analytics(db, window.start, window.end, employee_id)
    return {"time_range": window.time_range, "date_range": window.date_range, **result}


@router.get("/comprehensive", response_model=ComprehensiveAnalyticsResponse)
async def get_comprehensive_analytics(
    window: WindowParams = Depends(),
    employee_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_ceo_user)
):
    """Cards, tasks, attendance and time tracking per employee."""
    result = analytics_service.get_comprehensive(db, window.start, window.end, employee_id)
    return {"time_range": window.time_range, "date_range": window.date_range, **result}


@router.get("/download-pdf")
async def download_pdf(
    window: WindowParams = Depends(),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_ceo_user)
):
    result = analytics_service.get_all_analytics(db, window.start, window.end)
    if not result["employee_stats"]:
        raise ValidationError("No employees found")

    pdf_buffer = pdf_service.render_analytics(
        window.date_range["display"], result["summary"], result["employee_stats"]
    )
    return StreamingResponse(
        pdf_buffer,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename=analytics-report-{window.time_range}-{utcnow().strftime('%Y%m%d%H%M%S')}.pdf"}
    )


@router.get("/download-comprehensive-pdf")
async def download_comprehensive_pdf(
    window: WindowParams = Depends(),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_ceo_user)
):
    result = analytics_service.get_comprehensive(db, window.start, window.end)
    if not result["employee_stats"]:
        raise ValidationError("No employees found")

    pdf_buffer = pdf_service.render_comprehensive(
        window.date_range["display"], result["summary"], result["employee_stats"]
    )
    return StreamingResponse(
        pdf_buffer,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename=comprehensive-analytics-{window.time_range}-{utcnow().strftime('%Y%m%d%H%M%S')}.pdf"}
    )


@router.get("/export")
async def export_analytics(
    window: WindowParams = Depends(),
    format: str = "csv",
    db: Session = Depends(get_db),
    current_user: User = Depends(get_ceo_user)
):
    """Per-employee analytics as a CSV or Excel download."""
    if format not in EXPORT_FORMATS:
        raise ValidationError("Invalid format. Must be one of: csv, xlsx")

    result = analytics_service.get_all_analytics(db, window.start, window.end)
    rows = analytics_service.export_rows(result["employee_stats"], window.start, window.end)
    if format == "xlsx":
        buffer = export_service.export_to_excel(rows)
    else:
        buffer = export_service.export_to_csv(rows)

    return StreamingResponse(
        buffer,
        media_type=EXPORT_FORMATS[format],
        headers={"Content-Disposition": f"attachment; filename=analytics_{window.time_range}_{utcnow().strftime('%Y%m%d')}.{format}"}
    )
