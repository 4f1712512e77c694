from io import BytesIO
from typing import Dict, List, Sequence, Tuple
from datetime import datetime
from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas
from app.core.dates import utcnow
import logging

logger = logging.getLogger(__name__)

PAGE_WIDTH, PAGE_HEIGHT = A4
LEFT = 50
RIGHT = PAGE_WIDTH - 50
TOP = PAGE_HEIGHT - 50
# Rows below this line start a new page
BOTTOM = 90


class _Report:
    """Top-down cursor over a reportlab canvas."""

    def __init__(self, buffer: BytesIO, title: str):
        self.pdf = canvas.Canvas(buffer, pagesize=A4)
        self.pdf.setTitle(title)
        self.y = TOP

    def centered(self, text: str, font: str = "Helvetica", size: int = 12, gap: int = 18):
        self.pdf.setFont(font, size)
        self.pdf.drawCentredString(PAGE_WIDTH / 2, self.y, text)
        self.y -= gap

    def heading(self, text: str, size: int = 16):
        self.pdf.setFont("Helvetica-Bold", size)
        self.pdf.drawString(LEFT, self.y, text)
        self.y -= size + 10

    def rule(self, color: str = "#000000", width: float = 1, gap: int = 20):
        self.pdf.setStrokeColor(HexColor(color))
        self.pdf.setLineWidth(width)
        self.pdf.line(LEFT, self.y, RIGHT, self.y)
        self.y -= gap

    def label_value(self, label: str, value):
        self.pdf.setFont("Helvetica", 12)
        self.pdf.drawString(LEFT, self.y, label)
        self.pdf.setFont("Helvetica-Bold", 12)
        self.pdf.drawString(LEFT + self.pdf.stringWidth(label, "Helvetica", 12) + 4, self.y, str(value))
        self.y -= 18

    def row(self, columns: Sequence[Tuple[float, str]], font: str = "Helvetica", size: int = 9, gap: int = 16):
        if self.y < BOTTOM:
            self.pdf.showPage()
            self.y = TOP
        self.pdf.setFont(font, size)
        for x, text in columns:
            self.pdf.drawString(x, self.y, text)
        self.y -= gap

    def finish(self):
        self.pdf.save()


class PDFService:
    """Renders analytics reports as A4 PDFs."""

    @staticmethod
    def _footer(report: _Report, lines: List[str]):
        report.y -= 20
        for index, line in enumerate(lines):
            report.centered(line, font="Helvetica-Oblique", size=9 if index == 0 else 8, gap=14)

    @staticmethod
    def render_analytics(display: str, summary: Dict, employee_stats: List[Dict],
                         generated_at: datetime = None) -> BytesIO:
        """
        Standard analytics report: header, summary and per-employee table.

        Args:
            display: Human readable report period
            summary: Grand totals
            employee_stats: One dict per employee

        Returns:
            BytesIO object containing the PDF
        """
        generated_at = generated_at or utcnow()
        buffer = BytesIO()
        report = _Report(buffer, "Employee Analytics Report")

        report.centered("Employee Analytics Report", font="Helvetica-Bold", size=24, gap=30)
        report.centered(f"Report Period: {display}")
        report.centered(f"Generated on: {generated_at.strftime('%Y-%m-%d %H:%M')} UTC", size=10, gap=24)
        report.rule()

        report.heading("Summary")
        report.label_value("Total Employees:", summary["total_employees"])
        report.label_value("Total Tasks:", summary["total_tasks"])
        report.label_value("Completed Tasks:", summary["completed_tasks"])
        report.label_value("Total Hours Worked:", f"{summary['total_hours_worked']} hrs")
        report.y -= 10
        report.rule()

        report.heading("Employee Performance")
        columns = (50, 180, 260, 320, 380, 440, 500)
        report.row(list(zip(columns, ("Name", "Role", "Tasks", "Done", "Prog", "Hours", "Days"))),
                   font="Helvetica-Bold", size=10, gap=8)
        report.rule(gap=14)

        for emp in employee_stats:
            report.row(list(zip(columns, (
                emp["name"][:18],
                emp["sub_role"],
                str(emp["total_tasks"]),
                str(emp["completed_tasks"]),
                str(emp["in_progress_tasks"]),
                f"{emp['total_hours_worked']:.1f}",
                str(emp["attendance_days"]),
            ))))

        report.rule()
        PDFService._footer(report, [
            "Generated by Employee Management System",
            f"Report ID: RPT-{generated_at.strftime('%Y%m%d%H%M%S')}",
        ])
        report.finish()

        buffer.seek(0)
        logger.info(f"Analytics PDF rendered for {len(employee_stats)} employees")
        return buffer

    @staticmethod
    def render_comprehensive(display: str, summary: Dict, employee_stats: List[Dict],
                             generated_at: datetime = None) -> BytesIO:
        """Comprehensive report with card completion and time tracking columns."""
        generated_at = generated_at or utcnow()
        buffer = BytesIO()
        report = _Report(buffer, "Comprehensive Analytics Report")

        report.centered("Comprehensive Analytics Report", font="Helvetica-Bold", size=26, gap=30)
        report.centered(f"Period: {display}")
        report.centered(f"Generated: {generated_at.strftime('%Y-%m-%d %H:%M')} UTC", size=10, gap=24)
        report.rule(color="#ccff00", width=2)

        report.heading("Executive Summary", size=18)
        report.label_value("Total Employees:", summary["total_employees"])
        report.label_value(
            "Trello Cards:", f"{summary['completed_trello_cards']} / {summary['total_trello_cards']} completed"
        )
        report.label_value(
            "Regular Tasks:", f"{summary['completed_regular_tasks']} / {summary['total_regular_tasks']} completed"
        )
        report.label_value("Total Trello Time:", f"{summary['total_trello_hours']} hours")
        report.label_value("Total Attendance:", f"{summary['total_attendance_hours']} hours")
        report.y -= 10
        report.rule(color="#dddddd")

        report.heading("Employee Performance Details", size=18)
        columns = (55, 160, 230, 295, 355, 420, 485)
        report.row(list(zip(columns, ("Employee", "Role", "Trello", "Tasks", "Hours", "Attend", "Days"))),
                   font="Helvetica-Bold", gap=8)
        report.rule(color="#dddddd", gap=14)

        for emp in employee_stats:
            cards = emp["trello_cards"]
            tasks = emp["regular_tasks"]
            attendance = emp["attendance"]
            report.row(list(zip(columns, (
                emp["name"][:16],
                emp["sub_role"][:10],
                f"{cards['completed']}/{cards['total']}",
                f"{tasks['completed']}/{tasks['total']}",
                f"{cards['total_hours']}h",
                f"{attendance['total_hours_worked']:.1f}h",
                str(attendance["attendance_days"]),
            ))))

        report.rule(color="#ccff00", width=2)
        PDFService._footer(report, [
            "Employee Management System",
            f"Document ID: RPT-COMP-{generated_at.strftime('%Y%m%d%H%M%S')}",
        ])
        report.finish()

        buffer.seek(0)
        logger.info(f"Comprehensive PDF rendered for {len(employee_stats)} employees")
        return buffer


# Singleton instance
pdf_service = PDFService()
