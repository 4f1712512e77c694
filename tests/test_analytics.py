from datetime import datetime, timedelta
from io import BytesIO
import pandas as pd
import pytest
from app.core.dates import resolve_date_range
from app.models.attendance import Attendance
from app.models.board import Board, BoardList
from app.models.card import Card
from app.models.task import Task
from app.services.analytics_service import analytics_service
from app.services.export_service import export_service
from app.services.pdf_service import pdf_service

DAY = datetime(2026, 10, 19)


@pytest.fixture
def workload(db, ceo, developer, second_developer, designer):
    """Tasks, cards and attendance spread across one day."""
    at = DAY + timedelta(hours=10)
    db.add_all([
        # Department task for every developer
        Task(title="Upgrade deps", assigned_sub_role="Developer", status="Completed", created_at=at),
        Task(title="Review PR", assigned_sub_role="Developer", assigned_user_id=developer.id,
             assigned_user_name=developer.name, status="In Progress", created_at=at),
        Task(title="Moodboard", assigned_sub_role="Designer", assigned_user_id=designer.id,
             status="OnHold", created_at=at),
        # Outside the window
        Task(title="Old task", assigned_sub_role="Developer", created_at=at - timedelta(days=3)),
        Attendance(user_id=developer.id, punch_in_time=DAY + timedelta(hours=9),
                   punch_out_time=DAY + timedelta(hours=17, minutes=30), duration=30600),
    ])

    board = Board(name="Platform", created_by_id=ceo.id)
    board_list = BoardList(title="Doing", position=0)
    board.lists.append(board_list)
    db.add(board)
    db.flush()
    db.add_all([
        Card(title="API", list_id=board_list.id, assigned_to_id=developer.id, status="Completed",
             total_minutes=95, created_at=at),
        Card(title="CLI", list_id=board_list.id, assigned_to_id=developer.id, status="Pending",
             total_minutes=30, created_at=at),
    ])
    db.commit()


def window():
    return resolve_date_range("daily", "2026-10-19")


def test_department_tasks_fan_out(db, workload, developer, second_developer, designer):
    result = analytics_service.get_all_analytics(db, *window())
    stats = {s["name"]: s for s in result["employee_stats"]}

    assert stats["Dev One"]["total_tasks"] == 2
    assert stats["Dev One"]["completed_tasks"] == 1
    assert stats["Dev One"]["in_progress_tasks"] == 1
    # Only the department task reaches the second developer
    assert stats["Dev Two"]["total_tasks"] == 1
    assert stats["Dev Two"]["completed_tasks"] == 1
    assert stats["Designer One"]["on_hold_tasks"] == 1


def test_attendance_hours(db, workload):
    result = analytics_service.get_all_analytics(db, *window())
    dev = next(s for s in result["employee_stats"] if s["name"] == "Dev One")
    assert dev["total_hours_worked"] == 8.5
    assert dev["attendance_days"] == 1
    assert result["summary"]["total_hours_worked"] == 8.5
    assert result["summary"]["total_employees"] == 3


def test_analytics_is_idempotent(db, workload):
    assert analytics_service.get_all_analytics(db, *window()) == analytics_service.get_all_analytics(db, *window())


def test_single_employee_filter(db, workload, designer):
    result = analytics_service.get_all_analytics(db, *window(), employee_id=designer.id)
    assert [s["name"] for s in result["employee_stats"]] == ["Designer One"]


def test_comprehensive(db, workload, developer):
    result = analytics_service.get_comprehensive(db, *window(), employee_id=developer.id)
    dev = result["employee_stats"][0]

    assert dev["trello_cards"]["total"] == 2
    assert dev["trello_cards"]["completed"] == 1
    assert dev["trello_cards"]["total_minutes"] == 125
    assert dev["time_tracking"]["trello_hours"] == 2
    assert dev["time_tracking"]["trello_remaining_minutes"] == 5
    assert dev["regular_tasks"]["total"] == 2
    assert dev["attendance"]["total_hours_worked"] == 8.5
    assert dev["board_breakdown"]["Platform"]["total"] == 2
    assert dev["board_breakdown"]["Platform"]["pending"] == 1
    assert result["summary"]["total_trello_hours"] == 2


def test_empty_roster(db):
    result = analytics_service.get_all_analytics(db, *window())
    assert result["employee_stats"] == []
    assert result["summary"]["total_employees"] == 0


def test_routes_are_ceo_only(client, dev_headers):
    assert client.get("/api/analytics/all", headers=dev_headers).status_code == 403


def test_all_route(client, ceo_headers, workload):
    response = client.get("/api/analytics/all?time_range=daily&date=2026-10-19", headers=ceo_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["date_range"]["display"] == "October 19, 2026"
    assert data["summary"]["total_tasks"] == 4


def test_pdf_download(client, ceo_headers, workload):
    response = client.get("/api/analytics/download-pdf?time_range=weekly&date=2026-10-19", headers=ceo_headers)
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")

    response = client.get("/api/analytics/download-comprehensive-pdf", headers=ceo_headers)
    assert response.status_code == 200
    assert response.content.startswith(b"%PDF")


def test_pdf_without_employees(client, ceo_headers):
    response = client.get("/api/analytics/download-pdf", headers=ceo_headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "No employees found"


def test_pdf_paginates_long_rosters():
    employees = [
        {
            "name": f"Employee {i}", "sub_role": "Developer", "total_tasks": i, "completed_tasks": 0,
            "in_progress_tasks": 0, "total_hours_worked": 1.5, "attendance_days": 1,
        }
        for i in range(120)
    ]
    summary = {"total_employees": 120, "total_tasks": 0, "completed_tasks": 0, "total_hours_worked": 180}
    buffer = pdf_service.render_analytics("October 2026", summary, employees)
    content = buffer.getvalue()
    assert content.startswith(b"%PDF")
    pages = content.count(b"/Type /Page") - content.count(b"/Type /Pages")
    assert pages > 1


def test_csv_export(client, ceo_headers, workload):
    response = client.get("/api/analytics/export?format=csv&time_range=daily&date=2026-10-19", headers=ceo_headers)
    assert response.status_code == 200
    lines = response.text.strip().splitlines()
    assert lines[0].startswith("Employee,Email,Role")
    assert len(lines) == 4


def test_export_rejects_unknown_format(client, ceo_headers):
    assert client.get("/api/analytics/export?format=pdf", headers=ceo_headers).status_code == 400


def test_csv_export_includes_period_bounds(client, ceo_headers, workload):
    response = client.get("/api/analytics/export?format=csv&time_range=daily&date=2026-10-19", headers=ceo_headers)
    frame = pd.read_csv(BytesIO(response.content))
    assert list(frame["Period Start"].unique()) == ["2026-10-19 00:00:00"]
    assert list(frame["Period End"].unique()) == ["2026-10-19 23:59:59"]


def test_excel_export(client, ceo_headers, workload):
    response = client.get("/api/analytics/export?format=xlsx&time_range=daily&date=2026-10-19", headers=ceo_headers)
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    assert ".xlsx" in response.headers["content-disposition"]

    frame = pd.read_excel(BytesIO(response.content), sheet_name="Analytics")
    assert list(frame.columns) == [
        "Employee", "Email", "Role", "Total Tasks", "Completed", "In Progress", "On Hold", "Pending",
        "Hours Worked", "Attendance Days", "Period Start", "Period End",
    ]
    assert len(frame) == 3
    dev = frame[frame["Employee"] == "Dev One"].iloc[0]
    assert dev["Total Tasks"] == 2
    assert dev["Hours Worked"] == 8.5
    assert dev["Period Start"] == "2026-10-19 00:00:00"


def test_export_formats_datetime_columns():
    rows = [{"Employee": "A", "Period Start": datetime(2026, 10, 1), "Period End": datetime(2026, 10, 31, 23, 59, 59)}]
    frame = pd.read_csv(export_service.export_to_csv(rows))
    assert frame.loc[0, "Period Start"] == "2026-10-01 00:00:00"
    assert frame.loc[0, "Period End"] == "2026-10-31 23:59:59"


def test_explicit_window_needs_both_bounds(client, ceo_headers):
    response = client.get("/api/analytics/all?start_date=2026-10-01T00:00:00", headers=ceo_headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Both start_date and end_date are required"

    response = client.get("/api/analytics/all?end_date=2026-10-31T00:00:00", headers=ceo_headers)
    assert response.status_code == 400

    response = client.get(
        "/api/analytics/all?start_date=2026-10-31T00:00:00&end_date=2026-10-01T00:00:00", headers=ceo_headers
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "start_date must not be after end_date"


def test_explicit_window_overrides_selector(client, ceo_headers, workload):
    response = client.get(
        "/api/analytics/all?time_range=yearly&start_date=2026-10-19T08:00:00&end_date=2026-10-19T09:00:00",
        headers=ceo_headers
    )
    assert response.status_code == 200
    data = response.json()
    assert data["date_range"]["start_date"].startswith("2026-10-19T00:00:00")
    assert data["summary"]["total_tasks"] == 4
