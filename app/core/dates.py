"""Date helpers shared by attendance, activity and analytics queries.

All instants are naive UTC datetimes, which is how they are stored.
"""
import calendar
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Tuple, Union
from app.core.exceptions import ValidationError

TIME_RANGES = ("daily", "weekly", "monthly", "yearly")


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def start_of_day(value: datetime) -> datetime:
    return datetime.combine(value.date(), time.min)


def end_of_day(value: Union[datetime, date]) -> datetime:
    if isinstance(value, datetime):
        value = value.date()
    return datetime.combine(value, time.max)


def shift_months(value: datetime, months: int) -> datetime:
    """Move ``value`` by whole months, clamping the day to the target month."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def has_explicit_bounds(start_date: Optional[datetime], end_date: Optional[datetime]) -> bool:
    """True when both bounds are given. A single bound is rejected."""
    if (start_date is None) != (end_date is None):
        raise ValidationError("Both start_date and end_date are required")
    if start_date is not None and start_date > end_date:
        raise ValidationError("start_date must not be after end_date")
    return start_date is not None


def _to_datetime(value: Optional[Union[str, date, datetime]]) -> datetime:
    if value is None or value == "":
        return utcnow()
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def resolve_date_range(time_range: str = "daily",
                       selected: Optional[Union[str, date, datetime]] = None) -> Tuple[datetime, datetime]:
    """Resolve a calendar window around ``selected``.

    * daily: the selected day
    * weekly: the Sunday-started week containing the selected day
    * monthly: the calendar month
    * yearly: the calendar year

    Unknown selectors fall back to daily. Both bounds are inclusive.
    """
    day = _to_datetime(selected).date()

    if time_range == "weekly":
        days_since_sunday = (day.weekday() + 1) % 7
        first = day - timedelta(days=days_since_sunday)
        last = first + timedelta(days=6)
    elif time_range == "monthly":
        first = day.replace(day=1)
        last = day.replace(day=calendar.monthrange(day.year, day.month)[1])
    elif time_range == "yearly":
        first = date(day.year, 1, 1)
        last = date(day.year, 12, 31)
    else:
        first = last = day

    return datetime.combine(first, time.min), end_of_day(last)


def rolling_window_start(period: str, now: Optional[datetime] = None) -> datetime:
    """Start of a rolling window ending now: today, last 7 days or last month."""
    start = start_of_day(now or utcnow())
    if period == "weekly":
        return start - timedelta(days=7)
    if period == "monthly":
        return shift_months(start, -1)
    return start


def format_long_date(value: datetime) -> str:
    return f"{value.strftime('%B')} {value.day}, {value.year}"


def format_span(start_date: datetime, end_date: datetime) -> str:
    return f"{format_long_date(start_date)} - {format_long_date(end_date)}"


def format_date_range_display(time_range: str, start_date: datetime, end_date: datetime) -> str:
    if time_range == "weekly":
        return format_span(start_date, end_date)
    if time_range == "monthly":
        return f"{start_date.strftime('%B')} {start_date.year}"
    if time_range == "yearly":
        return str(start_date.year)
    return format_long_date(start_date)


def format_hours(seconds: Optional[float]) -> float:
    """Seconds to decimal hours rounded to two places."""
    if not seconds:
        return 0
    return round(seconds / 3600, 2)
