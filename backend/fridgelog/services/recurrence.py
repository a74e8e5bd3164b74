"""
Recurrence Generator
Turns a schedule and a query window into the target identifiers it requires
"""
from datetime import date, timedelta
from typing import Callable, Dict, List, Optional

from ..errors import InvalidSchedule
from ..models import Cadence, DateRange, PreviewEntry, Schedule, ScheduleCreate
from .calendar_math import (
    DATE_PATTERN,
    format_date,
    format_display,
    intersect,
    iter_days,
    parse_date,
    sunday_weekday,
    week_info,
    ONE_WEEK,
)

SUPPORTED_TIMEZONES = ("UTC",)


def effective_window(schedule: Schedule, query: DateRange) -> Optional[DateRange]:
    """Clamp the query to the schedule's active window"""
    start = parse_date(schedule.start_date)
    end = parse_date(schedule.end_date) if schedule.end_date else query.end
    if start > end:
        return None
    return intersect(query, DateRange(start=start, end=end))


def _daily_targets(schedule: Schedule, window: DateRange) -> List[str]:
    return [format_date(day) for day in iter_days(window)]


def _days_of_week_targets(schedule: Schedule, window: DateRange) -> List[str]:
    days = set(schedule.days_of_week)
    return [format_date(day) for day in iter_days(window) if sunday_weekday(day) in days]


def _weekly_targets(schedule: Schedule, window: DateRange) -> List[str]:
    targets = []
    week = week_info(window.start)
    while week.start_date <= window.end:
        # a week can straddle either edge of the window
        if week.end_date >= window.start and week.start_date <= window.end:
            targets.append(week.identifier)
        week = week_info(week.start_date + ONE_WEEK)
    return targets


_GENERATORS: Dict[Cadence, Callable[[Schedule, DateRange], List[str]]] = {
    Cadence.DAILY: _daily_targets,
    Cadence.DOW: _days_of_week_targets,
    Cadence.WEEKLY: _weekly_targets,
}


def generate_targets(schedule: Schedule, query: DateRange) -> List[str]:
    """Required target ids for ``schedule`` within ``query``, ascending.

    DAILY and DOW targets are YYYY-MM-DD dates, WEEKLY targets are YYYY-Www
    week identifiers. An inactive schedule requires nothing.
    """
    if not schedule.is_active:
        return []

    try:
        cadence = Cadence(schedule.cadence)
    except ValueError:
        raise InvalidSchedule(f"Unsupported cadence: {schedule.cadence}")

    if cadence == Cadence.DOW and not schedule.days_of_week:
        raise InvalidSchedule("Days of week must be specified for DOW cadence")

    window = effective_window(schedule, query)
    if window is None:
        return []

    return _GENERATORS[cadence](schedule, window)


def validate_schedule(data: ScheduleCreate) -> List[str]:
    """Collect every problem with a schedule request"""
    errors = []

    if not data.cadence:
        errors.append("Cadence is required")
    elif data.cadence not in [c.value for c in Cadence]:
        errors.append("Cadence must be DAILY, DOW, or WEEKLY")

    start = None
    if not data.start_date:
        errors.append("Start date is required")
    elif not DATE_PATTERN.match(data.start_date):
        errors.append("Start date must be in YYYY-MM-DD format")
    else:
        start = _valid_date(data.start_date, "Start date", errors)

    if data.end_date:
        if not DATE_PATTERN.match(data.end_date):
            errors.append("End date must be in YYYY-MM-DD format")
        else:
            end = _valid_date(data.end_date, "End date", errors)
            if start and end and end <= start:
                errors.append("End date must be after start date")

    if data.cadence == Cadence.DOW.value:
        if not data.days_of_week:
            errors.append("Days of week must be specified for DOW cadence")
        elif any(day < 0 or day > 6 for day in data.days_of_week):
            errors.append("Days of week must be between 0 (Sunday) and 6 (Saturday)")

    if data.timezone not in SUPPORTED_TIMEZONES:
        errors.append("Only UTC schedules are supported")

    return errors


def _valid_date(value: str, label: str, errors: List[str]) -> Optional[date]:
    try:
        return parse_date(value)
    except InvalidSchedule:
        errors.append(f"{label} is not a valid calendar date")
        return None


def build_preview(
    schedule: Schedule,
    today: date,
    days_ahead: int = 30,
    limit: int = 10,
) -> List[PreviewEntry]:
    """Next few targets from ``today`` for the schedule editor"""
    window = DateRange(start=today, end=today + timedelta(days=days_ahead))
    targets = generate_targets(schedule, window)
    return [
        PreviewEntry(target_id=target_id, display=format_display(target_id, schedule.cadence))
        for target_id in targets[:limit]
    ]
