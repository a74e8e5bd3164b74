"""
Compliance Classifier
On-time and missed decisions for instances, plus the dashboard rate math
"""
from datetime import datetime, time, timedelta, timezone

from ..errors import InvalidIdentifier, InvalidSchedule
from ..models import Cadence, DateRange, Instance, InstanceStatus
from .calendar_math import as_utc, parse_date, parse_week_identifier

# last representable instant of a target day, millisecond precision
END_OF_DAY = time(23, 59, 59, 999000, tzinfo=timezone.utc)


def target_period(target_id: str, cadence: Cadence) -> DateRange:
    """Calendar days covered by a target: the day itself or its Sunday..Saturday week"""
    if cadence == Cadence.WEEKLY:
        week = parse_week_identifier(target_id)
        return DateRange(start=week.start_date, end=week.end_date)

    try:
        day = parse_date(target_id)
    except InvalidSchedule as e:
        raise InvalidIdentifier(f"Invalid target date '{target_id}'") from e
    return DateRange(start=day, end=day)


def is_on_time(target_id: str, completed_at: datetime, cadence: Cadence) -> bool:
    """Completed within the calendar unit named by the target (UTC days)"""
    period = target_period(target_id, cadence)
    completed_day = as_utc(completed_at).date()
    return period.start <= completed_day <= period.end


def is_missed(target_id: str, now: datetime, cadence: Cadence) -> bool:
    """The target's calendar unit has fully elapsed.

    Only meaningful for instances that are still REQUIRED.
    """
    period = target_period(target_id, cadence)
    deadline = datetime.combine(period.end, END_OF_DAY)
    return as_utc(now) > deadline


def derive_status(instance: Instance, now: datetime) -> InstanceStatus:
    if instance.status == InstanceStatus.COMPLETED:
        return InstanceStatus.COMPLETED
    if is_missed(instance.target_id, now, instance.cadence):
        return InstanceStatus.MISSED
    return InstanceStatus.REQUIRED


def instance_on_time(instance: Instance) -> bool:
    if instance.status != InstanceStatus.COMPLETED or instance.completed_at is None:
        return False
    return is_on_time(instance.target_id, instance.completed_at, instance.cadence)


def is_upcoming(target_id: str, cadence: Cadence, now: datetime, days_before: int = 1) -> bool:
    """Due between today and ``days_before`` days from now"""
    today = as_utc(now).date()
    cutoff = today + timedelta(days=days_before)
    period = target_period(target_id, cadence)

    if cadence == Cadence.WEEKLY:
        return period.start <= cutoff and period.end >= today
    return today <= period.start <= cutoff


def completion_rate(required: int, completed: int) -> float:
    if required == 0:
        return 100.0
    return completed / required * 100


def on_time_rate(completed: int, on_time: int) -> float:
    if completed == 0:
        return 100.0
    return on_time / completed * 100
