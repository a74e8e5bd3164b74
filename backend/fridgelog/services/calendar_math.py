"""
Calendar Math
Week numbering, date/identifier parsing and range helpers. Every date here is a
UTC calendar day.

Weeks run Sunday through Saturday. Week 1 of a year is the week that contains
1 January, so it starts on 1 January moved back to the preceding Sunday. A week
belongs to the year its Saturday falls in, which makes the week straddling New
Year week 1 of the new year and gives every 7-day span exactly one identifier.
"""
import re
from datetime import date, datetime, timedelta, timezone
from typing import Iterator, Optional

from ..errors import InvalidDateRange, InvalidIdentifier, InvalidSchedule
from ..models import Cadence, DateRange, WeekInfo

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
WEEK_ID_PATTERN = re.compile(r"^(\d{4})-W(\d{2})$")

ONE_DAY = timedelta(days=1)
ONE_WEEK = timedelta(days=7)

MIN_YEAR = date.min.year + 1
# the week holding 31 December can belong to the following year
MAX_YEAR = date.max.year - 2


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Normalize a datetime to aware UTC; naive values are taken as UTC already"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_date(day: date) -> str:
    return day.isoformat()


def parse_date(value: str) -> date:
    """Parse a YYYY-MM-DD string, the exact inverse of format_date"""
    if not isinstance(value, str) or not DATE_PATTERN.match(value):
        raise InvalidSchedule(f"Invalid date '{value}', expected YYYY-MM-DD")
    try:
        day = date.fromisoformat(value)
    except ValueError:
        raise InvalidSchedule(f"Invalid date '{value}', expected YYYY-MM-DD")
    # keeps every surrounding week representable
    if not MIN_YEAR <= day.year <= MAX_YEAR:
        raise InvalidSchedule(f"Date '{value}' must be between years {MIN_YEAR} and {MAX_YEAR}")
    return day


def parse_range(from_date: str, to_date: str, max_days: Optional[int] = None) -> DateRange:
    """Parse a from/to query window, optionally capped at ``max_days`` days"""
    try:
        start = parse_date(from_date)
        end = parse_date(to_date)
    except InvalidSchedule as e:
        raise InvalidDateRange(e.message) from e
    if start > end:
        raise InvalidDateRange("To date must be on or after from date")
    if max_days is not None and (end - start).days + 1 > max_days:
        raise InvalidDateRange(f"Date range cannot span more than {max_days} days")
    return DateRange(start=start, end=end)


def sunday_weekday(day: date) -> int:
    """Weekday index with Sunday=0 .. Saturday=6"""
    return (day.weekday() + 1) % 7


def _week_one_start(year: int) -> date:
    jan_first = date(year, 1, 1)
    return jan_first - timedelta(days=sunday_weekday(jan_first))


def weeks_in_year(year: int) -> int:
    return (_week_one_start(year + 1) - _week_one_start(year)).days // 7


def format_week_identifier(year: int, week: int) -> str:
    return f"{year:04d}-W{week:02d}"


def week_info(day: date) -> WeekInfo:
    """Week containing ``day``"""
    start = day - timedelta(days=sunday_weekday(day))
    end = start + timedelta(days=6)
    year = end.year
    week = (start - _week_one_start(year)).days // 7 + 1
    return WeekInfo(
        year=year,
        week=week,
        identifier=format_week_identifier(year, week),
        start_date=start,
        end_date=end,
    )


def parse_week_identifier(identifier: str) -> WeekInfo:
    """Rebuild the week named by a YYYY-Www identifier"""
    match = WEEK_ID_PATTERN.match(identifier) if isinstance(identifier, str) else None
    if not match:
        raise InvalidIdentifier(f"Invalid week identifier '{identifier}', expected YYYY-Www")

    year = int(match.group(1))
    week = int(match.group(2))
    if not MIN_YEAR <= year <= MAX_YEAR + 1:
        raise InvalidIdentifier(f"Week identifier '{identifier}' is out of range")
    if not 1 <= week <= weeks_in_year(year):
        raise InvalidIdentifier(f"Year {year} has no week {week:02d}")

    start = _week_one_start(year) + (week - 1) * ONE_WEEK
    return WeekInfo(
        year=year,
        week=week,
        identifier=identifier,
        start_date=start,
        end_date=start + timedelta(days=6),
    )


def intersect(a: DateRange, b: DateRange) -> Optional[DateRange]:
    """Overlap of two ranges, or None when they do not meet"""
    start = max(a.start, b.start)
    end = min(a.end, b.end)
    if start > end:
        return None
    return DateRange(start=start, end=end)


def iter_days(span: DateRange) -> Iterator[date]:
    day = span.start
    while day <= span.end:
        yield day
        day += ONE_DAY


def format_display(target_id: str, cadence: Cadence) -> str:
    """Human readable label for a target, as shown in previews"""
    if cadence == Cadence.WEEKLY:
        week = parse_week_identifier(target_id)
        start, end = week.start_date, week.end_date
        return f"Week of {start:%b} {start.day} - {end:%b} {end.day}"

    day = parse_date(target_id)
    return f"{day:%A}, {day:%B} {day.day}, {day.year}"


def format_timestamp(value: datetime) -> str:
    """UTC ISO-8601 with milliseconds and a Z suffix"""
    return as_utc(value).isoformat(timespec="milliseconds").replace("+00:00", "Z")
