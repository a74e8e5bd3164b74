"""
Tests for on-time, missed and rate calculations
"""
import pytest
from datetime import datetime, timedelta, timezone

from fridgelog.errors import InvalidIdentifier
from fridgelog.models import Cadence, Instance, InstanceStatus
from fridgelog.services.compliance import (
    completion_rate,
    derive_status,
    instance_on_time,
    is_missed,
    is_on_time,
    is_upcoming,
    on_time_rate,
)


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def make_instance(target_id="2024-01-01", cadence="DAILY", completed_at=None):
    return Instance(
        checklist_id="checklist-1",
        schedule_id="schedule-1",
        cadence=cadence,
        target_id=target_id,
        period_start="2024-01-01",
        period_end="2024-01-01",
        status=InstanceStatus.COMPLETED if completed_at else InstanceStatus.REQUIRED,
        completed_at=completed_at,
    )


class TestOnTime:
    """Completion inside the target's calendar unit"""

    def test_daily_same_day(self):
        assert is_on_time("2024-01-01", utc(2024, 1, 1, 10, 0), Cadence.DAILY)

    def test_daily_next_day_is_late(self):
        assert not is_on_time("2024-01-01", utc(2024, 1, 2, 0, 0), Cadence.DAILY)

    def test_daily_before_the_day_is_not_on_time(self):
        assert not is_on_time("2024-01-02", utc(2024, 1, 1, 23, 59), Cadence.DAILY)

    def test_daily_last_millisecond(self):
        assert is_on_time("2024-01-01", utc(2024, 1, 1, 23, 59, 59, 999000), Cadence.DAILY)

    def test_days_of_week_behaves_like_daily(self):
        assert is_on_time("2024-01-03", utc(2024, 1, 3, 8, 0), Cadence.DOW)
        assert not is_on_time("2024-01-03", utc(2024, 1, 4, 8, 0), Cadence.DOW)

    def test_weekly_within_week(self):
        assert is_on_time("2024-W01", utc(2024, 1, 3, 12, 0), Cadence.WEEKLY)
        assert is_on_time("2024-W01", utc(2023, 12, 31, 0, 0), Cadence.WEEKLY)
        assert is_on_time("2024-W01", utc(2024, 1, 6, 23, 0), Cadence.WEEKLY)

    def test_weekly_after_week(self):
        assert not is_on_time("2024-W01", utc(2024, 1, 7, 0, 0), Cadence.WEEKLY)

    def test_offset_timestamps_are_judged_in_utc(self):
        local = datetime(2024, 1, 2, 1, 0, tzinfo=timezone(timedelta(hours=2)))

        assert is_on_time("2024-01-01", local, Cadence.DAILY)

    def test_bad_target(self):
        with pytest.raises(InvalidIdentifier):
            is_on_time("2024-13-01", utc(2024, 1, 1), Cadence.DAILY)
        with pytest.raises(InvalidIdentifier):
            is_on_time("2024-W60", utc(2024, 1, 1), Cadence.WEEKLY)


class TestMissed:
    """A required target is missed once its unit has elapsed"""

    def test_daily_end_of_day_boundary(self):
        assert not is_missed("2024-01-01", utc(2024, 1, 1, 23, 59, 59, 999000), Cadence.DAILY)
        assert is_missed("2024-01-01", utc(2024, 1, 2, 0, 0), Cadence.DAILY)

    def test_daily_future(self):
        assert not is_missed("2024-01-05", utc(2024, 1, 1, 12, 0), Cadence.DAILY)

    def test_weekly_boundary(self):
        assert not is_missed("2024-W01", utc(2024, 1, 6, 23, 0), Cadence.WEEKLY)
        assert is_missed("2024-W01", utc(2024, 1, 7, 0, 0), Cadence.WEEKLY)


class TestDeriveStatus:
    """Status shown to readers"""

    def test_required_in_progress(self):
        instance = make_instance("2024-01-10")

        assert derive_status(instance, utc(2024, 1, 10, 12, 0)) == InstanceStatus.REQUIRED

    def test_required_past_is_missed(self):
        instance = make_instance("2024-01-09")

        assert derive_status(instance, utc(2024, 1, 10, 12, 0)) == InstanceStatus.MISSED

    def test_completed_is_never_missed(self):
        instance = make_instance("2024-01-01", completed_at=utc(2024, 1, 5, 9, 0))

        assert derive_status(instance, utc(2024, 2, 1)) == InstanceStatus.COMPLETED
        assert not instance_on_time(instance)

    def test_completed_on_time(self):
        instance = make_instance("2024-W02", cadence="WEEKLY", completed_at=utc(2024, 1, 9, 9, 0))

        assert instance_on_time(instance)

    def test_required_is_not_on_time(self):
        assert not instance_on_time(make_instance("2024-01-01"))


class TestUpcoming:
    """Targets due soon"""

    def test_today_and_tomorrow(self):
        now = utc(2024, 1, 10, 12, 0)

        assert is_upcoming("2024-01-10", Cadence.DAILY, now)
        assert is_upcoming("2024-01-11", Cadence.DAILY, now)
        assert not is_upcoming("2024-01-12", Cadence.DAILY, now)
        assert not is_upcoming("2024-01-09", Cadence.DAILY, now)

    def test_wider_horizon(self):
        assert is_upcoming("2024-01-13", Cadence.DAILY, utc(2024, 1, 10), days_before=3)

    def test_current_and_next_week(self):
        now = utc(2024, 1, 12, 12, 0)

        assert is_upcoming("2024-W02", Cadence.WEEKLY, now)
        assert is_upcoming("2024-W03", Cadence.WEEKLY, now, days_before=2)
        assert not is_upcoming("2024-W03", Cadence.WEEKLY, now, days_before=1)
        assert not is_upcoming("2024-W01", Cadence.WEEKLY, now)


class TestRates:
    """Dashboard percentages"""

    def test_completion_rate(self):
        assert completion_rate(31, 28) == pytest.approx(90.32, abs=0.01)

    def test_on_time_rate(self):
        assert on_time_rate(28, 25) == pytest.approx(89.29, abs=0.01)

    def test_empty_denominators_are_fully_compliant(self):
        assert completion_rate(0, 0) == 100.0
        assert on_time_rate(0, 0) == 100.0

    def test_nothing_done(self):
        assert completion_rate(10, 0) == 0.0
