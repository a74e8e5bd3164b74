"""
Tests for turning schedules into required targets
"""
import pytest
from datetime import date

from fridgelog.errors import InvalidSchedule
from fridgelog.models import DateRange, Schedule, ScheduleCreate
from fridgelog.services.recurrence import build_preview, generate_targets, validate_schedule


def make_schedule(cadence="DAILY", start="2024-01-01", end=None, days=None, active=True):
    return Schedule(
        checklist_id="checklist-1",
        cadence=cadence,
        days_of_week=days or [],
        start_date=start,
        end_date=end,
        is_active=active,
    )


def window(start, end):
    return DateRange(start=date.fromisoformat(start), end=date.fromisoformat(end))


class TestDaily:
    """DAILY cadence"""

    def test_three_day_schedule(self):
        schedule = make_schedule(start="2024-01-01", end="2024-01-03")

        targets = generate_targets(schedule, window("2024-01-01", "2024-01-03"))

        assert targets == ["2024-01-01", "2024-01-02", "2024-01-03"]

    def test_one_target_per_day_strictly_increasing(self):
        schedule = make_schedule(start="2024-01-01", end="2024-12-31")
        query = window("2024-02-10", "2024-03-10")

        targets = generate_targets(schedule, query)

        assert len(targets) == (query.end - query.start).days + 1
        assert targets == sorted(set(targets))
        assert "2024-02-29" in targets

    def test_open_ended_schedule_runs_to_query_end(self):
        schedule = make_schedule(start="2024-01-01")

        targets = generate_targets(schedule, window("2030-06-01", "2030-06-03"))

        assert targets == ["2030-06-01", "2030-06-02", "2030-06-03"]

    def test_query_clamped_to_schedule_window(self):
        schedule = make_schedule(start="2024-01-05", end="2024-01-07")

        targets = generate_targets(schedule, window("2024-01-01", "2024-01-31"))

        assert targets == ["2024-01-05", "2024-01-06", "2024-01-07"]

    def test_query_outside_schedule(self):
        schedule = make_schedule(start="2024-03-01", end="2024-03-31")

        assert generate_targets(schedule, window("2024-01-01", "2024-01-31")) == []
        assert generate_targets(schedule, window("2024-04-01", "2024-04-30")) == []


class TestDaysOfWeek:
    """DOW cadence, Sunday=0"""

    def test_monday_wednesday_friday(self):
        schedule = make_schedule(cadence="DOW", days=[1, 3, 5], start="2024-01-01", end="2024-01-07")

        targets = generate_targets(schedule, window("2024-01-01", "2024-01-07"))

        assert targets == ["2024-01-01", "2024-01-03", "2024-01-05"]

    def test_weekend_days(self):
        schedule = make_schedule(cadence="DOW", days=[0, 6])

        targets = generate_targets(schedule, window("2024-01-01", "2024-01-14"))

        assert targets == ["2024-01-06", "2024-01-07", "2024-01-13", "2024-01-14"]

    def test_empty_days_rejected(self):
        schedule = make_schedule(cadence="DOW", days=[])

        with pytest.raises(InvalidSchedule):
            generate_targets(schedule, window("2024-01-01", "2024-01-07"))


class TestWeekly:
    """WEEKLY cadence"""

    def test_month_of_weeks(self):
        schedule = make_schedule(cadence="WEEKLY")

        targets = generate_targets(schedule, window("2024-01-01", "2024-01-31"))

        assert targets == ["2024-W01", "2024-W02", "2024-W03", "2024-W04", "2024-W05"]

    def test_weeks_straddling_window_edges_are_included(self):
        schedule = make_schedule(cadence="WEEKLY")

        targets = generate_targets(schedule, window("2024-01-03", "2024-01-09"))

        assert targets == ["2024-W01", "2024-W02"]

    def test_single_day_window(self):
        schedule = make_schedule(cadence="WEEKLY")

        assert generate_targets(schedule, window("2024-01-17", "2024-01-17")) == ["2024-W03"]

    def test_across_new_year(self):
        schedule = make_schedule(cadence="WEEKLY")

        targets = generate_targets(schedule, window("2024-12-20", "2025-01-10"))

        assert targets == ["2024-W51", "2024-W52", "2025-W01", "2025-W02"]

    def test_last_accepted_year(self):
        schedule = make_schedule(cadence="WEEKLY", start="9997-01-01")

        targets = generate_targets(schedule, window("9997-12-20", "9997-12-31"))

        assert len(targets) == 3
        assert targets[-1] == "9998-W01"


class TestScheduleState:
    """Inactive and unsupported schedules"""

    @pytest.mark.parametrize("cadence,days", [("DAILY", None), ("DOW", [1]), ("WEEKLY", None)])
    def test_inactive_schedule_requires_nothing(self, cadence, days):
        schedule = make_schedule(cadence=cadence, days=days, active=False)

        assert generate_targets(schedule, window("2024-01-01", "2024-12-31")) == []

    def test_unsupported_cadence(self):
        schedule = Schedule.model_construct(
            checklist_id="checklist-1",
            cadence="MONTHLY",
            days_of_week=[],
            start_date="2024-01-01",
            end_date=None,
            is_active=True,
        )

        with pytest.raises(InvalidSchedule):
            generate_targets(schedule, window("2024-01-01", "2024-01-31"))


class TestValidateSchedule:
    """Schedule request validation"""

    def test_valid_daily(self):
        assert validate_schedule(ScheduleCreate(cadence="DAILY", start_date="2024-01-01")) == []

    def test_valid_days_of_week(self):
        data = ScheduleCreate(cadence="DOW", days_of_week=[0, 6], start_date="2024-01-01", end_date="2024-02-01")

        assert validate_schedule(data) == []

    def test_unknown_cadence(self):
        errors = validate_schedule(ScheduleCreate(cadence="HOURLY", start_date="2024-01-01"))

        assert errors == ["Cadence must be DAILY, DOW, or WEEKLY"]

    def test_days_of_week_required(self):
        errors = validate_schedule(ScheduleCreate(cadence="DOW", start_date="2024-01-01"))

        assert "Days of week must be specified for DOW cadence" in errors

    def test_days_of_week_range(self):
        errors = validate_schedule(ScheduleCreate(cadence="DOW", days_of_week=[1, 7], start_date="2024-01-01"))

        assert "Days of week must be between 0 (Sunday) and 6 (Saturday)" in errors

    @pytest.mark.parametrize("end", ["2024-01-01", "2023-12-31"])
    def test_end_must_follow_start(self, end):
        errors = validate_schedule(ScheduleCreate(cadence="DAILY", start_date="2024-01-01", end_date=end))

        assert errors == ["End date must be after start date"]

    def test_malformed_dates(self):
        errors = validate_schedule(ScheduleCreate(cadence="DAILY", start_date="01/01/2024", end_date="2024-02-30"))

        assert "Start date must be in YYYY-MM-DD format" in errors
        assert "End date is not a valid calendar date" in errors

    def test_only_utc(self):
        errors = validate_schedule(ScheduleCreate(cadence="DAILY", start_date="2024-01-01", timezone="Europe/Berlin"))

        assert errors == ["Only UTC schedules are supported"]

    def test_reports_every_problem(self):
        errors = validate_schedule(ScheduleCreate(cadence="DOW", start_date="", timezone="PST"))

        assert len(errors) == 3

    def test_edge_years_rejected(self):
        errors = validate_schedule(ScheduleCreate(cadence="WEEKLY", start_date="0001-01-01"))

        assert errors == ["Start date is not a valid calendar date"]


class TestPreview:
    """Upcoming targets for the schedule editor"""

    def test_daily_preview_is_limited(self):
        preview = build_preview(make_schedule(), today=date(2024, 1, 10))

        assert len(preview) == 10
        assert preview[0].target_id == "2024-01-10"
        assert preview[0].display == "Wednesday, January 10, 2024"

    def test_weekly_preview(self):
        preview = build_preview(make_schedule(cadence="WEEKLY"), today=date(2024, 1, 10), days_ahead=30)

        assert [p.target_id for p in preview] == ["2024-W02", "2024-W03", "2024-W04", "2024-W05", "2024-W06"]
        assert preview[0].display == "Week of Jan 7 - Jan 13"

    def test_inactive_schedule_has_no_preview(self):
        assert build_preview(make_schedule(active=False), today=date(2024, 1, 10)) == []
