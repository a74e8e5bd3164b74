"""
Schedule Service
Orchestrates checklists, schedules and instances: generate-on-read calendars,
completions, dashboard summaries and export rows
"""
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Tuple
import logging

from ..config import settings
from ..errors import AlreadyCompleted, IncompleteRequiredItems, InvalidSchedule, NotFound
from ..models import (
    Cadence, Checklist, ChecklistCreate, ChecklistItem, Schedule, ScheduleCreate,
    DateRange, PreviewEntry, Instance, InstanceStatus, CompletionPayload,
    CalendarInstance, CalendarData, Period, ChecklistSummary, ChecklistMetrics, ExportRow,
)
from ..storage import Store
from .calendar_math import format_date, format_timestamp, parse_range, utcnow
from .compliance import (
    completion_rate,
    derive_status,
    instance_on_time,
    is_upcoming,
    on_time_rate,
    target_period,
)
from .recurrence import build_preview, generate_targets, validate_schedule

logger = logging.getLogger(__name__)

ScheduledChecklist = Tuple[Checklist, Schedule]


class ScheduleService:
    """Scheduler operations, each scoped to an owner id supplied by the caller"""

    def __init__(
        self,
        store: Store,
        clock: Callable[[], datetime] = utcnow,
        max_window_days: int = settings.max_window_days,
    ):
        self.store = store
        self.clock = clock
        self.max_window_days = max_window_days

    # ============ CHECKLISTS ============

    async def create_checklist(self, owner: str, data: ChecklistCreate) -> Checklist:
        checklist = Checklist(
            owner_id=owner,
            name=data.name,
            description=data.description,
            items=[ChecklistItem(**item.model_dump()) for item in data.items],
        )
        await self.store.create_checklist(checklist)
        logger.info(f"Created checklist {checklist.id} with {len(checklist.items)} items")
        return checklist

    async def list_checklists(self, owner: str, active_only: bool = True) -> List[Checklist]:
        checklists = await self.store.list_checklists(owner)
        if active_only:
            return [c for c in checklists if c.is_active]
        return checklists

    async def get_checklist(self, owner: str, checklist_id: str) -> Checklist:
        checklist = await self.store.get_checklist(checklist_id, owner)
        if checklist is None:
            raise NotFound("Checklist not found")
        return checklist

    # ============ SCHEDULES ============

    async def set_schedule(self, owner: str, checklist_id: str, data: ScheduleCreate) -> Schedule:
        """Create or replace the schedule of a checklist.

        Existing instances are left alone, including ones the new cadence
        would no longer produce.
        """
        await self.get_checklist(owner, checklist_id)

        errors = validate_schedule(data)
        if errors:
            logger.info(f"Rejected schedule for checklist {checklist_id}: {errors}")
            raise InvalidSchedule("; ".join(errors), errors)

        fields = {
            "checklist_id": checklist_id,
            "cadence": data.cadence,
            "days_of_week": sorted(set(data.days_of_week or [])) if data.cadence == Cadence.DOW.value else [],
            "start_date": data.start_date,
            "end_date": data.end_date,
            "timezone": data.timezone,
            "is_active": True,
        }
        existing = await self.store.get_schedule(checklist_id)
        if existing:
            schedule = existing.model_copy(update={**fields, "updated_at": self.clock()})
        else:
            schedule = Schedule(**fields)

        await self.store.save_schedule(schedule)
        logger.info(f"Saved {schedule.cadence} schedule for checklist {checklist_id}")
        return schedule

    async def get_schedule(self, owner: str, checklist_id: str) -> Schedule:
        await self.get_checklist(owner, checklist_id)
        schedule = await self.store.get_schedule(checklist_id)
        if schedule is None:
            raise NotFound("Checklist has no schedule")
        return schedule

    async def set_schedule_active(self, owner: str, checklist_id: str, is_active: bool) -> Schedule:
        schedule = await self.get_schedule(owner, checklist_id)
        schedule = schedule.model_copy(update={"is_active": is_active, "updated_at": self.clock()})
        await self.store.save_schedule(schedule)
        logger.info(f"Schedule for checklist {checklist_id} is now {'active' if is_active else 'paused'}")
        return schedule

    async def preview_schedule(self, owner: str, checklist_id: str, days_ahead: int = 30) -> List[PreviewEntry]:
        schedule = await self.get_schedule(owner, checklist_id)
        return build_preview(schedule, self.clock().date(), days_ahead)

    # ============ INSTANCES ============

    async def generate_instances(self, owner: str, from_date: str, to_date: str) -> int:
        """Persist every required instance in the window that does not exist yet.

        Returns how many were created; repeating a call creates none.
        """
        return await self._generate(owner, parse_range(from_date, to_date, self.max_window_days))

    async def _generate(self, owner: str, query: DateRange) -> int:
        range_start, range_end = format_date(query.start), format_date(query.end)
        created = 0

        for checklist, schedule in await self._scheduled_checklists(owner):
            if not schedule.is_active:
                continue
            targets = generate_targets(schedule, query)
            if not targets:
                continue

            existing = await self.store.list_instances(checklist.id, range_start, range_end)
            existing_targets = {i.target_id for i in existing}

            for target_id in targets:
                if target_id in existing_targets:
                    continue
                period = target_period(target_id, schedule.cadence)
                instance = Instance(
                    checklist_id=checklist.id,
                    schedule_id=schedule.id,
                    cadence=schedule.cadence,
                    target_id=target_id,
                    period_start=format_date(period.start),
                    period_end=format_date(period.end),
                )
                # False means a concurrent request got there first
                if await self.store.insert_instance(instance):
                    created += 1

        if created:
            logger.info(f"Generated {created} instances for {range_start}..{range_end}")
        return created

    async def get_calendar(self, owner: str, from_date: str, to_date: str) -> CalendarData:
        query = parse_range(from_date, to_date, self.max_window_days)
        await self._generate(owner, query)

        entries = await self._calendar_entries(owner, query)
        return CalendarData(instances=entries, period=Period(start=from_date, end=to_date))

    async def complete_instance(self, owner: str, instance_id: str, payload: CompletionPayload) -> Instance:
        """Mark a REQUIRED instance as completed by ``owner``.

        Completing an instance twice raises AlreadyCompleted.
        """
        instance = await self.store.get_instance(instance_id)
        if instance is None:
            raise NotFound("Instance not found")
        checklist = await self.store.get_checklist(instance.checklist_id, owner)
        if checklist is None:
            raise NotFound("Instance not found")

        if instance.status == InstanceStatus.COMPLETED:
            raise AlreadyCompleted("Instance is already completed")

        checked = [item.item_id for item in payload.items if item.checked]
        missing = [item_id for item_id in checklist.required_item_ids() if item_id not in checked]
        if missing:
            logger.info(f"Completion of {instance_id} rejected, {len(missing)} required items unchecked")
            raise IncompleteRequiredItems(missing)

        item_notes = {item.item_id: item.note for item in payload.items if item.note}
        completed = await self.store.mark_completed(
            instance_id,
            completed_by=owner,
            completed_at=self.clock(),
            completed_items=checked,
            item_notes=item_notes,
            note=payload.confirmation_note,
        )
        if completed is None:
            raise AlreadyCompleted("Instance is already completed")

        logger.info(f"Instance {instance_id} ({checklist.name} {instance.target_id}) completed")
        return completed

    async def get_upcoming(self, owner: str, days_before: int = 1) -> List[CalendarInstance]:
        """Required instances due from today through ``days_before`` days ahead"""
        now = self.clock()
        today = now.date()
        window = DateRange(start=today, end=today + timedelta(days=days_before))
        await self._generate(owner, window)

        return [
            entry for entry in await self._calendar_entries(owner, window)
            if entry.status == InstanceStatus.REQUIRED
            and is_upcoming(entry.target_id, entry.cadence, now, days_before)
        ]

    # ============ REPORTS ============

    async def get_summaries(
        self,
        owner: str,
        from_date: str,
        to_date: str,
        checklist_id: Optional[str] = None,
        cadence: Optional[str] = None,
    ) -> ChecklistMetrics:
        query = parse_range(from_date, to_date, self.max_window_days)
        await self._generate(owner, query)
        now = self.clock()
        metrics = ChecklistMetrics()

        for checklist, schedule in await self._scheduled_checklists(owner):
            if checklist_id and checklist.id != checklist_id:
                continue

            instances = await self.store.list_instances(
                checklist.id, format_date(query.start), format_date(query.end)
            )
            # instances keep the cadence they were created under
            if cadence:
                instances = [i for i in instances if i.cadence == cadence]
                if not instances and schedule.cadence != cadence:
                    continue
            required = len(instances)
            completed = sum(1 for i in instances if i.status == InstanceStatus.COMPLETED)
            on_time = sum(1 for i in instances if instance_on_time(i))
            missed = sum(1 for i in instances if derive_status(i, now) == InstanceStatus.MISSED)

            metrics.by_checklist.append(ChecklistSummary(
                checklist_id=checklist.id,
                checklist_name=checklist.name,
                cadence=cadence or schedule.cadence,
                period=Period(start=from_date, end=to_date),
                required=required,
                completed=completed,
                on_time=on_time,
                missed=missed,
                completion_rate=completion_rate(required, completed),
                on_time_rate=on_time_rate(completed, on_time),
            ))
            metrics.total_required += required
            metrics.total_completed += completed
            metrics.total_on_time += on_time
            metrics.total_missed += missed

        metrics.overall_completion_rate = completion_rate(metrics.total_required, metrics.total_completed)
        metrics.overall_on_time_rate = on_time_rate(metrics.total_completed, metrics.total_on_time)
        return metrics

    async def export_rows(self, owner: str, from_date: str, to_date: str) -> List[ExportRow]:
        calendar = await self.get_calendar(owner, from_date, to_date)
        return [
            ExportRow(
                date_or_week=entry.target_id,
                checklist_name=entry.checklist_name,
                cadence=entry.cadence,
                completed="Y" if entry.status == InstanceStatus.COMPLETED else "N",
                on_time="Y" if entry.on_time else "N",
                completed_at=format_timestamp(entry.completed_at) if entry.completed_at else "",
                completed_by=entry.completed_by or "",
            )
            for entry in calendar.instances
        ]

    # ============ HELPERS ============

    async def _scheduled_checklists(self, owner: str) -> List[ScheduledChecklist]:
        checklists = await self.store.list_checklists(owner)
        schedules = await self.store.list_schedules([c.id for c in checklists])
        by_checklist = {s.checklist_id: s for s in schedules}
        return [(c, by_checklist[c.id]) for c in checklists if c.id in by_checklist]

    async def _calendar_entries(self, owner: str, query: DateRange) -> List[CalendarInstance]:
        range_start, range_end = format_date(query.start), format_date(query.end)
        now = self.clock()
        entries = []

        for checklist, _ in await self._scheduled_checklists(owner):
            for instance in await self.store.list_instances(checklist.id, range_start, range_end):
                entries.append(CalendarInstance(
                    id=instance.id,
                    checklist_id=checklist.id,
                    checklist_name=checklist.name,
                    target_id=instance.target_id,
                    period_start=instance.period_start,
                    period_end=instance.period_end,
                    status=derive_status(instance, now),
                    cadence=instance.cadence,
                    on_time=instance_on_time(instance),
                    completed_at=instance.completed_at,
                    completed_by=instance.completed_by,
                ))

        entries.sort(key=lambda e: (e.period_start, e.checklist_name, e.target_id))
        return entries


# Singleton instance
_schedule_service: Optional[ScheduleService] = None


def init_schedule_service(store: Store) -> ScheduleService:
    """Create the service used by the API routes"""
    global _schedule_service
    _schedule_service = ScheduleService(store)
    return _schedule_service


def get_schedule_service() -> ScheduleService:
    """Dependency for getting the schedule service in routes"""
    if _schedule_service is None:
        raise RuntimeError("Schedule service not initialized. Call init_schedule_service() first.")
    return _schedule_service
