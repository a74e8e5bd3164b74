# Pydantic Models
from .user import User
from .checklist import ChecklistItem, ChecklistItemCreate, ChecklistCreate, Checklist
from .schedule import (
    Cadence, ScheduleCreate, ScheduleActiveUpdate, Schedule,
    DateRange, WeekInfo, PreviewEntry
)
from .instance import (
    InstanceStatus, Instance, CompletionItem, CompletionPayload,
    DateWindowRequest, GenerateResponse, CalendarInstance, Period, CalendarData
)
from .report import ChecklistSummary, ChecklistMetrics, ExportRow

__all__ = [
    # User
    "User",
    # Checklist
    "ChecklistItem", "ChecklistItemCreate", "ChecklistCreate", "Checklist",
    # Schedule
    "Cadence", "ScheduleCreate", "ScheduleActiveUpdate", "Schedule",
    "DateRange", "WeekInfo", "PreviewEntry",
    # Instance
    "InstanceStatus", "Instance", "CompletionItem", "CompletionPayload",
    "DateWindowRequest", "GenerateResponse", "CalendarInstance", "Period", "CalendarData",
    # Reports
    "ChecklistSummary", "ChecklistMetrics", "ExportRow",
]
