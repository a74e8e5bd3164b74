"""
Schedule Models
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import date, datetime
from enum import Enum
import uuid


class Cadence(str, Enum):
    """Recurrence rule of a checklist"""
    DAILY = "DAILY"
    DOW = "DOW"  # specific days of the week
    WEEKLY = "WEEKLY"


class ScheduleCreate(BaseModel):
    """Request for creating or replacing a checklist schedule

    Fields are kept loose here; ``validate_schedule`` reports every problem at once.
    """
    cadence: str
    days_of_week: Optional[List[int]] = None
    start_date: str
    end_date: Optional[str] = None
    timezone: str = "UTC"


class ScheduleActiveUpdate(BaseModel):
    """Request for pausing or resuming a schedule"""
    is_active: bool


class Schedule(BaseModel):
    """Schedule model, one per checklist"""
    model_config = ConfigDict(use_enum_values=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    checklist_id: str
    cadence: Cadence
    days_of_week: List[int] = Field(default_factory=list)  # 0=Sunday .. 6=Saturday
    start_date: str  # YYYY-MM-DD
    end_date: Optional[str] = None  # YYYY-MM-DD, inclusive
    timezone: str = "UTC"
    is_active: bool = True
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class DateRange(BaseModel):
    """Inclusive range of calendar days"""
    model_config = ConfigDict(frozen=True)

    start: date
    end: date


class WeekInfo(BaseModel):
    """Sunday..Saturday week with its identifier"""
    model_config = ConfigDict(frozen=True)

    year: int
    week: int
    identifier: str
    start_date: date
    end_date: date


class PreviewEntry(BaseModel):
    """Upcoming target shown in the schedule editor"""
    target_id: str
    display: str
