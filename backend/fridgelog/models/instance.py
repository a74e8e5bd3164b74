"""
Checklist Instance Models
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Optional
from datetime import datetime
from enum import Enum
import uuid

from .schedule import Cadence


class InstanceStatus(str, Enum):
    REQUIRED = "REQUIRED"
    COMPLETED = "COMPLETED"
    MISSED = "MISSED"  # derived on read, never stored


class Instance(BaseModel):
    """One required occurrence of a checklist"""
    model_config = ConfigDict(use_enum_values=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    checklist_id: str
    schedule_id: str
    cadence: Cadence
    target_id: str  # YYYY-MM-DD or YYYY-Www
    period_start: str  # first day covered by target_id
    period_end: str  # last day covered by target_id
    status: InstanceStatus = InstanceStatus.REQUIRED
    completed_at: Optional[datetime] = None
    completed_by: Optional[str] = None
    completed_items: List[str] = Field(default_factory=list)
    item_notes: Dict[str, str] = Field(default_factory=dict)
    confirmation_note: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class CompletionItem(BaseModel):
    item_id: str
    checked: bool
    note: Optional[str] = None


class CompletionPayload(BaseModel):
    """Request for completing an instance"""
    items: List[CompletionItem]
    confirmation_note: Optional[str] = None


class DateWindowRequest(BaseModel):
    """Request carrying a from/to window, e.g. for explicit generation"""
    model_config = ConfigDict(populate_by_name=True)

    from_date: str = Field(alias="from")
    to_date: str = Field(alias="to")


class GenerateResponse(BaseModel):
    created: int


class CalendarInstance(BaseModel):
    """Instance annotated for the calendar view"""
    model_config = ConfigDict(use_enum_values=True)

    id: str
    checklist_id: str
    checklist_name: str
    target_id: str
    period_start: str
    period_end: str
    status: InstanceStatus
    cadence: Cadence
    on_time: bool = False
    completed_at: Optional[datetime] = None
    completed_by: Optional[str] = None


class Period(BaseModel):
    start: str
    end: str


class CalendarData(BaseModel):
    instances: List[CalendarInstance]
    period: Period
