"""
Dashboard Summary and Export Models
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import List

from .schedule import Cadence
from .instance import Period


class ChecklistSummary(BaseModel):
    """Compliance counts for one scheduled checklist"""
    model_config = ConfigDict(use_enum_values=True)

    checklist_id: str
    checklist_name: str
    cadence: Cadence
    period: Period
    required: int
    completed: int
    on_time: int
    missed: int
    completion_rate: float
    on_time_rate: float


class ChecklistMetrics(BaseModel):
    """Totals across every matching checklist"""
    total_required: int = 0
    total_completed: int = 0
    total_on_time: int = 0
    total_missed: int = 0
    overall_completion_rate: float = 100.0
    overall_on_time_rate: float = 100.0
    by_checklist: List[ChecklistSummary] = Field(default_factory=list)


class ExportRow(BaseModel):
    """CSV-ready row, one per calendar instance"""
    date_or_week: str
    checklist_name: str
    cadence: str
    required: str = "Y"
    completed: str
    on_time: str
    completed_at: str
    completed_by: str
