"""
Dashboard Summary and Export Routes
"""
from fastapi import APIRouter, Depends, Query
from typing import List, Optional
import logging

from ..models import User, Cadence, ChecklistMetrics, ExportRow
from ..services.auth import require_auth
from ..services.schedule_service import ScheduleService, get_schedule_service

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Reports"])


@router.get("/summaries", response_model=ChecklistMetrics)
async def get_summaries(
    from_date: str = Query(alias="from"),
    to_date: str = Query(alias="to"),
    checklist_id: Optional[str] = None,
    cadence: Optional[Cadence] = None,
    user: User = Depends(require_auth),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Completion and on-time rates per checklist and overall"""
    return await service.get_summaries(
        user.id, from_date, to_date,
        checklist_id=checklist_id,
        cadence=cadence.value if cadence else None,
    )


@router.get("/export/checklists", response_model=List[ExportRow])
async def export_checklists(
    from_date: str = Query(alias="from"),
    to_date: str = Query(alias="to"),
    user: User = Depends(require_auth),
    service: ScheduleService = Depends(get_schedule_service),
):
    """CSV-ready rows for every calendar instance in the window"""
    return await service.export_rows(user.id, from_date, to_date)
