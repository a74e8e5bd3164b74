"""
Checklists and Schedules Routes
"""
from fastapi import APIRouter, Depends, Query
from typing import List
import logging

from ..config import settings
from ..models import (
    User, Checklist, ChecklistCreate, Schedule, ScheduleCreate,
    ScheduleActiveUpdate, PreviewEntry
)
from ..services.auth import require_auth
from ..services.schedule_service import ScheduleService, get_schedule_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/checklists", tags=["Checklists"])


# ============ CHECKLISTS ============

@router.post("", response_model=Checklist)
async def create_checklist(
    checklist: ChecklistCreate,
    user: User = Depends(require_auth),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Create a checklist with its items"""
    return await service.create_checklist(user.id, checklist)


@router.get("", response_model=List[Checklist])
async def list_checklists(
    active_only: bool = True,
    user: User = Depends(require_auth),
    service: ScheduleService = Depends(get_schedule_service),
):
    """List the caller's checklists"""
    return await service.list_checklists(user.id, active_only)


@router.get("/{checklist_id}", response_model=Checklist)
async def get_checklist(
    checklist_id: str,
    user: User = Depends(require_auth),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Get a checklist by ID"""
    return await service.get_checklist(user.id, checklist_id)


# ============ SCHEDULES ============

@router.post("/{checklist_id}/schedule", response_model=Schedule)
async def set_schedule(
    checklist_id: str,
    schedule: ScheduleCreate,
    user: User = Depends(require_auth),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Create or replace the checklist's schedule"""
    return await service.set_schedule(user.id, checklist_id, schedule)


@router.get("/{checklist_id}/schedule", response_model=Schedule)
async def get_schedule(
    checklist_id: str,
    user: User = Depends(require_auth),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Get the checklist's schedule"""
    return await service.get_schedule(user.id, checklist_id)


@router.patch("/{checklist_id}/schedule", response_model=Schedule)
async def set_schedule_active(
    checklist_id: str,
    update: ScheduleActiveUpdate,
    user: User = Depends(require_auth),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Pause or resume the checklist's schedule"""
    return await service.set_schedule_active(user.id, checklist_id, update.is_active)


@router.get("/{checklist_id}/schedule/preview", response_model=List[PreviewEntry])
async def preview_schedule(
    checklist_id: str,
    days_ahead: int = Query(default=settings.preview_days, ge=1, le=366),
    user: User = Depends(require_auth),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Preview the next required targets of the schedule"""
    return await service.preview_schedule(user.id, checklist_id, days_ahead)
