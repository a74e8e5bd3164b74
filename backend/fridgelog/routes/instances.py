"""
Instances and Calendar Routes
"""
from fastapi import APIRouter, Depends, Query
from typing import List
import logging

from ..config import settings
from ..models import (
    User, Instance, CompletionPayload, DateWindowRequest, GenerateResponse,
    CalendarData, CalendarInstance
)
from ..services.auth import require_auth
from ..services.schedule_service import ScheduleService, get_schedule_service

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Instances"])


@router.get("/calendar", response_model=CalendarData)
async def get_calendar(
    from_date: str = Query(alias="from"),
    to_date: str = Query(alias="to"),
    user: User = Depends(require_auth),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Calendar of required instances in the window, generating missing ones"""
    return await service.get_calendar(user.id, from_date, to_date)


@router.post("/instances/generate", response_model=GenerateResponse)
async def generate_instances(
    window: DateWindowRequest,
    user: User = Depends(require_auth),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Materialize required instances for the window"""
    created = await service.generate_instances(user.id, window.from_date, window.to_date)
    return GenerateResponse(created=created)


@router.get("/instances/upcoming", response_model=List[CalendarInstance])
async def get_upcoming(
    days_before: int = Query(default=settings.upcoming_days, ge=0, le=31),
    user: User = Depends(require_auth),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Required instances that are due soon"""
    return await service.get_upcoming(user.id, days_before)


@router.post("/instances/{instance_id}/complete", response_model=Instance)
async def complete_instance(
    instance_id: str,
    payload: CompletionPayload,
    user: User = Depends(require_auth),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Complete an instance once every required item is checked"""
    return await service.complete_instance(user.id, instance_id, payload)
