# Business Logic Services
from .auth import create_access_token, require_auth
from .schedule_service import ScheduleService, init_schedule_service, get_schedule_service

__all__ = [
    # Auth
    "create_access_token",
    "require_auth",
    # Scheduling
    "ScheduleService",
    "init_schedule_service",
    "get_schedule_service",
]
