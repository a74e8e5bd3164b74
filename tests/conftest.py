"""
Shared fixtures: in-memory store, frozen clock, service and API client
"""
import os

os.environ.setdefault("STORAGE_BACKEND", "memory")

import pytest
import httpx
from datetime import datetime, timezone

from fridgelog.main import app
from fridgelog.models import ChecklistCreate, ScheduleCreate
from fridgelog.services.auth import create_access_token
from fridgelog.services.schedule_service import ScheduleService, get_schedule_service
from fridgelog.storage import MemoryStore

OWNER = "owner-1"
OTHER_OWNER = "owner-2"


class FrozenClock:
    """Callable clock the tests can move forward"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    return FrozenClock(datetime(2024, 1, 10, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def service(store, clock):
    return ScheduleService(store, clock=clock)


@pytest.fixture
def make_checklist(service):
    """Create a checklist with one required and one optional item"""
    async def _make(name="Vaccine fridge AM check", owner=OWNER, schedule=None):
        checklist = await service.create_checklist(owner, ChecklistCreate(
            name=name,
            items=[
                {"label": "Temperature between 2 and 8 C", "required": True},
                {"label": "Door seal intact", "required": True, "order_index": 1},
                {"label": "Defrost needed", "required": False, "order_index": 2},
            ],
        ))
        if schedule is not None:
            await service.set_schedule(owner, checklist.id, ScheduleCreate(**schedule))
        return checklist
    return _make


@pytest.fixture
async def client(service):
    """Async HTTP client talking to the app in-process"""
    app.dependency_overrides[get_schedule_service] = lambda: service
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    token = create_access_token(OWNER, "pharmacist@example.com")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_auth_headers():
    token = create_access_token(OTHER_OWNER, "other@example.com")
    return {"Authorization": f"Bearer {token}"}
