"""
Storage
Persistence contract for checklists, schedules and instances, with a MongoDB
implementation and an in-process one for development and tests
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from .models import Checklist, Instance, InstanceStatus, Schedule

logger = logging.getLogger(__name__)


class Store(ABC):
    """What the scheduler needs from persistence.

    Instances are unique per (checklist_id, target_id); ``insert_instance``
    reports an existing pair as False instead of raising.
    """

    # ============ CHECKLISTS ============

    @abstractmethod
    async def create_checklist(self, checklist: Checklist) -> Checklist: ...

    @abstractmethod
    async def get_checklist(self, checklist_id: str, owner_id: str) -> Optional[Checklist]: ...

    @abstractmethod
    async def list_checklists(self, owner_id: str) -> List[Checklist]: ...

    # ============ SCHEDULES ============

    @abstractmethod
    async def save_schedule(self, schedule: Schedule) -> Schedule: ...

    @abstractmethod
    async def get_schedule(self, checklist_id: str) -> Optional[Schedule]: ...

    @abstractmethod
    async def list_schedules(self, checklist_ids: List[str]) -> List[Schedule]: ...

    # ============ INSTANCES ============

    @abstractmethod
    async def list_instances(self, checklist_id: str, range_start: str, range_end: str) -> List[Instance]:
        """Instances whose period overlaps [range_start, range_end] (YYYY-MM-DD)"""

    @abstractmethod
    async def insert_instance(self, instance: Instance) -> bool: ...

    @abstractmethod
    async def get_instance(self, instance_id: str) -> Optional[Instance]: ...

    @abstractmethod
    async def mark_completed(
        self,
        instance_id: str,
        completed_by: str,
        completed_at: datetime,
        completed_items: List[str],
        item_notes: Dict[str, str],
        note: Optional[str],
    ) -> Optional[Instance]:
        """Complete a REQUIRED instance; None when it is missing or not REQUIRED"""


class MongoStore(Store):
    """Store backed by the motor database"""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db

    async def create_checklist(self, checklist: Checklist) -> Checklist:
        await self.db.checklists.insert_one(checklist.model_dump())
        return checklist

    async def get_checklist(self, checklist_id: str, owner_id: str) -> Optional[Checklist]:
        doc = await self.db.checklists.find_one({"id": checklist_id, "owner_id": owner_id})
        return Checklist(**doc) if doc else None

    async def list_checklists(self, owner_id: str) -> List[Checklist]:
        cursor = self.db.checklists.find({"owner_id": owner_id}).sort("created_at", 1)
        return [Checklist(**doc) async for doc in cursor]

    async def save_schedule(self, schedule: Schedule) -> Schedule:
        await self.db.schedules.replace_one(
            {"checklist_id": schedule.checklist_id},
            schedule.model_dump(),
            upsert=True,
        )
        return schedule

    async def get_schedule(self, checklist_id: str) -> Optional[Schedule]:
        doc = await self.db.schedules.find_one({"checklist_id": checklist_id})
        return Schedule(**doc) if doc else None

    async def list_schedules(self, checklist_ids: List[str]) -> List[Schedule]:
        cursor = self.db.schedules.find({"checklist_id": {"$in": checklist_ids}})
        return [Schedule(**doc) async for doc in cursor]

    async def list_instances(self, checklist_id: str, range_start: str, range_end: str) -> List[Instance]:
        cursor = self.db.instances.find({
            "checklist_id": checklist_id,
            "period_start": {"$lte": range_end},
            "period_end": {"$gte": range_start},
        }).sort("period_start", 1)
        return [Instance(**doc) async for doc in cursor]

    async def insert_instance(self, instance: Instance) -> bool:
        try:
            await self.db.instances.insert_one(instance.model_dump())
        except DuplicateKeyError:
            logger.debug(f"Instance {instance.checklist_id}/{instance.target_id} already exists")
            return False
        return True

    async def get_instance(self, instance_id: str) -> Optional[Instance]:
        doc = await self.db.instances.find_one({"id": instance_id})
        return Instance(**doc) if doc else None

    async def mark_completed(
        self,
        instance_id: str,
        completed_by: str,
        completed_at: datetime,
        completed_items: List[str],
        item_notes: Dict[str, str],
        note: Optional[str],
    ) -> Optional[Instance]:
        doc = await self.db.instances.find_one_and_update(
            {"id": instance_id, "status": InstanceStatus.REQUIRED.value},
            {"$set": {
                "status": InstanceStatus.COMPLETED.value,
                "completed_at": completed_at,
                "completed_by": completed_by,
                "completed_items": completed_items,
                "item_notes": item_notes,
                "confirmation_note": note,
                "updated_at": completed_at,
            }},
            return_document=ReturnDocument.AFTER,
        )
        return Instance(**doc) if doc else None


class MemoryStore(Store):
    """In-process store; returns copies so callers cannot mutate stored state"""

    def __init__(self):
        self.checklists: Dict[str, Checklist] = {}
        self.schedules: Dict[str, Schedule] = {}  # keyed by checklist_id
        self.instances: Dict[str, Instance] = {}
        self._targets: Dict[tuple, str] = {}  # (checklist_id, target_id) -> instance id
        self._lock = asyncio.Lock()

    async def create_checklist(self, checklist: Checklist) -> Checklist:
        self.checklists[checklist.id] = checklist.model_copy(deep=True)
        return checklist

    async def get_checklist(self, checklist_id: str, owner_id: str) -> Optional[Checklist]:
        checklist = self.checklists.get(checklist_id)
        if checklist is None or checklist.owner_id != owner_id:
            return None
        return checklist.model_copy(deep=True)

    async def list_checklists(self, owner_id: str) -> List[Checklist]:
        owned = [c for c in self.checklists.values() if c.owner_id == owner_id]
        owned.sort(key=lambda c: c.created_at)
        return [c.model_copy(deep=True) for c in owned]

    async def save_schedule(self, schedule: Schedule) -> Schedule:
        self.schedules[schedule.checklist_id] = schedule.model_copy(deep=True)
        return schedule

    async def get_schedule(self, checklist_id: str) -> Optional[Schedule]:
        schedule = self.schedules.get(checklist_id)
        return schedule.model_copy(deep=True) if schedule else None

    async def list_schedules(self, checklist_ids: List[str]) -> List[Schedule]:
        return [
            self.schedules[cid].model_copy(deep=True)
            for cid in checklist_ids
            if cid in self.schedules
        ]

    async def list_instances(self, checklist_id: str, range_start: str, range_end: str) -> List[Instance]:
        found = [
            i for i in self.instances.values()
            if i.checklist_id == checklist_id
            and i.period_start <= range_end
            and i.period_end >= range_start
        ]
        found.sort(key=lambda i: i.period_start)
        return [i.model_copy(deep=True) for i in found]

    async def insert_instance(self, instance: Instance) -> bool:
        key = (instance.checklist_id, instance.target_id)
        async with self._lock:
            if key in self._targets:
                return False
            self._targets[key] = instance.id
            self.instances[instance.id] = instance.model_copy(deep=True)
        return True

    async def get_instance(self, instance_id: str) -> Optional[Instance]:
        instance = self.instances.get(instance_id)
        return instance.model_copy(deep=True) if instance else None

    async def mark_completed(
        self,
        instance_id: str,
        completed_by: str,
        completed_at: datetime,
        completed_items: List[str],
        item_notes: Dict[str, str],
        note: Optional[str],
    ) -> Optional[Instance]:
        async with self._lock:
            instance = self.instances.get(instance_id)
            if instance is None or instance.status != InstanceStatus.REQUIRED:
                return None
            updated = instance.model_copy(update={
                "status": InstanceStatus.COMPLETED.value,
                "completed_at": completed_at,
                "completed_by": completed_by,
                "completed_items": list(completed_items),
                "item_notes": dict(item_notes),
                "confirmation_note": note,
                "updated_at": completed_at,
            })
            self.instances[instance_id] = updated
        return updated.model_copy(deep=True)
