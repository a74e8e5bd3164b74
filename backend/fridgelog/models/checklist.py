"""
Checklist Models
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
import uuid


class ChecklistItemCreate(BaseModel):
    """Item definition in a checklist create request"""
    label: str = Field(min_length=1)
    required: bool = True
    order_index: int = Field(default=0, ge=0)
    note: Optional[str] = None


class ChecklistItem(ChecklistItemCreate):
    """Single checklist item"""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))


class ChecklistCreate(BaseModel):
    """Request for creating a checklist"""
    name: str = Field(min_length=1)
    description: Optional[str] = None
    items: List[ChecklistItemCreate] = Field(min_length=1)


class Checklist(BaseModel):
    """Checklist model"""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    owner_id: str
    name: str
    description: Optional[str] = None
    items: List[ChecklistItem]
    is_active: bool = True
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    def required_item_ids(self) -> List[str]:
        return [item.id for item in self.items if item.required]
