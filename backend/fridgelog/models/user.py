"""
User Models
"""
from pydantic import BaseModel
from typing import Optional


class User(BaseModel):
    """Authenticated caller, resolved from the bearer token"""
    id: str
    email: Optional[str] = None
