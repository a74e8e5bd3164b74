# API Routes
from .checklists import router as checklists_router
from .instances import router as instances_router
from .reports import router as reports_router

__all__ = [
    "checklists_router",
    "instances_router",
    "reports_router",
]
