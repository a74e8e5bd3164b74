"""
Fridgelog Backend - Main Application Entry Point
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from .config import settings
from .database import database
from .errors import SchedulerError, InvalidSchedule, IncompleteRequiredItems
from .storage import MemoryStore, MongoStore
from .services.schedule_service import init_schedule_service
from .routes import (
    checklists_router,
    instances_router,
    reports_router,
)

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    # Startup
    logger.info("Starting Fridgelog Backend...")

    if settings.storage_backend == "memory":
        logger.warning("Using in-memory storage - data is lost on restart")
        init_schedule_service(MemoryStore())
    else:
        await database.connect()

        if database.is_connected():
            logger.info("✓ Database connected successfully")
            init_schedule_service(MongoStore(database.get_db()))
        else:
            logger.warning("⚠ Database connection failed - running in degraded mode")
            logger.warning("Scheduling endpoints will answer 503 until the database is reachable")

    yield

    # Shutdown
    logger.info("Shutting down Fridgelog Backend...")
    await database.disconnect()


# Create FastAPI app
app = FastAPI(
    title="Fridgelog API",
    description="Recurring compliance checklists for refrigerator monitoring",
    version=API_VERSION,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_credentials=True,
    allow_origins=settings.allowed_origins.split(",") if settings.allowed_origins != "*" else ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(checklists_router, prefix="/api/v2")
app.include_router(instances_router, prefix="/api/v2")
app.include_router(reports_router, prefix="/api/v2")


@app.exception_handler(SchedulerError)
async def scheduler_error_handler(request: Request, exc: SchedulerError):
    """Map typed scheduler errors to JSON responses"""
    content = {"detail": exc.message, "code": exc.code}
    if isinstance(exc, InvalidSchedule):
        content["errors"] = exc.errors
    if isinstance(exc, IncompleteRequiredItems):
        content["missing_item_ids"] = exc.missing_item_ids
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=content)


# Health check endpoints
@app.get("/")
async def root():
    """Root endpoint"""
    return {"message": "Fridgelog API", "version": API_VERSION}


@app.get("/health")
async def health_check():
    """Health check endpoint with database status"""
    if settings.storage_backend == "memory":
        return {"status": "healthy", "database": "memory", "version": API_VERSION}

    db_connected = await database.check_connection()

    return {
        "status": "healthy" if db_connected else "degraded",
        "database": "connected" if db_connected else "disconnected",
        "version": API_VERSION
    }
