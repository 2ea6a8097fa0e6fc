import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hathak.config import get_settings
from hathak.infrastructure.database import engine, initialize_database
from hathak.infrastructure.scheduler import MaintenanceScheduler
from hathak.interfaces.api.routes import register_routes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and run the maintenance loop for the lifetime of the app."""

    initialize_database()
    interval = get_settings().maintenance_interval_seconds
    scheduler = MaintenanceScheduler(interval) if interval > 0 else None
    if scheduler is not None:
        scheduler.start()
    else:
        logger.info("Notification maintenance loop disabled")
    app.state.maintenance_scheduler = scheduler
    try:
        yield
    finally:
        if scheduler is not None:
            await scheduler.stop()
        engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(title="HatHak Notifications", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()
