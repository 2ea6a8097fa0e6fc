from fastapi import FastAPI

from .health import router as health_router
from .maintenance import router as maintenance_router
from .notifications import router as notifications_router
from .purchase_requests import router as purchase_requests_router


def register_routes(app: FastAPI) -> None:
    """Register every API router on the FastAPI application."""

    app.include_router(health_router)
    app.include_router(maintenance_router)
    app.include_router(notifications_router)
    app.include_router(purchase_requests_router)
