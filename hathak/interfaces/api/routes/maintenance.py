"""Endpoints that trigger notification maintenance jobs on demand."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from hathak.application.use_cases.notifications import (
    deliver_scheduled_notifications,
    purge_expired_notifications,
)
from hathak.infrastructure.database import get_db
from hathak.interfaces.api.schemas import DeliverySweepResponse, PurgeResponse

router = APIRouter(prefix="/notifications/maintenance", tags=["maintenance"])


@router.post("/deliver-scheduled", response_model=DeliverySweepResponse)
def deliver_scheduled(db: Session = Depends(get_db)) -> DeliverySweepResponse:
    return DeliverySweepResponse(processed=deliver_scheduled_notifications(db))


@router.post("/purge-expired", response_model=PurgeResponse)
def purge_expired(db: Session = Depends(get_db)) -> PurgeResponse:
    return PurgeResponse(deleted=purge_expired_notifications(db))
