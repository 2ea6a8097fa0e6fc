"""Endpoints that turn purchase-request events into notifications."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from hathak.application.use_cases.notifications import (
    dispatch_deadline_reminder,
    dispatch_request_notification,
)
from hathak.domain.errors import HatHakError
from hathak.infrastructure.database import get_db
from hathak.interfaces.api.schemas import (
    DeadlineReminderRequest,
    DispatchRequest,
    NotificationRead,
)

from .common import to_http_exception, to_read_model

router = APIRouter(prefix="/requests", tags=["dispatch"])


@router.post(
    "/{request_id}/notifications",
    response_model=list[NotificationRead],
    status_code=status.HTTP_201_CREATED,
)
def dispatch_event(
    request_id: int,
    payload: DispatchRequest,
    db: Session = Depends(get_db),
) -> list[NotificationRead]:
    """Create the notifications produced by ``payload.event_type``.

    Unknown event types create nothing and return an empty list.
    """

    try:
        created = dispatch_request_notification(
            db, request_id, payload.event_type, payload.metadata
        )
    except HatHakError as exc:
        raise to_http_exception(exc) from exc
    return [to_read_model(notification) for notification in created]


@router.post(
    "/{request_id}/deadline-reminders",
    response_model=list[NotificationRead],
    status_code=status.HTTP_201_CREATED,
)
def send_deadline_reminder(
    request_id: int,
    payload: DeadlineReminderRequest,
    db: Session = Depends(get_db),
) -> list[NotificationRead]:
    try:
        created = dispatch_deadline_reminder(
            db, request_id, payload.deadline_type, payload.days_until_deadline
        )
    except HatHakError as exc:
        raise to_http_exception(exc) from exc
    return [to_read_model(notification) for notification in created]
