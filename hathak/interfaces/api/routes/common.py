"""Helpers shared by the notification routers."""

from __future__ import annotations

from typing import Literal

from fastapi import HTTPException, status

from hathak.domain.entities import Notification
from hathak.domain.errors import HatHakError, NotFoundError
from hathak.interfaces.api.schemas import NotificationActionRead, NotificationRead
from hathak.utils import now_in_app_timezone

RecipientType = Literal["user", "admin"]


def to_http_exception(exc: HatHakError) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


def to_read_model(notification: Notification) -> NotificationRead:
    return NotificationRead(
        id=notification.id or 0,
        event_type=notification.event_type,
        request_id=notification.request_id,
        recipient_id=notification.recipient_id,
        recipient_type=notification.recipient_type,
        title=notification.title,
        message=notification.message,
        priority=notification.priority,
        urgency_level=notification.urgency_level(now_in_app_timezone()),
        channels=list(notification.channels),
        actions=[NotificationActionRead(**action.to_dict()) for action in notification.actions],
        metadata=notification.metadata or {},
        scheduled_for=notification.scheduled_for,
        delivered=notification.delivered,
        delivered_at=notification.delivered_at,
        read=notification.read,
        read_at=notification.read_at,
        expires_at=notification.expires_at,
        created_at=notification.created_at,
    )


__all__ = ["RecipientType", "to_http_exception", "to_read_model"]
