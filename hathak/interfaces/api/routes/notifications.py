"""Endpoints and websocket handler for a recipient's notifications."""

from __future__ import annotations

import logging
import math

from fastapi import APIRouter, Depends, Query, Response, WebSocket, WebSocketDisconnect, status
from sqlalchemy.orm import Session

from hathak.application.use_cases.notifications import (
    count_notifications_for_recipient,
    delete_notification,
    get_unread_count,
    list_notifications_for_recipient,
    mark_all_notifications_as_read,
    mark_notification_as_read,
    mark_notifications_as_read,
)
from hathak.domain.errors import HatHakError
from hathak.infrastructure.database import SessionLocal, get_db
from hathak.infrastructure.notifications import notification_manager, serialize_notification
from hathak.interfaces.api.schemas import (
    MarkAllReadResponse,
    NotificationPage,
    NotificationRead,
    Pagination,
    UnreadCountRead,
)

from .common import RecipientType, to_http_exception, to_read_model

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/{recipient_type}/{recipient_id}", response_model=NotificationPage)
def list_notifications(
    recipient_type: RecipientType,
    recipient_id: int,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    unread_only: bool = False,
    event_type: str | None = Query(None, alias="type"),
    priority: str | None = None,
    db: Session = Depends(get_db),
) -> NotificationPage:
    """Return a page of the recipient's unexpired notifications, newest first."""

    try:
        notifications = list_notifications_for_recipient(
            db,
            recipient_id,
            recipient_type,
            limit=limit,
            skip=(page - 1) * limit,
            unread_only=unread_only,
            event_type=event_type,
            priority=priority,
        )
        total = count_notifications_for_recipient(
            db, recipient_id, recipient_type, unread_only=unread_only
        )
    except HatHakError as exc:
        raise to_http_exception(exc) from exc

    return NotificationPage(
        notifications=[to_read_model(notification) for notification in notifications],
        pagination=Pagination(
            page=page, limit=limit, total=total, pages=math.ceil(total / limit)
        ),
    )


@router.get("/{recipient_type}/{recipient_id}/unread-count", response_model=UnreadCountRead)
def unread_count(
    recipient_type: RecipientType,
    recipient_id: int,
    db: Session = Depends(get_db),
) -> UnreadCountRead:
    try:
        count = get_unread_count(db, recipient_id, recipient_type)
    except HatHakError as exc:
        raise to_http_exception(exc) from exc
    return UnreadCountRead(count=count)


@router.patch(
    "/{recipient_type}/{recipient_id}/mark-all-read", response_model=MarkAllReadResponse
)
def mark_all_read(
    recipient_type: RecipientType,
    recipient_id: int,
    db: Session = Depends(get_db),
) -> MarkAllReadResponse:
    try:
        updated = mark_all_notifications_as_read(db, recipient_id, recipient_type)
    except HatHakError as exc:
        raise to_http_exception(exc) from exc
    return MarkAllReadResponse(updated=updated)


@router.patch(
    "/{recipient_type}/{recipient_id}/{notification_id}/read",
    response_model=NotificationRead,
)
def mark_read(
    recipient_type: RecipientType,
    recipient_id: int,
    notification_id: int,
    db: Session = Depends(get_db),
) -> NotificationRead:
    try:
        notification = mark_notification_as_read(
            db, notification_id, recipient_id, recipient_type=recipient_type
        )
    except HatHakError as exc:
        raise to_http_exception(exc) from exc
    return to_read_model(notification)


@router.delete(
    "/{recipient_type}/{recipient_id}/{notification_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def remove_notification(
    recipient_type: RecipientType,
    recipient_id: int,
    notification_id: int,
    db: Session = Depends(get_db),
) -> Response:
    try:
        delete_notification(db, notification_id, recipient_id, recipient_type=recipient_type)
    except HatHakError as exc:
        raise to_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.websocket("/{recipient_type}/{recipient_id}/ws")
async def notifications_websocket(
    websocket: WebSocket, recipient_type: RecipientType, recipient_id: int
) -> None:
    """Stream new notifications to the recipient and accept read acknowledgements."""

    session = SessionLocal()
    try:
        pending = list_notifications_for_recipient(
            session, recipient_id, recipient_type, unread_only=True
        )
    finally:
        session.close()

    await notification_manager.connect(recipient_type, recipient_id, websocket)
    try:
        await websocket.send_json(
            {"type": "init", "data": [serialize_notification(item) for item in pending]}
        )
        while True:
            try:
                message = await websocket.receive_json()
            except ValueError:
                logger.debug("Ignoring malformed websocket frame from %s %s", recipient_type, recipient_id)
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            if message_type == "ack":
                ids = message.get("ids", [])
                if isinstance(ids, list) and ids:
                    ack_session = SessionLocal()
                    try:
                        mark_notifications_as_read(
                            ack_session,
                            [
                                item
                                for item in ids
                                if isinstance(item, int) and not isinstance(item, bool)
                            ],
                            recipient_id,
                            recipient_type,
                        )
                    finally:
                        ack_session.close()
    except WebSocketDisconnect:
        pass
    finally:
        notification_manager.disconnect(recipient_type, recipient_id, websocket)
