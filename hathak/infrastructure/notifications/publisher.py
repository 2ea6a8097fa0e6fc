"""Utility helpers to push notifications to websocket subscribers."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from anyio import from_thread

from hathak.domain.entities import Notification

from .manager import NotificationConnectionManager, notification_manager

logger = logging.getLogger(__name__)


class NotificationPublisher:
    """Serialize notifications and schedule their delivery."""

    def __init__(self, manager: NotificationConnectionManager) -> None:
        self._manager = manager

    def dispatch(self, notification: Notification) -> bool:
        """Schedule ``notification`` for its recipient's open websockets.

        Returns ``False`` when no event loop is reachable from the caller, in
        which case nothing is pushed.
        """

        message = {"type": "notification", "data": serialize_notification(notification)}
        args = (notification.recipient_type, notification.recipient_id, message)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            try:
                from_thread.run(self._manager.send_to_recipient, *args)
            except RuntimeError:
                logger.debug(
                    "No event loop available; skipped realtime push of notification %s",
                    notification.id,
                )
                return False
        else:
            loop.create_task(self._manager.send_to_recipient(*args))
        return True


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the websocket payload representation for ``notification``."""

    return {
        "id": notification.id,
        "type": notification.event_type,
        "request_id": notification.request_id,
        "recipient_id": notification.recipient_id,
        "recipient_type": notification.recipient_type,
        "title": notification.title,
        "message": notification.message,
        "priority": notification.priority,
        "channels": list(notification.channels),
        "actions": [action.to_dict() for action in notification.actions],
        "metadata": notification.metadata or {},
        "read": notification.read,
        "created_at": _isoformat(notification.created_at),
        "read_at": _isoformat(notification.read_at),
        "expires_at": _isoformat(notification.expires_at),
    }


def _isoformat(value) -> str | None:
    return value.isoformat() if value else None


notification_publisher = NotificationPublisher(notification_manager)


__all__ = [
    "NotificationPublisher",
    "notification_publisher",
    "serialize_notification",
]
