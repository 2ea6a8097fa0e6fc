"""Connection management helpers for notification websockets."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, DefaultDict, Set, Tuple

from fastapi import WebSocket, WebSocketDisconnect

logger = logging.getLogger(__name__)

RecipientKey = Tuple[str, int]


class NotificationConnectionManager:
    """Manage active websocket connections grouped by recipient."""

    def __init__(self) -> None:
        self._connections: DefaultDict[RecipientKey, Set[WebSocket]] = defaultdict(set)

    async def connect(
        self, recipient_type: str, recipient_id: int, websocket: WebSocket
    ) -> None:
        """Accept the websocket connection and register it for the recipient."""

        await websocket.accept()
        self._connections[(recipient_type, recipient_id)].add(websocket)

    def disconnect(
        self, recipient_type: str, recipient_id: int, websocket: WebSocket
    ) -> None:
        key = (recipient_type, recipient_id)
        connections = self._connections.get(key)
        if connections is None:
            return
        connections.discard(websocket)
        if not connections:
            self._connections.pop(key, None)

    def is_connected(self, recipient_type: str, recipient_id: int) -> bool:
        return bool(self._connections.get((recipient_type, recipient_id)))

    async def send_to_recipient(
        self, recipient_type: str, recipient_id: int, message: dict[str, Any]
    ) -> None:
        """Send ``message`` to every active connection of the recipient."""

        connections = list(self._connections.get((recipient_type, recipient_id), set()))
        for connection in connections:
            try:
                await connection.send_json(message)
            except (WebSocketDisconnect, RuntimeError):
                logger.debug(
                    "Dropping closed websocket for %s %s", recipient_type, recipient_id
                )
                self.disconnect(recipient_type, recipient_id, connection)


notification_manager = NotificationConnectionManager()


__all__ = ["NotificationConnectionManager", "notification_manager"]
