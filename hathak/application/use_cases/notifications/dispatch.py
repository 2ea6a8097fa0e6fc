"""Turn purchase-request events into persisted notifications."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime, timedelta
from typing import Any, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hathak.config import get_settings
from hathak.domain.entities import (
    PRIORITY_HIGH,
    PRIORITY_MEDIUM,
    PRIORITY_URGENT,
    RECIPIENT_TYPE_ADMIN,
    RECIPIENT_TYPE_USER,
    Admin,
    EventType,
    Notification,
    PurchaseRequest,
)
from hathak.domain.errors import NotFoundError, ValidationError
from hathak.domain.notification_rules import (
    EventMetadata,
    NotificationTemplate,
    RequestSnapshot,
    parse_event_metadata,
    resolve_templates,
)
from hathak.infrastructure.repositories import (
    AdminRepository,
    NotificationRepository,
    PurchaseRequestRepository,
)
from hathak.utils import now_in_app_timezone

logger = logging.getLogger(__name__)


class PurchaseRequestLookup(Protocol):
    def get(self, request_id: int) -> PurchaseRequest | None: ...


class ActiveAdminDirectory(Protocol):
    def list_active(self) -> Sequence[Admin]: ...


class NotificationStore(Protocol):
    def create(self, notification: Notification) -> Notification: ...

    def rollback(self) -> None: ...


def deadline_priority(days_until_deadline: int) -> str:
    """Return the urgency tier for a deadline ``days_until_deadline`` away."""

    if days_until_deadline <= 1:
        return PRIORITY_URGENT
    if days_until_deadline <= 3:
        return PRIORITY_HIGH
    return PRIORITY_MEDIUM


def deadline_message(request_number: str, days_until_deadline: int) -> str:
    if days_until_deadline == 0:
        return f"Deadline is today! Please take action on request #{request_number}"
    return f"Deadline in {days_until_deadline} day(s) for request #{request_number}"


class NotificationDispatcher:
    """Resolve the rule for an event and persist one record per recipient.

    The admin directory is queried on every dispatch so newly activated or
    deactivated admins are honoured immediately.
    """

    def __init__(
        self,
        requests: PurchaseRequestLookup,
        admins: ActiveAdminDirectory,
        notifications: NotificationStore,
        *,
        clock: Callable[[], datetime] = now_in_app_timezone,
        ttl: timedelta | None = None,
    ) -> None:
        self._requests = requests
        self._admins = admins
        self._notifications = notifications
        self._clock = clock
        self._ttl = ttl if ttl is not None else timedelta(
            days=get_settings().notification_ttl_days
        )

    def dispatch(
        self,
        request_id: int,
        event_type: EventType | str,
        metadata: Mapping[str, Any] | EventMetadata | None = None,
        *,
        priority: str | None = None,
    ) -> list[Notification]:
        """Create the notifications ``event_type`` produces for ``request_id``.

        ``priority`` overrides the template priority of the user-facing record.
        Raises :class:`NotFoundError` before any write when the request does not
        exist and :class:`ValidationError` when ``metadata`` is malformed.
        """

        request = self._requests.get(request_id)
        if request is None:
            raise NotFoundError(f"Purchase request {request_id} not found")

        parsed = parse_event_metadata(metadata)
        templates = resolve_templates(
            event_type,
            RequestSnapshot(
                request_number=request.request_number,
                customer_name=request.customer_name,
            ),
            parsed,
        )
        if templates.is_empty:
            logger.warning(
                "No notification rule for event %r on request %s; nothing dispatched",
                event_type,
                request_id,
            )
            return []

        event_value = EventType.parse(event_type).value
        merged_metadata = {
            "requestNumber": request.request_number,
            "customerName": request.customer_name,
            **_caller_metadata(metadata, parsed),
        }

        created: list[Notification] = []
        if templates.user is not None:
            saved = self._persist(
                request,
                event_value,
                templates.user,
                recipient_id=request.customer_id,
                recipient_type=RECIPIENT_TYPE_USER,
                metadata=merged_metadata,
                priority=priority,
            )
            if saved is not None:
                created.append(saved)

        if templates.admin is not None:
            for admin in self._admins.list_active():
                saved = self._persist(
                    request,
                    event_value,
                    templates.admin,
                    recipient_id=admin.id,
                    recipient_type=RECIPIENT_TYPE_ADMIN,
                    metadata=merged_metadata,
                )
                if saved is not None:
                    created.append(saved)

        logger.info(
            "Dispatched %s notification(s) for %s on request %s",
            len(created),
            event_value,
            request.request_number,
        )
        return created

    def dispatch_deadline_reminder(
        self, request_id: int, deadline_type: str, days_until_deadline: int
    ) -> list[Notification]:
        if days_until_deadline < 0:
            raise ValidationError("days_until_deadline must not be negative")

        request = self._requests.get(request_id)
        if request is None:
            raise NotFoundError(f"Purchase request {request_id} not found")

        priority = deadline_priority(days_until_deadline)
        return self.dispatch(
            request_id,
            EventType.DEADLINE_REMINDER,
            {
                "message": deadline_message(request.request_number, days_until_deadline),
                "urgent": priority == PRIORITY_URGENT,
                "deadlineType": deadline_type,
            },
            priority=priority,
        )

    def _persist(
        self,
        request: PurchaseRequest,
        event_type: str,
        template: NotificationTemplate,
        *,
        recipient_id: int,
        recipient_type: str,
        metadata: dict[str, Any],
        priority: str | None = None,
    ) -> Notification | None:
        now = self._clock()
        notification = Notification(
            id=None,
            event_type=event_type,
            request_id=request.id,
            recipient_id=recipient_id,
            recipient_type=recipient_type,
            title=template.title,
            message=template.message,
            priority=priority or template.priority,
            channels=list(template.channels),
            actions=list(template.actions),
            metadata=dict(metadata),
            scheduled_for=now,
            expires_at=now + self._ttl,
            created_at=now,
        )
        try:
            notification.validate()
            return self._notifications.create(notification)
        except (ValidationError, SQLAlchemyError):
            logger.exception(
                "Failed to store %s notification for %s %s on request %s",
                event_type,
                recipient_type,
                recipient_id,
                request.request_number,
            )
            self._notifications.rollback()
            return None


def _caller_metadata(
    raw: Mapping[str, Any] | EventMetadata | None, parsed: EventMetadata
) -> dict[str, Any]:
    if raw is None:
        return {}
    if isinstance(raw, EventMetadata):
        return parsed.model_dump(by_alias=True, exclude_none=True)
    return dict(raw)


def build_dispatcher(session: Session) -> NotificationDispatcher:
    """Return a dispatcher wired to SQLAlchemy repositories sharing ``session``."""

    return NotificationDispatcher(
        PurchaseRequestRepository(session),
        AdminRepository(session),
        NotificationRepository(session),
    )


def dispatch_request_notification(
    session: Session,
    request_id: int,
    event_type: EventType | str,
    metadata: Mapping[str, Any] | None = None,
) -> list[Notification]:
    return build_dispatcher(session).dispatch(request_id, event_type, metadata)


def dispatch_deadline_reminder(
    session: Session,
    request_id: int,
    deadline_type: str,
    days_until_deadline: int,
) -> list[Notification]:
    return build_dispatcher(session).dispatch_deadline_reminder(
        request_id, deadline_type, days_until_deadline
    )


__all__ = [
    "ActiveAdminDirectory",
    "NotificationDispatcher",
    "NotificationStore",
    "PurchaseRequestLookup",
    "build_dispatcher",
    "deadline_message",
    "deadline_priority",
    "dispatch_deadline_reminder",
    "dispatch_request_notification",
]
