"""Read-side operations on a recipient's notifications."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from sqlalchemy.orm import Session

from hathak.domain.entities import PRIORITIES, RECIPIENT_TYPES, EventType, Notification
from hathak.domain.errors import NotFoundError, ValidationError
from hathak.infrastructure.repositories import NotificationRepository

DEFAULT_PAGE_SIZE = 50


def _ensure_recipient_type(recipient_type: str) -> None:
    if recipient_type not in RECIPIENT_TYPES:
        raise ValidationError(f"Unknown recipient type: {recipient_type!r}")


def list_notifications_for_recipient(
    session: Session,
    recipient_id: int,
    recipient_type: str,
    *,
    limit: int = DEFAULT_PAGE_SIZE,
    skip: int = 0,
    unread_only: bool = False,
    event_type: str | None = None,
    priority: str | None = None,
) -> Sequence[Notification]:
    """Return the recipient's unexpired notifications, newest first."""

    _ensure_recipient_type(recipient_type)
    if limit < 1:
        raise ValidationError("limit must be a positive integer")
    if skip < 0:
        raise ValidationError("skip must not be negative")
    if event_type is not None and EventType.parse(event_type) is None:
        raise ValidationError(f"Unknown notification type: {event_type!r}")
    if priority is not None and priority not in PRIORITIES:
        raise ValidationError(f"Unknown priority: {priority!r}")

    return NotificationRepository(session).list_for_recipient(
        recipient_id,
        recipient_type,
        limit=limit,
        skip=skip,
        unread_only=unread_only,
        event_type=event_type,
        priority=priority,
    )


def count_notifications_for_recipient(
    session: Session,
    recipient_id: int,
    recipient_type: str,
    *,
    unread_only: bool = False,
) -> int:
    _ensure_recipient_type(recipient_type)
    return NotificationRepository(session).count_for_recipient(
        recipient_id, recipient_type, unread_only=unread_only
    )


def get_unread_count(session: Session, recipient_id: int, recipient_type: str) -> int:
    return count_notifications_for_recipient(
        session, recipient_id, recipient_type, unread_only=True
    )


def mark_notification_as_read(
    session: Session,
    notification_id: int,
    recipient_id: int,
    *,
    recipient_type: str | None = None,
) -> Notification:
    """Mark one notification as read.

    Marking an already-read notification again succeeds without changing it.
    """

    if recipient_type is not None:
        _ensure_recipient_type(recipient_type)
    notification = NotificationRepository(session).mark_as_read(
        notification_id, recipient_id=recipient_id, recipient_type=recipient_type
    )
    if notification is None:
        raise NotFoundError(f"Notification {notification_id} not found")
    return notification


def mark_notifications_as_read(
    session: Session,
    notification_ids: Iterable[int],
    recipient_id: int,
    recipient_type: str,
) -> int:
    _ensure_recipient_type(recipient_type)
    return NotificationRepository(session).mark_many_as_read(
        notification_ids, recipient_id=recipient_id, recipient_type=recipient_type
    )


def mark_all_notifications_as_read(
    session: Session, recipient_id: int, recipient_type: str
) -> int:
    _ensure_recipient_type(recipient_type)
    return NotificationRepository(session).mark_all_as_read(recipient_id, recipient_type)


def delete_notification(
    session: Session,
    notification_id: int,
    recipient_id: int,
    *,
    recipient_type: str | None = None,
) -> None:
    if recipient_type is not None:
        _ensure_recipient_type(recipient_type)
    deleted = NotificationRepository(session).delete(
        notification_id, recipient_id=recipient_id, recipient_type=recipient_type
    )
    if not deleted:
        raise NotFoundError(f"Notification {notification_id} not found")


__all__ = [
    "DEFAULT_PAGE_SIZE",
    "count_notifications_for_recipient",
    "delete_notification",
    "get_unread_count",
    "list_notifications_for_recipient",
    "mark_all_notifications_as_read",
    "mark_notification_as_read",
    "mark_notifications_as_read",
]
