"""Notification use cases: dispatch, delivery maintenance and read state."""

from .delivery import deliver_scheduled_notifications, purge_expired_notifications
from .dispatch import (
    NotificationDispatcher,
    build_dispatcher,
    dispatch_deadline_reminder,
    dispatch_request_notification,
)
from .read_state import (
    count_notifications_for_recipient,
    delete_notification,
    get_unread_count,
    list_notifications_for_recipient,
    mark_all_notifications_as_read,
    mark_notification_as_read,
    mark_notifications_as_read,
)

__all__ = [
    "NotificationDispatcher",
    "build_dispatcher",
    "count_notifications_for_recipient",
    "delete_notification",
    "deliver_scheduled_notifications",
    "dispatch_deadline_reminder",
    "dispatch_request_notification",
    "get_unread_count",
    "list_notifications_for_recipient",
    "mark_all_notifications_as_read",
    "mark_notification_as_read",
    "mark_notifications_as_read",
    "purge_expired_notifications",
]
