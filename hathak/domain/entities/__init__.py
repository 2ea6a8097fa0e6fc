"""Domain entities exposed by the application."""

from .admin import Admin
from .customer import Customer
from .notification import (
    CHANNEL_EMAIL,
    CHANNEL_IN_APP,
    CHANNEL_SMS,
    CHANNELS,
    PRIORITIES,
    PRIORITY_HIGH,
    PRIORITY_LOW,
    PRIORITY_MEDIUM,
    PRIORITY_URGENT,
    RECIPIENT_TYPE_ADMIN,
    RECIPIENT_TYPE_USER,
    RECIPIENT_TYPES,
    EventType,
    Notification,
    NotificationAction,
)
from .purchase_request import PurchaseRequest

__all__ = [
    "Admin",
    "CHANNEL_EMAIL",
    "CHANNEL_IN_APP",
    "CHANNEL_SMS",
    "CHANNELS",
    "Customer",
    "EventType",
    "Notification",
    "NotificationAction",
    "PRIORITIES",
    "PRIORITY_HIGH",
    "PRIORITY_LOW",
    "PRIORITY_MEDIUM",
    "PRIORITY_URGENT",
    "PurchaseRequest",
    "RECIPIENT_TYPE_ADMIN",
    "RECIPIENT_TYPE_USER",
    "RECIPIENT_TYPES",
]
