"""Realtime and channel delivery helpers for notifications."""

from .delivery import ChannelDeliveryGateway, DeliveryGateway
from .manager import NotificationConnectionManager, notification_manager
from .publisher import (
    NotificationPublisher,
    notification_publisher,
    serialize_notification,
)

__all__ = [
    "ChannelDeliveryGateway",
    "DeliveryGateway",
    "NotificationConnectionManager",
    "NotificationPublisher",
    "notification_manager",
    "notification_publisher",
    "serialize_notification",
]
