"""Channel delivery used by the scheduled delivery sweeper."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

from sqlalchemy.orm import Session

from hathak.config import get_settings
from hathak.domain.entities import (
    CHANNEL_EMAIL,
    CHANNEL_IN_APP,
    CHANNEL_SMS,
    RECIPIENT_TYPE_ADMIN,
    Notification,
)
from hathak.domain.errors import DeliveryError
from hathak.infrastructure.email import send_notification_email
from hathak.infrastructure.repositories import AdminRepository, CustomerRepository

from .publisher import NotificationPublisher, notification_publisher

logger = logging.getLogger(__name__)


class DeliveryGateway(Protocol):
    def deliver(self, notification: Notification) -> None: ...


class ChannelDeliveryGateway:
    """Deliver a notification on each of its channels.

    Raises :class:`DeliveryError` when a configured provider rejects the
    notification so the sweeper leaves it undelivered for the next run.
    """

    def __init__(
        self,
        session: Session,
        *,
        publisher: NotificationPublisher = notification_publisher,
        email_sender: Callable[[Notification, str], bool] = send_notification_email,
    ) -> None:
        self.session = session
        self._publisher = publisher
        self._email_sender = email_sender

    def deliver(self, notification: Notification) -> None:
        for channel in notification.channels:
            if channel == CHANNEL_IN_APP:
                self._deliver_in_app(notification)
            elif channel == CHANNEL_EMAIL:
                self._deliver_email(notification)
            elif channel == CHANNEL_SMS:
                logger.info(
                    "No SMS provider configured; skipped sms for notification %s",
                    notification.id,
                )
            else:
                raise DeliveryError(f"Unsupported channel {channel!r}", channel=channel)

    def _deliver_in_app(self, notification: Notification) -> None:
        self._publisher.dispatch(notification)

    def _deliver_email(self, notification: Notification) -> None:
        if not get_settings().email_enabled:
            logger.info(
                "Email is not configured; skipped email for notification %s",
                notification.id,
            )
            return

        address = self._resolve_email(notification)
        if not address:
            logger.warning(
                "No email address for %s %s; skipped email for notification %s",
                notification.recipient_type,
                notification.recipient_id,
                notification.id,
            )
            return

        if not self._email_sender(notification, address):
            raise DeliveryError(
                f"Email delivery failed for notification {notification.id}",
                channel=CHANNEL_EMAIL,
            )

    def _resolve_email(self, notification: Notification) -> str | None:
        if notification.recipient_type == RECIPIENT_TYPE_ADMIN:
            admin = AdminRepository(self.session).get(notification.recipient_id)
            return admin.email if admin else None
        customer = CustomerRepository(self.session).get(notification.recipient_id)
        return customer.email if customer else None


__all__ = ["ChannelDeliveryGateway", "DeliveryGateway"]
