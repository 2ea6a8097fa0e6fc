"""Maintenance jobs: the scheduled delivery sweep and the expiry purge."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hathak.domain.errors import DeliveryError
from hathak.infrastructure.notifications import ChannelDeliveryGateway, DeliveryGateway
from hathak.infrastructure.repositories import NotificationRepository
from hathak.utils import now_in_app_timezone

logger = logging.getLogger(__name__)


def deliver_scheduled_notifications(
    session: Session,
    *,
    gateway: DeliveryGateway | None = None,
    now: datetime | None = None,
) -> int:
    """Deliver every due notification and mark it delivered.

    A notification is due when it is undelivered, scheduled at or before
    ``now`` and not yet expired. Failures are logged per record and leave the
    record undelivered for the next sweep. Returns the number of records
    considered, delivered or not.
    """

    now = now or now_in_app_timezone()
    repository = NotificationRepository(session)
    gateway = gateway or ChannelDeliveryGateway(session)

    due = repository.list_due(now=now)
    delivered = 0
    for notification in due:
        try:
            gateway.deliver(notification)
            if repository.mark_as_delivered(notification.id, delivered_at=now):
                delivered += 1
        except DeliveryError as exc:
            logger.warning(
                "Delivery of notification %s failed on %s: %s",
                notification.id,
                exc.channel or "unknown channel",
                exc,
            )
        except SQLAlchemyError:
            logger.exception("Could not mark notification %s delivered", notification.id)
            session.rollback()
        except Exception:
            logger.exception("Unexpected error delivering notification %s", notification.id)

    logger.info(
        "Delivery sweep considered %s notification(s), delivered %s", len(due), delivered
    )
    return len(due)


def purge_expired_notifications(session: Session, *, now: datetime | None = None) -> int:
    """Delete every notification whose ``expires_at`` is before ``now``."""

    deleted = NotificationRepository(session).delete_expired(
        now=now or now_in_app_timezone()
    )
    if deleted:
        logger.info("Purged %s expired notification(s)", deleted)
    return deleted


__all__ = ["deliver_scheduled_notifications", "purge_expired_notifications"]
