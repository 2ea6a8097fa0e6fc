"""Domain entity representing a persisted notification."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any

from hathak.domain.errors import ValidationError

RECIPIENT_TYPE_USER = "user"
RECIPIENT_TYPE_ADMIN = "admin"
RECIPIENT_TYPES = (RECIPIENT_TYPE_USER, RECIPIENT_TYPE_ADMIN)

PRIORITY_LOW = "low"
PRIORITY_MEDIUM = "medium"
PRIORITY_HIGH = "high"
PRIORITY_URGENT = "urgent"
PRIORITIES = (PRIORITY_LOW, PRIORITY_MEDIUM, PRIORITY_HIGH, PRIORITY_URGENT)

CHANNEL_IN_APP = "in_app"
CHANNEL_EMAIL = "email"
CHANNEL_SMS = "sms"
CHANNELS = (CHANNEL_IN_APP, CHANNEL_EMAIL, CHANNEL_SMS)

ACTION_STYLES = ("primary", "secondary", "success", "warning", "danger")

TITLE_MAX_LENGTH = 200
MESSAGE_MAX_LENGTH = 1000

# Age after which a priority is displayed one level higher.
_ESCALATION_RULES: tuple[tuple[str, timedelta, str], ...] = (
    (PRIORITY_URGENT, timedelta(minutes=5), "critical"),
    (PRIORITY_HIGH, timedelta(minutes=15), PRIORITY_URGENT),
    (PRIORITY_MEDIUM, timedelta(hours=1), PRIORITY_HIGH),
    (PRIORITY_LOW, timedelta(hours=24), PRIORITY_MEDIUM),
)


class EventType(str, Enum):
    """Closed set of business events that can produce notifications."""

    REQUEST_SUBMITTED = "request_submitted"
    REQUEST_APPROVED = "request_approved"
    REQUEST_REJECTED = "request_rejected"
    CHANGES_REQUESTED = "changes_requested"
    CHANGES_SUBMITTED = "changes_submitted"
    CHANGES_APPROVED = "changes_approved"
    CHANGES_REJECTED = "changes_rejected"
    PAYMENT_REQUIRED = "payment_required"
    PAYMENT_RECEIVED = "payment_received"
    PAYMENT_FAILED = "payment_failed"
    ITEMS_PURCHASED = "items_purchased"
    ITEMS_ARRIVED = "items_arrived"
    INSPECTION_REQUIRED = "inspection_required"
    INSPECTION_COMPLETED = "inspection_completed"
    PACKAGING_OPTIONS = "packaging_options"
    PACKAGING_SELECTED = "packaging_selected"
    ITEMS_SHIPPED = "items_shipped"
    DELIVERY_CONFIRMED = "delivery_confirmed"
    DEADLINE_REMINDER = "deadline_reminder"

    @classmethod
    def parse(cls, value: "EventType | str") -> "EventType | None":
        """Return the matching member or ``None`` for unknown tags."""

        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass(frozen=True)
class NotificationAction:
    """Follow-up call-to-action attached to a notification."""

    label: str
    action: str
    url: str
    style: str = "primary"

    def to_dict(self) -> dict[str, str]:
        return {
            "label": self.label,
            "action": self.action,
            "url": self.url,
            "style": self.style,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NotificationAction":
        return cls(
            label=str(data.get("label", "")),
            action=str(data.get("action", "")),
            url=str(data.get("url", "")),
            style=str(data.get("style") or "primary"),
        )


@dataclass
class Notification:
    """Message addressed to exactly one recipient about a purchase request.

    Only ``delivered``/``delivered_at`` and ``read``/``read_at`` change after
    creation.
    """

    id: int | None
    event_type: str
    request_id: int
    recipient_id: int
    recipient_type: str
    title: str
    message: str
    priority: str = PRIORITY_MEDIUM
    channels: list[str] = field(default_factory=list)
    actions: list[NotificationAction] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    scheduled_for: datetime | None = None
    delivered: bool = False
    delivered_at: datetime | None = None
    read: bool = False
    read_at: datetime | None = None
    expires_at: datetime | None = None
    created_at: datetime | None = None

    def validate(self) -> None:
        """Raise :class:`ValidationError` when the record cannot be stored."""

        if self.recipient_type not in RECIPIENT_TYPES:
            raise ValidationError(f"Unknown recipient type: {self.recipient_type!r}")
        if EventType.parse(self.event_type) is None:
            raise ValidationError(f"Unknown notification type: {self.event_type!r}")
        if self.priority not in PRIORITIES:
            raise ValidationError(f"Unknown priority: {self.priority!r}")
        if not self.channels:
            raise ValidationError("At least one delivery channel is required")
        unknown_channels = [channel for channel in self.channels if channel not in CHANNELS]
        if unknown_channels:
            raise ValidationError(f"Unknown channels: {', '.join(unknown_channels)}")
        if not self.title or not self.title.strip():
            raise ValidationError("Notification title is required")
        if len(self.title) > TITLE_MAX_LENGTH:
            raise ValidationError(f"Notification title exceeds {TITLE_MAX_LENGTH} characters")
        if not self.message or not self.message.strip():
            raise ValidationError("Notification message is required")
        if len(self.message) > MESSAGE_MAX_LENGTH:
            raise ValidationError(
                f"Notification message exceeds {MESSAGE_MAX_LENGTH} characters"
            )
        for action in self.actions:
            if action.style not in ACTION_STYLES:
                raise ValidationError(f"Unknown action style: {action.style!r}")

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at < now

    def can_be_read(self, now: datetime) -> bool:
        return not self.read and not self.is_expired(now)

    def is_due(self, now: datetime) -> bool:
        """Return ``True`` when the sweeper may deliver this notification."""

        if self.delivered:
            return False
        if self.scheduled_for is not None and self.scheduled_for > now:
            return False
        return self.expires_at is None or self.expires_at > now

    def urgency_level(self, now: datetime) -> str:
        """Return the display priority, escalated for notifications left unattended."""

        if self.created_at is None:
            return self.priority
        age = now - self.created_at
        for priority, threshold, escalated in _ESCALATION_RULES:
            if self.priority == priority and age > threshold:
                return escalated
        return self.priority


__all__ = [
    "ACTION_STYLES",
    "CHANNELS",
    "CHANNEL_EMAIL",
    "CHANNEL_IN_APP",
    "CHANNEL_SMS",
    "EventType",
    "MESSAGE_MAX_LENGTH",
    "Notification",
    "NotificationAction",
    "PRIORITIES",
    "PRIORITY_HIGH",
    "PRIORITY_LOW",
    "PRIORITY_MEDIUM",
    "PRIORITY_URGENT",
    "RECIPIENT_TYPES",
    "RECIPIENT_TYPE_ADMIN",
    "RECIPIENT_TYPE_USER",
    "TITLE_MAX_LENGTH",
]
