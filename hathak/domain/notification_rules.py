"""Event-to-notification rule table.

Every :class:`EventType` maps to a factory that builds the user-facing and/or
admin-facing template for a purchase request. The table is pure: resolving a
rule performs no I/O and always returns the same templates for the same
inputs.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from hathak.domain.entities.notification import (
    CHANNEL_EMAIL,
    CHANNEL_IN_APP,
    CHANNEL_SMS,
    PRIORITY_HIGH,
    PRIORITY_LOW,
    PRIORITY_MEDIUM,
    PRIORITY_URGENT,
    EventType,
    NotificationAction,
)
from hathak.domain.errors import ValidationError

USER_REQUESTS_URL = "/User/ControlPanel/BuyForMe/BuyForMeRequests"
ADMIN_BUYME_URL = "/admin/buyme"

_IN_APP = (CHANNEL_IN_APP,)
_IN_APP_EMAIL = (CHANNEL_IN_APP, CHANNEL_EMAIL)
_ALL_CHANNELS = (CHANNEL_IN_APP, CHANNEL_EMAIL, CHANNEL_SMS)


class EventMetadata(BaseModel):
    """Caller-supplied data accompanying an event.

    Known keys are typed; unknown keys are kept as extras so they still end
    up in the stored notification metadata.
    """

    model_config = ConfigDict(
        extra="allow", populate_by_name=True, coerce_numbers_to_str=True
    )

    reason: str | None = None
    tracking_number: str | None = Field(default=None, alias="trackingNumber")
    passed: bool | None = None
    message: str | None = None
    urgent: bool | None = None
    deadline_type: str | None = Field(default=None, alias="deadlineType")


def parse_event_metadata(raw: Mapping[str, Any] | EventMetadata | None) -> EventMetadata:
    """Validate ``raw`` into :class:`EventMetadata`.

    Raises :class:`ValidationError` when a known key has an unusable value.
    """

    if isinstance(raw, EventMetadata):
        return raw
    if raw is None:
        return EventMetadata()
    if not isinstance(raw, Mapping):
        raise ValidationError("Notification metadata must be a mapping")
    try:
        return EventMetadata.model_validate(dict(raw))
    except PydanticValidationError as exc:
        fields = ", ".join(
            ".".join(str(part) for part in error["loc"]) for error in exc.errors()
        )
        raise ValidationError(f"Invalid notification metadata: {fields}") from exc


@dataclass(frozen=True)
class RequestSnapshot:
    """Fields of the triggering request that templates interpolate."""

    request_number: str
    customer_name: str = ""


@dataclass(frozen=True)
class NotificationTemplate:
    """Fully rendered content for one side (user or admin) of an event."""

    title: str
    message: str
    priority: str
    channels: tuple[str, ...]
    actions: tuple[NotificationAction, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ResolvedTemplates:
    user: NotificationTemplate | None = None
    admin: NotificationTemplate | None = None

    @property
    def is_empty(self) -> bool:
        return self.user is None and self.admin is None


RuleFactory = Callable[[RequestSnapshot, EventMetadata], ResolvedTemplates]


def _user_action(label: str, action: str) -> tuple[NotificationAction, ...]:
    return (NotificationAction(label=label, action=action, url=USER_REQUESTS_URL),)


def _admin_action(label: str, action: str, query: str) -> tuple[NotificationAction, ...]:
    return (NotificationAction(label=label, action=action, url=f"{ADMIN_BUYME_URL}?{query}"),)


def _request_submitted(request: RequestSnapshot, metadata: EventMetadata) -> ResolvedTemplates:
    return ResolvedTemplates(
        admin=NotificationTemplate(
            title="New Request Submitted",
            message=(
                f"Request #{request.request_number} has been submitted by "
                f"{request.customer_name}"
            ),
            priority=PRIORITY_MEDIUM,
            channels=_IN_APP_EMAIL,
            actions=_admin_action(
                "Review Request", "review", "tab=review_queue&subtab=pending"
            ),
        )
    )


def _request_approved(request: RequestSnapshot, metadata: EventMetadata) -> ResolvedTemplates:
    return ResolvedTemplates(
        user=NotificationTemplate(
            title="Request Approved!",
            message=(
                f"Your request #{request.request_number} has been approved. "
                "Please complete payment to proceed."
            ),
            priority=PRIORITY_HIGH,
            channels=_ALL_CHANNELS,
            actions=_user_action("Make Payment", "payment"),
        )
    )


def _request_rejected(request: RequestSnapshot, metadata: EventMetadata) -> ResolvedTemplates:
    reason = metadata.reason or "Please review and resubmit."
    return ResolvedTemplates(
        user=NotificationTemplate(
            title="Request Rejected",
            message=f"Your request #{request.request_number} has been rejected. {reason}",
            priority=PRIORITY_MEDIUM,
            channels=_IN_APP_EMAIL,
            actions=_user_action("View Details", "view"),
        )
    )


def _changes_requested(request: RequestSnapshot, metadata: EventMetadata) -> ResolvedTemplates:
    return ResolvedTemplates(
        user=NotificationTemplate(
            title="Changes Required",
            message=(
                f"Your request #{request.request_number} requires changes. Please review "
                "the requirements and submit updated information."
            ),
            priority=PRIORITY_HIGH,
            channels=_ALL_CHANNELS,
            actions=_user_action("View Changes", "changes"),
        )
    )


def _changes_submitted(request: RequestSnapshot, metadata: EventMetadata) -> ResolvedTemplates:
    return ResolvedTemplates(
        admin=NotificationTemplate(
            title="Changes Submitted",
            message=f"User has submitted changes for request #{request.request_number}",
            priority=PRIORITY_MEDIUM,
            channels=_IN_APP_EMAIL,
            actions=_admin_action(
                "Review Changes",
                "review_changes",
                "tab=review_queue&subtab=changes_submitted",
            ),
        )
    )


def _changes_approved(request: RequestSnapshot, metadata: EventMetadata) -> ResolvedTemplates:
    return ResolvedTemplates(
        user=NotificationTemplate(
            title="Changes Approved",
            message=(
                f"Your changes for request #{request.request_number} have been approved. "
                "Your request is now being processed."
            ),
            priority=PRIORITY_MEDIUM,
            channels=_IN_APP_EMAIL,
            actions=_user_action("View Request", "view"),
        )
    )


def _changes_rejected(request: RequestSnapshot, metadata: EventMetadata) -> ResolvedTemplates:
    return ResolvedTemplates(
        user=NotificationTemplate(
            title="Changes Rejected",
            message=(
                f"Your changes for request #{request.request_number} have been rejected. "
                "Please review the feedback and resubmit."
            ),
            priority=PRIORITY_HIGH,
            channels=_IN_APP_EMAIL,
            actions=_user_action("View Feedback", "view"),
        )
    )


def _payment_required(request: RequestSnapshot, metadata: EventMetadata) -> ResolvedTemplates:
    return ResolvedTemplates(
        user=NotificationTemplate(
            title="Payment Required",
            message=(
                f"Payment is required for request #{request.request_number}. "
                "Please complete payment to continue processing."
            ),
            priority=PRIORITY_HIGH,
            channels=_ALL_CHANNELS,
            actions=_user_action("Make Payment", "payment"),
        )
    )


def _payment_received(request: RequestSnapshot, metadata: EventMetadata) -> ResolvedTemplates:
    return ResolvedTemplates(
        admin=NotificationTemplate(
            title="Payment Received",
            message=(
                f"Payment received for request #{request.request_number}. "
                "Processing can now begin."
            ),
            priority=PRIORITY_MEDIUM,
            channels=_IN_APP_EMAIL,
            actions=_admin_action("View Request", "view", "tab=work_in_progress"),
        ),
        user=NotificationTemplate(
            title="Payment Confirmed",
            message=(
                f"Payment confirmed for request #{request.request_number}. "
                "We are now processing your order."
            ),
            priority=PRIORITY_MEDIUM,
            channels=_IN_APP_EMAIL,
            actions=_user_action("Track Progress", "track"),
        ),
    )


def _payment_failed(request: RequestSnapshot, metadata: EventMetadata) -> ResolvedTemplates:
    return ResolvedTemplates(
        user=NotificationTemplate(
            title="Payment Failed",
            message=(
                f"Payment failed for request #{request.request_number}. "
                "Please try again or contact support."
            ),
            priority=PRIORITY_HIGH,
            channels=_ALL_CHANNELS,
            actions=_user_action("Retry Payment", "retry_payment"),
        )
    )


def _items_purchased(request: RequestSnapshot, metadata: EventMetadata) -> ResolvedTemplates:
    return ResolvedTemplates(
        user=NotificationTemplate(
            title="Items Purchased",
            message=(
                f"Items for request #{request.request_number} have been purchased "
                "successfully. They will be shipped to our warehouse soon."
            ),
            priority=PRIORITY_MEDIUM,
            channels=_IN_APP_EMAIL,
            actions=_user_action("Track Progress", "track"),
        )
    )


def _items_arrived(request: RequestSnapshot, metadata: EventMetadata) -> ResolvedTemplates:
    return ResolvedTemplates(
        admin=NotificationTemplate(
            title="Items Arrived",
            message=(
                f"Items for request #{request.request_number} have arrived at the "
                "warehouse and are ready for inspection."
            ),
            priority=PRIORITY_MEDIUM,
            channels=_IN_APP_EMAIL,
            actions=_admin_action(
                "Start Inspection", "inspect", "tab=inspection&subtab=pending_inspection"
            ),
        )
    )


def _inspection_required(request: RequestSnapshot, metadata: EventMetadata) -> ResolvedTemplates:
    return ResolvedTemplates(
        admin=NotificationTemplate(
            title="Inspection Required",
            message=(
                f"Inspection is required for request #{request.request_number}. "
                "Items are ready for quality check."
            ),
            priority=PRIORITY_MEDIUM,
            channels=_IN_APP_EMAIL,
            actions=_admin_action(
                "Start Inspection", "inspect", "tab=inspection&subtab=pending_inspection"
            ),
        )
    )


def _inspection_completed(request: RequestSnapshot, metadata: EventMetadata) -> ResolvedTemplates:
    if metadata.passed:
        outcome = "Items passed inspection and are ready for packaging."
    else:
        outcome = "Items failed inspection. Please contact support."
    return ResolvedTemplates(
        user=NotificationTemplate(
            title="Inspection Completed",
            message=f"Inspection completed for request #{request.request_number}. {outcome}",
            priority=PRIORITY_MEDIUM,
            channels=_IN_APP_EMAIL,
            actions=_user_action("View Results", "view"),
        )
    )


def _packaging_options(request: RequestSnapshot, metadata: EventMetadata) -> ResolvedTemplates:
    return ResolvedTemplates(
        user=NotificationTemplate(
            title="Packaging Options Available",
            message=(
                f"Packaging options are now available for request #{request.request_number}. "
                "Please select your preferred packaging method."
            ),
            priority=PRIORITY_MEDIUM,
            channels=_IN_APP_EMAIL,
            actions=_user_action("Select Packaging", "packaging"),
        )
    )


def _packaging_selected(request: RequestSnapshot, metadata: EventMetadata) -> ResolvedTemplates:
    return ResolvedTemplates(
        admin=NotificationTemplate(
            title="Packaging Selected",
            message=(
                f"User has selected packaging options for request #{request.request_number}. "
                "Ready for packaging."
            ),
            priority=PRIORITY_MEDIUM,
            channels=_IN_APP_EMAIL,
            actions=_admin_action(
                "View Options", "view", "tab=packaging_shipping&subtab=packaging"
            ),
        )
    )


def _items_shipped(request: RequestSnapshot, metadata: EventMetadata) -> ResolvedTemplates:
    tracking_number = metadata.tracking_number or "N/A"
    return ResolvedTemplates(
        user=NotificationTemplate(
            title="Items Shipped!",
            message=(
                f"Your items for request #{request.request_number} have been shipped. "
                f"Tracking number: {tracking_number}"
            ),
            priority=PRIORITY_HIGH,
            channels=_ALL_CHANNELS,
            actions=_user_action("Track Shipment", "track"),
        )
    )


def _delivery_confirmed(request: RequestSnapshot, metadata: EventMetadata) -> ResolvedTemplates:
    return ResolvedTemplates(
        admin=NotificationTemplate(
            title="Delivery Confirmed",
            message=(
                f"Delivery confirmed for request #{request.request_number}. "
                "Order completed successfully."
            ),
            priority=PRIORITY_LOW,
            channels=_IN_APP,
            actions=_admin_action("View Request", "view", "tab=delivered"),
        )
    )


def _deadline_reminder(request: RequestSnapshot, metadata: EventMetadata) -> ResolvedTemplates:
    detail = metadata.message or (
        f"You have a pending deadline for request #{request.request_number}"
    )
    return ResolvedTemplates(
        user=NotificationTemplate(
            title="Deadline Reminder",
            message=f"Reminder: {detail}",
            priority=PRIORITY_URGENT if metadata.urgent else PRIORITY_HIGH,
            channels=_ALL_CHANNELS,
            actions=_user_action("Take Action", "action"),
        )
    )


NOTIFICATION_RULES: dict[EventType, RuleFactory] = {
    EventType.REQUEST_SUBMITTED: _request_submitted,
    EventType.REQUEST_APPROVED: _request_approved,
    EventType.REQUEST_REJECTED: _request_rejected,
    EventType.CHANGES_REQUESTED: _changes_requested,
    EventType.CHANGES_SUBMITTED: _changes_submitted,
    EventType.CHANGES_APPROVED: _changes_approved,
    EventType.CHANGES_REJECTED: _changes_rejected,
    EventType.PAYMENT_REQUIRED: _payment_required,
    EventType.PAYMENT_RECEIVED: _payment_received,
    EventType.PAYMENT_FAILED: _payment_failed,
    EventType.ITEMS_PURCHASED: _items_purchased,
    EventType.ITEMS_ARRIVED: _items_arrived,
    EventType.INSPECTION_REQUIRED: _inspection_required,
    EventType.INSPECTION_COMPLETED: _inspection_completed,
    EventType.PACKAGING_OPTIONS: _packaging_options,
    EventType.PACKAGING_SELECTED: _packaging_selected,
    EventType.ITEMS_SHIPPED: _items_shipped,
    EventType.DELIVERY_CONFIRMED: _delivery_confirmed,
    EventType.DEADLINE_REMINDER: _deadline_reminder,
}

_MISSING_RULES = set(EventType) - set(NOTIFICATION_RULES)
if _MISSING_RULES:
    raise RuntimeError(
        "Notification rules missing for: "
        + ", ".join(sorted(event.value for event in _MISSING_RULES))
    )


def resolve_templates(
    event_type: EventType | str,
    request: RequestSnapshot,
    metadata: Mapping[str, Any] | EventMetadata | None = None,
) -> ResolvedTemplates:
    """Return the templates produced by ``event_type`` for ``request``.

    Unknown event types resolve to an empty :class:`ResolvedTemplates`.
    """

    event = EventType.parse(event_type)
    if event is None:
        return ResolvedTemplates()
    return NOTIFICATION_RULES[event](request, parse_event_metadata(metadata))


__all__ = [
    "ADMIN_BUYME_URL",
    "EventMetadata",
    "NOTIFICATION_RULES",
    "NotificationTemplate",
    "RequestSnapshot",
    "ResolvedTemplates",
    "USER_REQUESTS_URL",
    "parse_event_metadata",
    "resolve_templates",
]
