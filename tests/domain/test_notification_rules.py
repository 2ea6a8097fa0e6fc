"""Tests for the event-to-notification rule table."""

from __future__ import annotations

import pytest

from hathak.domain.entities import EventType
from hathak.domain.errors import ValidationError
from hathak.domain.notification_rules import (
    ADMIN_BUYME_URL,
    NOTIFICATION_RULES,
    USER_REQUESTS_URL,
    RequestSnapshot,
    parse_event_metadata,
    resolve_templates,
)

REQUEST = RequestSnapshot(request_number="R-100", customer_name="Jane Doe")

ADMIN_ONLY = {
    EventType.REQUEST_SUBMITTED,
    EventType.CHANGES_SUBMITTED,
    EventType.ITEMS_ARRIVED,
    EventType.INSPECTION_REQUIRED,
    EventType.PACKAGING_SELECTED,
    EventType.DELIVERY_CONFIRMED,
}


def test_rule_table_covers_every_event_type() -> None:
    assert set(NOTIFICATION_RULES) == set(EventType)
    assert len(EventType) == 19


@pytest.mark.parametrize("event_type", list(EventType))
def test_known_event_types_resolve_to_templates(event_type: EventType) -> None:
    templates = resolve_templates(event_type.value, REQUEST, {})

    assert not templates.is_empty
    if event_type is EventType.PAYMENT_RECEIVED:
        assert templates.user is not None and templates.admin is not None
    elif event_type in ADMIN_ONLY:
        assert templates.user is None and templates.admin is not None
    else:
        assert templates.user is not None and templates.admin is None


@pytest.mark.parametrize("event_type", ["", "unknown_event", "REQUEST_APPROVED", "request-approved"])
def test_unknown_event_types_resolve_to_nothing(event_type: str) -> None:
    assert resolve_templates(event_type, REQUEST, {}).is_empty


def test_templates_interpolate_request_fields() -> None:
    admin = resolve_templates(EventType.REQUEST_SUBMITTED, REQUEST).admin

    assert admin.title == "New Request Submitted"
    assert admin.message == "Request #R-100 has been submitted by Jane Doe"
    assert admin.channels == ("in_app", "email")
    assert admin.actions[0].url == f"{ADMIN_BUYME_URL}?tab=review_queue&subtab=pending"


def test_request_rejected_uses_reason_or_default() -> None:
    with_reason = resolve_templates("request_rejected", REQUEST, {"reason": "Item banned."})
    without_reason = resolve_templates("request_rejected", REQUEST, {})

    assert with_reason.user.message.endswith("Item banned.")
    assert without_reason.user.message.endswith("Please review and resubmit.")


def test_items_shipped_includes_tracking_number() -> None:
    shipped = resolve_templates("items_shipped", REQUEST, {"trackingNumber": "TRK1"}).user
    unknown = resolve_templates("items_shipped", REQUEST, {}).user

    assert "R-100" in shipped.message and "TRK1" in shipped.message
    assert unknown.message.endswith("Tracking number: N/A")
    assert shipped.channels == ("in_app", "email", "sms")
    assert shipped.actions[0].url == USER_REQUESTS_URL


def test_inspection_completed_branches_on_outcome() -> None:
    passed = resolve_templates("inspection_completed", REQUEST, {"passed": True}).user
    failed = resolve_templates("inspection_completed", REQUEST, {"passed": False}).user

    assert "passed inspection" in passed.message
    assert "failed inspection" in failed.message


def test_deadline_reminder_priority_follows_urgent_flag() -> None:
    urgent = resolve_templates(
        "deadline_reminder", REQUEST, {"urgent": True, "message": "Pay now"}
    ).user
    normal = resolve_templates("deadline_reminder", REQUEST, {}).user

    assert urgent.priority == "urgent"
    assert urgent.message == "Reminder: Pay now"
    assert normal.priority == "high"
    assert "pending deadline for request #R-100" in normal.message


def test_deadline_reminder_treats_null_urgent_as_not_urgent() -> None:
    metadata = parse_event_metadata({"urgent": None, "deadlineType": "payment"})
    template = resolve_templates("deadline_reminder", REQUEST, {"urgent": None}).user

    assert metadata.urgent is None
    assert metadata.deadline_type == "payment"
    assert template.priority == "high"


def test_metadata_keeps_unknown_keys_and_accepts_aliases() -> None:
    metadata = parse_event_metadata({"trackingNumber": 123, "carrier": "DHL"})

    assert metadata.tracking_number == "123"
    assert metadata.model_extra == {"carrier": "DHL"}


@pytest.mark.parametrize("raw", [{"passed": "maybe"}, {"urgent": "very"}, ["not", "a", "mapping"]])
def test_malformed_metadata_raises_validation_error(raw) -> None:
    with pytest.raises(ValidationError):
        parse_event_metadata(raw)
