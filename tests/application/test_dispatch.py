"""Tests for the notification dispatcher."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import OperationalError

from hathak.application.use_cases.notifications import (
    NotificationDispatcher,
    dispatch_deadline_reminder,
    dispatch_request_notification,
)
from hathak.domain.entities import Admin, EventType, Notification, PurchaseRequest
from hathak.domain.errors import NotFoundError, ValidationError
from hathak.infrastructure.repositories import NotificationRepository

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class FakeRequests:
    def __init__(self, *requests: PurchaseRequest) -> None:
        self._requests = {request.id: request for request in requests}

    def get(self, request_id: int) -> PurchaseRequest | None:
        return self._requests.get(request_id)


class FakeAdmins:
    def __init__(self, count: int) -> None:
        self.admins = [
            Admin(id=100 + index, name=f"Admin {index}", email=f"a{index}@hathak.test")
            for index in range(count)
        ]
        self.calls = 0

    def list_active(self) -> list[Admin]:
        self.calls += 1
        return list(self.admins)


class FakeStore:
    def __init__(self, fail_for: set[int] | None = None) -> None:
        self.saved: list[Notification] = []
        self.rollbacks = 0
        self._fail_for = fail_for or set()

    def create(self, notification: Notification) -> Notification:
        if notification.recipient_id in self._fail_for:
            raise OperationalError("INSERT", {}, Exception("database is locked"))
        saved = replace(notification, id=len(self.saved) + 1)
        self.saved.append(saved)
        return saved

    def rollback(self) -> None:
        self.rollbacks += 1


REQUEST = PurchaseRequest(
    id=1,
    request_number="R-100",
    customer_id=7,
    customer_name="Jane Doe",
    status="approved",
)


def _dispatcher(admin_count: int = 3, store: FakeStore | None = None):
    admins = FakeAdmins(admin_count)
    store = store or FakeStore()
    dispatcher = NotificationDispatcher(
        FakeRequests(REQUEST),
        admins,
        store,
        clock=lambda: FIXED_NOW,
        ttl=timedelta(days=30),
    )
    return dispatcher, admins, store


@pytest.mark.parametrize("admin_count", [0, 1, 4])
def test_admin_only_event_fans_out_to_every_active_admin(admin_count: int) -> None:
    dispatcher, admins, _ = _dispatcher(admin_count)

    created = dispatcher.dispatch(1, "request_submitted", {})

    assert len(created) == admin_count
    assert {n.recipient_type for n in created} <= {"admin"}
    assert [n.recipient_id for n in created] == [admin.id for admin in admins.admins]


def test_user_only_event_creates_one_record_for_the_customer() -> None:
    dispatcher, admins, _ = _dispatcher(3)

    created = dispatcher.dispatch(1, EventType.REQUEST_APPROVED, {})

    assert len(created) == 1
    assert created[0].recipient_type == "user"
    assert created[0].recipient_id == 7
    assert created[0].priority == "high"


def test_payment_received_notifies_customer_and_all_admins() -> None:
    dispatcher, _, _ = _dispatcher(3)

    created = dispatcher.dispatch(1, "payment_received", {})

    assert len(created) == 4
    assert sum(1 for n in created if n.recipient_type == "user") == 1
    assert sum(1 for n in created if n.recipient_type == "admin") == 3


def test_admins_are_enumerated_on_every_dispatch() -> None:
    dispatcher, admins, _ = _dispatcher(1)

    dispatcher.dispatch(1, "items_arrived", {})
    admins.admins.append(Admin(id=999, name="New", email="new@hathak.test"))
    created = dispatcher.dispatch(1, "items_arrived", {})

    assert admins.calls == 2
    assert len(created) == 2


def test_metadata_merges_request_fields_and_caller_wins() -> None:
    dispatcher, _, _ = _dispatcher()

    created = dispatcher.dispatch(
        1,
        "items_shipped",
        {"trackingNumber": "TRK1", "customerName": "Override", "carrier": "DHL"},
    )

    metadata = created[0].metadata
    assert metadata["requestNumber"] == "R-100"
    assert metadata["customerName"] == "Override"
    assert metadata["trackingNumber"] == "TRK1"
    assert metadata["carrier"] == "DHL"
    assert "R-100" in created[0].message and "TRK1" in created[0].message


def test_records_are_scheduled_now_and_expire_after_ttl() -> None:
    dispatcher, _, _ = _dispatcher()

    created = dispatcher.dispatch(1, "request_approved")

    assert created[0].scheduled_for == FIXED_NOW
    assert created[0].created_at == FIXED_NOW
    assert created[0].expires_at == FIXED_NOW + timedelta(days=30)
    assert created[0].delivered is False
    assert created[0].read is False


def test_missing_request_aborts_before_any_write() -> None:
    dispatcher, admins, store = _dispatcher()

    with pytest.raises(NotFoundError):
        dispatcher.dispatch(404, "payment_received", {})

    assert store.saved == []
    assert admins.calls == 0


def test_malformed_metadata_aborts_before_any_write() -> None:
    dispatcher, _, store = _dispatcher()

    with pytest.raises(ValidationError):
        dispatcher.dispatch(1, "inspection_completed", {"passed": "maybe"})

    assert store.saved == []


def test_unknown_event_type_creates_nothing_and_warns(caplog) -> None:
    dispatcher, _, store = _dispatcher()

    with caplog.at_level("WARNING"):
        created = dispatcher.dispatch(1, "request_teleported", {})

    assert created == []
    assert store.saved == []
    assert "request_teleported" in caplog.text


def test_failed_recipient_write_does_not_stop_the_fan_out(caplog) -> None:
    store = FakeStore(fail_for={101})
    dispatcher, _, _ = _dispatcher(3, store=store)

    with caplog.at_level("ERROR"):
        created = dispatcher.dispatch(1, "payment_received", {})

    assert [n.recipient_id for n in created] == [7, 100, 102]
    assert store.rollbacks == 1
    assert "Failed to store payment_received notification for admin 101" in caplog.text


@pytest.mark.parametrize(
    ("days", "priority", "fragment"),
    [
        (0, "urgent", "Deadline is today!"),
        (1, "urgent", "Deadline in 1 day(s)"),
        (2, "high", "Deadline in 2 day(s)"),
        (3, "high", "Deadline in 3 day(s)"),
        (5, "medium", "Deadline in 5 day(s)"),
    ],
)
def test_deadline_reminder_tiers(days: int, priority: str, fragment: str) -> None:
    dispatcher, _, _ = _dispatcher()

    created = dispatcher.dispatch_deadline_reminder(1, "payment", days)

    assert len(created) == 1
    assert created[0].event_type == "deadline_reminder"
    assert created[0].priority == priority
    assert fragment in created[0].message
    assert "R-100" in created[0].message
    assert created[0].metadata["deadlineType"] == "payment"
    assert created[0].metadata["urgent"] is (priority == "urgent")


def test_deadline_reminder_rejects_negative_days() -> None:
    dispatcher, _, store = _dispatcher()

    with pytest.raises(ValidationError):
        dispatcher.dispatch_deadline_reminder(1, "payment", -1)

    assert store.saved == []


def test_deadline_reminder_for_missing_request() -> None:
    dispatcher, _, _ = _dispatcher()

    with pytest.raises(NotFoundError):
        dispatcher.dispatch_deadline_reminder(2, "payment", 1)


def test_dispatch_persists_records_in_the_database(db_session, purchase_request, admins) -> None:
    created = dispatch_request_notification(
        db_session, purchase_request.id, "payment_received", {"amount": 42}
    )

    assert len(created) == 1 + len(admins)
    stored = NotificationRepository(db_session).list_for_recipient(
        purchase_request.customer_id, "user"
    )
    assert len(stored) == 1
    assert stored[0].title == "Payment Confirmed"
    assert stored[0].metadata == {
        "requestNumber": "R-100",
        "customerName": "Jane Doe",
        "amount": 42,
    }
    assert stored[0].actions[0].style == "primary"


def test_dispatch_skips_inactive_admins(db_session, purchase_request, admins) -> None:
    created = dispatch_request_notification(db_session, purchase_request.id, "items_arrived")

    assert sorted(n.recipient_id for n in created) == sorted(admin.id for admin in admins)


def test_dispatch_deadline_reminder_in_database(db_session, purchase_request) -> None:
    created = dispatch_deadline_reminder(db_session, purchase_request.id, "inspection", 0)

    assert created[0].priority == "urgent"
    assert "today" in created[0].message


def test_dispatch_for_missing_request_in_database(db_session, purchase_request) -> None:
    with pytest.raises(NotFoundError):
        dispatch_request_notification(db_session, purchase_request.id + 100, "request_approved")
