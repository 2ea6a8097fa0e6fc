"""Integration tests for the notification API endpoints."""

from __future__ import annotations

from datetime import timedelta

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

from hathak.utils import now_in_app_timezone


@pytest.fixture()
def client():
    """Return a test client bound to a clean application instance."""

    from main import create_app

    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}


def test_dispatch_and_read_flow(client: TestClient, purchase_request, customer, admins) -> None:
    response = client.post(
        f"/requests/{purchase_request.id}/notifications",
        json={"event_type": "items_shipped", "metadata": {"trackingNumber": "TRK1"}},
    )
    assert response.status_code == 201
    created = response.json()
    assert len(created) == 1
    assert created[0]["type"] == "items_shipped"
    assert "TRK1" in created[0]["message"]
    assert created[0]["urgency_level"] == "high"

    base = f"/notifications/user/{customer.id}"
    assert client.get(f"{base}/unread-count").json() == {"count": 1}

    listing = client.get(base, params={"page": 1, "limit": 10}).json()
    assert listing["pagination"] == {"page": 1, "limit": 10, "total": 1, "pages": 1}
    notification_id = listing["notifications"][0]["id"]

    marked = client.patch(f"{base}/{notification_id}/read")
    assert marked.status_code == 200
    assert marked.json()["read"] is True
    assert client.patch(f"{base}/{notification_id}/read").status_code == 200
    assert client.get(f"{base}/unread-count").json() == {"count": 0}

    assert client.delete(f"{base}/{notification_id}").status_code == 204
    assert client.delete(f"{base}/{notification_id}").status_code == 404


def test_payment_received_fans_out_to_admins(client: TestClient, purchase_request, admins) -> None:
    response = client.post(
        f"/requests/{purchase_request.id}/notifications",
        json={"event_type": "payment_received"},
    )

    assert response.status_code == 201
    recipients = sorted((item["recipient_type"], item["recipient_id"]) for item in response.json())
    assert recipients == sorted(
        [("user", purchase_request.customer_id)] + [("admin", admin.id) for admin in admins]
    )
    first_admin = client.get(f"/notifications/admin/{admins[0].id}").json()
    assert first_admin["notifications"][0]["title"] == "Payment Received"


def test_list_filters_by_type_and_unread(client: TestClient, purchase_request, customer) -> None:
    for event_type in ("request_approved", "payment_required", "items_shipped"):
        client.post(
            f"/requests/{purchase_request.id}/notifications", json={"event_type": event_type}
        )
    base = f"/notifications/user/{customer.id}"

    by_type = client.get(base, params={"type": "payment_required"}).json()
    page_two = client.get(base, params={"page": 2, "limit": 2}).json()

    assert [item["type"] for item in by_type["notifications"]] == ["payment_required"]
    assert len(page_two["notifications"]) == 1
    assert page_two["pagination"]["pages"] == 2

    assert client.patch(f"{base}/mark-all-read").json() == {"updated": 3}
    assert client.get(base, params={"unread_only": True}).json()["notifications"] == []


def test_unknown_event_type_creates_nothing(client: TestClient, purchase_request) -> None:
    response = client.post(
        f"/requests/{purchase_request.id}/notifications", json={"event_type": "teleported"}
    )

    assert response.status_code == 201
    assert response.json() == []


def test_dispatch_error_mapping(client: TestClient, purchase_request) -> None:
    missing = client.post("/requests/9999/notifications", json={"event_type": "request_approved"})
    malformed = client.post(
        f"/requests/{purchase_request.id}/notifications",
        json={"event_type": "inspection_completed", "metadata": {"passed": "maybe"}},
    )

    assert missing.status_code == 404
    assert malformed.status_code == 400


def test_unknown_recipient_type_is_rejected(client: TestClient) -> None:
    assert client.get("/notifications/vendor/1").status_code == 422


def test_invalid_filters_are_rejected(client: TestClient, customer) -> None:
    response = client.get(f"/notifications/user/{customer.id}", params={"priority": "critical"})

    assert response.status_code == 400


def test_mark_read_of_foreign_notification_is_not_found(
    client: TestClient, purchase_request, admins
) -> None:
    created = client.post(
        f"/requests/{purchase_request.id}/notifications", json={"event_type": "request_approved"}
    ).json()

    response = client.patch(f"/notifications/admin/{admins[0].id}/{created[0]['id']}/read")

    assert response.status_code == 404


@pytest.mark.parametrize(
    ("days", "priority"),
    [(0, "urgent"), (2, "high"), (5, "medium")],
)
def test_deadline_reminders(client: TestClient, purchase_request, days: int, priority: str) -> None:
    response = client.post(
        f"/requests/{purchase_request.id}/deadline-reminders",
        json={"deadline_type": "payment", "days_until_deadline": days},
    )

    assert response.status_code == 201
    assert response.json()[0]["priority"] == priority


def test_deadline_reminder_rejects_negative_days(client: TestClient, purchase_request) -> None:
    response = client.post(
        f"/requests/{purchase_request.id}/deadline-reminders",
        json={"deadline_type": "payment", "days_until_deadline": -1},
    )

    assert response.status_code == 422


def test_dispatch_accepts_null_urgent_flag(client: TestClient, purchase_request) -> None:
    response = client.post(
        f"/requests/{purchase_request.id}/notifications",
        json={"event_type": "deadline_reminder", "metadata": {"urgent": None}},
    )

    assert response.status_code == 201
    assert response.json()[0]["priority"] == "high"


def test_maintenance_endpoints(client: TestClient, make_notification) -> None:
    now = now_in_app_timezone()
    make_notification(scheduled_for=now - timedelta(minutes=1))
    make_notification(expires_at=now - timedelta(minutes=1))

    assert client.post("/notifications/maintenance/deliver-scheduled").json() == {"processed": 1}
    assert client.post("/notifications/maintenance/deliver-scheduled").json() == {"processed": 0}
    assert client.post("/notifications/maintenance/purge-expired").json() == {"deleted": 1}
    assert client.post("/notifications/maintenance/purge-expired").json() == {"deleted": 0}


def test_websocket_init_ping_and_ack(client: TestClient, make_notification, customer) -> None:
    pending = make_notification()

    with client.websocket_connect(f"/notifications/user/{customer.id}/ws") as websocket:
        init = websocket.receive_json()
        assert init["type"] == "init"
        assert [item["id"] for item in init["data"]] == [pending.id]

        websocket.send_json({"type": "ack", "ids": [pending.id]})
        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}

    assert client.get(f"/notifications/user/{customer.id}/unread-count").json() == {"count": 0}


def test_websocket_ack_ignores_boolean_ids(
    client: TestClient, make_notification, customer
) -> None:
    pending = make_notification()
    assert pending.id == 1

    with client.websocket_connect(f"/notifications/user/{customer.id}/ws") as websocket:
        websocket.receive_json()
        websocket.send_json({"type": "ack", "ids": [True, "1", None]})
        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}

    assert client.get(f"/notifications/user/{customer.id}/unread-count").json() == {"count": 1}


def test_websocket_receives_swept_notifications(
    client: TestClient, purchase_request, customer
) -> None:
    with client.websocket_connect(f"/notifications/user/{customer.id}/ws") as websocket:
        assert websocket.receive_json() == {"type": "init", "data": []}

        client.post(
            f"/requests/{purchase_request.id}/notifications",
            json={"event_type": "request_approved"},
        )
        client.post("/notifications/maintenance/deliver-scheduled")

        pushed = websocket.receive_json()
        assert pushed["type"] == "notification"
        assert pushed["data"]["type"] == "request_approved"
        assert pushed["data"]["recipient_id"] == customer.id
