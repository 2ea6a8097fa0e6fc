"""Shared fixtures: a throwaway SQLite database and seeded collaborators."""

from __future__ import annotations

import os
import sys
from datetime import timedelta
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

TEST_DB_PATH = Path(__file__).parent / "test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["APP_TIMEZONE"] = "UTC"
os.environ["MAINTENANCE_INTERVAL_SECONDS"] = "0"
os.environ.pop("SENDGRID_API_KEY", None)
os.environ.pop("SENDGRID_SENDER", None)

from hathak.domain.entities import Admin, Customer, Notification, NotificationAction, PurchaseRequest  # noqa: E402
from hathak.infrastructure import database  # noqa: E402
from hathak.infrastructure.repositories import (  # noqa: E402
    AdminRepository,
    CustomerRepository,
    NotificationRepository,
    PurchaseRequestRepository,
)
from hathak.utils import now_in_app_timezone  # noqa: E402


@pytest.fixture(autouse=True)
def setup_database():
    """Recreate every table before each test."""

    from hathak.infrastructure import models  # noqa: F401

    database.Base.metadata.drop_all(bind=database.engine, checkfirst=True)
    database.Base.metadata.create_all(bind=database.engine)
    yield
    database.engine.dispose()


def pytest_sessionfinish(session, exitstatus):
    if TEST_DB_PATH.exists():
        TEST_DB_PATH.unlink()


@pytest.fixture()
def db_session():
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def customer(db_session) -> Customer:
    return CustomerRepository(db_session).create(
        Customer(id=None, name="Jane Doe", email="jane@example.com", phone="+15550100")
    )


@pytest.fixture()
def admins(db_session) -> list[Admin]:
    repository = AdminRepository(db_session)
    active = [
        repository.create(Admin(id=None, name="Alice Admin", email="alice@hathak.test")),
        repository.create(Admin(id=None, name="Bob Admin", email="bob@hathak.test")),
    ]
    repository.create(
        Admin(id=None, name="Retired Admin", email="retired@hathak.test", is_active=False)
    )
    return active


@pytest.fixture()
def purchase_request(db_session, customer, admins) -> PurchaseRequest:
    return PurchaseRequestRepository(db_session).create(
        PurchaseRequest(
            id=None,
            request_number="R-100",
            customer_id=customer.id,
            customer_name=customer.name,
            status="pending",
            last_modified_by_admin_id=admins[0].id,
        )
    )


@pytest.fixture()
def make_notification(db_session, purchase_request):
    """Return a factory storing notifications for the seeded request."""

    repository = NotificationRepository(db_session)

    def _make(**overrides) -> Notification:
        now = now_in_app_timezone()
        values = {
            "id": None,
            "event_type": "request_approved",
            "request_id": purchase_request.id,
            "recipient_id": purchase_request.customer_id,
            "recipient_type": "user",
            "title": "Request Approved!",
            "message": "Your request #R-100 has been approved.",
            "priority": "high",
            "channels": ["in_app"],
            "actions": [NotificationAction(label="View", action="view", url="/requests")],
            "metadata": {"requestNumber": "R-100"},
            "scheduled_for": now,
            "expires_at": now + timedelta(days=30),
            "created_at": now,
        }
        values.update(overrides)
        return repository.create(Notification(**values))

    return _make
