"""Tests for environment-driven settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from hathak.config import Settings


def test_defaults() -> None:
    settings = Settings(database_url="sqlite://")

    assert settings.app_timezone == "UTC"
    assert settings.notification_ttl_days == 30
    assert settings.maintenance_interval_seconds == 0
    assert settings.email_enabled is False


def test_sendgrid_credentials_must_be_paired() -> None:
    with pytest.raises(ValidationError):
        Settings(database_url="sqlite://", sendgrid_api_key="SG.fake")

    settings = Settings(
        database_url="sqlite://",
        sendgrid_api_key="SG.fake",
        sendgrid_sender="noreply@hathak.test",
    )
    assert settings.email_enabled is True


def test_ttl_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        Settings(database_url="sqlite://", notification_ttl_days=0)
