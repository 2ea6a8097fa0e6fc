"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class NotificationActionRead(BaseModel):
    label: str
    action: str
    url: str
    style: str = "primary"


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    event_type: str = Field(..., serialization_alias="type")
    request_id: int
    recipient_id: int
    recipient_type: str
    title: str
    message: str
    priority: str
    urgency_level: str
    channels: list[str] = Field(default_factory=list)
    actions: list[NotificationActionRead] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)
    scheduled_for: datetime | None = None
    delivered: bool = False
    delivered_at: datetime | None = None
    read: bool = False
    read_at: datetime | None = None
    expires_at: datetime | None = None
    created_at: datetime | None = None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class NotificationPage(BaseModel):
    notifications: list[NotificationRead]
    pagination: Pagination


class UnreadCountRead(BaseModel):
    count: int


class MarkAllReadResponse(BaseModel):
    updated: int


class DispatchRequest(BaseModel):
    """Payload used to dispatch a purchase-request event."""

    event_type: str = Field(..., min_length=1)
    metadata: dict[str, Any] = Field(default_factory=dict)


class DeadlineReminderRequest(BaseModel):
    deadline_type: str = Field(..., min_length=1)
    days_until_deadline: int = Field(..., ge=0)


class DeliverySweepResponse(BaseModel):
    processed: int


class PurgeResponse(BaseModel):
    deleted: int


__all__ = [
    "DeadlineReminderRequest",
    "DeliverySweepResponse",
    "DispatchRequest",
    "MarkAllReadResponse",
    "NotificationActionRead",
    "NotificationPage",
    "NotificationRead",
    "Pagination",
    "PurgeResponse",
    "UnreadCountRead",
]
