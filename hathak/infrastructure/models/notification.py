"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    JSON,
    String,
    Text,
)
from sqlalchemy.sql import expression

from hathak.infrastructure.database import Base
from hathak.utils import now_in_app_naive_datetime


class NotificationModel(Base):
    """Database representation of a per-recipient notification."""

    __tablename__ = "notification"
    __table_args__ = (
        Index("ix_notification_recipient_read", "recipient_id", "recipient_type", "read"),
    )

    id = Column(Integer, primary_key=True, index=True)
    event_type = Column("type", String(40), nullable=False, index=True)
    request_id = Column(
        Integer, ForeignKey("purchase_request.id"), nullable=False, index=True
    )
    recipient_id = Column(Integer, nullable=False)
    recipient_type = Column(String(10), nullable=False)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    priority = Column(String(10), nullable=False, default="medium")
    channels = Column(JSON, nullable=False, default=list)
    actions = Column(JSON, nullable=False, default=list)
    # ``metadata`` is reserved on declarative classes; only the column keeps the name.
    metadata_ = Column("metadata", JSON, nullable=False, default=dict)
    scheduled_for = Column(DateTime(), nullable=True, index=True)
    delivered = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    delivered_at = Column(DateTime(), nullable=True)
    read = Column(Boolean, nullable=False, default=False, server_default=expression.false())
    read_at = Column(DateTime(), nullable=True)
    expires_at = Column(DateTime(), nullable=True, index=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)


__all__ = ["NotificationModel"]
