"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Iterable

from sqlalchemy import or_
from sqlalchemy.orm import Query, Session

from hathak.domain.entities import Notification, NotificationAction
from hathak.infrastructure.models import NotificationModel
from hathak.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)


class NotificationRepository:
    """Provide CRUD and read-state operations for :class:`Notification` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, notification_id: int) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel()
        self._apply_entity_to_model(model, notification)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def rollback(self) -> None:
        self.session.rollback()

    def list_for_recipient(
        self,
        recipient_id: int,
        recipient_type: str,
        *,
        now: datetime | None = None,
        limit: int | None = 50,
        skip: int = 0,
        unread_only: bool = False,
        event_type: str | None = None,
        priority: str | None = None,
    ) -> Sequence[Notification]:
        query = self._visible_query(recipient_id, recipient_type, now=now)
        if unread_only:
            query = query.filter(NotificationModel.read.is_(False))
        if event_type:
            query = query.filter(NotificationModel.event_type == event_type)
        if priority:
            query = query.filter(NotificationModel.priority == priority)
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if skip:
            query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def count_for_recipient(
        self,
        recipient_id: int,
        recipient_type: str,
        *,
        now: datetime | None = None,
        unread_only: bool = False,
    ) -> int:
        query = self._visible_query(recipient_id, recipient_type, now=now)
        if unread_only:
            query = query.filter(NotificationModel.read.is_(False))
        return query.count()

    def mark_as_read(
        self,
        notification_id: int,
        *,
        recipient_id: int,
        recipient_type: str | None = None,
    ) -> Notification | None:
        """Mark a single notification as read, keeping the first ``read_at``."""

        query = self.session.query(NotificationModel).filter(
            NotificationModel.id == notification_id,
            NotificationModel.recipient_id == recipient_id,
        )
        if recipient_type is not None:
            query = query.filter(NotificationModel.recipient_type == recipient_type)
        model = query.first()
        if model is None:
            return None
        if not model.read:
            model.read = True
            model.read_at = ensure_app_naive_datetime(now_in_app_timezone())
            self.session.add(model)
            self.session.commit()
            self.session.refresh(model)
        return self._to_entity(model)

    def mark_many_as_read(
        self,
        notification_ids: Iterable[int],
        *,
        recipient_id: int,
        recipient_type: str,
    ) -> int:
        ids = [notification_id for notification_id in notification_ids if notification_id is not None]
        if not ids:
            return 0
        updated = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.id.in_(ids),
                NotificationModel.recipient_id == recipient_id,
                NotificationModel.recipient_type == recipient_type,
                NotificationModel.read.is_(False),
            )
            .update(
                {
                    NotificationModel.read: True,
                    NotificationModel.read_at: ensure_app_naive_datetime(
                        now_in_app_timezone()
                    ),
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return updated

    def mark_all_as_read(self, recipient_id: int, recipient_type: str) -> int:
        updated = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.recipient_id == recipient_id,
                NotificationModel.recipient_type == recipient_type,
                NotificationModel.read.is_(False),
            )
            .update(
                {
                    NotificationModel.read: True,
                    NotificationModel.read_at: ensure_app_naive_datetime(
                        now_in_app_timezone()
                    ),
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return updated

    def list_due(self, *, now: datetime, limit: int | None = None) -> Sequence[Notification]:
        """Return undelivered, unexpired notifications scheduled at or before ``now``."""

        naive_now = ensure_app_naive_datetime(now)
        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.delivered.is_(False))
            .filter(
                or_(
                    NotificationModel.scheduled_for.is_(None),
                    NotificationModel.scheduled_for <= naive_now,
                )
            )
            .filter(
                or_(
                    NotificationModel.expires_at.is_(None),
                    NotificationModel.expires_at > naive_now,
                )
            )
            .order_by(NotificationModel.scheduled_for.asc(), NotificationModel.id.asc())
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def mark_as_delivered(self, notification_id: int, *, delivered_at: datetime) -> bool:
        """Flag the notification as delivered; returns ``False`` if it was already."""

        updated = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.id == notification_id,
                NotificationModel.delivered.is_(False),
            )
            .update(
                {
                    NotificationModel.delivered: True,
                    NotificationModel.delivered_at: ensure_app_naive_datetime(delivered_at),
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return bool(updated)

    def delete(
        self,
        notification_id: int,
        *,
        recipient_id: int,
        recipient_type: str | None = None,
    ) -> bool:
        query = self.session.query(NotificationModel).filter(
            NotificationModel.id == notification_id,
            NotificationModel.recipient_id == recipient_id,
        )
        if recipient_type is not None:
            query = query.filter(NotificationModel.recipient_type == recipient_type)
        deleted = query.delete(synchronize_session=False)
        self.session.commit()
        return bool(deleted)

    def delete_expired(self, *, now: datetime) -> int:
        deleted = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.expires_at < ensure_app_naive_datetime(now))
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return deleted

    def _visible_query(
        self, recipient_id: int, recipient_type: str, *, now: datetime | None
    ) -> Query:
        naive_now = ensure_app_naive_datetime(now or now_in_app_timezone())
        return (
            self.session.query(NotificationModel)
            .filter(NotificationModel.recipient_id == recipient_id)
            .filter(NotificationModel.recipient_type == recipient_type)
            .filter(
                or_(
                    NotificationModel.expires_at.is_(None),
                    NotificationModel.expires_at > naive_now,
                )
            )
        )

    @staticmethod
    def _apply_entity_to_model(model: NotificationModel, notification: Notification) -> None:
        created_at = notification.created_at or now_in_app_timezone()
        model.event_type = notification.event_type
        model.request_id = notification.request_id
        model.recipient_id = notification.recipient_id
        model.recipient_type = notification.recipient_type
        model.title = notification.title
        model.message = notification.message
        model.priority = notification.priority
        model.channels = list(notification.channels)
        model.actions = [action.to_dict() for action in notification.actions]
        model.metadata_ = dict(notification.metadata or {})
        model.scheduled_for = ensure_app_naive_datetime(
            notification.scheduled_for or created_at
        )
        model.delivered = notification.delivered
        model.delivered_at = ensure_app_naive_datetime(notification.delivered_at)
        model.read = notification.read
        model.read_at = ensure_app_naive_datetime(notification.read_at)
        model.expires_at = ensure_app_naive_datetime(notification.expires_at)
        model.created_at = ensure_app_naive_datetime(created_at)

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            event_type=model.event_type,
            request_id=model.request_id,
            recipient_id=model.recipient_id,
            recipient_type=model.recipient_type,
            title=model.title,
            message=model.message,
            priority=model.priority,
            channels=list(model.channels or []),
            actions=[NotificationAction.from_dict(item) for item in model.actions or []],
            metadata=dict(model.metadata_ or {}),
            scheduled_for=ensure_app_timezone(model.scheduled_for),
            delivered=bool(model.delivered),
            delivered_at=ensure_app_timezone(model.delivered_at),
            read=bool(model.read),
            read_at=ensure_app_timezone(model.read_at),
            expires_at=ensure_app_timezone(model.expires_at),
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["NotificationRepository"]
