"""Persistence layer for administrator accounts."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from hathak.domain.entities import Admin
from hathak.infrastructure.models import AdminModel
from hathak.utils import ensure_app_timezone


class AdminRepository:
    """Provide read access to :class:`Admin` records."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_active(self) -> Sequence[Admin]:
        """Return the active administrators ordered by id."""

        query = (
            self.session.query(AdminModel)
            .filter(AdminModel.is_active.is_(True))
            .order_by(AdminModel.id.asc())
        )
        return [self._to_entity(model) for model in query.all()]

    def get(self, admin_id: int) -> Admin | None:
        model = self.session.get(AdminModel, admin_id)
        return self._to_entity(model) if model else None

    def create(self, admin: Admin) -> Admin:
        model = AdminModel(
            name=admin.name,
            email=admin.email,
            role=admin.role,
            is_active=admin.is_active,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: AdminModel) -> Admin:
        return Admin(
            id=model.id,
            name=model.name,
            email=model.email,
            role=model.role,
            is_active=bool(model.is_active),
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["AdminRepository"]
