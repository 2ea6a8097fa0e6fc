"""Persistence layer for purchase requests."""

from __future__ import annotations

from sqlalchemy.orm import Session, joinedload

from hathak.domain.entities import PurchaseRequest
from hathak.infrastructure.models import PurchaseRequestModel
from hathak.utils import ensure_app_naive_datetime, ensure_app_timezone


class PurchaseRequestRepository:
    """Load purchase requests together with their last editor."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, request_id: int) -> PurchaseRequest | None:
        model = (
            self.session.query(PurchaseRequestModel)
            .options(joinedload(PurchaseRequestModel.last_modified_by_admin))
            .filter(PurchaseRequestModel.id == request_id)
            .first()
        )
        return self._to_entity(model) if model else None

    def create(self, request: PurchaseRequest) -> PurchaseRequest:
        model = PurchaseRequestModel(
            request_number=request.request_number,
            customer_id=request.customer_id,
            customer_name=request.customer_name,
            status=request.status,
            last_modified_by_admin_id=request.last_modified_by_admin_id,
        )
        if request.created_at is not None:
            model.created_at = ensure_app_naive_datetime(request.created_at)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: PurchaseRequestModel) -> PurchaseRequest:
        admin = model.last_modified_by_admin
        return PurchaseRequest(
            id=model.id,
            request_number=model.request_number,
            customer_id=model.customer_id,
            customer_name=model.customer_name,
            status=model.status,
            last_modified_by_admin_id=model.last_modified_by_admin_id,
            last_modified_by_admin_name=admin.name if admin else None,
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["PurchaseRequestRepository"]
