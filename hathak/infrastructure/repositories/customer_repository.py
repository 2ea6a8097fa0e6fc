"""Persistence layer for customers."""

from __future__ import annotations

from sqlalchemy.orm import Session

from hathak.domain.entities import Customer
from hathak.infrastructure.models import CustomerModel
from hathak.utils import ensure_app_timezone


class CustomerRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, customer_id: int) -> Customer | None:
        model = self.session.get(CustomerModel, customer_id)
        return self._to_entity(model) if model else None

    def create(self, customer: Customer) -> Customer:
        model = CustomerModel(
            name=customer.name,
            email=customer.email,
            phone=customer.phone,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: CustomerModel) -> Customer:
        return Customer(
            id=model.id,
            name=model.name,
            email=model.email,
            phone=model.phone,
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["CustomerRepository"]
