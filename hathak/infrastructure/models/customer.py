"""SQLAlchemy model for the customer table."""

from sqlalchemy import Column, DateTime, Integer, String

from hathak.infrastructure.database import Base
from hathak.utils import now_in_app_naive_datetime


class CustomerModel(Base):
    __tablename__ = "customer"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    email = Column(String(120), nullable=False, index=True)
    phone = Column(String(30), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)


__all__ = ["CustomerModel"]
