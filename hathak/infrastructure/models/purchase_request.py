"""SQLAlchemy model for "Buy For Me" purchase requests."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from hathak.infrastructure.database import Base
from hathak.utils import now_in_app_naive_datetime


class PurchaseRequestModel(Base):
    """Database representation of a purchase request."""

    __tablename__ = "purchase_request"

    id = Column(Integer, primary_key=True, index=True)
    request_number = Column(String(20), nullable=False, unique=True, index=True)
    customer_id = Column(Integer, ForeignKey("customer.id"), nullable=False, index=True)
    customer_name = Column(String(120), nullable=False)
    status = Column(String(40), nullable=False, default="pending")
    last_modified_by_admin_id = Column(Integer, ForeignKey("admin.id"), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)

    customer = relationship("CustomerModel", lazy="joined")
    last_modified_by_admin = relationship("AdminModel", lazy="joined")


__all__ = ["PurchaseRequestModel"]
