"""SQLAlchemy model for the admin table."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.sql import expression

from hathak.infrastructure.database import Base
from hathak.utils import now_in_app_naive_datetime


class AdminModel(Base):
    """Database representation of a back-office administrator."""

    __tablename__ = "admin"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False)
    email = Column(String(120), nullable=False, unique=True, index=True)
    role = Column(String(30), nullable=False, default="admin")
    is_active = Column(
        Boolean, nullable=False, default=True, server_default=expression.true()
    )
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)


__all__ = ["AdminModel"]
