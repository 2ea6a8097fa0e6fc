"""Domain entity representing a storefront customer."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Customer:
    id: int | None
    name: str
    email: str
    phone: str | None = None
    created_at: datetime | None = None


__all__ = ["Customer"]
