"""Domain entity representing a back-office administrator."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Admin:
    """Staff account that receives admin-facing notifications while active."""

    id: int | None
    name: str
    email: str
    role: str = "admin"
    is_active: bool = True
    created_at: datetime | None = None


__all__ = ["Admin"]
