"""Domain entity representing a "Buy For Me" purchase request."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class PurchaseRequest:
    """Customer request that triggers notifications as it moves through its workflow.

    ``last_modified_by_admin_name`` is denormalised from the related admin record
    when the request is loaded.
    """

    id: int | None
    request_number: str
    customer_id: int
    customer_name: str
    status: str
    last_modified_by_admin_id: int | None = None
    last_modified_by_admin_name: str | None = None
    created_at: datetime | None = None


__all__ = ["PurchaseRequest"]
