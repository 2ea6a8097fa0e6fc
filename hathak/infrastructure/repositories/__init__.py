"""Repository implementations backed by SQLAlchemy."""

from .admin_repository import AdminRepository
from .customer_repository import CustomerRepository
from .notification_repository import NotificationRepository
from .purchase_request_repository import PurchaseRequestRepository

__all__ = [
    "AdminRepository",
    "CustomerRepository",
    "NotificationRepository",
    "PurchaseRequestRepository",
]
