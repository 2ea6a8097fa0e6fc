"""ORM models used by the application infrastructure."""

from .admin import AdminModel
from .customer import CustomerModel
from .notification import NotificationModel
from .purchase_request import PurchaseRequestModel

__all__ = [
    "AdminModel",
    "CustomerModel",
    "NotificationModel",
    "PurchaseRequestModel",
]
