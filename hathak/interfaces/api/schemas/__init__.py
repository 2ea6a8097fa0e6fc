from .notification import (
    DeadlineReminderRequest,
    DeliverySweepResponse,
    DispatchRequest,
    MarkAllReadResponse,
    NotificationActionRead,
    NotificationPage,
    NotificationRead,
    Pagination,
    PurgeResponse,
    UnreadCountRead,
)

__all__ = [
    "DeadlineReminderRequest",
    "DeliverySweepResponse",
    "DispatchRequest",
    "MarkAllReadResponse",
    "NotificationActionRead",
    "NotificationPage",
    "NotificationRead",
    "Pagination",
    "PurgeResponse",
    "UnreadCountRead",
]
