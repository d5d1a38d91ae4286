"""Dispatcher module."""

from .dispatcher import (
    INotificationDispatcher,
    NotificationDispatcher,
    TickReport,
    build_batches,
    format_batch,
    is_eligible,
    item_url,
)

__all__ = [
    "INotificationDispatcher",
    "NotificationDispatcher",
    "TickReport",
    "build_batches",
    "format_batch",
    "is_eligible",
    "item_url",
]
