"""Notifications package."""

from fintrack.notifications.builder import NotificationBuilder
from fintrack.notifications.dispatcher import (
    NotificationDeliveryError,
    NotificationDispatcher,
)

__all__ = [
    "NotificationBuilder",
    "NotificationDeliveryError",
    "NotificationDispatcher",
]
