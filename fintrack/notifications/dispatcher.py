"""
Notification dispatcher interface.

Delivery (push, e-mail, in-app socket) belongs to the surrounding
application. Flows hand every Notification they persist to a dispatcher.
"""

from abc import ABC, abstractmethod

from fintrack.models.entities import Notification


class NotificationDispatcher(ABC):
    """Receives notifications produced by the derived-state rules."""

    @abstractmethod
    def dispatch(self, notification: Notification) -> None:
        """
        Deliver a notification.

        Args:
            notification: The persisted notification record

        Raises:
            NotificationDeliveryError: If delivery fails
        """
        pass


class NotificationDeliveryError(Exception):
    """A dispatcher could not deliver a notification."""
    pass
