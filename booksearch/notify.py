"""Notification boundary between the search core and the toast layer."""
import logging
from typing import Callable, List

from booksearch.models import Notification

logger = logging.getLogger(__name__)

Notifier = Callable[[Notification], None]


def log_notification(notification: Notification) -> None:
    """Default notifier: destructive messages are logged as errors."""
    if notification.variant == "destructive":
        logger.error(f"{notification.title}: {notification.description}")
    else:
        logger.info(f"{notification.title}: {notification.description}")


class NotificationLog:
    """Notifier that records every notification, e.g. for a status line."""

    def __init__(self, forward: Notifier = log_notification):
        self.forward = forward
        self.notifications: List[Notification] = []

    def __call__(self, notification: Notification) -> None:
        self.notifications.append(notification)
        self.forward(notification)

    @property
    def destructive(self) -> List[Notification]:
        return [n for n in self.notifications if n.variant == "destructive"]
