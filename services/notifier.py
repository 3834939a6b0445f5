"""
Notification collaborators.

Notifications are fire-and-forget: notify() never raises into the caller.
"""

from typing import Protocol

import structlog

from models.controller import Notification, NotificationKind

logger = structlog.get_logger(__name__)


class Notifier(Protocol):
    """Anything that can show a user-facing message."""

    def notify(self, kind: NotificationKind, message: str) -> None:
        ...


class LoggingNotifier:
    """Writes notifications to the structured log."""

    def notify(self, kind: NotificationKind, message: str) -> None:
        if kind == NotificationKind.ERROR:
            logger.warning("user_notification", kind=kind.value, message=message)
        else:
            logger.info("user_notification", kind=kind.value, message=message)


class RecordingNotifier:
    """Keeps notifications in memory, in the order they fired."""

    def __init__(self):
        self.notifications: list[Notification] = []

    def notify(self, kind: NotificationKind, message: str) -> None:
        self.notifications.append(Notification(kind=kind, message=message))

    @property
    def errors(self) -> list[str]:
        return [n.message for n in self.notifications if n.kind == NotificationKind.ERROR]

    @property
    def successes(self) -> list[str]:
        return [n.message for n in self.notifications if n.kind == NotificationKind.SUCCESS]

    def clear(self) -> None:
        self.notifications.clear()
