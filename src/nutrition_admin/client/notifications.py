"""Single global notification channel for mutation outcomes."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Literal

logger = logging.getLogger(__name__)

Level = Literal["success", "error", "info"]


@dataclass(frozen=True)
class Notification:
    level: Level
    message: str


NotificationListener = Callable[[Notification], None]


@dataclass
class Notifier:
    """Collects notifications and fans them out to subscribers."""

    history: list[Notification] = field(default_factory=list)
    _listeners: list[NotificationListener] = field(default_factory=list)

    def notify(self, level: Level, message: str) -> Notification:
        """Publish a notification to every subscriber."""
        notification = Notification(level=level, message=message)
        self.history.append(notification)
        if level == "error":
            logger.warning("Notification: %s", message)
        for listener in list(self._listeners):
            listener(notification)
        return notification

    def subscribe(self, listener: NotificationListener) -> Callable[[], None]:
        """Register a listener and return a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
