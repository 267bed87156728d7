from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    DANGER = "danger"


@dataclass(frozen=True)
class Notification:
    message: str
    severity: Severity = Severity.INFO


NotificationListener = Callable[[Notification], None]


class NotificationCenter:
    """Fire-and-forget sink for player-facing feedback."""

    def __init__(self) -> None:
        self._pending: List[Notification] = []
        self._listeners: List[NotificationListener] = []

    def add_listener(self, listener: NotificationListener) -> None:
        self._listeners.append(listener)

    def notify(self, message: str, severity: Severity | str = Severity.INFO) -> None:
        notification = Notification(message=str(message), severity=Severity(severity))
        self._pending.append(notification)
        for listener in list(self._listeners):
            try:
                listener(notification)
            except Exception:
                logger.exception("Notification listener failed", extra={"notification": notification.message})

    def pending(self) -> List[Notification]:
        return list(self._pending)

    def drain(self) -> List[Notification]:
        drained, self._pending = self._pending, []
        return drained
