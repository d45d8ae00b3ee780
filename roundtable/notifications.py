"""Notification sink types shared by selection, client and orchestrator."""

import logging
from collections.abc import Callable

from roundtable.models import Notification, Severity

logger = logging.getLogger(__name__)

Notifier = Callable[[Notification], None]

_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}


def null_notifier(notification: Notification) -> None:
    """Drop the notification."""


class LoggingNotifier:
    """Notifier that writes every notification to the log at its severity."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def __call__(self, notification: Notification) -> None:
        self._log.log(
            _LEVELS[notification.severity],
            "%s: %s",
            notification.title,
            notification.description,
        )
