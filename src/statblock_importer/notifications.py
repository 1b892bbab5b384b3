"""
One-way notification channel used to surface non-fatal import problems.
"""

import logging
from typing import Protocol

logger = logging.getLogger("statblock-importer")


class Notifier(Protocol):
    """Receives user-facing warnings."""

    def warn(self, message: str) -> None: ...


class LoggingNotifier:
    """Routes warnings to the package logger."""

    def warn(self, message: str) -> None:
        logger.warning(f"⚠️ {message}")


class RecordingNotifier:
    """Keeps every warning, optionally forwarding it to another notifier."""

    def __init__(self, forward: Notifier | None = None):
        self.messages: list[str] = []
        self._forward = forward

    def warn(self, message: str) -> None:
        self.messages.append(message)
        if self._forward is not None:
            self._forward.warn(message)
