"""Structured, leveled event log threaded through one generation call."""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from .models import LayoutEvent

logger = logging.getLogger(__name__)

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class EventLog:
    """Collects LayoutEvents and mirrors them to a standard logger.

    A muted log drops everything; the geometry search uses one so its
    simulated distributions do not flood the real record.
    """

    def __init__(self, log: Optional[logging.Logger] = None, muted: bool = False) -> None:
        self.events: List[LayoutEvent] = []
        self.muted = muted
        self._log = log or logger

    @classmethod
    def silent(cls) -> "EventLog":
        return cls(muted=True)

    def emit(self, level: str, code: str, message: str, **data: Any) -> None:
        if self.muted:
            return
        self.events.append(LayoutEvent(level=level, code=code, message=message, data=data))
        self._log.log(_LEVELS[level], "[%s] %s", code, message)

    def debug(self, code: str, message: str, **data: Any) -> None:
        self.emit("debug", code, message, **data)

    def info(self, code: str, message: str, **data: Any) -> None:
        self.emit("info", code, message, **data)

    def warning(self, code: str, message: str, **data: Any) -> None:
        self.emit("warning", code, message, **data)

    def error(self, code: str, message: str, **data: Any) -> None:
        self.emit("error", code, message, **data)

    def codes(self) -> List[str]:
        return [event.code for event in self.events]

    def with_code(self, code: str) -> List[LayoutEvent]:
        return [event for event in self.events if event.code == code]
