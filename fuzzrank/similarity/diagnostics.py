"""Diagnostics sink for advisory messages raised while scoring."""

from __future__ import annotations

import logging
import threading
from typing import Optional

logger = logging.getLogger(__name__)


class Diagnostics:
    """Collects advisories, emitting each advisory code at most once.

    A sink is passed to the engine through ``ScoreOptions.diagnostics`` so
    callers can inspect what degraded during a call instead of relying on
    process-wide warning flags.
    """

    def __init__(
        self,
        sink_logger: Optional[logging.Logger] = None,
        level: int = logging.WARNING,
    ) -> None:
        self._logger = sink_logger or logger
        self._level = level
        self._advisories: dict[str, str] = {}
        self._lock = threading.Lock()

    def advise(self, code: str, message: str, level: Optional[int] = None) -> bool:
        """Record an advisory; returns False if ``code`` was already seen."""
        with self._lock:
            if code in self._advisories:
                return False
            self._advisories[code] = message
        self._logger.log(self._level if level is None else level, message)
        return True

    @property
    def advisories(self) -> dict[str, str]:
        with self._lock:
            return dict(self._advisories)

    def __contains__(self, code: object) -> bool:
        with self._lock:
            return code in self._advisories

    def __len__(self) -> int:
        with self._lock:
            return len(self._advisories)

    def clear(self) -> None:
        with self._lock:
            self._advisories.clear()


def advise(
    diagnostics: Optional[Diagnostics],
    code: str,
    message: str,
    level: Optional[int] = None,
) -> None:
    """Send an advisory to ``diagnostics``, or log it at DEBUG without a sink."""
    if diagnostics is None:
        logger.debug(message)
        return
    diagnostics.advise(code, message, level)
