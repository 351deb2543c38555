"""Delayed call scheduling.

The paging loop waits between pages and error messages are dismissed after
a delay. Both go through a Scheduler so the timing source can be replaced.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


class ScheduledCall(Protocol):
    """Handle to a pending delayed call."""

    def cancel(self) -> None:
        """Prevent the call from running if it has not run yet."""


class Scheduler(Protocol):
    """Runs callbacks after a delay."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        """Schedule ``callback`` to run after ``delay`` seconds."""


class ThreadingScheduler:
    """Scheduler backed by daemon ``threading.Timer`` threads."""

    def __init__(self, name: str = "moviefetch-timer") -> None:
        self.name = name

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        timer = threading.Timer(delay, self._guarded, args=(callback,))
        timer.name = self.name
        timer.daemon = True
        timer.start()
        return timer

    @staticmethod
    def _guarded(callback: Callable[[], None]) -> None:
        try:
            callback()
        except Exception:
            # Boundary: timer threads have no caller to report to
            logger.exception("Scheduled call %r failed", callback)
