from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone

from appointments.application.ports.clock import ClockPort


class ManualClock(ClockPort):
    """Clock that only moves when told to. Used by tests and local scripts."""

    def __init__(self, start: datetime | None = None) -> None:
        self._now = start or datetime.now(timezone.utc)
        if self._now.tzinfo is None:
            self._now = self._now.replace(tzinfo=timezone.utc)
        self._lock = threading.Lock()

    def now(self) -> datetime:
        with self._lock:
            return self._now

    def advance(self, delta: timedelta) -> datetime:
        with self._lock:
            self._now = self._now + delta
            return self._now

    def set(self, value: datetime) -> None:
        with self._lock:
            self._now = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
