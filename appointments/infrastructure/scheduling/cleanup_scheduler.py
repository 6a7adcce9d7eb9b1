from __future__ import annotations

import logging
import threading

from appointments.application.use_cases.cleanup import CleanupSweeper


class CleanupScheduler:
    """Runs CleanupSweeper.sweep() on a fixed interval in a background thread."""

    def __init__(self, sweeper: CleanupSweeper, interval_seconds: float = 3600.0) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._sweeper = sweeper
        self._interval_seconds = interval_seconds
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()
        self._last_removed: int | None = None
        self._logger = logging.getLogger(__name__)

    @property
    def is_running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    @property
    def last_removed(self) -> int | None:
        return self._last_removed

    def start(self) -> None:
        with self._lock:
            if self.is_running:
                return
            self._stop_event.clear()
            self._thread = threading.Thread(target=self._run, name="appointment-cleanup", daemon=True)
            self._thread.start()
        self._logger.info("Cleanup scheduler started (interval=%ss)", self._interval_seconds)

    def stop(self, timeout: float = 5.0) -> None:
        with self._lock:
            thread = self._thread
            self._stop_event.set()
            self._thread = None
        if thread is not None:
            thread.join(timeout)
            if thread.is_alive():
                self._logger.warning("Cleanup thread did not stop within %ss", timeout)
        self._logger.info("Cleanup scheduler stopped")

    def _run(self) -> None:
        # First sweep happens one interval after start, then on every tick.
        while not self._stop_event.wait(self._interval_seconds):
            self.run_once()

    def run_once(self) -> int | None:
        try:
            self._last_removed = self._sweeper.sweep()
        except Exception as e:
            # Keep the timer alive; the next tick retries.
            self._logger.exception("Scheduled cleanup failed", extra={"error": str(e)})
            return None
        return self._last_removed
