from __future__ import annotations

import logging

from appointments.application.ports.appointment_store import AppointmentStorePort
from appointments.application.ports.clock import ClockPort
from appointments.domain.entities.appointment import AppointmentStatus


class CleanupSweeper:
    """Removes appointments still PENDING after their scheduled time."""

    def __init__(self, store: AppointmentStorePort, clock: ClockPort) -> None:
        self._store = store
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    def sweep(self) -> int:
        """Delete expired unconfirmed appointments. Returns how many were removed."""
        cutoff = self._clock.now()
        expired = self._store.find_by_status_before(AppointmentStatus.PENDING, cutoff)
        if not expired:
            return 0

        removed = 0
        for appointment in expired:
            try:
                # Conditional delete: skips records confirmed, rescheduled or removed since the scan.
                if self._store.delete(
                    appointment.id,
                    expected_status=AppointmentStatus.PENDING,
                    scheduled_before=cutoff,
                ):
                    removed += 1
                else:
                    self._logger.debug("Skipping appointment changed during sweep", extra={"appointment_id": appointment.id})
            except Exception as e:
                # Best-effort: one failed delete must not abort the rest of the sweep.
                self._logger.exception(
                    "Failed to delete expired appointment",
                    extra={"appointment_id": appointment.id, "error": str(e)},
                )

        if removed:
            self._logger.info("Deleted expired unconfirmed appointments", extra={"removed": removed})
        return removed

    def run_cleanup_now(self) -> int:
        """Synchronous sweep for trust-boundary events such as a login."""
        return self.sweep()
