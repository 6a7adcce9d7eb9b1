from __future__ import annotations

from datetime import datetime, timedelta

from appointments.application.ports.appointment_store import AppointmentStorePort
from appointments.domain.entities.appointment import Appointment


class ConflictChecker:
    def __init__(self, store: AppointmentStorePort) -> None:
        self._store = store

    def find_conflicts(
        self,
        provider_id: int,
        proposed_time: datetime,
        window_before: timedelta,
        window_after: timedelta,
    ) -> list[Appointment]:
        """Non-cancelled appointments of the provider inside the inclusive window."""
        candidates = self._store.find_between(
            proposed_time - window_before,
            proposed_time + window_after,
            provider_id=provider_id,
        )
        return [a for a in candidates if not a.is_cancelled]

    def has_conflict(
        self,
        provider_id: int,
        proposed_time: datetime,
        window_before: timedelta,
        window_after: timedelta,
    ) -> bool:
        return bool(self.find_conflicts(provider_id, proposed_time, window_before, window_after))
