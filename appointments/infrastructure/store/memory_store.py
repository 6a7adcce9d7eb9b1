from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime

from appointments.application.ports.appointment_store import AppointmentStorePort
from appointments.domain.entities.appointment import Appointment, AppointmentStatus


class MemoryAppointmentStore(AppointmentStorePort):
    def __init__(self) -> None:
        self._appointments: dict[int, Appointment] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def get(self, appointment_id: int) -> Appointment | None:
        with self._lock:
            return self._appointments.get(appointment_id)

    def insert(self, appointment: Appointment) -> Appointment:
        with self._lock:
            saved = replace(appointment, id=self._next_id)
            self._appointments[saved.id] = saved
            self._next_id += 1
            return saved

    def update(self, appointment: Appointment) -> Appointment | None:
        with self._lock:
            if appointment.id not in self._appointments:
                return None
            self._appointments[appointment.id] = appointment
            return appointment

    def delete(
        self,
        appointment_id: int,
        expected_status: AppointmentStatus | None = None,
        scheduled_before: datetime | None = None,
    ) -> bool:
        with self._lock:
            current = self._appointments.get(appointment_id)
            if current is None:
                return False
            if expected_status is not None and current.status is not expected_status:
                return False
            if scheduled_before is not None and not current.scheduled_at < scheduled_before:
                return False
            del self._appointments[appointment_id]
            return True

    def list_all(self) -> list[Appointment]:
        with self._lock:
            return list(self._appointments.values())
