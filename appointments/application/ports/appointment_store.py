from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from appointments.domain.entities.appointment import Appointment, AppointmentStatus


class AppointmentStorePort(ABC):
    """
    Durable keyed collection of appointments.

    Adapters must make each call atomic. The find_* queries have scan-based
    defaults built on list_all(); adapters backed by an indexed engine can
    override them.
    """

    @abstractmethod
    def get(self, appointment_id: int) -> Appointment | None:
        raise NotImplementedError

    @abstractmethod
    def insert(self, appointment: Appointment) -> Appointment:
        """Persist a new appointment. Returns it with the assigned id."""
        raise NotImplementedError

    @abstractmethod
    def update(self, appointment: Appointment) -> Appointment | None:
        """
        Replace an existing appointment.
        Returns None if the id is no longer present; never re-inserts.
        """
        raise NotImplementedError

    @abstractmethod
    def delete(
        self,
        appointment_id: int,
        expected_status: AppointmentStatus | None = None,
        scheduled_before: datetime | None = None,
    ) -> bool:
        """
        Remove an appointment. Returns False if absent.
        With expected_status, removes only while the stored status still matches.
        With scheduled_before, removes only while the stored time is still earlier.
        """
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> list[Appointment]:
        raise NotImplementedError

    def find_by_customer(self, customer_id: int) -> list[Appointment]:
        return [a for a in self.list_all() if a.customer_id == customer_id]

    def find_by_provider(self, provider_id: int) -> list[Appointment]:
        return [a for a in self.list_all() if a.provider_id == provider_id]

    def find_by_status(self, status: AppointmentStatus) -> list[Appointment]:
        return [a for a in self.list_all() if a.status is status]

    def find_between(
        self,
        start: datetime,
        end: datetime,
        provider_id: int | None = None,
    ) -> list[Appointment]:
        """Appointments with start <= scheduled_at <= end, optionally for one provider."""
        return [
            a
            for a in self.list_all()
            if start <= a.scheduled_at <= end and (provider_id is None or a.provider_id == provider_id)
        ]

    def find_by_status_before(self, status: AppointmentStatus, cutoff: datetime) -> list[Appointment]:
        """Appointments in the given status with scheduled_at strictly before cutoff."""
        return [a for a in self.list_all() if a.status is status and a.scheduled_at < cutoff]
