from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime

from appointments.application.dto.appointment_view import AppointmentView, build_view
from appointments.application.exceptions import InvalidArgumentError, NotFoundError
from appointments.application.ports.appointment_store import AppointmentStorePort
from appointments.application.ports.clock import ClockPort
from appointments.application.ports.participant_directory import ParticipantDirectoryPort
from appointments.application.utils.parsing import ensure_utc, parse_status
from appointments.domain.entities.appointment import (
    ACTIVE_STATUSES,
    Appointment,
    AppointmentStatistics,
    AppointmentStatus,
)


class AppointmentQueryUseCase:
    """Read-only projections over the appointment store. Nothing is cached."""

    def __init__(
        self,
        store: AppointmentStorePort,
        participants: ParticipantDirectoryPort,
        clock: ClockPort,
    ) -> None:
        self._store = store
        self._participants = participants
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    def list_all(self) -> list[Appointment]:
        # Most recent appointment first, then by customer.
        return sorted(
            self._store.list_all(),
            key=lambda a: (a.scheduled_at, a.customer_id),
            reverse=True,
        )

    def list_by_customer(self, customer_id: int) -> list[Appointment]:
        self._require_participant(customer_id, "Customer")
        return _by_id(self._store.find_by_customer(customer_id))

    def list_by_provider(self, provider_id: int) -> list[Appointment]:
        self._require_participant(provider_id, "Provider")
        return _by_id(self._store.find_by_provider(provider_id))

    def list_upcoming_by_customer(self, customer_id: int) -> list[Appointment]:
        self._require_participant(customer_id, "Customer")
        return self._upcoming(self._store.find_by_customer(customer_id))

    def list_upcoming_by_provider(self, provider_id: int) -> list[Appointment]:
        self._require_participant(provider_id, "Provider")
        return self._upcoming(self._store.find_by_provider(provider_id))

    def list_past_by_customer(self, customer_id: int) -> list[Appointment]:
        self._require_participant(customer_id, "Customer")
        return self._past(self._store.find_by_customer(customer_id))

    def list_past_by_provider(self, provider_id: int) -> list[Appointment]:
        self._require_participant(provider_id, "Provider")
        return self._past(self._store.find_by_provider(provider_id))

    def list_by_status(self, status: AppointmentStatus | str) -> list[Appointment]:
        return _by_id(self._store.find_by_status(parse_status(status)))

    def list_by_date_range(self, start: datetime, end: datetime) -> list[Appointment]:
        start_utc, end_utc = ensure_utc(start), ensure_utc(end)
        if start_utc > end_utc:
            raise InvalidArgumentError("Start of date range must not be after its end")
        return sorted(self._store.find_between(start_utc, end_utc), key=lambda a: (a.scheduled_at, a.id))

    def search(self, keyword: str) -> list[Appointment]:
        """Case-insensitive substring match on participant names, service type and notes."""
        needle = (keyword or "").strip().lower()
        results = []
        for appointment in _by_id(self._store.list_all()):
            if not needle or needle in self._search_text(appointment):
                results.append(appointment)
        return results

    def get_statistics(self) -> AppointmentStatistics:
        return _count(self._store.list_all())

    def get_provider_statistics(self, provider_id: int) -> AppointmentStatistics:
        self._require_participant(provider_id, "Provider")
        return _count(self._store.find_by_provider(provider_id))

    def project(self, appointment: Appointment) -> AppointmentView:
        return build_view(appointment, self._participants)

    def project_all(self, appointments: list[Appointment]) -> list[AppointmentView]:
        return [self.project(a) for a in appointments]

    def _require_participant(self, participant_id: int, label: str) -> None:
        if not self._participants.exists(participant_id):
            raise NotFoundError(f"{label} not found with id: {participant_id}")

    def _upcoming(self, appointments: list[Appointment]) -> list[Appointment]:
        now = self._clock.now()
        upcoming = [a for a in appointments if a.scheduled_at > now and a.status in ACTIVE_STATUSES]
        return sorted(upcoming, key=lambda a: a.scheduled_at)

    def _past(self, appointments: list[Appointment]) -> list[Appointment]:
        now = self._clock.now()
        past = [a for a in appointments if a.scheduled_at < now]
        return sorted(past, key=lambda a: a.scheduled_at, reverse=True)

    def _search_text(self, appointment: Appointment) -> str:
        customer = self._participants.get_display_info(appointment.customer_id)
        provider = self._participants.get_display_info(appointment.provider_id)
        parts = [
            customer.name if customer else "",
            provider.name if provider else "",
            appointment.service_type.value,
            appointment.notes or "",
        ]
        return "\n".join(parts).lower()


def _by_id(appointments: list[Appointment]) -> list[Appointment]:
    return sorted(appointments, key=lambda a: a.id)


def _count(appointments: list[Appointment]) -> AppointmentStatistics:
    counts = Counter(a.status for a in appointments)
    return AppointmentStatistics(
        total=len(appointments),
        pending=counts[AppointmentStatus.PENDING],
        confirmed=counts[AppointmentStatus.CONFIRMED],
        completed=counts[AppointmentStatus.COMPLETED],
        cancelled=counts[AppointmentStatus.CANCELLED],
    )
