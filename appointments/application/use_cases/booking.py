from __future__ import annotations

import logging
import threading
from dataclasses import replace
from datetime import datetime, timedelta

from appointments.application.exceptions import (
    ConflictError,
    InvalidArgumentError,
    InvalidStateError,
    NotFoundError,
)
from appointments.application.ports.appointment_store import AppointmentStorePort
from appointments.application.ports.clock import ClockPort
from appointments.application.ports.participant_directory import ParticipantDirectoryPort
from appointments.application.use_cases.conflict_checker import ConflictChecker
from appointments.application.utils.parsing import ensure_utc, parse_service_type, parse_status
from appointments.domain.entities.appointment import Appointment, AppointmentStatus, ServiceType
from appointments.domain.status_transitions import is_allowed_transition, is_terminal


class BookingUseCase:
    """
    Creates, reschedules, re-statuses and deletes appointments.

    The conflict check and the insert for one provider run under that
    provider's lock, so concurrent requests for the same slot cannot both
    pass the check before either is stored.
    """

    def __init__(
        self,
        store: AppointmentStorePort,
        participants: ParticipantDirectoryPort,
        clock: ClockPort,
        conflict_checker: ConflictChecker | None = None,
        conflict_window: timedelta = timedelta(hours=1),
        strict_transitions: bool = False,
    ) -> None:
        self._store = store
        self._participants = participants
        self._clock = clock
        self._conflict_checker = conflict_checker or ConflictChecker(store)
        self._conflict_window = conflict_window
        self._strict_transitions = strict_transitions
        self._provider_locks: dict[int, threading.Lock] = {}
        self._lock_lock = threading.Lock()  # guards _provider_locks
        self._logger = logging.getLogger(__name__)

    def _get_provider_lock(self, provider_id: int) -> threading.Lock:
        with self._lock_lock:
            if provider_id not in self._provider_locks:
                self._provider_locks[provider_id] = threading.Lock()
            return self._provider_locks[provider_id]

    def create(
        self,
        customer_id: int,
        provider_id: int,
        service_type: ServiceType | str,
        scheduled_at: datetime,
        notes: str | None = None,
    ) -> Appointment:
        self._logger.info("Creating appointment", extra={"customer_id": customer_id, "provider_id": provider_id})

        if not self._participants.exists(customer_id):
            raise NotFoundError(f"Customer not found with id: {customer_id}")
        if not self._participants.exists(provider_id):
            raise NotFoundError(f"Service provider not found with id: {provider_id}")
        if not self._participants.is_service_provider(provider_id):
            raise InvalidStateError("Selected user is not a service provider")

        parsed_type = parse_service_type(service_type)
        when = ensure_utc(scheduled_at)

        with self._get_provider_lock(provider_id):
            now = self._clock.now()
            self._require_future(when, now)

            conflicts = self._conflict_checker.find_conflicts(
                provider_id, when, self._conflict_window, self._conflict_window
            )
            if conflicts:
                self._logger.warning(
                    "Double booking rejected",
                    extra={"provider_id": provider_id, "appointment_id": conflicts[0].id},
                )
                raise ConflictError("Service provider already has an appointment at this time")

            saved = self._store.insert(
                Appointment(
                    customer_id=customer_id,
                    provider_id=provider_id,
                    service_type=parsed_type,
                    scheduled_at=when,
                    status=AppointmentStatus.PENDING,
                    notes=notes,
                    created_at=now,
                    updated_at=now,
                )
            )

        self._logger.info("Appointment created", extra={"appointment_id": saved.id})
        return saved

    def update(
        self,
        appointment_id: int,
        service_type: ServiceType | str | None = None,
        scheduled_at: datetime | None = None,
        notes: str | None = None,
    ) -> Appointment:
        """Partial update; None leaves a field unchanged. Does not re-check conflicts."""
        self._logger.info("Updating appointment", extra={"appointment_id": appointment_id})
        existing = self.get_by_id(appointment_id)

        parsed_type = parse_service_type(service_type) if service_type is not None else None
        when = ensure_utc(scheduled_at) if scheduled_at is not None else None

        with self._get_provider_lock(existing.provider_id):
            now = self._clock.now()
            if when is not None:
                self._require_future(when, now)

            current = self.get_by_id(appointment_id)
            if self._strict_transitions and is_terminal(current.status):
                raise InvalidStateError(f"Appointment in status {current.status.value} can no longer be modified")

            updated = replace(
                current,
                service_type=parsed_type or current.service_type,
                scheduled_at=when or current.scheduled_at,
                notes=notes if notes is not None else current.notes,
                updated_at=now,
            )
            saved = self._store.update(updated)

        if saved is None:
            raise NotFoundError(f"Appointment not found with id: {appointment_id}")
        self._logger.info("Appointment updated", extra={"appointment_id": appointment_id})
        return saved

    def set_status(self, appointment_id: int, new_status: AppointmentStatus | str) -> Appointment:
        status = parse_status(new_status)
        self._logger.info("Updating appointment status", extra={"appointment_id": appointment_id, "status": status.value})

        current = self.get_by_id(appointment_id)
        if self._strict_transitions and not is_allowed_transition(current.status, status):
            raise InvalidStateError(
                f"Cannot change status from {current.status.value} to {status.value}"
            )

        saved = self._store.update(replace(current, status=status, updated_at=self._clock.now()))
        if saved is None:
            raise NotFoundError(f"Appointment not found with id: {appointment_id}")
        return saved

    def delete(self, appointment_id: int) -> None:
        self._logger.info("Deleting appointment", extra={"appointment_id": appointment_id})
        if not self._store.delete(appointment_id):
            raise NotFoundError(f"Appointment not found with id: {appointment_id}")

    def get_by_id(self, appointment_id: int) -> Appointment:
        appointment = self._store.get(appointment_id)
        if appointment is None:
            raise NotFoundError(f"Appointment not found with id: {appointment_id}")
        return appointment

    @staticmethod
    def _require_future(when: datetime, now: datetime) -> None:
        if when <= now:
            raise InvalidArgumentError("Appointment must be scheduled for a future date")
