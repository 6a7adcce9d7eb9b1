from __future__ import annotations

from datetime import datetime, timezone

import pytest

from appointments.application.use_cases.booking import BookingUseCase
from appointments.application.use_cases.cleanup import CleanupSweeper
from appointments.application.use_cases.queries import AppointmentQueryUseCase
from appointments.domain.entities.participant import Participant, ParticipantRole
from appointments.infrastructure.clock.manual_clock import ManualClock
from appointments.infrastructure.participants.memory_directory import MemoryParticipantDirectory
from appointments.infrastructure.store.memory_store import MemoryAppointmentStore

CUSTOMER_ID = 1
PROVIDER_ID = 2
OTHER_PROVIDER_ID = 3
SECOND_CUSTOMER_ID = 4

NOW = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(NOW)


@pytest.fixture
def participants() -> MemoryParticipantDirectory:
    return MemoryParticipantDirectory(
        [
            Participant(id=CUSTOMER_ID, name="John Doe", email="john@example.com"),
            Participant(
                id=PROVIDER_ID,
                name="Dr. Smith",
                email="smith@example.com",
                role=ParticipantRole.SERVICE_PROVIDER,
            ),
            Participant(
                id=OTHER_PROVIDER_ID,
                name="Anna Barber",
                email="anna@example.com",
                role=ParticipantRole.SERVICE_PROVIDER,
            ),
            Participant(id=SECOND_CUSTOMER_ID, name="Jane Roe", email="jane@example.com"),
        ]
    )


@pytest.fixture
def store() -> MemoryAppointmentStore:
    return MemoryAppointmentStore()


@pytest.fixture
def booking(store, participants, clock) -> BookingUseCase:
    return BookingUseCase(store=store, participants=participants, clock=clock)


@pytest.fixture
def strict_booking(store, participants, clock) -> BookingUseCase:
    return BookingUseCase(store=store, participants=participants, clock=clock, strict_transitions=True)


@pytest.fixture
def queries(store, participants, clock) -> AppointmentQueryUseCase:
    return AppointmentQueryUseCase(store=store, participants=participants, clock=clock)


@pytest.fixture
def sweeper(store, clock) -> CleanupSweeper:
    return CleanupSweeper(store=store, clock=clock)
