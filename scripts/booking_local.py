#!/usr/bin/env python3
"""
Local walkthrough of the booking lifecycle (no HTTP).

Usage:
  python3 scripts/booking_local.py

What it does:
- Seeds one customer and one provider in memory
- Books a slot, shows the double-booking rejection for an overlapping slot
- Advances a manual clock past the slot and runs the cleanup sweep
"""

from __future__ import annotations

import sys
from datetime import timedelta
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from appointments.application.exceptions import AppointmentError
from appointments.application.use_cases.booking import BookingUseCase
from appointments.application.use_cases.cleanup import CleanupSweeper
from appointments.application.use_cases.queries import AppointmentQueryUseCase
from appointments.domain.entities.participant import Participant, ParticipantRole
from appointments.infrastructure.clock.manual_clock import ManualClock
from appointments.infrastructure.participants.memory_directory import MemoryParticipantDirectory
from appointments.infrastructure.store.memory_store import MemoryAppointmentStore


def main() -> None:
    clock = ManualClock()
    store = MemoryAppointmentStore()
    participants = MemoryParticipantDirectory(
        [
            Participant(id=1, name="John Doe", email="john@example.com"),
            Participant(id=2, name="Dr. Smith", email="smith@example.com", role=ParticipantRole.SERVICE_PROVIDER),
        ]
    )
    booking = BookingUseCase(store=store, participants=participants, clock=clock)
    queries = AppointmentQueryUseCase(store=store, participants=participants, clock=clock)
    sweeper = CleanupSweeper(store=store, clock=clock)

    start = clock.now()
    first = booking.create(1, 2, "DOCTOR", start + timedelta(hours=24), notes="Annual check")
    view = queries.project(first)
    print(f"Booked #{view.id}: {view.customer_name} with {view.provider_name} at {view.scheduled_at} [{view.status.value}]")

    try:
        booking.create(1, 2, "DOCTOR", start + timedelta(hours=24, minutes=30))
    except AppointmentError as e:
        print(f"Second booking rejected: {type(e).__name__}: {e}")

    print(f"Stats: {queries.get_statistics().to_dict()}")

    clock.advance(timedelta(hours=25))
    print(f"Clock advanced to {clock.now()}; sweep removed {sweeper.sweep()} appointment(s)")
    print(f"Stats: {queries.get_statistics().to_dict()}")


if __name__ == "__main__":
    main()
