"""
Tests for the expired-appointment sweep and its background scheduler.
"""

from __future__ import annotations

import threading
from dataclasses import replace
from datetime import timedelta

import pytest

from appointments.application.exceptions import ConflictError, NotFoundError
from appointments.application.use_cases.booking import BookingUseCase
from appointments.application.use_cases.cleanup import CleanupSweeper
from appointments.domain.entities.appointment import AppointmentStatus
from appointments.infrastructure.scheduling.cleanup_scheduler import CleanupScheduler
from appointments.infrastructure.store.memory_store import MemoryAppointmentStore
from conftest import CUSTOMER_ID, NOW, OTHER_PROVIDER_ID, PROVIDER_ID, SECOND_CUSTOMER_ID


def test_dr_smith_scenario(booking, sweeper, clock):
    """Book, get rejected for the overlapping slot, let it expire, sweep it away."""
    first = booking.create(CUSTOMER_ID, PROVIDER_ID, "DOCTOR", NOW + timedelta(hours=24))
    assert first.status is AppointmentStatus.PENDING

    with pytest.raises(ConflictError):
        booking.create(CUSTOMER_ID, PROVIDER_ID, "DOCTOR", NOW + timedelta(hours=24, minutes=30))

    clock.advance(timedelta(hours=25))
    assert sweeper.sweep() == 1
    with pytest.raises(NotFoundError):
        booking.get_by_id(first.id)


def test_sweep_only_removes_expired_pending(booking, sweeper, store, clock):
    expired_pending = booking.create(CUSTOMER_ID, PROVIDER_ID, "DOCTOR", NOW + timedelta(hours=1))
    expired_confirmed = booking.create(CUSTOMER_ID, OTHER_PROVIDER_ID, "BARBER", NOW + timedelta(hours=1))
    booking.set_status(expired_confirmed.id, AppointmentStatus.CONFIRMED)
    future_pending = booking.create(SECOND_CUSTOMER_ID, PROVIDER_ID, "DOCTOR", NOW + timedelta(days=3))

    clock.advance(timedelta(hours=2))
    assert sweeper.sweep() == 1

    remaining = {a.id for a in store.list_all()}
    assert expired_pending.id not in remaining
    assert remaining == {expired_confirmed.id, future_pending.id}


def test_sweep_keeps_appointment_scheduled_exactly_now(booking, sweeper, clock):
    created = booking.create(CUSTOMER_ID, PROVIDER_ID, "DOCTOR", NOW + timedelta(hours=1))
    clock.advance(timedelta(hours=1))
    assert sweeper.sweep() == 0
    assert booking.get_by_id(created.id).status is AppointmentStatus.PENDING


def test_sweep_is_idempotent(booking, sweeper, store, clock):
    booking.create(CUSTOMER_ID, PROVIDER_ID, "DOCTOR", NOW + timedelta(hours=1))
    booking.create(CUSTOMER_ID, OTHER_PROVIDER_ID, "SALON", NOW + timedelta(days=2))
    clock.advance(timedelta(hours=3))

    assert sweeper.sweep() == 1
    snapshot = store.list_all()
    assert sweeper.sweep() == 0
    assert store.list_all() == snapshot


def test_run_cleanup_now_on_empty_store(sweeper):
    assert sweeper.run_cleanup_now() == 0


class _FlakyStore(MemoryAppointmentStore):
    """Fails to delete one specific id."""

    def __init__(self, failing_id: int) -> None:
        super().__init__()
        self._failing_id = failing_id

    def delete(self, appointment_id, expected_status=None, scheduled_before=None):
        if appointment_id == self._failing_id:
            raise RuntimeError("disk unavailable")
        return super().delete(appointment_id, expected_status, scheduled_before)


def test_sweep_continues_after_single_failure(participants, clock):
    store = _FlakyStore(failing_id=1)
    booking = BookingUseCase(store, participants, clock)
    booking.create(CUSTOMER_ID, PROVIDER_ID, "DOCTOR", NOW + timedelta(hours=1))
    booking.create(CUSTOMER_ID, OTHER_PROVIDER_ID, "DOCTOR", NOW + timedelta(hours=1))
    clock.advance(timedelta(hours=2))

    assert CleanupSweeper(store, clock).sweep() == 1
    assert [a.id for a in store.list_all()] == [1]


class _RacingStore(MemoryAppointmentStore):
    """Lets a concurrent writer act between the sweep's scan and its deletes."""

    def __init__(self) -> None:
        super().__init__()
        self.before_delete = None

    def find_by_status_before(self, status, cutoff):
        found = super().find_by_status_before(status, cutoff)
        if self.before_delete is not None:
            self.before_delete()
        return found


def test_sweep_skips_records_changed_or_removed_concurrently(participants, clock):
    store = _RacingStore()
    booking = BookingUseCase(store, participants, clock)
    confirmed_later = booking.create(CUSTOMER_ID, PROVIDER_ID, "DOCTOR", NOW + timedelta(hours=1))
    deleted_later = booking.create(CUSTOMER_ID, OTHER_PROVIDER_ID, "DOCTOR", NOW + timedelta(hours=1))
    clock.advance(timedelta(hours=2))

    def concurrent_writer():
        store.update(replace(store.get(confirmed_later.id), status=AppointmentStatus.CONFIRMED))
        store.delete(deleted_later.id)

    store.before_delete = concurrent_writer

    assert CleanupSweeper(store, clock).sweep() == 0
    assert store.get(confirmed_later.id).status is AppointmentStatus.CONFIRMED


def test_sweep_skips_records_rescheduled_concurrently(participants, clock):
    store = _RacingStore()
    booking = BookingUseCase(store, participants, clock)
    created = booking.create(CUSTOMER_ID, PROVIDER_ID, "DOCTOR", NOW + timedelta(hours=1))
    clock.advance(timedelta(hours=2))
    rescheduled_to = NOW + timedelta(days=3)

    def concurrent_writer():
        store.update(replace(store.get(created.id), scheduled_at=rescheduled_to))

    store.before_delete = concurrent_writer

    assert CleanupSweeper(store, clock).sweep() == 0
    kept = store.get(created.id)
    assert kept.status is AppointmentStatus.PENDING
    assert kept.scheduled_at == rescheduled_to


def test_scheduler_rejects_non_positive_interval(sweeper):
    with pytest.raises(ValueError):
        CleanupScheduler(sweeper, interval_seconds=0)


def test_scheduler_runs_sweeps_until_stopped(store, clock):
    swept = threading.Event()

    class _SignallingSweeper(CleanupSweeper):
        def sweep(self) -> int:
            removed = super().sweep()
            swept.set()
            return removed

    scheduler = CleanupScheduler(_SignallingSweeper(store, clock), interval_seconds=0.01)
    scheduler.start()
    try:
        assert scheduler.is_running
        assert swept.wait(timeout=2.0)
    finally:
        scheduler.stop(timeout=2.0)

    assert not scheduler.is_running
    assert scheduler.last_removed == 0


def test_scheduler_survives_failing_sweep(store, clock):
    class _BrokenSweeper(CleanupSweeper):
        def sweep(self) -> int:
            raise RuntimeError("store offline")

    scheduler = CleanupScheduler(_BrokenSweeper(store, clock), interval_seconds=60)
    assert scheduler.run_once() is None
    assert scheduler.last_removed is None


def test_scheduler_start_is_idempotent(sweeper):
    scheduler = CleanupScheduler(sweeper, interval_seconds=60)
    scheduler.start()
    try:
        first_thread = scheduler._thread
        scheduler.start()
        assert scheduler._thread is first_thread
    finally:
        scheduler.stop(timeout=2.0)
