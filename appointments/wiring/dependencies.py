from datetime import timedelta
from functools import lru_cache
import logging

from appointments.application.ports.appointment_store import AppointmentStorePort
from appointments.application.ports.clock import ClockPort
from appointments.application.ports.participant_directory import ParticipantDirectoryPort
from appointments.application.use_cases.booking import BookingUseCase
from appointments.application.use_cases.cleanup import CleanupSweeper
from appointments.application.use_cases.conflict_checker import ConflictChecker
from appointments.application.use_cases.queries import AppointmentQueryUseCase
from appointments.core.config import settings
from appointments.infrastructure.clock.system_clock import SystemClock
from appointments.infrastructure.participants.json_directory import JsonParticipantDirectory
from appointments.infrastructure.participants.memory_directory import MemoryParticipantDirectory
from appointments.infrastructure.scheduling.cleanup_scheduler import CleanupScheduler
from appointments.infrastructure.store.json_store import JsonAppointmentStore
from appointments.infrastructure.store.memory_store import MemoryAppointmentStore


logger = logging.getLogger(__name__)


@lru_cache
def get_clock() -> ClockPort:
    return SystemClock()


@lru_cache
def get_appointment_store() -> AppointmentStorePort:
    provider = settings.STORE_PROVIDER.lower()
    if provider == "json":
        logger.info("Using JsonAppointmentStore at %s", settings.STORE_DATA_FILE)
        return JsonAppointmentStore(data_file=settings.STORE_DATA_FILE)
    if provider != "memory":
        raise ValueError(f"Unknown STORE_PROVIDER: {settings.STORE_PROVIDER}")
    logger.info("Using MemoryAppointmentStore")
    return MemoryAppointmentStore()


@lru_cache
def get_participant_directory() -> ParticipantDirectoryPort:
    if settings.PARTICIPANTS_FILE:
        return JsonParticipantDirectory(settings.PARTICIPANTS_FILE)
    if settings.ENV.lower() not in {"dev", "local"}:
        logger.warning("PARTICIPANTS_FILE not set; participant directory is empty")
    return MemoryParticipantDirectory()


# Singleton: per-provider booking locks live on the instance.
@lru_cache
def get_booking_use_case() -> BookingUseCase:
    store = get_appointment_store()
    return BookingUseCase(
        store=store,
        participants=get_participant_directory(),
        clock=get_clock(),
        conflict_checker=ConflictChecker(store),
        conflict_window=timedelta(minutes=settings.CONFLICT_WINDOW_MINUTES),
        strict_transitions=settings.STRICT_STATUS_TRANSITIONS,
    )


@lru_cache
def get_query_use_case() -> AppointmentQueryUseCase:
    return AppointmentQueryUseCase(
        store=get_appointment_store(),
        participants=get_participant_directory(),
        clock=get_clock(),
    )


@lru_cache
def get_cleanup_sweeper() -> CleanupSweeper:
    return CleanupSweeper(store=get_appointment_store(), clock=get_clock())


@lru_cache
def get_cleanup_scheduler() -> CleanupScheduler:
    return CleanupScheduler(
        sweeper=get_cleanup_sweeper(),
        interval_seconds=settings.CLEANUP_INTERVAL_SECONDS,
    )
