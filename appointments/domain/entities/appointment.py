from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class AppointmentStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class ServiceType(str, Enum):
    DOCTOR = "DOCTOR"  # Medical Consultation
    DENTIST = "DENTIST"  # Dental Check-up
    BARBER = "BARBER"  # Haircut & Styling
    SALON = "SALON"  # Beauty Services
    CONSULTANT = "CONSULTANT"  # Business Consultation
    THERAPIST = "THERAPIST"  # Therapy Session
    LAWYER = "LAWYER"  # Legal Consultation
    MECHANIC = "MECHANIC"  # Vehicle Service
    OTHER = "OTHER"


ACTIVE_STATUSES = frozenset({AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED})


@dataclass(frozen=True)
class Appointment:
    customer_id: int
    provider_id: int
    service_type: ServiceType
    scheduled_at: datetime
    status: AppointmentStatus = AppointmentStatus.PENDING
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    id: int | None = field(default=None)  # assigned by the store on insert

    @property
    def is_cancelled(self) -> bool:
        return self.status is AppointmentStatus.CANCELLED


@dataclass(frozen=True)
class AppointmentStatistics:
    total: int = 0
    pending: int = 0
    confirmed: int = 0
    completed: int = 0
    cancelled: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "pending": self.pending,
            "confirmed": self.confirmed,
            "completed": self.completed,
            "cancelled": self.cancelled,
        }
