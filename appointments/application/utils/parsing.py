from __future__ import annotations

from datetime import datetime, timezone

from appointments.application.exceptions import InvalidArgumentError
from appointments.domain.entities.appointment import AppointmentStatus, ServiceType


def ensure_utc(value: datetime) -> datetime:
    """Naive datetimes are taken as UTC; aware ones are converted to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_service_type(value: ServiceType | str) -> ServiceType:
    if isinstance(value, ServiceType):
        return value
    normalized = str(value).strip().upper()
    try:
        return ServiceType(normalized)
    except ValueError:
        allowed = ", ".join(s.value for s in ServiceType)
        raise InvalidArgumentError(f"Unknown service type '{value}'. Allowed: {allowed}") from None


def parse_status(value: AppointmentStatus | str) -> AppointmentStatus:
    if isinstance(value, AppointmentStatus):
        return value
    normalized = str(value).strip().upper()
    try:
        return AppointmentStatus(normalized)
    except ValueError:
        allowed = ", ".join(s.value for s in AppointmentStatus)
        raise InvalidArgumentError(f"Unknown status '{value}'. Allowed: {allowed}") from None
