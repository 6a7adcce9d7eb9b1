from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from appointments.application.ports.participant_directory import ParticipantDirectoryPort
from appointments.domain.entities.appointment import Appointment, AppointmentStatus, ServiceType


@dataclass(frozen=True)
class AppointmentView:
    id: int
    customer_id: int
    customer_name: str
    customer_email: str
    provider_id: int
    provider_name: str
    provider_email: str
    service_type: ServiceType
    scheduled_at: datetime
    status: AppointmentStatus
    notes: str | None
    created_at: datetime | None
    updated_at: datetime | None


def build_view(appointment: Appointment, participants: ParticipantDirectoryPort) -> AppointmentView:
    customer = participants.get_display_info(appointment.customer_id)
    provider = participants.get_display_info(appointment.provider_id)
    return AppointmentView(
        id=appointment.id,
        customer_id=appointment.customer_id,
        customer_name=customer.name if customer else "",
        customer_email=customer.email if customer else "",
        provider_id=appointment.provider_id,
        provider_name=provider.name if provider else "",
        provider_email=provider.email if provider else "",
        service_type=appointment.service_type,
        scheduled_at=appointment.scheduled_at,
        status=appointment.status,
        notes=appointment.notes,
        created_at=appointment.created_at,
        updated_at=appointment.updated_at,
    )
