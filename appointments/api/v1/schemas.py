from datetime import datetime

from pydantic import BaseModel, Field

from appointments.application.dto.appointment_view import AppointmentView


class AppointmentCreateSchema(BaseModel):
    customer_id: int
    provider_id: int
    service_type: str
    scheduled_at: datetime
    notes: str | None = Field(default=None, max_length=1000)


class AppointmentUpdateSchema(BaseModel):
    service_type: str | None = None
    scheduled_at: datetime | None = None
    notes: str | None = Field(default=None, max_length=1000)


class StatusUpdateSchema(BaseModel):
    status: str


class AppointmentResponseSchema(BaseModel):
    id: int
    customer_id: int
    customer_name: str
    customer_email: str
    provider_id: int
    provider_name: str
    provider_email: str
    service_type: str
    scheduled_at: datetime
    status: str
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_view(cls, view: AppointmentView) -> "AppointmentResponseSchema":
        return cls(
            id=view.id,
            customer_id=view.customer_id,
            customer_name=view.customer_name,
            customer_email=view.customer_email,
            provider_id=view.provider_id,
            provider_name=view.provider_name,
            provider_email=view.provider_email,
            service_type=view.service_type.value,
            scheduled_at=view.scheduled_at,
            status=view.status.value,
            notes=view.notes,
            created_at=view.created_at,
            updated_at=view.updated_at,
        )


class StatisticsSchema(BaseModel):
    total: int
    pending: int
    confirmed: int
    completed: int
    cancelled: int


class CleanupResultSchema(BaseModel):
    removed: int
