from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from appointments.api.v1.schemas import (
    AppointmentCreateSchema,
    AppointmentResponseSchema,
    AppointmentUpdateSchema,
    StatisticsSchema,
    StatusUpdateSchema,
)
from appointments.application.exceptions import (
    AppointmentError,
    ConflictError,
    InvalidArgumentError,
    InvalidStateError,
    NotFoundError,
)
from appointments.application.use_cases.booking import BookingUseCase
from appointments.application.use_cases.queries import AppointmentQueryUseCase
from appointments.domain.entities.appointment import Appointment
from appointments.wiring.dependencies import get_booking_use_case, get_query_use_case

router = APIRouter(prefix="/appointments")
logger = logging.getLogger(__name__)

INTERNAL_ERROR_DETAIL = "Internal server error"


def http_error(exc: AppointmentError) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, (InvalidArgumentError, InvalidStateError)):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, ConflictError):
        return HTTPException(status_code=409, detail=str(exc))
    # InternalError and anything unmapped: full detail in the log, opaque to the caller.
    logger.error("Internal error (%s)", type(exc).__name__, exc_info=exc, extra={"error": str(exc)})
    return HTTPException(status_code=500, detail=INTERNAL_ERROR_DETAIL)


def _respond(queries: AppointmentQueryUseCase, appointment: Appointment) -> AppointmentResponseSchema:
    return AppointmentResponseSchema.from_view(queries.project(appointment))


def _respond_all(queries: AppointmentQueryUseCase, appointments: list[Appointment]) -> list[AppointmentResponseSchema]:
    return [AppointmentResponseSchema.from_view(v) for v in queries.project_all(appointments)]


@router.get("", response_model=list[AppointmentResponseSchema])
def list_appointments(queries: AppointmentQueryUseCase = Depends(get_query_use_case)):
    try:
        return _respond_all(queries, queries.list_all())
    except AppointmentError as e:
        raise http_error(e)


@router.post("", response_model=AppointmentResponseSchema, status_code=201)
def create_appointment(
    req: AppointmentCreateSchema,
    booking: BookingUseCase = Depends(get_booking_use_case),
    queries: AppointmentQueryUseCase = Depends(get_query_use_case),
):
    try:
        appointment = booking.create(
            customer_id=req.customer_id,
            provider_id=req.provider_id,
            service_type=req.service_type,
            scheduled_at=req.scheduled_at,
            notes=req.notes,
        )
        return _respond(queries, appointment)
    except AppointmentError as e:
        raise http_error(e)


@router.get("/search", response_model=list[AppointmentResponseSchema])
def search_appointments(
    keyword: str = Query(""),
    queries: AppointmentQueryUseCase = Depends(get_query_use_case),
):
    try:
        return _respond_all(queries, queries.search(keyword))
    except AppointmentError as e:
        raise http_error(e)


@router.get("/date-range", response_model=list[AppointmentResponseSchema])
def list_by_date_range(
    start: datetime,
    end: datetime,
    queries: AppointmentQueryUseCase = Depends(get_query_use_case),
):
    try:
        return _respond_all(queries, queries.list_by_date_range(start, end))
    except AppointmentError as e:
        raise http_error(e)


@router.get("/stats", response_model=StatisticsSchema)
def get_statistics(queries: AppointmentQueryUseCase = Depends(get_query_use_case)):
    try:
        return StatisticsSchema(**queries.get_statistics().to_dict())
    except AppointmentError as e:
        raise http_error(e)


@router.get("/status/{status}", response_model=list[AppointmentResponseSchema])
def list_by_status(status: str, queries: AppointmentQueryUseCase = Depends(get_query_use_case)):
    try:
        return _respond_all(queries, queries.list_by_status(status))
    except AppointmentError as e:
        raise http_error(e)


@router.get("/customer/{customer_id}", response_model=list[AppointmentResponseSchema])
def list_by_customer(customer_id: int, queries: AppointmentQueryUseCase = Depends(get_query_use_case)):
    try:
        return _respond_all(queries, queries.list_by_customer(customer_id))
    except AppointmentError as e:
        raise http_error(e)


@router.get("/customer/{customer_id}/upcoming", response_model=list[AppointmentResponseSchema])
def list_upcoming_by_customer(customer_id: int, queries: AppointmentQueryUseCase = Depends(get_query_use_case)):
    try:
        return _respond_all(queries, queries.list_upcoming_by_customer(customer_id))
    except AppointmentError as e:
        raise http_error(e)


@router.get("/customer/{customer_id}/past", response_model=list[AppointmentResponseSchema])
def list_past_by_customer(customer_id: int, queries: AppointmentQueryUseCase = Depends(get_query_use_case)):
    try:
        return _respond_all(queries, queries.list_past_by_customer(customer_id))
    except AppointmentError as e:
        raise http_error(e)


@router.get("/provider/{provider_id}", response_model=list[AppointmentResponseSchema])
def list_by_provider(provider_id: int, queries: AppointmentQueryUseCase = Depends(get_query_use_case)):
    try:
        return _respond_all(queries, queries.list_by_provider(provider_id))
    except AppointmentError as e:
        raise http_error(e)


@router.get("/provider/{provider_id}/upcoming", response_model=list[AppointmentResponseSchema])
def list_upcoming_by_provider(provider_id: int, queries: AppointmentQueryUseCase = Depends(get_query_use_case)):
    try:
        return _respond_all(queries, queries.list_upcoming_by_provider(provider_id))
    except AppointmentError as e:
        raise http_error(e)


@router.get("/provider/{provider_id}/past", response_model=list[AppointmentResponseSchema])
def list_past_by_provider(provider_id: int, queries: AppointmentQueryUseCase = Depends(get_query_use_case)):
    try:
        return _respond_all(queries, queries.list_past_by_provider(provider_id))
    except AppointmentError as e:
        raise http_error(e)


@router.get("/provider/{provider_id}/stats", response_model=StatisticsSchema)
def get_provider_statistics(provider_id: int, queries: AppointmentQueryUseCase = Depends(get_query_use_case)):
    try:
        return StatisticsSchema(**queries.get_provider_statistics(provider_id).to_dict())
    except AppointmentError as e:
        raise http_error(e)


@router.get("/{appointment_id}", response_model=AppointmentResponseSchema)
def get_appointment(
    appointment_id: int,
    booking: BookingUseCase = Depends(get_booking_use_case),
    queries: AppointmentQueryUseCase = Depends(get_query_use_case),
):
    try:
        return _respond(queries, booking.get_by_id(appointment_id))
    except AppointmentError as e:
        raise http_error(e)


@router.put("/{appointment_id}", response_model=AppointmentResponseSchema)
def update_appointment(
    appointment_id: int,
    req: AppointmentUpdateSchema,
    booking: BookingUseCase = Depends(get_booking_use_case),
    queries: AppointmentQueryUseCase = Depends(get_query_use_case),
):
    try:
        appointment = booking.update(
            appointment_id,
            service_type=req.service_type,
            scheduled_at=req.scheduled_at,
            notes=req.notes,
        )
        return _respond(queries, appointment)
    except AppointmentError as e:
        raise http_error(e)


@router.patch("/{appointment_id}/status", response_model=AppointmentResponseSchema)
def update_status(
    appointment_id: int,
    req: StatusUpdateSchema,
    booking: BookingUseCase = Depends(get_booking_use_case),
    queries: AppointmentQueryUseCase = Depends(get_query_use_case),
):
    try:
        return _respond(queries, booking.set_status(appointment_id, req.status))
    except AppointmentError as e:
        raise http_error(e)


@router.delete("/{appointment_id}", status_code=204)
def delete_appointment(appointment_id: int, booking: BookingUseCase = Depends(get_booking_use_case)):
    try:
        booking.delete(appointment_id)
    except AppointmentError as e:
        raise http_error(e)
    return Response(status_code=204)
