from __future__ import annotations

from appointments.domain.entities.appointment import AppointmentStatus

ALLOWED_TRANSITIONS: dict[AppointmentStatus, frozenset[AppointmentStatus]] = {
    AppointmentStatus.PENDING: frozenset({AppointmentStatus.CONFIRMED, AppointmentStatus.CANCELLED}),
    AppointmentStatus.CONFIRMED: frozenset({AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED}),
    AppointmentStatus.COMPLETED: frozenset(),
    AppointmentStatus.CANCELLED: frozenset(),
}


def is_terminal(status: AppointmentStatus) -> bool:
    return not ALLOWED_TRANSITIONS[status]


def is_allowed_transition(current: AppointmentStatus, new: AppointmentStatus) -> bool:
    """Re-setting the current status is always allowed."""
    if current is new:
        return True
    return new in ALLOWED_TRANSITIONS[current]
