class AppointmentError(Exception):
    """Base class for failures surfaced by the booking core."""
    pass


class NotFoundError(AppointmentError):
    """Raised when a referenced appointment or participant does not exist."""
    pass


class InvalidArgumentError(AppointmentError):
    """Raised for malformed or out-of-domain input (past time, unknown enum value)."""
    pass


class InvalidStateError(AppointmentError):
    """Raised when a participant or appointment is in the wrong state for the operation."""
    pass


class ConflictError(AppointmentError):
    """Raised when a business rule is violated, e.g. a double booking."""
    pass


class InternalError(AppointmentError):
    """Raised for unexpected failures. The message is never shown to callers."""
    pass


class StoreError(InternalError):
    """Raised when the persistence adapter fails (I/O, corrupted data)."""
    pass
