"""
Booking Errors
Version: 1.0.0

Typed failures raised by BookingService.
Each error carries a human readable message, a machine readable code
and the HTTP status the API layer answers with.
"""


class BookingError(Exception):
    """Base class for booking operation failures."""

    code = "BOOKING_ERROR"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {
            "code": self.status_code,
            "message": self.message,
            "error": self.code
        }


class ValidationError(BookingError):
    """Input failed a field constraint. Always caller-correctable."""

    code = "VALIDATION_ERROR"
    status_code = 400


class NotFoundError(BookingError):
    """Referenced booking id does not exist."""

    code = "NOT_FOUND"
    status_code = 404


class GenerationError(BookingError):
    """Entropy source unavailable, no identifier can be produced."""

    code = "ID_GENERATION_FAILED"
    status_code = 500
