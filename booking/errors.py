class BookingError(Exception):
    """Base for every failure the booking core reports to its caller."""

    status_code = 400

    def __init__(self, message: str, **details):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(BookingError):
    """Malformed or missing input; the caller should correct and resend."""

    status_code = 400


class NotFoundError(BookingError):
    """A referenced id does not resolve (item no longer available)."""

    status_code = 404


class SlotConflict(BookingError):
    """The slot was taken by another active appointment; re-fetch availability."""

    status_code = 409


class InvalidTransition(BookingError):
    """The requested status change is not allowed by the lifecycle."""

    status_code = 409
