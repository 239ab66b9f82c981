"""Domain exceptions, translated to HTTP responses at the route boundary."""

from __future__ import annotations


class BookingNotFoundError(LookupError):
    def __init__(self, booking_id: str) -> None:
        super().__init__(f"Booking {booking_id} not found")
        self.booking_id = booking_id


class BookingConflictError(Exception):
    """Raised when a candidate booking overlaps one or more stored bookings."""

    def __init__(self, conflicting_ids: list[str]) -> None:
        super().__init__("Time slot conflicts with existing booking")
        self.conflicting_ids = conflicting_ids


class InvalidBookingWindowError(ValueError):
    def __init__(self) -> None:
        super().__init__("end_time must be after start_time")


class PictureRejectedError(ValueError):
    """Raised when an uploaded staff picture fails type or size checks."""

    def __init__(self, reason: str, status_code: int = 400) -> None:
        super().__init__(reason)
        self.status_code = status_code


class UnknownReferenceError(ValueError):
    """Raised when a booking names users or services that do not exist."""

    def __init__(self, kind: str, missing_ids: list[str]) -> None:
        super().__init__(f"Unknown {kind} id(s): {', '.join(missing_ids)}")
        self.kind = kind
        self.missing_ids = missing_ids


class ServiceInUseError(Exception):
    def __init__(self, service_id: str) -> None:
        super().__init__(
            "Cannot delete service that is used in bookings. Deactivate it instead."
        )
        self.service_id = service_id
