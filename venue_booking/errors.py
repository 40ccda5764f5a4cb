"""
Booking error taxonomy

Every error is an HTTPException so services can raise it directly and FastAPI
renders it as {"detail": "..."} with the matching status code.
"""

from typing import Optional

from fastapi import HTTPException


class BookingError(HTTPException):
    """Base class for all booking-domain failures"""

    status_code = 400
    code = "BOOKING_ERROR"

    def __init__(self, detail: str, headers: Optional[dict] = None):
        super().__init__(status_code=type(self).status_code, detail=detail, headers=headers)

    def __str__(self) -> str:
        return f"{self.code}: {self.detail}"


# Venue catalog
class VenueUnavailable(BookingError):
    code = "VENUE_UNAVAILABLE"


class VenueNotFound(BookingError):
    status_code = 404
    code = "VENUE_NOT_FOUND"


# Scheduling input
class MissingBookingDate(BookingError):
    code = "MISSING_BOOKING_DATE"


class InvalidDate(BookingError):
    code = "INVALID_DATE"


class NoUsableTimeSpecified(BookingError):
    code = "NO_USABLE_TIME"


class InvalidSlotIndex(BookingError):
    code = "INVALID_SLOT_INDEX"


class NoMatchingSlot(BookingError):
    code = "NO_MATCHING_SLOT"


class UnmatchedStartTime(NoMatchingSlot):
    code = "UNMATCHED_START_TIME"


# Booking rules
class SlotAlreadyBooked(BookingError):
    status_code = 409
    code = "SLOT_ALREADY_BOOKED"


class InvalidUnitPrice(BookingError):
    code = "INVALID_UNIT_PRICE"


class CapacityExceeded(BookingError):
    code = "CAPACITY_EXCEEDED"


class BookingNotFound(BookingError):
    status_code = 404
    code = "BOOKING_NOT_FOUND"


class Unauthorized(BookingError):
    status_code = 403
    code = "UNAUTHORIZED"


class InvalidStateTransition(BookingError):
    status_code = 409
    code = "INVALID_STATE_TRANSITION"

    def __init__(self, current: str, requested: str, detail: Optional[str] = None):
        self.current = current
        self.requested = requested
        super().__init__(
            detail or f"Cannot {requested} a booking in status {current}"
        )
