"""
Authorization policy

A capability check of the caller's role and identity against the resource,
evaluated by services before any mutation.
"""

import logging
from enum import Enum
from typing import Optional

from .errors import Unauthorized
from .models import Booking, User, Venue

logger = logging.getLogger(__name__)


class Operation(str, Enum):
    VIEW_BOOKING = "view this booking"
    CONFIRM_BOOKING = "confirm this booking"
    REJECT_BOOKING = "reject this booking"
    COMPLETE_BOOKING = "complete this booking"
    CANCEL_BOOKING = "cancel this booking"
    DELETE_BOOKING = "delete this booking"
    VIEW_VENDOR_BOOKINGS = "view these bookings"
    VIEW_VENDOR_STATS = "view these statistics"
    VIEW_VENUE_BOOKINGS = "view bookings for this venue"
    MANAGE_VENUE = "manage this venue"
    PUBLISH_VENUE = "change the publication status of this venue"


_BOOKING_OWNER_OPS = {Operation.VIEW_BOOKING, Operation.CANCEL_BOOKING, Operation.DELETE_BOOKING}
_BOOKING_VENDOR_OPS = {
    Operation.VIEW_BOOKING,
    Operation.CONFIRM_BOOKING,
    Operation.REJECT_BOOKING,
    Operation.COMPLETE_BOOKING,
}
_VENDOR_SELF_OPS = {Operation.VIEW_VENDOR_BOOKINGS, Operation.VIEW_VENDOR_STATS}
_VENUE_OWNER_OPS = {Operation.VIEW_VENUE_BOOKINGS, Operation.MANAGE_VENUE}


def can(
    operation: Operation,
    caller: User,
    booking: Optional[Booking] = None,
    venue: Optional[Venue] = None,
    vendor_id: Optional[int] = None,
) -> bool:
    """Return True if ``caller`` may perform ``operation`` on the given resource"""
    if caller.is_admin:
        return True

    if booking is not None:
        if operation in _BOOKING_OWNER_OPS and booking.user_id == caller.id:
            return True
        if operation in _BOOKING_VENDOR_OPS and booking.vendor_id == caller.id:
            return True
        return False

    if venue is not None and operation in _VENUE_OWNER_OPS:
        return venue.vendor_id == caller.id

    if vendor_id is not None and operation in _VENDOR_SELF_OPS:
        return vendor_id == caller.id

    return False


def authorize(
    operation: Operation,
    caller: User,
    booking: Optional[Booking] = None,
    venue: Optional[Venue] = None,
    vendor_id: Optional[int] = None,
) -> None:
    """Raise Unauthorized unless ``can`` allows the operation"""
    if not can(operation, caller, booking=booking, venue=venue, vendor_id=vendor_id):
        logger.warning(f"⚠️ User {caller.id} ({caller.role}) not allowed to {operation.value}")
        raise Unauthorized(f"You are not authorized to {operation.value}")
