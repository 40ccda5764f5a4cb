"""Booking router - FastAPI endpoints for the booking engine"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_roles
from ...config import BOOKING_RATE_LIMIT, BOOKING_RATE_WINDOW_SECONDS
from ...database import get_db
from ...models import Role, User
from ...rate_limiter import create_rate_limiter
from .availability import AvailabilityService
from .schemas import (
    BookingActionRequest,
    BookingConfirmResponse,
    BookingCreate,
    BookingPage,
    BookingResponse,
    SlotAvailabilityResponse,
    SlotInfo,
    VendorBookingStatsResponse,
)
from .service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["Bookings"])

vendor_or_admin = require_roles(Role.VENDOR, Role.ADMIN)
booking_rate_limiter = create_rate_limiter(
    limit=BOOKING_RATE_LIMIT, window_seconds=BOOKING_RATE_WINDOW_SECONDS, key_prefix="booking_create"
)


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    """Dependency injection for BookingService"""
    return BookingService(db)


def get_availability_service(db: Session = Depends(get_db)) -> AvailabilityService:
    """Dependency injection for AvailabilityService"""
    return AvailabilityService(db)


def page_params(
    page: int = Query(0, ge=0),
    size: int = Query(10, ge=1, le=100),
    sortBy: str = Query("createdAt"),
    sortDir: str = Query("desc"),
) -> dict:
    return {"page": page, "size": size, "sort_by": sortBy, "sort_dir": sortDir}


def _reason(reason: Optional[str], body: Optional[BookingActionRequest]) -> Optional[str]:
    if reason:
        return reason
    return body.reason if body else None


# ============================================================================
# CREATE
# ============================================================================


@router.post(
    "",
    response_model=BookingResponse,
    status_code=201,
    dependencies=[Depends(booking_rate_limiter)],
)
async def create_booking(
    data: BookingCreate,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Book one time slot of a venue"""
    return BookingResponse.from_booking(service.create_booking(data, current_user))


# ============================================================================
# AVAILABILITY
# ============================================================================


@router.get("/availability")
async def check_availability(
    venueId: int = Query(...),
    date: str = Query(..., description="yyyy-MM-dd or ISO-8601 date-time"),
    availability: AvailabilityService = Depends(get_availability_service),
):
    """Whole-day availability of a venue"""
    return {"venueId": venueId, "date": date, "available": availability.is_day_available(venueId, date)}


@router.get("/time-slots", response_model=list[SlotInfo])
async def get_time_slots(
    venueId: int = Query(...),
    date: str = Query(...),
    availability: AvailabilityService = Depends(get_availability_service),
):
    """The four time slots of a venue day with availability flags"""
    return availability.get_time_slots(venueId, date)


@router.get("/slot-availability", response_model=SlotAvailabilityResponse)
async def get_slot_availability(
    venueId: int = Query(...),
    date: str = Query(...),
    availability: AvailabilityService = Depends(get_availability_service),
):
    """Detailed per-slot breakdown with totals"""
    return availability.get_slot_availability(venueId, date)


# ============================================================================
# LISTINGS
# ============================================================================


@router.get("/user/my-bookings", response_model=BookingPage)
async def get_my_bookings(
    paging: dict = Depends(page_params),
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Bookings made by the caller"""
    return service.list_my_bookings(current_user, **paging)


@router.get("/vendor", response_model=BookingPage)
async def get_vendor_bookings(
    vendorId: Optional[int] = Query(None),
    paging: dict = Depends(page_params),
    current_user: User = Depends(vendor_or_admin),
    service: BookingService = Depends(get_booking_service),
):
    """Bookings across the caller's venues (admins may pass vendorId)"""
    return service.list_vendor_bookings(current_user, vendor_id=vendorId, **paging)


@router.get("/vendor/statistics", response_model=VendorBookingStatsResponse)
async def get_vendor_statistics(
    vendorId: Optional[int] = Query(None),
    current_user: User = Depends(vendor_or_admin),
    availability: AvailabilityService = Depends(get_availability_service),
):
    """Aggregate booking counts and revenue for a vendor"""
    return availability.get_vendor_booking_stats(vendorId or current_user.id, current_user)


@router.get("/vendor/{vendor_id}/status/{status}", response_model=BookingPage)
async def get_vendor_bookings_by_status(
    vendor_id: int,
    status: str,
    paging: dict = Depends(page_params),
    current_user: User = Depends(vendor_or_admin),
    service: BookingService = Depends(get_booking_service),
):
    """A vendor's bookings filtered by status"""
    return service.list_vendor_bookings(current_user, vendor_id=vendor_id, status=status, **paging)


@router.post("/vendor/{booking_id}/reject", response_model=BookingResponse)
async def vendor_reject_booking(
    booking_id: int,
    reason: Optional[str] = Query(None, max_length=1000),
    body: Optional[BookingActionRequest] = None,
    current_user: User = Depends(vendor_or_admin),
    service: BookingService = Depends(get_booking_service),
):
    """Reject a booking from the vendor dashboard"""
    return BookingResponse.from_booking(service.reject_booking(booking_id, current_user, _reason(reason, body)))


@router.get("/venue/{venue_id}", response_model=BookingPage)
async def get_venue_bookings(
    venue_id: int,
    paging: dict = Depends(page_params),
    current_user: User = Depends(vendor_or_admin),
    service: BookingService = Depends(get_booking_service),
):
    """Bookings of one venue (venue owner or admin)"""
    return service.list_venue_bookings(venue_id, current_user, **paging)


# ============================================================================
# SINGLE BOOKING
# ============================================================================


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: int,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Get a booking"""
    return BookingResponse.from_booking(service.get_booking(booking_id, current_user))


@router.api_route("/{booking_id}/confirm", methods=["POST", "PUT"], response_model=BookingConfirmResponse)
async def confirm_booking(
    booking_id: int,
    current_user: User = Depends(vendor_or_admin),
    service: BookingService = Depends(get_booking_service),
    availability: AvailabilityService = Depends(get_availability_service),
):
    """Confirm a pending booking and return the refreshed slot availability"""
    booking = service.confirm_booking(booking_id, current_user)
    return BookingConfirmResponse(
        booking=BookingResponse.from_booking(booking),
        slotAvailability=availability.availability_for(booking),
    )


@router.api_route("/{booking_id}/reject", methods=["POST", "PUT"], response_model=BookingResponse)
async def reject_booking(
    booking_id: int,
    reason: Optional[str] = Query(None, max_length=1000),
    body: Optional[BookingActionRequest] = None,
    current_user: User = Depends(vendor_or_admin),
    service: BookingService = Depends(get_booking_service),
):
    """Reject a pending or confirmed booking"""
    return BookingResponse.from_booking(service.reject_booking(booking_id, current_user, _reason(reason, body)))


@router.api_route("/{booking_id}/complete", methods=["POST", "PUT"], response_model=BookingResponse)
async def complete_booking(
    booking_id: int,
    current_user: User = Depends(vendor_or_admin),
    service: BookingService = Depends(get_booking_service),
):
    """Mark a confirmed booking as completed"""
    return BookingResponse.from_booking(service.complete_booking(booking_id, current_user))


@router.api_route("/{booking_id}/cancel", methods=["POST", "PUT"], response_model=BookingResponse)
async def cancel_booking(
    booking_id: int,
    reason: Optional[str] = Query(None, max_length=1000),
    body: Optional[BookingActionRequest] = None,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Cancel one of the caller's bookings"""
    return BookingResponse.from_booking(service.cancel_booking(booking_id, current_user, _reason(reason, body)))


@router.delete("/{booking_id}")
async def delete_booking(
    booking_id: int,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Soft delete a booking"""
    return service.delete_booking(booking_id, current_user)
