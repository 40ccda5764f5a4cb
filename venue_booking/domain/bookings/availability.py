"""Availability and statistics views - read-only projections of stored bookings"""

import logging
from datetime import date, time

from sqlalchemy.orm import Session

from ...errors import InvalidDate
from ...models import Booking, BookingStatus, User, Venue
from ...policy import Operation, authorize
from ...shared.validators import parse_date_param, parse_datetime_param
from ..scheduling import TIME_SLOTS, SlotCalendar
from ..scheduling.slots import within_working_hours
from ..venues.service import VenueCatalog
from .repository import BookingRepository
from .schemas import SlotAvailabilityResponse, SlotInfo, VendorBookingStatsResponse

logger = logging.getLogger(__name__)

AVAILABLE = "AVAILABLE"
BOOKED = "BOOKED"


def _parse_requested_date(value: str) -> date:
    try:
        requested = parse_date_param(value)
    except ValueError as e:
        raise InvalidDate(f"Invalid date format: {value}. Expected yyyy-MM-dd") from e
    if requested < date.today():
        raise InvalidDate("Cannot check availability for past dates")
    return requested


class AvailabilityService:
    """
    Slot availability and vendor statistics.

    Nothing here is cached; every call recomputes from live booking rows and
    the statistics queries run independently, without a shared snapshot.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = BookingRepository()
        self.catalog = VenueCatalog(db)
        self.calendar = SlotCalendar(db)

    def build_slot_availability(self, venue: Venue, booking_date: date) -> SlotAvailabilityResponse:
        """Four-slot breakdown of ``venue`` on ``booking_date``"""
        booked = self.calendar.occupied_indices(venue.id, booking_date)
        total_slots = VenueCatalog.total_slots(venue)

        slots = [
            SlotInfo(
                slotIndex=slot.index,
                startTime=slot.start_time,
                endTime=slot.end_time,
                displayText=slot.label,
                isAvailable=slot.index not in booked,
                status=BOOKED if slot.index in booked else AVAILABLE,
            )
            for slot in TIME_SLOTS
        ]
        booked_count = self.calendar.active_count(venue.id, booking_date)

        return SlotAvailabilityResponse(
            venueId=venue.id,
            venueTitle=venue.title,
            bookingDate=booking_date,
            totalSlots=total_slots,
            bookedSlots=booked_count,
            availableSlots=max(total_slots - booked_count, 0),
            slots=slots,
        )

    def get_slot_availability(self, venue_id: int, date_value: str) -> SlotAvailabilityResponse:
        venue = self.catalog.get_venue(venue_id)
        booking_date = _parse_requested_date(date_value)
        return self.build_slot_availability(venue, booking_date)

    def availability_for(self, booking: Booking) -> SlotAvailabilityResponse:
        """Availability of the day a booking belongs to, past dates included"""
        venue = self.catalog.get_venue(booking.venue_id)
        return self.build_slot_availability(venue, booking.booking_date)

    def get_time_slots(self, venue_id: int, date_value: str) -> list[SlotInfo]:
        return self.get_slot_availability(venue_id, date_value).slots

    def is_day_available(self, venue_id: int, value: str) -> bool:
        """
        Whole-day availability check.

        False for past dates and for a requested time outside working hours;
        otherwise True while the day still has a free slot.
        """
        venue = self.catalog.get_venue(venue_id)
        try:
            requested = parse_datetime_param(value)
        except ValueError as e:
            raise InvalidDate(f"Invalid date format: {value}. Expected yyyy-MM-dd or ISO date-time") from e

        if requested.date() < date.today():
            return False

        requested_time = requested.time()
        if requested_time != time(0, 0) and not within_working_hours(requested_time):
            logger.debug(f"Requested time {requested_time} is outside working hours")
            return False

        return self.calendar.active_count(venue.id, requested.date()) < VenueCatalog.total_slots(venue)

    def get_vendor_booking_stats(self, vendor_id: int, user: User) -> VendorBookingStatsResponse:
        authorize(Operation.VIEW_VENDOR_STATS, user, vendor_id=vendor_id)

        today = date.today()
        stats = VendorBookingStatsResponse(
            totalBookings=self.repo.count_for_vendor(self.db, vendor_id),
            pendingCount=self.repo.count_for_vendor(self.db, vendor_id, BookingStatus.PENDING.value),
            confirmedCount=self.repo.count_for_vendor(self.db, vendor_id, BookingStatus.CONFIRMED.value),
            cancelledCount=self.repo.count_for_vendor(self.db, vendor_id, BookingStatus.CANCELLED.value),
            completedCount=self.repo.count_for_vendor(self.db, vendor_id, BookingStatus.COMPLETED.value),
            upcomingCount=self.repo.count_upcoming_for_vendor(self.db, vendor_id, today),
            todayCount=self.repo.count_today_for_vendor(self.db, vendor_id, today),
            totalRevenue=self.repo.sum_revenue_for_vendor(self.db, vendor_id),
        )
        logger.info(f"📊 Booking stats for vendor {vendor_id}: {stats.totalBookings} total")
        return stats
