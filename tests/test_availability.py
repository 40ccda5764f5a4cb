"""Tests for slot availability, whole-day availability and vendor statistics."""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from conftest import FUTURE_DATE, booking_request, make_venue
from venue_booking.errors import (
    CapacityExceeded,
    InvalidDate,
    SlotAlreadyBooked,
    Unauthorized,
    VenueNotFound,
)


def book(service, venue, user, slot_index, on=FUTURE_DATE, **overrides):
    return service.create_booking(
        booking_request(venue.id, slotIndex=slot_index, bookingDate=on.isoformat(), **overrides), user
    )


class TestSlotAvailability:
    def test_empty_day(self, availability, venue):
        result = availability.get_slot_availability(venue.id, FUTURE_DATE.isoformat())

        assert result.totalSlots == 4
        assert result.bookedSlots == 0
        assert result.availableSlots == 4
        assert all(slot.isAvailable for slot in result.slots)
        assert result.venueTitle == "Riverside Garden Hall"

    def test_scenario_after_booking_and_confirm(self, service, availability, venue, customer, vendor):
        booking = book(service, venue, customer, 0)
        with pytest.raises(SlotAlreadyBooked):
            book(service, venue, customer, 0)
        with pytest.raises(CapacityExceeded):
            book(service, venue, customer, 1, guestCount=60)
        service.confirm_booking(booking.id, vendor)

        result = availability.get_slot_availability(venue.id, FUTURE_DATE.isoformat())

        assert (result.totalSlots, result.bookedSlots, result.availableSlots) == (4, 1, 3)
        assert [slot.status for slot in result.slots] == ["BOOKED", "AVAILABLE", "AVAILABLE", "AVAILABLE"]
        assert result.slots[0].displayText == "10:00 - 12:00"

    def test_cancelled_bookings_do_not_count(self, service, availability, venue, customer):
        first = book(service, venue, customer, 1)
        book(service, venue, customer, 2)
        service.cancel_booking(first.id, customer)

        result = availability.get_slot_availability(venue.id, FUTURE_DATE.isoformat())

        assert result.bookedSlots == 1
        assert result.availableSlots + result.bookedSlots == result.totalSlots
        assert [s.slotIndex for s in result.slots if not s.isAvailable] == [2]

    def test_available_slots_never_negative(self, db, service, availability, vendor, customer):
        venue = make_venue(db, vendor, total_slots=2)
        for index in range(4):
            book(service, venue, customer, index)

        result = availability.get_slot_availability(venue.id, FUTURE_DATE.isoformat())

        assert result.totalSlots == 2
        assert result.bookedSlots == 4
        assert result.availableSlots == 0

    def test_past_date_rejected(self, availability, venue):
        yesterday = date.today() - timedelta(days=1)
        with pytest.raises(InvalidDate, match="past"):
            availability.get_slot_availability(venue.id, yesterday.isoformat())

    def test_malformed_date_rejected(self, availability, venue):
        with pytest.raises(InvalidDate):
            availability.get_slot_availability(venue.id, "25/12/2026")

    def test_unknown_venue(self, availability):
        with pytest.raises(VenueNotFound):
            availability.get_slot_availability(9999, FUTURE_DATE.isoformat())

    def test_time_slots_list(self, service, availability, venue, customer):
        book(service, venue, customer, 3)
        slots = availability.get_time_slots(venue.id, FUTURE_DATE.isoformat())
        assert [s.isAvailable for s in slots] == [True, True, True, False]


class TestDayAvailability:
    def test_free_day(self, availability, venue):
        assert availability.is_day_available(venue.id, FUTURE_DATE.isoformat()) is True

    def test_past_day(self, availability, venue):
        assert availability.is_day_available(venue.id, (date.today() - timedelta(days=3)).isoformat()) is False

    @pytest.mark.parametrize("clock,expected", [("09:00", False), ("10:00", True), ("18:00", True), ("20:30", False)])
    def test_working_hours(self, availability, venue, clock, expected):
        value = f"{FUTURE_DATE.isoformat()}T{clock}:00"
        assert availability.is_day_available(venue.id, value) is expected

    def test_fully_booked_day(self, service, availability, venue, customer):
        for index in range(4):
            book(service, venue, customer, index)
        assert availability.is_day_available(venue.id, FUTURE_DATE.isoformat()) is False

    def test_total_slots_limits_the_day(self, db, service, availability, vendor, customer):
        venue = make_venue(db, vendor, total_slots=1)
        book(service, venue, customer, 2)
        assert availability.is_day_available(venue.id, FUTURE_DATE.isoformat()) is False

    def test_malformed(self, availability, venue):
        with pytest.raises(InvalidDate):
            availability.is_day_available(venue.id, "tomorrow")


class TestVendorStats:
    @pytest.fixture
    def populated(self, service, venue, customer, vendor):
        today = date.today()
        pending = book(service, venue, customer, 0)
        confirmed = book(service, venue, customer, 1)
        completed = book(service, venue, customer, 2)
        cancelled = book(service, venue, customer, 3)
        today_booking = book(service, venue, customer, 0, on=today, guestCount=1)

        service.confirm_booking(confirmed.id, vendor)
        service.confirm_booking(completed.id, vendor)
        service.complete_booking(completed.id, vendor)
        service.cancel_booking(cancelled.id, customer)
        return pending, today_booking

    def test_counts(self, availability, vendor, populated):
        stats = availability.get_vendor_booking_stats(vendor.id, vendor)

        assert stats.totalBookings == 5
        assert stats.pendingCount == 2
        assert stats.confirmedCount == 1
        assert stats.completedCount == 1
        assert stats.cancelledCount == 1
        assert stats.upcomingCount == 2
        assert stats.todayCount == 1

    def test_revenue_counts_confirmed_and_completed(self, availability, vendor, populated):
        stats = availability.get_vendor_booking_stats(vendor.id, vendor)
        assert stats.totalRevenue == float(Decimal("20000000"))

    def test_deleted_bookings_excluded(self, service, availability, vendor, customer, populated):
        pending, _ = populated
        service.delete_booking(pending.id, customer)
        assert availability.get_vendor_booking_stats(vendor.id, vendor).totalBookings == 4

    def test_empty_vendor(self, availability, other_vendor):
        stats = availability.get_vendor_booking_stats(other_vendor.id, other_vendor)
        assert stats.totalBookings == 0
        assert stats.totalRevenue == 0.0

    def test_admin_may_view_any_vendor(self, availability, vendor, admin, populated):
        assert availability.get_vendor_booking_stats(vendor.id, admin).totalBookings == 5

    def test_other_vendor_may_not_view(self, availability, vendor, other_vendor):
        with pytest.raises(Unauthorized):
            availability.get_vendor_booking_stats(vendor.id, other_vendor)
