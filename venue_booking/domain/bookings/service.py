"""Booking service - the booking lifecycle engine"""

import logging
import secrets
import string
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...config import BOOKING_CODE_MAX_ATTEMPTS, DEFAULT_CURRENCY
from ...errors import (
    BookingNotFound,
    CapacityExceeded,
    InvalidStateTransition,
    InvalidUnitPrice,
    SlotAlreadyBooked,
)
from ...models import TERMINAL_STATUSES, Booking, BookingStatus, User
from ...policy import Operation, authorize
from ...utils.sanitization import sanitize_string, sanitize_text
from ..scheduling import SlotCalendar, TimeSlot, resolve_booking_date, resolve_slot
from ..venues.service import VenueCatalog
from .repository import BookingRepository
from .schemas import BookingCreate, BookingPage, BookingResponse

logger = logging.getLogger(__name__)

BOOKING_CODE_ALPHABET = string.ascii_uppercase + string.digits
BOOKING_CODE_SUFFIX_LENGTH = 4
SLOT_DURATION_HOURS = 2.0


def generate_booking_code(on: Optional[date] = None) -> str:
    """Generate a booking code of the form BK-YYYYMMDD-XXXX"""
    on = on or date.today()
    suffix = "".join(secrets.choice(BOOKING_CODE_ALPHABET) for _ in range(BOOKING_CODE_SUFFIX_LENGTH))
    return f"BK-{on.strftime('%Y%m%d')}-{suffix}"


def slot_taken_message(slot: TimeSlot) -> str:
    return f"Time slot {slot.label} is already booked for this date. Please choose another slot."


class BookingService:
    """Service layer for booking creation, status transitions and listings"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = BookingRepository()
        self.catalog = VenueCatalog(db)
        self.calendar = SlotCalendar(db)

    # ========================================================================
    # CREATE
    # ========================================================================

    def create_booking(self, data: BookingCreate, user: User) -> Booking:
        """
        Create a PENDING booking for one slot of one venue day.

        Checks run in a fixed order and the first failure wins: venue, date,
        slot, slot occupancy, unit price, capacity. The venue booking counter
        is incremented in the same transaction as the insert.
        """
        logger.info(f"📥 Creating booking for user_id: {user.id}, venue_id: {data.venueId}")

        venue = self.catalog.get_bookable_venue(data.venueId)
        booking_date = resolve_booking_date(data.bookingDate, data.bookingDateTime)
        slot = resolve_slot(data.slotIndex, data.startTime, data.bookingDateTime)

        if self.calendar.is_occupied(venue.id, booking_date, slot.index):
            logger.warning(f"⚠️ Slot {slot.index} of venue {venue.id} on {booking_date} already booked")
            raise SlotAlreadyBooked(slot_taken_message(slot))

        unit_price = data.unitPrice if data.unitPrice is not None else venue.price
        if unit_price is None or Decimal(unit_price) <= 0:
            raise InvalidUnitPrice("Unit price must be greater than 0")
        unit_price = Decimal(unit_price)

        if data.guestCount is not None and venue.capacity is not None and data.guestCount > venue.capacity:
            raise CapacityExceeded(
                f"Number of guests ({data.guestCount}) exceeds venue capacity ({venue.capacity})"
            )

        total_amount = unit_price * max(data.guestCount or 0, 1)
        discount_amount = data.discountAmount or Decimal("0")

        booking_data = {
            "user_id": user.id,
            "vendor_id": venue.vendor_id,
            "venue_id": venue.id,
            "customer_name": sanitize_string(data.customerName.strip()),
            "customer_phone": data.customerPhone,
            "customer_email": data.customerEmail,
            "booking_date": booking_date,
            "slot_index": slot.index,
            "start_time": slot.start_time,
            "end_time": slot.end_time,
            "duration_hours": SLOT_DURATION_HOURS,
            "guest_count": data.guestCount,
            "unit_price": unit_price,
            "total_amount": total_amount,
            "deposit_amount": data.depositAmount if data.depositAmount is not None else Decimal("0"),
            "discount_amount": discount_amount,
            "final_amount": total_amount - discount_amount,
            "currency": (data.currency or DEFAULT_CURRENCY).upper(),
            "additional_services": sanitize_text(data.additionalServices),
            "special_requests": sanitize_text(data.specialRequests),
            "notes": sanitize_text(data.notes),
            "status": BookingStatus.PENDING.value,
        }

        venue_id = venue.id
        for attempt in range(1, BOOKING_CODE_MAX_ATTEMPTS + 1):
            booking_code = generate_booking_code()
            try:
                booking = self.repo.add_booking(self.db, booking_code=booking_code, **booking_data)
                self.catalog.increment_booking_count(venue_id)
                self.db.commit()
            except IntegrityError as e:
                self.db.rollback()
                # The partial unique index caught a concurrent booking of the same slot
                if self.calendar.is_occupied(venue_id, booking_date, slot.index):
                    logger.warning(
                        f"⚠️ Concurrent booking detected for venue {venue_id}, {booking_date}, slot {slot.index}"
                    )
                    raise SlotAlreadyBooked(slot_taken_message(slot)) from e
                if not self.repo.code_exists(self.db, booking_code):
                    raise
                logger.warning(f"🔁 Booking code collision on {booking_code} (attempt {attempt})")
                continue

            self.db.refresh(booking)
            logger.info(
                f"✅ Booking {booking.booking_code} created: venue {venue_id}, {booking_date}, {slot.label}"
            )
            return booking

        logger.error(f"❌ Could not allocate a unique booking code after {BOOKING_CODE_MAX_ATTEMPTS} attempts")
        raise HTTPException(status_code=503, detail="Could not allocate a booking code. Please try again.")

    # ========================================================================
    # READ
    # ========================================================================

    def _load(self, booking_id: int) -> Booking:
        booking = self.repo.get_booking(self.db, booking_id)
        if not booking:
            raise BookingNotFound(f"Booking not found with id: {booking_id}")
        return booking

    def get_booking(self, booking_id: int, user: User) -> Booking:
        booking = self._load(booking_id)
        authorize(Operation.VIEW_BOOKING, user, booking=booking)
        return booking

    def build_page(self, bookings: list[Booking], total: int, page: int, size: int) -> BookingPage:
        """Wrap a listing page and enrich each booking with its venue title"""
        titles = self.catalog.venue_titles({b.venue_id for b in bookings})
        return BookingPage(
            content=[BookingResponse.from_booking(b, venue_name=titles.get(b.venue_id)) for b in bookings],
            page=page,
            size=size,
            totalElements=total,
            totalPages=(total + size - 1) // size if size else 0,
        )

    def list_my_bookings(self, user: User, page: int, size: int, sort_by: str, sort_dir: str) -> BookingPage:
        bookings, total = self.repo.list_for_user(self.db, user.id, page, size, sort_by, sort_dir)
        return self.build_page(bookings, total, page, size)

    def list_vendor_bookings(
        self,
        user: User,
        page: int,
        size: int,
        sort_by: str,
        sort_dir: str,
        vendor_id: Optional[int] = None,
        status: Optional[str] = None,
    ) -> BookingPage:
        """List bookings across a vendor's venues; admins may name any vendor"""
        vendor_id = vendor_id or user.id
        authorize(Operation.VIEW_VENDOR_BOOKINGS, user, vendor_id=vendor_id)

        if status is not None:
            status = status.upper()
            if status not in {s.value for s in BookingStatus}:
                raise HTTPException(status_code=400, detail=f"Invalid booking status: {status}")

        bookings, total = self.repo.list_for_vendor(
            self.db, vendor_id, page, size, sort_by, sort_dir, status=status
        )
        return self.build_page(bookings, total, page, size)

    def list_venue_bookings(
        self, venue_id: int, user: User, page: int, size: int, sort_by: str, sort_dir: str
    ) -> BookingPage:
        venue = self.catalog.get_venue(venue_id)
        authorize(Operation.VIEW_VENUE_BOOKINGS, user, venue=venue)
        bookings, total = self.repo.list_for_venue(self.db, venue_id, page, size, sort_by, sort_dir)
        return self.build_page(bookings, total, page, size)

    # ========================================================================
    # STATUS TRANSITIONS
    # ========================================================================

    def confirm_booking(self, booking_id: int, user: User) -> Booking:
        """PENDING → CONFIRMED; confirming an already confirmed booking is a no-op"""
        booking = self._load(booking_id)
        # A soft-deleted venue blocks vendor-side transitions
        self.catalog.get_venue(booking.venue_id)
        authorize(Operation.CONFIRM_BOOKING, user, booking=booking)

        if booking.status == BookingStatus.CONFIRMED.value:
            logger.info(f"ℹ️ Booking {booking.booking_code} already confirmed, nothing to do")
            return booking
        if booking.status != BookingStatus.PENDING.value:
            raise InvalidStateTransition(booking.status, "confirm")

        booking.status = BookingStatus.CONFIRMED.value
        booking.confirmed_by = user.id
        booking.confirmed_at = datetime.now()
        booking = self.repo.save(self.db, booking)

        logger.info(f"✅ Booking {booking.booking_code} confirmed by user {user.id}")
        return booking

    def reject_booking(self, booking_id: int, user: User, reason: Optional[str] = None) -> Booking:
        """Vendor-side refusal: PENDING or CONFIRMED → CANCELLED"""
        booking = self._load(booking_id)
        self.catalog.get_venue(booking.venue_id)
        authorize(Operation.REJECT_BOOKING, user, booking=booking)

        if booking.status not in (BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value):
            raise InvalidStateTransition(booking.status, "reject")

        self._mark_cancelled(booking, user, reason)
        booking = self.repo.save(self.db, booking)

        logger.info(f"🚫 Booking {booking.booking_code} rejected by user {user.id}")
        return booking

    def complete_booking(self, booking_id: int, user: User) -> Booking:
        booking = self._load(booking_id)
        self.catalog.get_venue(booking.venue_id)
        authorize(Operation.COMPLETE_BOOKING, user, booking=booking)

        if booking.status != BookingStatus.CONFIRMED.value:
            raise InvalidStateTransition(booking.status, "complete")

        booking.status = BookingStatus.COMPLETED.value
        booking.completed_at = datetime.now()
        booking = self.repo.save(self.db, booking)

        logger.info(f"🏁 Booking {booking.booking_code} completed")
        return booking

    def cancel_booking(self, booking_id: int, user: User, reason: Optional[str] = None) -> Booking:
        """Customer-side cancellation from any non-terminal status"""
        booking = self._load(booking_id)
        authorize(Operation.CANCEL_BOOKING, user, booking=booking)

        if booking.status in TERMINAL_STATUSES:
            raise InvalidStateTransition(booking.status, "cancel")

        self._mark_cancelled(booking, user, reason)
        booking = self.repo.save(self.db, booking)

        logger.info(f"❌ Booking {booking.booking_code} cancelled by user {user.id}")
        return booking

    def delete_booking(self, booking_id: int, user: User) -> dict:
        """Soft delete; the row stays for audit but disappears from every read"""
        booking = self._load(booking_id)
        authorize(Operation.DELETE_BOOKING, user, booking=booking)

        if booking.status == BookingStatus.COMPLETED.value:
            raise InvalidStateTransition(booking.status, "delete", "Cannot delete a completed booking")

        self.repo.soft_delete(self.db, booking)
        logger.info(f"🗑️ Booking {booking.booking_code} soft-deleted by user {user.id}")
        return {"message": "Booking deleted successfully"}

    @staticmethod
    def _mark_cancelled(booking: Booking, user: User, reason: Optional[str]) -> None:
        booking.status = BookingStatus.CANCELLED.value
        booking.cancelled_by = user.id
        booking.cancelled_at = datetime.now()
        booking.cancellation_reason = sanitize_text(reason, max_length=1000)
