"""Slot occupancy lookups against stored bookings"""

from datetime import date

from sqlalchemy.orm import Session

from ...models import Booking, BookingStatus


class SlotCalendar:
    """Answers which slots of a venue day are held by an active booking"""

    def __init__(self, db: Session):
        self.db = db

    def _active_bookings(self, venue_id: int, booking_date: date):
        return self.db.query(Booking).filter(
            Booking.venue_id == venue_id,
            Booking.booking_date == booking_date,
            Booking.status != BookingStatus.CANCELLED.value,
            Booking.deleted_at.is_(None),
        )

    def is_occupied(self, venue_id: int, booking_date: date, slot_index: int) -> bool:
        """True if a non-cancelled, non-deleted booking holds the slot"""
        query = self._active_bookings(venue_id, booking_date).filter(
            Booking.slot_index == slot_index
        )
        return self.db.query(query.exists()).scalar()

    def occupied_indices(self, venue_id: int, booking_date: date) -> set[int]:
        rows = self._active_bookings(venue_id, booking_date).with_entities(Booking.slot_index).all()
        return {row[0] for row in rows}

    def active_count(self, venue_id: int, booking_date: date) -> int:
        return self._active_bookings(venue_id, booking_date).count()
