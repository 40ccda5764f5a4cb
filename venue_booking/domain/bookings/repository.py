"""Booking repository - Database operations for bookings"""

from datetime import date, datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from ...models import ACTIVE_STATUSES, REVENUE_STATUSES, Booking

# API sort keys → columns
SORTABLE_COLUMNS = {
    "createdAt": Booking.created_at,
    "bookingDate": Booking.booking_date,
    "finalAmount": Booking.final_amount,
    "status": Booking.status,
}
DEFAULT_SORT = "createdAt"


class BookingRepository:
    """Repository for booking database operations"""

    @staticmethod
    def get_booking(db: Session, booking_id: int) -> Optional[Booking]:
        """Get a booking that has not been soft-deleted"""
        return (
            db.query(Booking)
            .filter(Booking.id == booking_id, Booking.deleted_at.is_(None))
            .first()
        )

    @staticmethod
    def code_exists(db: Session, booking_code: str) -> bool:
        return db.query(db.query(Booking).filter(Booking.booking_code == booking_code).exists()).scalar()

    @staticmethod
    def add_booking(db: Session, **booking_data) -> Booking:
        """Stage a new booking and flush it; the caller owns the commit"""
        booking = Booking(**booking_data)
        db.add(booking)
        db.flush()
        return booking

    @staticmethod
    def save(db: Session, booking: Booking) -> Booking:
        db.commit()
        db.refresh(booking)
        return booking

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    @staticmethod
    def _paginate(query: Query, page: int, size: int, sort_by: str, sort_dir: str) -> tuple[list[Booking], int]:
        column = SORTABLE_COLUMNS.get(sort_by, SORTABLE_COLUMNS[DEFAULT_SORT])
        ordering = column.asc() if sort_dir.lower() == "asc" else column.desc()
        total = query.count()
        items = query.order_by(ordering, Booking.id.desc()).offset(page * size).limit(size).all()
        return items, total

    @staticmethod
    def _visible(db: Session) -> Query:
        return db.query(Booking).filter(Booking.deleted_at.is_(None))

    @classmethod
    def list_for_user(cls, db: Session, user_id: int, page: int, size: int, sort_by: str, sort_dir: str):
        query = cls._visible(db).filter(Booking.user_id == user_id)
        return cls._paginate(query, page, size, sort_by, sort_dir)

    @classmethod
    def list_for_vendor(
        cls,
        db: Session,
        vendor_id: int,
        page: int,
        size: int,
        sort_by: str,
        sort_dir: str,
        status: Optional[str] = None,
    ):
        query = cls._visible(db).filter(Booking.vendor_id == vendor_id)
        if status:
            query = query.filter(Booking.status == status)
        return cls._paginate(query, page, size, sort_by, sort_dir)

    @classmethod
    def list_for_venue(cls, db: Session, venue_id: int, page: int, size: int, sort_by: str, sort_dir: str):
        query = cls._visible(db).filter(Booking.venue_id == venue_id)
        return cls._paginate(query, page, size, sort_by, sort_dir)

    # ------------------------------------------------------------------
    # Vendor statistics
    # ------------------------------------------------------------------

    @staticmethod
    def count_for_vendor(db: Session, vendor_id: int, status: Optional[str] = None) -> int:
        query = db.query(func.count(Booking.id)).filter(
            Booking.vendor_id == vendor_id, Booking.deleted_at.is_(None)
        )
        if status:
            query = query.filter(Booking.status == status)
        return query.scalar()

    @staticmethod
    def count_upcoming_for_vendor(db: Session, vendor_id: int, today: date) -> int:
        return (
            db.query(func.count(Booking.id))
            .filter(
                Booking.vendor_id == vendor_id,
                Booking.deleted_at.is_(None),
                Booking.booking_date > today,
                Booking.status.in_(ACTIVE_STATUSES),
            )
            .scalar()
        )

    @staticmethod
    def count_today_for_vendor(db: Session, vendor_id: int, today: date) -> int:
        return (
            db.query(func.count(Booking.id))
            .filter(
                Booking.vendor_id == vendor_id,
                Booking.deleted_at.is_(None),
                Booking.booking_date == today,
                Booking.status.in_(ACTIVE_STATUSES),
            )
            .scalar()
        )

    @staticmethod
    def sum_revenue_for_vendor(db: Session, vendor_id: int) -> float:
        total = (
            db.query(func.sum(Booking.final_amount))
            .filter(
                Booking.vendor_id == vendor_id,
                Booking.deleted_at.is_(None),
                Booking.status.in_(REVENUE_STATUSES),
            )
            .scalar()
            or 0
        )
        return float(total)

    @staticmethod
    def soft_delete(db: Session, booking: Booking) -> None:
        booking.deleted_at = datetime.now()
        db.commit()
