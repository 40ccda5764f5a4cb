from enum import Enum

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Time,
    text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .config import DEFAULT_CURRENCY, DEFAULT_SLOTS_PER_DAY
from .database import Base


class Role(str, Enum):
    USER = "USER"
    VENDOR = "VENDOR"
    ADMIN = "ADMIN"


class VenueStatus(str, Enum):
    PENDING = "PENDING"
    PUBLISHED = "PUBLISHED"
    REJECTED = "REJECTED"
    DRAFT = "DRAFT"


class BookingStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


# Statuses that keep a slot occupied / count as upcoming work
ACTIVE_STATUSES = (BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value)
# Statuses whose final amount counts as vendor revenue
REVENUE_STATUSES = (BookingStatus.CONFIRMED.value, BookingStatus.COMPLETED.value)
TERMINAL_STATUSES = (BookingStatus.CANCELLED.value, BookingStatus.COMPLETED.value)

# Partial index predicate shared by PostgreSQL and SQLite
ACTIVE_SLOT_PREDICATE = text("status <> 'CANCELLED' AND deleted_at IS NULL")


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    full_name = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    role = Column(String(20), default=Role.USER.value, nullable=False)  # USER, VENDOR, ADMIN
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    venues = relationship("Venue", back_populates="vendor")

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value


class Venue(Base):
    """A bookable wedding venue listing ("post") owned by a vendor"""

    __tablename__ = "venues"

    id = Column(Integer, primary_key=True, index=True)
    vendor_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    location = Column(String(500), nullable=True)
    price = Column(Numeric(14, 2), nullable=True)  # Listed unit price
    capacity = Column(Integer, nullable=True)  # Max guests
    total_slots = Column(Integer, default=DEFAULT_SLOTS_PER_DAY, nullable=False)

    # Publication workflow: PENDING → PUBLISHED | REJECTED, DRAFT kept by the vendor
    status = Column(String(20), default=VenueStatus.PENDING.value, nullable=False, index=True)
    is_active = Column(Boolean, default=True, nullable=False)

    # Denormalized counter, incremented with every accepted booking
    booking_count = Column(Integer, default=0, nullable=False)

    published_at = Column(DateTime, nullable=True)
    deleted_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    vendor = relationship("User", back_populates="venues")
    bookings = relationship("Booking", back_populates="venue")


class Booking(Base):
    """A reservation of one fixed slot on one venue/date by one customer"""

    __tablename__ = "bookings"
    __table_args__ = (
        Index("idx_booking_slot", "venue_id", "booking_date", "slot_index"),
        # At most one active booking per venue/date/slot
        Index(
            "uq_booking_active_slot",
            "venue_id",
            "booking_date",
            "slot_index",
            unique=True,
            postgresql_where=ACTIVE_SLOT_PREDICATE,
            sqlite_where=ACTIVE_SLOT_PREDICATE,
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    booking_code = Column(String(20), unique=True, nullable=False, index=True)

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    vendor_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    venue_id = Column(Integer, ForeignKey("venues.id"), nullable=False, index=True)

    # Customer contact
    customer_name = Column(String(255), nullable=False)
    customer_phone = Column(String(50), nullable=False)
    customer_email = Column(String(255), nullable=True)

    # Scheduling: slot 0=10-12h, 1=12-14h, 2=14-16h, 3=16-18h
    booking_date = Column(Date, nullable=False)
    slot_index = Column(Integer, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    duration_hours = Column(Float, default=2.0, nullable=False)
    guest_count = Column(Integer, nullable=True)

    # Pricing
    unit_price = Column(Numeric(14, 2), nullable=False)
    total_amount = Column(Numeric(14, 2), nullable=False)
    deposit_amount = Column(Numeric(14, 2), default=0, nullable=True)
    discount_amount = Column(Numeric(14, 2), default=0, nullable=False)
    final_amount = Column(Numeric(14, 2), nullable=False)
    currency = Column(String(3), default=DEFAULT_CURRENCY, nullable=False)

    additional_services = Column(Text, nullable=True)
    special_requests = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)

    # Status workflow: PENDING → CONFIRMED → COMPLETED, CANCELLED from PENDING or CONFIRMED
    status = Column(String(20), default=BookingStatus.PENDING.value, nullable=False, index=True)

    # Audit trail
    confirmed_by = Column(Integer, nullable=True)
    confirmed_at = Column(DateTime, nullable=True)
    cancelled_by = Column(Integer, nullable=True)
    cancelled_at = Column(DateTime, nullable=True)
    cancellation_reason = Column(Text, nullable=True)
    completed_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
    deleted_at = Column(DateTime, nullable=True)

    venue = relationship("Venue", back_populates="bookings")
