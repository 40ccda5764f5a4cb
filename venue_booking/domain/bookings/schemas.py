"""Booking domain schemas - Pydantic models for validation"""

from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from ...shared.validators import parse_date_param, validate_email, validate_phone
from ...utils.sanitization import check_escaped_length


class BookingCreate(BaseModel):
    """
    Schema for creating a booking.

    The slot is given either as slotIndex (0=10-12h, 1=12-14h, 2=14-16h, 3=16-18h)
    or, for older clients, as a startTime string / bookingDateTime.
    """

    venueId: Optional[int] = Field(default=None, validation_alias=AliasChoices("venueId", "postId"))
    customerName: str = Field(min_length=1, max_length=255)
    customerPhone: str
    customerEmail: Optional[str] = None
    bookingDate: Optional[date] = None
    bookingDateTime: Optional[datetime] = None
    slotIndex: Optional[int] = None
    startTime: Optional[str] = None
    endTime: Optional[str] = None  # Ignored, always derived from the slot
    guestCount: Optional[int] = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("guestCount", "numberOfGuests", "number_of_guests"),
    )
    unitPrice: Optional[Decimal] = None
    depositAmount: Optional[Decimal] = Field(default=None, ge=0)
    discountAmount: Optional[Decimal] = Field(default=None, ge=0)
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    additionalServices: Optional[str] = Field(default=None, max_length=2000)
    specialRequests: Optional[str] = Field(
        default=None,
        max_length=2000,
        validation_alias=AliasChoices("specialRequests", "special_requests"),
    )
    notes: Optional[str] = Field(default=None, max_length=2000)

    @field_validator("customerName")
    @classmethod
    def validate_customer_name(cls, v):
        if not v.strip():
            raise ValueError("Customer name is required")
        return check_escaped_length(v, 255)

    @field_validator("customerPhone")
    @classmethod
    def validate_customer_phone(cls, v):
        if not v or not v.strip():
            raise ValueError("Customer phone is required")
        return validate_phone(v)

    @field_validator("customerEmail")
    @classmethod
    def validate_customer_email(cls, v):
        if v:
            return validate_email(v)
        return None

    @field_validator("bookingDate", mode="before")
    @classmethod
    def parse_booking_date(cls, v):
        # Accept an ISO date-time here too; only the date part matters
        if isinstance(v, str):
            if not v.strip():
                return None
            return parse_date_param(v)
        return v


class BookingActionRequest(BaseModel):
    """Optional body for reject/cancel"""

    reason: Optional[str] = Field(default=None, max_length=1000)


class BookingResponse(BaseModel):
    """Schema for booking response"""

    id: int
    bookingCode: str
    userId: int
    vendorId: int
    venueId: int
    venueName: Optional[str] = None
    customerName: str
    customerPhone: str
    customerEmail: Optional[str] = None
    bookingDate: date
    slotIndex: int
    startTime: time
    endTime: time
    durationHours: float
    guestCount: Optional[int] = None
    unitPrice: float
    totalAmount: float
    depositAmount: Optional[float] = None
    discountAmount: float
    finalAmount: float
    currency: str
    additionalServices: Optional[str] = None
    specialRequests: Optional[str] = None
    notes: Optional[str] = None
    status: str
    confirmedBy: Optional[int] = None
    confirmedAt: Optional[datetime] = None
    cancelledBy: Optional[int] = None
    cancelledAt: Optional[datetime] = None
    cancellationReason: Optional[str] = None
    completedAt: Optional[datetime] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    @classmethod
    def from_booking(cls, booking, venue_name: Optional[str] = None) -> "BookingResponse":
        if venue_name is None and booking.venue is not None:
            venue_name = booking.venue.title
        return cls(
            id=booking.id,
            bookingCode=booking.booking_code,
            userId=booking.user_id,
            vendorId=booking.vendor_id,
            venueId=booking.venue_id,
            venueName=venue_name,
            customerName=booking.customer_name,
            customerPhone=booking.customer_phone,
            customerEmail=booking.customer_email,
            bookingDate=booking.booking_date,
            slotIndex=booking.slot_index,
            startTime=booking.start_time,
            endTime=booking.end_time,
            durationHours=booking.duration_hours,
            guestCount=booking.guest_count,
            unitPrice=float(booking.unit_price),
            totalAmount=float(booking.total_amount),
            depositAmount=float(booking.deposit_amount) if booking.deposit_amount is not None else None,
            discountAmount=float(booking.discount_amount or 0),
            finalAmount=float(booking.final_amount),
            currency=booking.currency,
            additionalServices=booking.additional_services,
            specialRequests=booking.special_requests,
            notes=booking.notes,
            status=booking.status,
            confirmedBy=booking.confirmed_by,
            confirmedAt=booking.confirmed_at,
            cancelledBy=booking.cancelled_by,
            cancelledAt=booking.cancelled_at,
            cancellationReason=booking.cancellation_reason,
            completedAt=booking.completed_at,
            createdAt=booking.created_at,
            updatedAt=booking.updated_at,
        )


class BookingPage(BaseModel):
    """One page of a booking listing"""

    content: list[BookingResponse]
    page: int
    size: int
    totalElements: int
    totalPages: int


class SlotInfo(BaseModel):
    slotIndex: int
    startTime: time
    endTime: time
    displayText: str
    isAvailable: bool
    status: str  # AVAILABLE, BOOKED


class SlotAvailabilityResponse(BaseModel):
    """Per-slot breakdown of one venue day"""

    venueId: int
    venueTitle: Optional[str] = None
    bookingDate: date
    totalSlots: int
    availableSlots: int
    bookedSlots: int
    slots: list[SlotInfo]


class BookingConfirmResponse(BaseModel):
    """Confirmed booking together with the refreshed availability of its day"""

    booking: BookingResponse
    slotAvailability: SlotAvailabilityResponse


class VendorBookingStatsResponse(BaseModel):
    totalBookings: int
    pendingCount: int
    confirmedCount: int
    cancelledCount: int
    completedCount: int
    upcomingCount: int  # Future dates, still PENDING or CONFIRMED
    todayCount: int
    totalRevenue: float  # Sum of final amounts of CONFIRMED + COMPLETED
