"""Venue catalog schemas - Pydantic models for validation"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...models import VenueStatus
from ...utils.sanitization import check_escaped_length


class VenueCreate(BaseModel):
    """Schema for listing a new venue"""

    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=5000)
    location: Optional[str] = Field(default=None, max_length=500)
    price: Decimal = Field(gt=0)
    capacity: Optional[int] = Field(default=None, gt=0)
    totalSlots: Optional[int] = Field(default=None, ge=1, le=4)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        if not v.strip():
            raise ValueError("Title is required")
        return check_escaped_length(v, 255)

    @field_validator("location")
    @classmethod
    def validate_location(cls, v):
        return check_escaped_length(v, 500)


class VenueUpdate(BaseModel):
    """Schema for updating an existing venue"""

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=5000)
    location: Optional[str] = Field(default=None, max_length=500)
    price: Optional[Decimal] = Field(default=None, gt=0)
    capacity: Optional[int] = Field(default=None, gt=0)
    totalSlots: Optional[int] = Field(default=None, ge=1, le=4)
    isActive: Optional[bool] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Title cannot be blank")
        return check_escaped_length(v, 255)

    @field_validator("location")
    @classmethod
    def validate_location(cls, v):
        return check_escaped_length(v, 500)


class VenueStatusUpdate(BaseModel):
    """Schema for moderating a venue's publication status"""

    status: str

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        v = v.strip().upper()
        if v not in {s.value for s in VenueStatus}:
            raise ValueError(f"Status must be one of {', '.join(s.value for s in VenueStatus)}")
        return v


class VenueResponse(BaseModel):
    """Schema for venue response"""

    id: int
    vendorId: int
    title: str
    description: Optional[str] = None
    location: Optional[str] = None
    price: Optional[float] = None
    capacity: Optional[int] = None
    totalSlots: int
    status: str
    isActive: bool
    bookingCount: int
    publishedAt: Optional[datetime] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_venue(cls, venue) -> "VenueResponse":
        return cls(
            id=venue.id,
            vendorId=venue.vendor_id,
            title=venue.title,
            description=venue.description,
            location=venue.location,
            price=float(venue.price) if venue.price is not None else None,
            capacity=venue.capacity,
            totalSlots=venue.total_slots,
            status=venue.status,
            isActive=venue.is_active,
            bookingCount=venue.booking_count or 0,
            publishedAt=venue.published_at,
            createdAt=venue.created_at,
        )
