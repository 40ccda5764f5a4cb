"""Venue catalog service - the booking engine's view of venues"""

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from ...config import DEFAULT_SLOTS_PER_DAY
from ...errors import VenueNotFound, VenueUnavailable
from ...models import User, Venue, VenueStatus
from ...policy import Operation, authorize
from ...utils.sanitization import sanitize_string
from .repository import VenueRepository
from .schemas import VenueCreate, VenueUpdate

logger = logging.getLogger(__name__)


class VenueCatalog:
    """Service layer for venue lookups and catalog maintenance"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = VenueRepository()

    def get_venue(self, venue_id: int) -> Venue:
        """Get a venue that exists and is not soft-deleted"""
        venue = self.repo.get_venue(self.db, venue_id)
        if not venue:
            raise VenueNotFound("Venue not found")
        return venue

    def get_bookable_venue(self, venue_id) -> Venue:
        """Get a venue that currently accepts bookings"""
        if venue_id is None:
            raise VenueUnavailable("Venue ID is required")

        venue = self.repo.get_venue(self.db, venue_id)
        if not venue:
            raise VenueUnavailable("Venue not found")
        if not venue.is_active:
            raise VenueUnavailable("Venue is not active")
        if venue.status != VenueStatus.PUBLISHED.value:
            raise VenueUnavailable("Venue is not available for booking")
        return venue

    def increment_booking_count(self, venue_id: int) -> None:
        """Bump the venue counter; committed together with the caller's booking insert"""
        self.repo.increment_booking_count(self.db, venue_id)

    def venue_titles(self, venue_ids: set[int]) -> dict[int, str]:
        return self.repo.get_venue_titles(self.db, venue_ids)

    @staticmethod
    def total_slots(venue: Venue) -> int:
        return venue.total_slots or DEFAULT_SLOTS_PER_DAY

    def create_venue(self, data: VenueCreate, user: User) -> Venue:
        """List a new venue; admins publish immediately, vendors wait for moderation"""
        logger.info(f"🏢 Creating venue for vendor_id: {user.id}")

        status = VenueStatus.PUBLISHED.value if user.is_admin else VenueStatus.PENDING.value
        venue_data = {
            "title": sanitize_string(data.title),
            "description": sanitize_string(data.description),
            "location": sanitize_string(data.location),
            "price": data.price,
            "capacity": data.capacity,
            "total_slots": data.totalSlots or DEFAULT_SLOTS_PER_DAY,
            "status": status,
            "published_at": datetime.now() if status == VenueStatus.PUBLISHED.value else None,
        }
        return self.repo.create_venue(self.db, user.id, **venue_data)

    def update_venue(self, venue_id: int, data: VenueUpdate, user: User) -> Venue:
        venue = self.get_venue(venue_id)
        authorize(Operation.MANAGE_VENUE, user, venue=venue)

        updates = {}
        if data.title is not None:
            updates["title"] = sanitize_string(data.title)
        if data.description is not None:
            updates["description"] = sanitize_string(data.description)
        if data.location is not None:
            updates["location"] = sanitize_string(data.location)
        if data.price is not None:
            updates["price"] = data.price
        if data.capacity is not None:
            updates["capacity"] = data.capacity
        if data.totalSlots is not None:
            updates["total_slots"] = data.totalSlots
        if data.isActive is not None:
            updates["is_active"] = data.isActive

        return self.repo.update_venue(self.db, venue, **updates)

    def set_status(self, venue_id: int, status: str, user: User) -> Venue:
        """Moderate a venue's publication status (admin only)"""
        venue = self.get_venue(venue_id)
        authorize(Operation.PUBLISH_VENUE, user, venue=venue)

        updates = {"status": status}
        if status == VenueStatus.PUBLISHED.value and venue.published_at is None:
            updates["published_at"] = datetime.now()

        logger.info(f"🏢 Venue {venue_id} status {venue.status} → {status} by user {user.id}")
        return self.repo.update_venue(self.db, venue, **updates)

    def delete_venue(self, venue_id: int, user: User) -> dict:
        venue = self.get_venue(venue_id)
        authorize(Operation.MANAGE_VENUE, user, venue=venue)
        self.repo.soft_delete_venue(self.db, venue)
        logger.info(f"🗑️ Venue {venue_id} soft-deleted by user {user.id}")
        return {"message": "Venue deleted successfully"}
