"""Venue repository - Database operations for the venue catalog"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Venue


class VenueRepository:
    """Repository for venue database operations"""

    @staticmethod
    def get_venue(db: Session, venue_id: int) -> Optional[Venue]:
        """Get a venue that has not been soft-deleted"""
        return db.query(Venue).filter(Venue.id == venue_id, Venue.deleted_at.is_(None)).first()

    @staticmethod
    def get_venue_titles(db: Session, venue_ids: set[int]) -> dict[int, str]:
        """Map venue IDs to titles, for enriching booking listings"""
        if not venue_ids:
            return {}
        rows = db.query(Venue.id, Venue.title).filter(Venue.id.in_(venue_ids)).all()
        return {venue_id: title for venue_id, title in rows}

    @staticmethod
    def create_venue(db: Session, vendor_id: int, **venue_data) -> Venue:
        """Create a new venue"""
        venue = Venue(vendor_id=vendor_id, **venue_data)
        db.add(venue)
        db.commit()
        db.refresh(venue)
        return venue

    @staticmethod
    def update_venue(db: Session, venue: Venue, **updates) -> Venue:
        """Update a venue with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(venue, key):
                setattr(venue, key, value)

        db.commit()
        db.refresh(venue)
        return venue

    @staticmethod
    def increment_booking_count(db: Session, venue_id: int) -> None:
        """
        Increment the denormalized booking counter in the caller's transaction.
        Uses a SQL expression so concurrent increments do not overwrite each other.
        """
        db.query(Venue).filter(Venue.id == venue_id).update(
            {Venue.booking_count: Venue.booking_count + 1}, synchronize_session=False
        )

    @staticmethod
    def soft_delete_venue(db: Session, venue: Venue) -> None:
        venue.deleted_at = datetime.now()
        venue.is_active = False
        db.commit()
