"""Venue router - FastAPI endpoints for the venue catalog"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_roles
from ...database import get_db
from ...models import Role, User
from .schemas import VenueCreate, VenueResponse, VenueStatusUpdate, VenueUpdate
from .service import VenueCatalog

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/venues", tags=["Venues"])

vendor_or_admin = require_roles(Role.VENDOR, Role.ADMIN)
admin_only = require_roles(Role.ADMIN)


def get_venue_catalog(db: Session = Depends(get_db)) -> VenueCatalog:
    """Dependency injection for VenueCatalog"""
    return VenueCatalog(db)


@router.post("", response_model=VenueResponse, status_code=201)
async def create_venue(
    data: VenueCreate,
    current_user: User = Depends(vendor_or_admin),
    catalog: VenueCatalog = Depends(get_venue_catalog),
):
    """List a new venue"""
    return VenueResponse.from_venue(catalog.create_venue(data, current_user))


@router.get("/{venue_id}", response_model=VenueResponse)
async def get_venue(
    venue_id: int,
    current_user: User = Depends(get_current_user),
    catalog: VenueCatalog = Depends(get_venue_catalog),
):
    """Get a venue"""
    return VenueResponse.from_venue(catalog.get_venue(venue_id))


@router.patch("/{venue_id}", response_model=VenueResponse)
async def update_venue(
    venue_id: int,
    data: VenueUpdate,
    current_user: User = Depends(vendor_or_admin),
    catalog: VenueCatalog = Depends(get_venue_catalog),
):
    """Update price, capacity, slots or the active flag of a venue"""
    return VenueResponse.from_venue(catalog.update_venue(venue_id, data, current_user))


@router.patch("/{venue_id}/status", response_model=VenueResponse)
async def set_venue_status(
    venue_id: int,
    data: VenueStatusUpdate,
    current_user: User = Depends(admin_only),
    catalog: VenueCatalog = Depends(get_venue_catalog),
):
    """Publish, reject or return a venue to draft"""
    return VenueResponse.from_venue(catalog.set_status(venue_id, data.status, current_user))


@router.delete("/{venue_id}")
async def delete_venue(
    venue_id: int,
    current_user: User = Depends(vendor_or_admin),
    catalog: VenueCatalog = Depends(get_venue_catalog),
):
    """Soft delete a venue"""
    return catalog.delete_venue(venue_id, current_user)
