"""Tests for the venue catalog service and /venues routes."""

import pytest

from conftest import auth_headers, booking_request
from venue_booking.domain.venues.schemas import VenueCreate, VenueUpdate
from venue_booking.domain.venues.service import VenueCatalog
from venue_booking.errors import CapacityExceeded, Unauthorized, VenueNotFound, VenueUnavailable
from venue_booking.models import VenueStatus


@pytest.fixture
def catalog(db):
    return VenueCatalog(db)


class TestVenueCatalog:
    def test_vendor_listing_starts_pending(self, catalog, vendor):
        venue = catalog.create_venue(VenueCreate(title="Lotus Ballroom", price="2500000", capacity=200), vendor)

        assert venue.status == VenueStatus.PENDING.value
        assert venue.published_at is None
        assert venue.total_slots == 4
        assert venue.booking_count == 0

    def test_admin_listing_is_published(self, catalog, admin):
        venue = catalog.create_venue(VenueCreate(title="Lotus Ballroom", price="2500000"), admin)

        assert venue.status == VenueStatus.PUBLISHED.value
        assert venue.published_at is not None

    def test_title_is_escaped(self, catalog, vendor):
        venue = catalog.create_venue(VenueCreate(title="Tom & Jerry's <Hall>", price="1"), vendor)
        assert venue.title == "Tom &amp; Jerry&#x27;s &lt;Hall&gt;"

    def test_publish_makes_venue_bookable(self, catalog, vendor, admin):
        venue = catalog.create_venue(VenueCreate(title="Lotus Ballroom", price="2500000"), vendor)
        with pytest.raises(VenueUnavailable):
            catalog.get_bookable_venue(venue.id)

        catalog.set_status(venue.id, VenueStatus.PUBLISHED.value, admin)

        assert catalog.get_bookable_venue(venue.id).published_at is not None

    def test_vendor_cannot_publish(self, catalog, venue, vendor):
        with pytest.raises(Unauthorized):
            catalog.set_status(venue.id, VenueStatus.PUBLISHED.value, vendor)

    def test_owner_updates(self, catalog, venue, vendor):
        updated = catalog.update_venue(venue.id, VenueUpdate(capacity=80, isActive=False), vendor)

        assert updated.capacity == 80
        assert updated.is_active is False

    def test_stranger_cannot_update(self, catalog, venue, other_vendor):
        with pytest.raises(Unauthorized):
            catalog.update_venue(venue.id, VenueUpdate(capacity=80), other_vendor)

    def test_soft_delete_hides_venue(self, catalog, venue, vendor):
        catalog.delete_venue(venue.id, vendor)

        with pytest.raises(VenueNotFound):
            catalog.get_venue(venue.id)
        with pytest.raises(VenueUnavailable, match="Venue not found"):
            catalog.get_bookable_venue(venue.id)

    def test_deactivated_venue_rejects_bookings(self, catalog, service, venue, vendor, customer):
        catalog.update_venue(venue.id, VenueUpdate(isActive=False), vendor)
        with pytest.raises(VenueUnavailable, match="not active"):
            service.create_booking(booking_request(venue.id), customer)

    def test_lower_capacity_applies_to_new_bookings(self, catalog, service, venue, vendor, customer):
        catalog.update_venue(venue.id, VenueUpdate(capacity=5), vendor)
        with pytest.raises(CapacityExceeded):
            service.create_booking(booking_request(venue.id, guestCount=6), customer)


class TestVenueRoutes:
    def test_create(self, client, vendor):
        response = client.post(
            "/venues",
            json={"title": "Lotus Ballroom", "price": 2500000, "capacity": 200, "totalSlots": 3},
            headers=auth_headers(vendor),
        )
        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "PENDING"
        assert body["totalSlots"] == 3
        assert body["vendorId"] == vendor.id

    def test_customer_cannot_create(self, client, customer):
        response = client.post("/venues", json={"title": "Hall", "price": 1}, headers=auth_headers(customer))
        assert response.status_code == 403

    def test_title_too_long_once_escaped(self, client, vendor):
        response = client.post(
            "/venues", json={"title": "Bride & Groom " * 15, "price": 1}, headers=auth_headers(vendor)
        )
        assert response.status_code == 422

    def test_blank_title_update_rejected(self, client, venue, vendor):
        response = client.patch(f"/venues/{venue.id}", json={"title": "  "}, headers=auth_headers(vendor))
        assert response.status_code == 422

    def test_total_slots_bounded(self, client, vendor):
        response = client.post(
            "/venues", json={"title": "Hall", "price": 1, "totalSlots": 6}, headers=auth_headers(vendor)
        )
        assert response.status_code == 422

    def test_get(self, client, venue, customer):
        response = client.get(f"/venues/{venue.id}", headers=auth_headers(customer))
        assert response.json()["title"] == "Riverside Garden Hall"

    def test_get_unknown(self, client, customer):
        assert client.get("/venues/9999", headers=auth_headers(customer)).status_code == 404

    def test_status_update(self, client, venue, admin):
        response = client.patch(f"/venues/{venue.id}/status", json={"status": "rejected"}, headers=auth_headers(admin))
        assert response.status_code == 200
        assert response.json()["status"] == "REJECTED"

    def test_status_update_invalid(self, client, venue, admin):
        response = client.patch(f"/venues/{venue.id}/status", json={"status": "ARCHIVED"}, headers=auth_headers(admin))
        assert response.status_code == 422

    def test_status_update_requires_admin(self, client, venue, vendor):
        response = client.patch(f"/venues/{venue.id}/status", json={"status": "DRAFT"}, headers=auth_headers(vendor))
        assert response.status_code == 403

    def test_patch(self, client, venue, vendor):
        response = client.patch(f"/venues/{venue.id}", json={"price": 1200000}, headers=auth_headers(vendor))
        assert response.json()["price"] == 1200000

    def test_delete(self, client, venue, vendor):
        assert client.delete(f"/venues/{venue.id}", headers=auth_headers(vendor)).status_code == 200
        assert client.get(f"/venues/{venue.id}", headers=auth_headers(vendor)).status_code == 404
