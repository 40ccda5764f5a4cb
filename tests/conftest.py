"""Shared fixtures: in-memory database, users, venues and an authenticated client."""

import os
from datetime import date, timedelta
from decimal import Decimal

# Configure the app before anything imports venue_booking.config
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from venue_booking.auth import issue_access_token  # noqa: E402
from venue_booking.database import Base, get_db  # noqa: E402
from venue_booking.domain.bookings.availability import AvailabilityService  # noqa: E402
from venue_booking.domain.bookings.schemas import BookingCreate  # noqa: E402
from venue_booking.domain.bookings.service import BookingService  # noqa: E402
from venue_booking.models import Role, User, Venue, VenueStatus  # noqa: E402

FUTURE_DATE = date.today() + timedelta(days=30)


@pytest.fixture
def db():
    """Fresh in-memory database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


def make_user(db, email: str, role: Role = Role.USER, is_active: bool = True) -> User:
    user = User(email=email, full_name=email.split("@")[0].title(), role=role.value, is_active=is_active)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_venue(db, vendor: User, **overrides) -> Venue:
    data = {
        "title": "Riverside Garden Hall",
        "price": Decimal("1000000"),
        "capacity": 50,
        "total_slots": 4,
        "status": VenueStatus.PUBLISHED.value,
        "is_active": True,
    }
    data.update(overrides)
    venue = Venue(vendor_id=vendor.id, **data)
    db.add(venue)
    db.commit()
    db.refresh(venue)
    return venue


def booking_request(venue_id, **overrides) -> BookingCreate:
    data = {
        "venueId": venue_id,
        "customerName": "Nguyen Van An",
        "customerPhone": "0901234567",
        "customerEmail": "An.Nguyen@Example.com",
        "bookingDate": FUTURE_DATE.isoformat(),
        "slotIndex": 0,
        "guestCount": 10,
    }
    data.update(overrides)
    return BookingCreate(**data)


@pytest.fixture
def customer(db):
    return make_user(db, "customer@example.com")


@pytest.fixture
def other_customer(db):
    return make_user(db, "other@example.com")


@pytest.fixture
def vendor(db):
    return make_user(db, "vendor@example.com", Role.VENDOR)


@pytest.fixture
def other_vendor(db):
    return make_user(db, "rival@example.com", Role.VENDOR)


@pytest.fixture
def admin(db):
    return make_user(db, "admin@example.com", Role.ADMIN)


@pytest.fixture
def venue(db, vendor):
    """Venue X: capacity 50, price 1,000,000, four slots, published."""
    return make_venue(db, vendor)


@pytest.fixture
def service(db):
    return BookingService(db)


@pytest.fixture
def availability(db):
    return AvailabilityService(db)


@pytest.fixture
def client(db):
    """TestClient whose requests share the test's database session."""
    from venue_booking.main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {issue_access_token(user.id, user.role)}"}
