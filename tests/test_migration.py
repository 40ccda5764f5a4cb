"""Tests for the SQL migration runner."""

from pathlib import Path

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.pool import StaticPool

from run_migration import run_migration, split_statements

MIGRATIONS = Path(__file__).resolve().parent.parent / "migrations"


@pytest.fixture
def legacy_engine():
    """A bookings table created before the slot index existed."""
    engine = create_engine("sqlite://", poolclass=StaticPool)
    with engine.begin() as conn:
        conn.execute(
            text(
                "CREATE TABLE bookings (id INTEGER PRIMARY KEY, venue_id INTEGER, booking_date DATE, "
                "slot_index INTEGER, status VARCHAR(20), deleted_at DATETIME)"
            )
        )
    yield engine
    engine.dispose()


def _insert(conn, status="PENDING"):
    conn.execute(
        text(
            "INSERT INTO bookings (venue_id, booking_date, slot_index, status) "
            "VALUES (1, '2026-12-25', 0, :status)"
        ),
        {"status": status},
    )


class TestSplitStatements:
    def test_comments_and_blank_statements_dropped(self):
        sql = "-- header\nCREATE TABLE a (id INT);\n\n-- note\nCREATE TABLE b (id INT);\n"
        assert split_statements(sql) == ["CREATE TABLE a (id INT)", "CREATE TABLE b (id INT)"]


class TestSlotIndexMigration:
    def test_adds_partial_unique_index(self, legacy_engine):
        run_migration(str(MIGRATIONS / "add_booking_slot_unique_index.sql"), bind=legacy_engine)

        with legacy_engine.begin() as conn:
            _insert(conn, status="CANCELLED")
            _insert(conn)
        with pytest.raises(IntegrityError):
            with legacy_engine.begin() as conn:
                _insert(conn)

    def test_is_idempotent(self, legacy_engine):
        path = str(MIGRATIONS / "add_booking_slot_unique_index.sql")
        run_migration(path, bind=legacy_engine)
        run_migration(path, bind=legacy_engine)

    def test_missing_file(self, legacy_engine):
        with pytest.raises(FileNotFoundError):
            run_migration("migrations/does_not_exist.sql", bind=legacy_engine)
