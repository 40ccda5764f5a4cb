"""Tests for the bearer token access gate."""

import base64
import json
import time

import pytest
from fastapi import HTTPException

from conftest import auth_headers, make_user
from venue_booking.auth import issue_access_token, verify_access_token
from venue_booking.models import Role


def _segment(data: dict) -> str:
    return base64.urlsafe_b64encode(json.dumps(data).encode()).rstrip(b"=").decode()


class TestTokens:
    def test_round_trip(self):
        payload = verify_access_token(issue_access_token(7, Role.VENDOR.value))
        assert payload["sub"] == "7"
        assert payload["role"] == "VENDOR"
        assert payload["iss"] == "venue-booking"

    def test_wrong_secret(self):
        token = issue_access_token(7, Role.USER.value, secret="another-secret")
        with pytest.raises(HTTPException) as exc_info:
            verify_access_token(token)
        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Invalid token signature"

    def test_tampered_payload(self):
        header, _, signature = issue_access_token(7, Role.USER.value).split(".")
        forged = _segment({"sub": "1", "role": "ADMIN", "iss": "venue-booking", "exp": time.time() + 60})
        with pytest.raises(HTTPException, match="signature"):
            verify_access_token(f"{header}.{forged}.{signature}")

    def test_expired(self):
        token = issue_access_token(7, Role.USER.value, ttl_seconds=-10)
        with pytest.raises(HTTPException) as exc_info:
            verify_access_token(token)
        assert exc_info.value.headers == {"X-Token-Expired": "true"}

    def test_malformed(self):
        with pytest.raises(HTTPException, match="format"):
            verify_access_token("not-a-jwt")

    def test_unsupported_algorithm(self):
        _, payload, signature = issue_access_token(7, Role.USER.value).split(".")
        header = _segment({"alg": "none", "typ": "JWT"})
        with pytest.raises(HTTPException, match="algorithm"):
            verify_access_token(f"{header}.{payload}.{signature}")


class TestGate:
    def test_missing_header(self, client):
        response = client.get("/bookings/user/my-bookings")
        assert response.status_code == 401

    def test_garbage_token(self, client):
        response = client.get("/bookings/user/my-bookings", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401

    def test_unknown_user(self, client):
        headers = {"Authorization": f"Bearer {issue_access_token(999, Role.USER.value)}"}
        assert client.get("/bookings/user/my-bookings", headers=headers).status_code == 401

    def test_inactive_user(self, db, client):
        user = make_user(db, "gone@example.com", is_active=False)
        assert client.get("/bookings/user/my-bookings", headers=auth_headers(user)).status_code == 401

    def test_role_is_taken_from_database(self, db, client, customer):
        # A token claiming VENDOR does not lift a USER account's role
        headers = {"Authorization": f"Bearer {issue_access_token(customer.id, Role.VENDOR.value)}"}
        assert client.get("/bookings/vendor", headers=headers).status_code == 403

    def test_valid_token(self, client, customer):
        response = client.get("/bookings/user/my-bookings", headers=auth_headers(customer))
        assert response.status_code == 200
