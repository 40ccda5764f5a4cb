"""Shared validation utilities"""

import re
from datetime import date, datetime
from typing import Optional

_EMAIL_PATTERN = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"


def validate_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate and normalize an international phone number.

    Keeps a leading "+" and strips spaces, dashes, dots and parentheses.

    Raises:
        ValueError: If the number does not have 8 to 15 digits
    """
    if not phone:
        return phone

    phone = phone.strip()
    has_plus = phone.startswith("+")
    digits = re.sub(r"\D", "", phone)

    if not 8 <= len(digits) <= 15:
        raise ValueError("Phone number must contain between 8 and 15 digits")

    return f"+{digits}" if has_plus else digits


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    if not re.match(_EMAIL_PATTERN, email):
        raise ValueError("Invalid email format")

    return email


def parse_date_param(value: str) -> date:
    """
    Parse a query-string date given as yyyy-MM-dd or an ISO-8601 date-time.

    Raises:
        ValueError: If the value matches neither format
    """
    value = value.strip()
    try:
        return date.fromisoformat(value)
    except ValueError:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()


def parse_datetime_param(value: str) -> datetime:
    """
    Parse a query-string value as a date-time; a bare date means start of day.

    Raises:
        ValueError: If the value matches neither format
    """
    value = value.strip()
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return datetime.combine(date.fromisoformat(value), datetime.min.time())
