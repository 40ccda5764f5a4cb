import html
import re
from typing import Optional

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")


def sanitize_string(value: Optional[str]) -> Optional[str]:
    """
    Sanitize a string by escaping HTML special characters to prevent XSS.
    Returns None if input is None.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        return value
    return html.escape(str(value), quote=True)


def sanitize_text(value: Optional[str], max_length: int = 2000) -> Optional[str]:
    """
    Trim, length-check, escape and strip control characters from free text.
    Blank input becomes None so empty notes are not stored.

    Raises:
        ValueError: If input exceeds max_length
    """
    if value is None:
        return None

    value = str(value).strip()
    if not value:
        return None

    if len(value) > max_length:
        raise ValueError(f"Input exceeds maximum length of {max_length} characters")

    return _CONTROL_CHARS.sub("", sanitize_string(value))


def check_escaped_length(value: Optional[str], max_length: int) -> Optional[str]:
    """
    Ensure a value still fits its column once HTML-escaped.
    Returns the stripped value unescaped; escaping happens at write time.

    Raises:
        ValueError: If the escaped value exceeds max_length
    """
    if value is None:
        return None

    value = value.strip()
    if len(sanitize_string(value)) > max_length:
        raise ValueError(
            f"Input exceeds maximum length of {max_length} characters once special characters are escaped"
        )
    return value
