import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./venue_booking.db")

# Security - CRITICAL: No default secret key in production
SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    import warnings

    warnings.warn(
        "SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION", RuntimeWarning, stacklevel=2
    )
    SECRET_KEY = "INSECURE-DEV-KEY-CHANGE-IN-PRODUCTION"  # noqa: S105 - Dev fallback only

# Access tokens are issued by the external auth service and only verified here
ACCESS_TOKEN_ISSUER = os.getenv("ACCESS_TOKEN_ISSUER", "venue-booking")
ACCESS_TOKEN_TTL_SECONDS = int(os.getenv("ACCESS_TOKEN_TTL_SECONDS", "3600"))

# Booking rules
DEFAULT_SLOTS_PER_DAY = int(os.getenv("DEFAULT_SLOTS_PER_DAY", "4"))
BOOKING_CODE_MAX_ATTEMPTS = int(os.getenv("BOOKING_CODE_MAX_ATTEMPTS", "5"))
DEFAULT_CURRENCY = os.getenv("DEFAULT_CURRENCY", "VND")

# Rate limiting for booking creation (per client IP)
RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
BOOKING_RATE_LIMIT = int(os.getenv("BOOKING_RATE_LIMIT", "20"))
BOOKING_RATE_WINDOW_SECONDS = int(os.getenv("BOOKING_RATE_WINDOW_SECONDS", "60"))

# Frontend base URL, used for CORS defaults
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")
