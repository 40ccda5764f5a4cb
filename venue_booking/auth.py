import logging
import time
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError
from jose import jwt as jose_jwt
from jose.exceptions import JWTClaimsError
from sqlalchemy.orm import Session

from .config import ACCESS_TOKEN_ISSUER, ACCESS_TOKEN_TTL_SECONDS, SECRET_KEY
from .database import get_db
from .errors import Unauthorized
from .models import Role, User

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

ALGORITHM = "HS256"


def issue_access_token(
    user_id: int,
    role: str,
    ttl_seconds: int = ACCESS_TOKEN_TTL_SECONDS,
    secret: str = SECRET_KEY,
) -> str:
    """
    Issue an HS256 access token.
    Production tokens come from the auth service; this is used by tests and local tooling.
    """
    now = int(time.time())
    to_encode = {
        "sub": str(user_id),
        "role": role,
        "iss": ACCESS_TOKEN_ISSUER,
        "iat": now,
        "exp": now + ttl_seconds,
    }
    return jose_jwt.encode(to_encode, secret, algorithm=ALGORITHM)


def verify_access_token(token: str, secret: str = SECRET_KEY) -> dict:
    """
    Verify an HS256 access token signature and claims.
    Returns the decoded payload.
    """
    parts = token.split(".")
    if len(parts) != 3:
        logger.warning(f"⚠️ Malformed token received: {len(parts)} parts")
        raise HTTPException(status_code=401, detail="Invalid token format. Expected a valid JWT token.")

    try:
        header = jose_jwt.get_unverified_header(token)
    except JWTError as e:
        logger.error(f"❌ Failed to decode token header: {str(e)}")
        raise HTTPException(status_code=401, detail="Invalid token header") from e

    if header.get("alg") != ALGORITHM:
        logger.error(f"❌ Invalid token algorithm: {header.get('alg')}")
        raise HTTPException(status_code=401, detail="Invalid token algorithm")

    try:
        payload = jose_jwt.decode(
            token,
            secret,
            algorithms=[ALGORITHM],
            issuer=ACCESS_TOKEN_ISSUER,
            options={"verify_aud": False},
        )
    except ExpiredSignatureError as e:
        raise HTTPException(
            status_code=401,
            detail="Token has expired. Please refresh your session.",
            headers={"X-Token-Expired": "true"},
        ) from e
    except JWTClaimsError as e:
        logger.error(f"❌ Token claims rejected: {str(e)}")
        raise HTTPException(status_code=401, detail="Invalid token claims") from e
    except JWTError as e:
        logger.error("❌ Token signature verification failed")
        raise HTTPException(status_code=401, detail="Invalid token signature") from e

    if not payload.get("sub"):
        raise HTTPException(status_code=401, detail="Invalid token claims")

    return payload


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the calling user from the bearer token"""
    if not credentials:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated. Please provide a valid Bearer token in the Authorization header.",
        )

    payload = verify_access_token(credentials.credentials)

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError) as e:
        raise HTTPException(status_code=401, detail="Invalid token claims") from e

    user = db.query(User).filter(User.id == user_id).first()
    if not user or not user.is_active:
        logger.warning(f"⚠️ Token for unknown or inactive user {user_id}")
        raise HTTPException(status_code=401, detail="Authentication failed")

    logger.debug(f"✅ User authenticated: {user.id} ({user.role})")
    return user


def require_roles(*roles: Role):
    """
    Create a dependency that only admits callers holding one of ``roles``

    Example usage:
        vendor_or_admin = require_roles(Role.VENDOR, Role.ADMIN)

        @router.post("/{booking_id}/confirm")
        async def confirm(booking_id: int, current_user: User = Depends(vendor_or_admin)):
            ...
    """
    allowed = {role.value for role in roles}

    async def role_checker(user: User = Depends(get_current_user)) -> User:
        if user.role not in allowed:
            logger.warning(f"⚠️ User {user.id} with role {user.role} denied (requires {sorted(allowed)})")
            raise Unauthorized("You do not have permission to perform this action")
        return user

    return role_checker
