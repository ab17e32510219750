"""JWT service for PropLedger authentication."""

import hashlib
import secrets
from datetime import datetime, timedelta

import jwt

from ...config import settings
from ...core.utils import utc_now


def create_access_token(
    user_id: int,
    account_id: int,
    company_id: int,
    email: str,
    role_slug: str,
    first_name: str = "",
    last_name: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed JWT access token carrying the tenant scope and role."""
    now = utc_now()
    expire = now + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )

    payload = {
        "sub": str(user_id),
        "account_id": account_id,
        "company_id": company_id,
        "email": email,
        "role": role_slug,
        "first_name": first_name,
        "last_name": last_name,
        "exp": expire,
        "iat": now,
        "type": "access",
    }

    return jwt.encode(
        payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm
    )


def create_refresh_token(remember_me: bool = False) -> tuple[str, datetime]:
    """Create a refresh token.

    Returns:
        Tuple of (token_string, expiry_datetime)
    """
    token = secrets.token_urlsafe(32)
    days = (
        settings.refresh_token_remember_days
        if remember_me
        else settings.refresh_token_expire_days
    )
    return token, utc_now() + timedelta(days=days)


def hash_refresh_token(token: str) -> str:
    """Hash a refresh token for storage."""
    return hashlib.sha256(token.encode()).hexdigest()


def decode_access_token(token: str) -> dict | None:
    """Decode and validate a JWT access token.

    Returns:
        Token payload if valid, None if invalid or expired.
    """
    try:
        payload = jwt.decode(
            token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm]
        )
    except jwt.InvalidTokenError:
        return None
    if payload.get("type") != "access":
        return None
    return payload


def get_token_expiry_seconds() -> int:
    """Access token lifetime in seconds."""
    return settings.access_token_expire_minutes * 60
