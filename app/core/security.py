"""Password hashing and JWT creation/verification for access and refresh tokens."""

from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from app.core.config import DURATION_PATTERN, get_settings

# Bcrypt cost (rounds).
BCRYPT_ROUNDS = 12

PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128

# Claim marking a refresh token; access tokens never carry it.
TOKEN_TYPE_CLAIM = "typ"
REFRESH_TOKEN_TYPE = "refresh"

_DURATION_UNITS = {
    "": 1,
    "s": 1,
    "m": 60,
    "h": 3600,
    "d": 86400,
    "w": 604800,
}


def parse_duration(value: str) -> timedelta:
    """Parse '15m', '7d', '12h', '30s' or bare seconds ('3600') into a timedelta."""
    match = DURATION_PATTERN.match(value)
    if match is None:
        raise ValueError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    return timedelta(seconds=int(amount) * _DURATION_UNITS[unit.lower()])


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def _encode(claims: dict[str, Any], secret: str, lifetime: timedelta) -> str:
    now = datetime.now(UTC)
    payload = {**claims, "iat": now, "exp": now + lifetime}
    return jwt.encode(payload, secret, algorithm=get_settings().JWT_ALGORITHM)


def create_access_token(sub: str | int, role: str, email: str) -> str:
    """Create a short-lived access token with sub (user id), role and email."""
    settings = get_settings()
    return _encode(
        {"sub": str(sub), "role": role, "email": email},
        settings.JWT_ACCESS_SECRET.get_secret_value(),
        parse_duration(settings.JWT_ACCESS_EXPIRES),
    )


def create_refresh_token(sub: str | int, role: str, email: str) -> str:
    """Create a long-lived refresh token; same claims as access plus typ=refresh."""
    settings = get_settings()
    return _encode(
        {
            "sub": str(sub),
            "role": role,
            "email": email,
            TOKEN_TYPE_CLAIM: REFRESH_TOKEN_TYPE,
        },
        settings.JWT_REFRESH_SECRET.get_secret_value(),
        parse_duration(settings.JWT_REFRESH_EXPIRES),
    )


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and validate an access JWT; return payload (sub, role, email, exp, iat).
    Raises jwt.PyJWTError on invalid or expired token, or when given a refresh token.
    """
    settings = get_settings()
    payload = jwt.decode(
        token,
        settings.JWT_ACCESS_SECRET.get_secret_value(),
        algorithms=[settings.JWT_ALGORITHM],
        options={"require": ["exp", "sub"]},
    )
    if payload.get(TOKEN_TYPE_CLAIM) == REFRESH_TOKEN_TYPE:
        raise jwt.InvalidTokenError("Refresh token used as access token")
    return payload


def decode_refresh_token(token: str) -> dict[str, Any]:
    """
    Decode and validate a refresh JWT.
    Raises jwt.PyJWTError on invalid or expired token, or when typ is not 'refresh'.
    """
    settings = get_settings()
    payload = jwt.decode(
        token,
        settings.JWT_REFRESH_SECRET.get_secret_value(),
        algorithms=[settings.JWT_ALGORITHM],
        options={"require": ["exp", "sub"]},
    )
    if payload.get(TOKEN_TYPE_CLAIM) != REFRESH_TOKEN_TYPE:
        raise jwt.InvalidTokenError("Not a refresh token")
    return payload
