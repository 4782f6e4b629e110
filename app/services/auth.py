"""Credential checks and token issuance: register, login and refresh."""

import logging
from dataclasses import dataclass
from functools import lru_cache

import jwt
from sqlalchemy.orm import Session

from app.core.security import (
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    hash_password,
    verify_password,
)
from app.models import User
from app.schemas.user import Role, UserPublic
from app.services.errors import InvalidCredentialsError, InvalidTokenError
from app.services.users import create_user, find_by_email

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _dummy_password_hash() -> str:
    """Hash checked when the email is unknown so both failure paths cost one bcrypt check."""
    return hash_password("not-a-real-password")


@dataclass
class TokenPair:
    access_token: str
    refresh_token: str


@dataclass
class AuthResult:
    """Public user projection plus freshly issued tokens."""

    user: UserPublic
    tokens: TokenPair


def issue_tokens(user: User) -> TokenPair:
    """Sign an access/refresh pair for the user's current id, role and email."""
    return TokenPair(
        access_token=create_access_token(sub=user.id, role=user.role, email=user.email),
        refresh_token=create_refresh_token(sub=user.id, role=user.role, email=user.email),
    )


def _result(user: User) -> AuthResult:
    return AuthResult(user=UserPublic.model_validate(user), tokens=issue_tokens(user))


def register(
    db: Session,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
) -> AuthResult:
    """
    Create a USER account and sign it in.

    Raises EmailInUseError if the (lowercased) email is already registered.
    """
    user = create_user(
        db,
        email=email,
        password=password,
        first_name=first_name,
        last_name=last_name,
        role=Role.USER,
    )
    logger.info("User registered", extra={"user_id": user.id})
    return _result(user)


def login(db: Session, email: str, password: str) -> AuthResult:
    """
    Verify credentials and issue a token pair.

    Unknown email and wrong password both raise InvalidCredentialsError.
    """
    user = find_by_email(db, email)
    if user is None:
        verify_password(password, _dummy_password_hash())
        logger.info("Login rejected", extra={"reason": "unknown_email"})
        raise InvalidCredentialsError()
    if not verify_password(password, user.password_hash):
        logger.info("Login rejected", extra={"reason": "bad_password", "user_id": user.id})
        raise InvalidCredentialsError()

    logger.info("User logged in", extra={"user_id": user.id})
    return _result(user)


def refresh(db: Session, refresh_token: str) -> AuthResult:
    """
    Exchange a valid refresh token for a new pair.

    The user is re-read so the new tokens carry the current role and email.
    Presented tokens are not tracked: each stays valid until its own expiry.
    """
    try:
        payload = decode_refresh_token(refresh_token)
    except jwt.PyJWTError as e:
        logger.info("Refresh rejected", extra={"reason": type(e).__name__})
        raise InvalidTokenError() from e

    try:
        user_id = int(payload["sub"])
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidTokenError() from e

    user = db.get(User, user_id)
    if user is None:
        logger.info("Refresh rejected", extra={"reason": "user_not_found", "user_id": user_id})
        raise InvalidTokenError()
    return _result(user)
