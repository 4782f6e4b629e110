"""Auth endpoints: register, login, refresh (cookie) and logout."""

from typing import Annotated

from fastapi import APIRouter, Cookie, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.database import get_db
from app.core.security import parse_duration
from app.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from app.services import auth as auth_service

router = APIRouter()

REFRESH_COOKIE_NAME = "refresh_token"


def _set_refresh_cookie(response: Response, token: str) -> None:
    """HTTP-only refresh cookie scoped to the auth routes."""
    settings = get_settings()
    response.set_cookie(
        key=REFRESH_COOKIE_NAME,
        value=token,
        max_age=int(parse_duration(settings.JWT_REFRESH_EXPIRES).total_seconds()),
        path=settings.auth_cookie_path,
        secure=settings.cookie_secure,
        httponly=True,
        samesite="lax",
    )


def _auth_response(response: Response, result: auth_service.AuthResult) -> AuthResponse:
    _set_refresh_cookie(response, result.tokens.refresh_token)
    return AuthResponse(user=result.user, access_token=result.tokens.access_token)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """Create a USER account; returns the user and an access token, sets the refresh cookie."""
    result = auth_service.register(
        db,
        email=body.email,
        password=body.password,
        first_name=body.first_name,
        last_name=body.last_name,
    )
    return _auth_response(response, result)


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """
    Authenticate with email and password; returns an access token and sets the refresh cookie.
    Include the token in the Authorization header as: Bearer <accessToken>
    """
    result = auth_service.login(db, email=body.email, password=body.password)
    return _auth_response(response, result)


@router.post("/refresh", response_model=AuthResponse)
def refresh(
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    refresh_token: Annotated[str | None, Cookie()] = None,
) -> AuthResponse:
    """Issue a new access token and refresh cookie from the refresh_token cookie."""
    if not refresh_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing refresh token",
        )
    result = auth_service.refresh(db, refresh_token)
    return _auth_response(response, result)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout() -> Response:
    """Clear the refresh cookie. The token itself is not revoked."""
    settings = get_settings()
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    response.delete_cookie(
        key=REFRESH_COOKIE_NAME,
        path=settings.auth_cookie_path,
        secure=settings.cookie_secure,
        httponly=True,
        samesite="lax",
    )
    return response
