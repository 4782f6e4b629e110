"""Pydantic request/response schemas."""

from app.schemas.auth import (
    AuthenticatedUser,
    AuthResponse,
    LoginRequest,
    RegisterRequest,
)
from app.schemas.health import HealthResponse
from app.schemas.user import (
    Role,
    UserCreate,
    UserPublic,
    UserResponse,
    UsersPage,
    UserUpdate,
)

__all__ = [
    "AuthenticatedUser",
    "AuthResponse",
    "HealthResponse",
    "LoginRequest",
    "RegisterRequest",
    "Role",
    "UserCreate",
    "UserPublic",
    "UserResponse",
    "UsersPage",
    "UserUpdate",
]
