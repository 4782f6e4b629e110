"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from app.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN
from app.schemas.user import CamelModel, Role, UserPublic


class RegisterRequest(CamelModel):
    """Self-service signup; always creates a USER account."""

    email: EmailStr = Field(..., description="Email (stored lowercase)")
    password: str = Field(
        ..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN, description="Password"
    )
    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: str = Field(..., min_length=1, max_length=255, description="Email")
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Password")


class AuthResponse(BaseModel):
    """User plus access token; the refresh token travels in an HTTP-only cookie."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user: UserPublic
    access_token: str = Field(..., description="JWT access token (Bearer)")


class AuthenticatedUser(BaseModel):
    """Identity decoded from a valid access token, attached to the request."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: int
    role: Role
    email: str
