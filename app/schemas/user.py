"""Request/response schemas for the user directory (public projection and CRUD bodies)."""

from datetime import datetime
from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, model_validator
from pydantic.alias_generators import to_camel

from app.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN


class Role(str, Enum):
    """Flat role set; access checks compare for exact equality."""

    USER = "USER"
    ADMIN = "ADMIN"


class CamelModel(BaseModel):
    """Base schema: snake_case attributes, camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class UserPublic(CamelModel):
    """User as exposed by the API. Never carries the password hash."""

    user_id: int = Field(
        ..., validation_alias=AliasChoices("userId", "id"), serialization_alias="userId"
    )
    email: str
    first_name: str
    last_name: str
    role: Role
    signup_date: datetime | None = None


class UserCreate(CamelModel):
    """Admin-created account; role defaults to USER."""

    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)
    role: Role = Role.USER


class UserUpdate(CamelModel):
    """Partial update; at least one field must be provided."""

    email: EmailStr | None = None
    password: str | None = Field(
        default=None, min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN
    )
    first_name: str | None = Field(default=None, min_length=1, max_length=255)
    last_name: str | None = Field(default=None, min_length=1, max_length=255)
    role: Role | None = None

    @model_validator(mode="after")
    def require_one_field(self) -> "UserUpdate":
        if not self.model_dump(exclude_none=True):
            raise ValueError("At least one field must be provided")
        return self


class UserResponse(BaseModel):
    """Single-user envelope: {"user": {...}}."""

    user: UserPublic


class UsersPage(BaseModel):
    """Response for GET /users (admin only)."""

    users: list[UserPublic]
    total: int
    page: int
    limit: int
