"""Shared test helpers: in-memory database, cheap bcrypt, seeded users."""

from unittest.mock import patch

from sqlalchemy.pool import StaticPool

from app.core.database import Database
from app.models import Base, User
from app.services.users import create_user

DEFAULT_PASSWORD = "longenough"


def make_database() -> Database:
    """Single-connection SQLite database with the schema created."""
    database = Database(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(database.engine)
    return database


def fast_hashing():
    """Patch bcrypt cost down for tests; production cost stays 12."""
    return patch("app.core.security.BCRYPT_ROUNDS", 4)


def seed_user(
    database: Database,
    email: str = "user@acme.io",
    role: str = "USER",
    password: str = DEFAULT_PASSWORD,
    first_name: str = "Uma",
    last_name: str = "User",
) -> User:
    db = database.session()
    try:
        user = create_user(
            db,
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            role=role,
        )
        db.expunge(user)
        return user
    finally:
        db.close()


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
