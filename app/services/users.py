"""User directory CRUD: uniqueness of email, password hashing, pagination and search."""

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.security import hash_password
from app.models import User
from app.schemas.user import Role
from app.services.errors import EmailInUseError, UserNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
MAX_LIMIT = 100


@dataclass
class UserPage:
    users: list[User]
    total: int
    page: int
    limit: int


def normalize_email(email: str) -> str:
    return email.strip().lower()


def find_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def _commit_unique(db: Session) -> None:
    """Commit; a unique-index violation (concurrent signup with same email) becomes EMAIL_IN_USE."""
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise EmailInUseError() from e


def list_users(
    db: Session,
    page: int | None = None,
    limit: int | None = None,
    search: str | None = None,
) -> UserPage:
    """Page through users ordered by id; search matches email, first or last name (case-insensitive)."""
    page = page if page is not None and page >= 1 else DEFAULT_PAGE
    limit = limit if limit is not None and 1 <= limit <= MAX_LIMIT else DEFAULT_LIMIT

    query = db.query(User)
    term = (search or "").strip()
    if term:
        # Literal substring: % and _ in the search text are escaped, not wildcards.
        term = term.lower()
        query = query.filter(
            or_(
                func.lower(User.email).contains(term, autoescape=True),
                func.lower(User.first_name).contains(term, autoescape=True),
                func.lower(User.last_name).contains(term, autoescape=True),
            )
        )

    total = query.count()
    users = query.order_by(User.id).offset((page - 1) * limit).limit(limit).all()
    return UserPage(users=users, total=total, page=page, limit=limit)


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise UserNotFoundError()
    return user


def create_user(
    db: Session,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    role: Role | str = Role.USER,
) -> User:
    """Create a user after checking email uniqueness. The password is stored as a bcrypt hash only."""
    email = normalize_email(email)
    if find_by_email(db, email) is not None:
        raise EmailInUseError()

    user = User(
        email=email,
        password_hash=hash_password(password),
        first_name=first_name,
        last_name=last_name,
        role=Role(role).value,
    )
    db.add(user)
    _commit_unique(db)
    db.refresh(user)
    logger.info("User created", extra={"user_id": user.id, "role": user.role})
    return user


def update_user(db: Session, user_id: int, changes: dict[str, Any]) -> User:
    """
    Apply a partial update. Keys: email, password, first_name, last_name, role.

    None values are ignored; a new password is re-hashed; a new email must not
    belong to another user.
    """
    user = get_user(db, user_id)
    changes = {k: v for k, v in changes.items() if v is not None}

    if "email" in changes:
        email = normalize_email(changes["email"])
        existing = find_by_email(db, email)
        if existing is not None and existing.id != user.id:
            raise EmailInUseError()
        user.email = email
    if "first_name" in changes:
        user.first_name = changes["first_name"]
    if "last_name" in changes:
        user.last_name = changes["last_name"]
    if "role" in changes:
        user.role = Role(changes["role"]).value
    if "password" in changes:
        user.password_hash = hash_password(changes["password"])

    _commit_unique(db)
    db.refresh(user)
    logger.info(
        "User updated",
        extra={"user_id": user.id, "fields": ",".join(sorted(changes))},
    )
    return user


def delete_user(db: Session, user_id: int) -> None:
    user = get_user(db, user_id)
    db.delete(user)
    db.commit()
    logger.info("User deleted", extra={"user_id": user_id})
