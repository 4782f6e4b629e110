"""ORM model for directory users (credentials, profile and role)."""

from sqlalchemy import Column, DateTime, Integer, String, func

from app.models.base import Base


class User(Base):
    """
    User account for JWT authentication and role-based access control.

    email is stored lowercase; role is 'USER' or 'ADMIN'.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    role = Column(String(16), nullable=False, default="USER", server_default="USER")
    signup_date = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
