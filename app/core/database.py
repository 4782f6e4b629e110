"""Database engine lifecycle and per-request session management."""

import logging
from collections.abc import Generator
from typing import Any

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

logger = logging.getLogger(__name__)


class Database:
    """
    Owns the SQLAlchemy engine (and its connection pool) and the session factory.

    Constructed once at process start and disposed at shutdown; services only
    ever see the sessions it hands out.
    """

    def __init__(self, url: str, *, echo: bool = False, **engine_kwargs: Any) -> None:
        self.engine = create_engine(url, pool_pre_ping=True, echo=echo, **engine_kwargs)
        self.session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def session(self) -> Session:
        return self.session_factory()

    def dispose(self) -> None:
        """Close every pooled connection."""
        self.engine.dispose()
        logger.info("Database engine disposed")


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency that yields a DB session and closes it when done."""
    db = request.app.state.db.session()
    try:
        yield db
    finally:
        db.close()


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        return False
