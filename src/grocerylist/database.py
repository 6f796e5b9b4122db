"""Database configuration and session management."""

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from grocerylist.config import get_settings


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


def make_engine(database_url: str | None = None, echo: bool = False) -> Engine:
    """Create a synchronous engine, defaulting to the configured database URL."""
    return create_engine(database_url or get_settings().database_url, echo=echo)


def make_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Session factory bound to an engine, creating tables if they don't exist."""
    Base.metadata.create_all(engine)
    return sessionmaker(engine, expire_on_commit=False)
