import logging
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from medeina.core.config import get_database_url

logger = logging.getLogger(__name__)

# Create Base class for models
Base = declarative_base()

# Internal lazy globals
_engine: Optional[Engine] = None
_SessionLocal = None
_database_url: Optional[str] = None


def build_engine(database_url: str) -> Engine:
    """Create an engine suited to the URL's backend.

    In-memory SQLite uses a single shared connection (StaticPool) so tables
    created on one connection stay visible to every session.
    """
    url = make_url(database_url)
    if url.drivername.startswith("sqlite"):
        if url.database in (None, "", ":memory:"):
            return create_engine(
                database_url,
                echo=False,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        return create_engine(
            database_url, echo=False, connect_args={"check_same_thread": False}
        )
    return create_engine(database_url, echo=False, pool_pre_ping=True)


def get_engine(database_url: Optional[str] = None) -> Engine:
    """Return a cached SQLAlchemy engine, creating it on first call.

    The URL defaults to DATABASE_URL, read at call time so tests can set it
    before the engine is constructed. A different URL replaces the cached
    engine.
    """
    global _engine
    global _SessionLocal
    global _database_url
    database_url = database_url or get_database_url()
    if _engine is None or _database_url != database_url:
        if _engine is not None:
            _engine.dispose()
        _engine = build_engine(database_url)
        _SessionLocal = None
        _database_url = database_url
        logger.debug(
            "SQLAlchemy engine created",
            extra={"context": {"dialect": _engine.dialect.name}},
        )
    return _engine


def get_sessionmaker(database_url: Optional[str] = None):
    """Return a cached sessionmaker bound to the lazy engine."""
    global _SessionLocal
    engine = get_engine(database_url)
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(
            autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
        )
    return _SessionLocal


def SessionLocal(database_url: Optional[str] = None) -> Session:
    """Return a new Session bound to the configured database."""
    return get_sessionmaker(database_url)()


def create_tables(engine: Optional[Engine] = None) -> None:
    """Create all tables on ``engine`` (defaults to the lazy engine)."""
    # Import models so Base.metadata is populated
    from medeina.db import base  # noqa: F401

    Base.metadata.create_all(bind=engine or get_engine())


def dispose_engine() -> None:
    """Dispose the cached engine; the next call to get_engine builds a new one."""
    global _engine
    global _SessionLocal
    global _database_url
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None
    _database_url = None
