"""
Database Configuration Module

SQLAlchemy 2.0 engine and session management for the Book Review API.

Engine Lifecycle
================
The engine is process-wide state:
1. init_engine() creates it once (called from the application lifespan)
2. Every request borrows a Session from SessionLocal
3. dispose_engine() closes pooled connections on shutdown

Session Management Pattern
==========================
We use the "session per request" pattern:
1. Request arrives → create a new session
2. Use session for all database operations in that request
3. Services commit on success, rollback on failure
4. Close session when request ends
"""

import logging
from collections.abc import Generator
from typing import Any

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from book_reviews.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


# =============================================================================
# Session Factory
# =============================================================================
# Bound to the engine by init_engine(). Each call to SessionLocal()
# creates a new session.
#
# - autoflush=False: Don't auto-flush before queries (more predictable behavior)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
)

_engine: Engine | None = None


# =============================================================================
# Base Model Class
# =============================================================================
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Alembic uses Base.metadata to discover tables for migrations.
    """
    pass


# =============================================================================
# Engine Lifecycle
# =============================================================================
def _engine_options(database_url: str) -> dict[str, Any]:
    """Build create_engine() keyword arguments for the given URL."""
    if database_url.startswith("sqlite"):
        options: dict[str, Any] = {
            "connect_args": {"check_same_thread": False},
        }
        # In-memory databases vanish when their only connection closes
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
        return options

    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_pre_ping": True,  # Verify connections are alive before using
    }


def init_engine(database_url: str | None = None) -> Engine:
    """
    Create the process-wide engine and bind the session factory to it.

    Calling it again returns the existing engine.

    Args:
        database_url: Override for settings.database_url

    Returns:
        The SQLAlchemy engine
    """
    global _engine

    if _engine is not None:
        return _engine

    url = database_url or settings.database_url
    _engine = create_engine(
        url,
        echo=settings.debug,  # Log SQL in debug mode
        **_engine_options(url),
    )
    SessionLocal.configure(bind=_engine)
    logger.info(f"Database engine initialized ({_engine.url.get_backend_name()})")
    return _engine


def get_engine() -> Engine:
    """Return the engine, creating it on first use."""
    return init_engine()


def dispose_engine() -> None:
    """Close all pooled connections and forget the engine."""
    global _engine

    if _engine is None:
        return

    _engine.dispose()
    _engine = None
    logger.info("Database engine disposed")


# =============================================================================
# Dependency Injection
# =============================================================================
def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI.

    Yields a new session and closes it when the request ends, even if
    the handler raised.

    Usage in Routes:
        @router.get("/books/")
        def get_books(db: Session = Depends(get_db)):
            ...
    """
    get_engine()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# =============================================================================
# Utility Functions
# =============================================================================
def create_tables() -> None:
    """
    Create all database tables.

    Useful for development and SQLite setups. In production, use Alembic
    migrations instead.
    """
    # Models must be imported so their tables are registered on Base.metadata
    import book_reviews.models  # noqa: F401

    Base.metadata.create_all(bind=get_engine())
