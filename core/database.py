# =============================================================================
# core/database.py - Database Engine and Sessions
# =============================================================================
# SQLAlchemy engine and session factory for the relational store.
#
# Usage:
#   from core.database import get_db
#
#   @router.get("/things")
#   def list_things(db: Session = Depends(get_db)):
#       ...
# =============================================================================

import logging

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import settings
from core.entities import Base

logger = logging.getLogger(__name__)


def build_engine(database_url: str) -> Engine:
    """
    Create an engine for the given URL.

    SQLite needs check_same_thread disabled for use from the threadpool,
    and an in-memory SQLite database must share one connection.
    """
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)

    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_recycle=3600,
    )


engine = build_engine(settings.DATABASE_URL)

if settings.is_production and settings.DATABASE_URL.startswith("sqlite"):
    logger.warning("Using SQLite in production is not recommended")

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


def get_db():
    """FastAPI dependency yielding a database session per request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Create all tables that don't exist yet."""
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready")


def check_database() -> str:
    """
    Probe the database with a trivial query.

    Returns:
        "healthy", or "unhealthy: <reason>" (truncated)
    """
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return "healthy"
    except Exception as e:
        return f"unhealthy: {str(e)[:50]}"


def dispose_engine() -> None:
    """Close pooled connections (called on shutdown)."""
    engine.dispose()
    logger.info("Database connections closed")
