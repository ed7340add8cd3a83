"""
Doubt Solver: Database Engine
SQLAlchemy setup. Works with SQLite (dev) and PostgreSQL (prod).
"""

import logging

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from sqlalchemy.pool import StaticPool

from doubtsolver.config import DATABASE_URL, RESET_DATABASE

logger = logging.getLogger(__name__)


# ─── Engine Setup ────────────────────────────────────────────────────────────

_is_sqlite = DATABASE_URL.startswith("sqlite")

if _is_sqlite:
    # StaticPool keeps one shared connection, so an in-memory sqlite:// database
    # is the same database in every session. check_same_thread=False lets that
    # connection be used from FastAPI's request threadpool.
    engine = create_engine(
        DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, _connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
else:
    engine = create_engine(
        DATABASE_URL,
        pool_size=10,
        max_overflow=20,
        pool_pre_ping=True,
        echo=False,
    )


# ─── Session Factory ─────────────────────────────────────────────────────────

SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


# ─── Base Class ──────────────────────────────────────────────────────────────

class Base(DeclarativeBase):
    """Doubt, WeakTopic and DailyTask tables."""


def init_db():
    """Create all tables if absent. Called once at startup."""
    # Register models on Base.metadata
    from doubtsolver import models  # noqa: F401

    if RESET_DATABASE:
        logger.warning("RESET_DATABASE=true, dropping all tables!")
        Base.metadata.drop_all(bind=engine)

    Base.metadata.create_all(bind=engine)
    logger.info(f"Database ready ({engine.dialect.name})")
