"""
SQLAlchemy engine for raw parameterized SQL against the Supabase Postgres
database, plus the test-mode switch.
"""

import os
import logging
from typing import Optional
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

_engine: Optional[Engine] = None


def is_test_mode() -> bool:
    """True when APP_ENV=test or TEST_MODE=true."""
    return (
        os.environ.get("APP_ENV", "").lower() == "test"
        or os.environ.get("TEST_MODE", "").lower() == "true"
    )


def get_database_url() -> str:
    """Get the Postgres connection string from environment variables."""
    url = os.environ.get("DATABASE_URL")
    if not url:
        raise ValueError("DATABASE_URL environment variable not set")
    return url


def get_engine() -> Engine:
    """Lazily create the shared engine."""
    global _engine

    if _engine is None:
        _engine = create_engine(get_database_url(), pool_pre_ping=True)
        logger.info("Database engine initialized")

    return _engine


def set_engine(engine: Optional[Engine]) -> None:
    """Replace the shared engine (used by tests)."""
    global _engine
    _engine = engine
