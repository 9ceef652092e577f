"""Engine and session factory.

The engine is created on first use so importing the application does not
open a database connection.
"""

from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from umuturage.core.config import get_settings


@lru_cache
def get_engine() -> Engine:
    settings = get_settings()
    return create_engine(settings.database_url, pool_pre_ping=True, echo=settings.db_echo)


@lru_cache
def get_session_factory() -> sessionmaker:
    return sessionmaker(bind=get_engine(), autocommit=False, autoflush=False)


def create_session() -> Session:
    """Open a new session bound to the configured database."""
    return get_session_factory()()
