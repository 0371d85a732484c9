"""Engine and session factory bound to the configured database."""
from __future__ import annotations

from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from dayplanner.core.config import settings

SessionLocal = sessionmaker(autoflush=False, autocommit=False, future=True)


@lru_cache
def get_engine() -> Engine:
    """Create the engine on first use so importing the app never opens a connection."""
    engine = create_engine(settings.database_url, pool_pre_ping=True, future=True)
    SessionLocal.configure(bind=engine)
    return engine
