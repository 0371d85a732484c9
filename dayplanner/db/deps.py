"""FastAPI dependencies for database access."""
from __future__ import annotations

from typing import Iterator

from sqlalchemy.orm import Session

from dayplanner.db.session import SessionLocal, get_engine


def get_db() -> Iterator[Session]:
    """Yield a session per request and always close it."""
    get_engine()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
