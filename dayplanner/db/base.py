"""Declarative base shared by all ORM models."""
from __future__ import annotations

from sqlalchemy.orm import declarative_base

Base = declarative_base()
