"""Weekly schedule snapshot ORM model."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Column, DateTime, ForeignKey, Index, Text, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import UUID

from dayplanner.db.base import Base


class ScheduleSnapshot(Base):
    __tablename__ = "schedule_snapshots"
    __table_args__ = (
        UniqueConstraint("user_id", "storage_key", name="uq_schedule_snapshots_user_key"),
        Index("ix_schedule_snapshots_user_id", "user_id"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    storage_key = Column(Text, nullable=False)
    # Raw JSON text: the loader owns parsing so a corrupt value degrades to the default schedule.
    payload = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
