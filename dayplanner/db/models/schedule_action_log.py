"""Schedule mutation audit log ORM model."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Column, DateTime, ForeignKey, Index, Text, func
from sqlalchemy.dialects.postgresql import UUID

from dayplanner.db.base import Base
from dayplanner.db.types import JSONBCompat


class ScheduleActionLog(Base):
    __tablename__ = "schedule_action_log"
    __table_args__ = (Index("ix_schedule_action_log_user_id", "user_id"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    action_type = Column(Text, nullable=False)
    day = Column(Text, nullable=True)
    action_payload = Column(JSONBCompat, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
