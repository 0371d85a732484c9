"""Load and save weekly schedules for a user."""
from __future__ import annotations

import logging
from typing import Any, Dict
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from dayplanner.core.config import settings
from dayplanner.db.models.schedule_action_log import ScheduleActionLog
from dayplanner.db.models.schedule_snapshot import ScheduleSnapshot
from dayplanner.db.models.user import User
from dayplanner.services.task_ids import new_task_id
from dayplanner.services.weekly_schedule import WeeklySchedule, dump_schedule, load_schedule

logger = logging.getLogger(__name__)


def get_or_create_user(db: Session, user_id: UUID) -> User:
    """Fetch an existing user or create a new row safely."""
    user = db.get(User, user_id)
    if user:
        return user

    user = User(id=user_id)
    db.add(user)
    try:
        db.flush()
        return user
    except IntegrityError:
        db.rollback()
        existing = db.get(User, user_id)
        if existing:
            return existing
        raise


def get_snapshot_row(db: Session, user_id: UUID, storage_key: str | None = None) -> ScheduleSnapshot | None:
    key = storage_key or settings.schedule_storage_key
    return (
        db.query(ScheduleSnapshot)
        .filter(ScheduleSnapshot.user_id == user_id, ScheduleSnapshot.storage_key == key)
        .one_or_none()
    )


def load_user_schedule(db: Session, user_id: UUID, storage_key: str | None = None) -> WeeklySchedule:
    """Return the user's schedule, or the default week if nothing usable is stored."""
    row = get_snapshot_row(db, user_id, storage_key)
    schedule = load_schedule(row.payload if row else None)
    # Ids minted from now on must not clash with ids that came back from storage.
    new_task_id.reserve(schedule.task_ids())
    return schedule


def save_user_schedule(
    db: Session,
    user_id: UUID,
    schedule: WeeklySchedule,
    *,
    action_type: str,
    day: str | None = None,
    payload: Dict[str, Any] | None = None,
    storage_key: str | None = None,
) -> ScheduleSnapshot:
    """Write the full snapshot and an audit row in one transaction."""
    key = storage_key or settings.schedule_storage_key
    get_or_create_user(db, user_id)

    row = get_snapshot_row(db, user_id, key)
    if row is None:
        row = ScheduleSnapshot(user_id=user_id, storage_key=key)
    row.payload = dump_schedule(schedule)
    db.add(row)

    db.add(
        ScheduleActionLog(
            user_id=user_id,
            action_type=action_type,
            day=day,
            action_payload=dict(payload or {}),
        )
    )
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(row)
    logger.info("Saved schedule for user %s (action=%s, day=%s)", user_id, action_type, day or "-")
    return row
