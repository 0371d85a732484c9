"""ORM models exposed for metadata discovery."""
from dayplanner.db.models.schedule_action_log import ScheduleActionLog
from dayplanner.db.models.schedule_snapshot import ScheduleSnapshot
from dayplanner.db.models.user import User

__all__ = [
    "ScheduleActionLog",
    "ScheduleSnapshot",
    "User",
]
