"""Weekly schedule: one partition per day, plus its snapshot codec."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterator, List, Mapping, Tuple

from pydantic import BaseModel, ConfigDict, Field, RootModel, ValidationError

from dayplanner.observability.metrics import log_metric
from dayplanner.services.errors import InvalidPartitionError, StorageCorruptError, UnknownDayError
from dayplanner.services.partition import (
    DAYS,
    Block,
    Partition,
    Task,
    default_day,
    validate_partition,
)

logger = logging.getLogger(__name__)


class _TaskRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", strict=True)

    id: str
    text: str
    done: bool = False


class _BlockRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", strict=True)

    start: int = Field(ge=0)
    span: int = Field(ge=1)
    tasks: List[_TaskRecord] = Field(default_factory=list)


class _SnapshotRecord(RootModel[Dict[str, List[_BlockRecord]]]):
    pass


class WeeklySchedule(Mapping[str, Partition]):
    """Immutable mapping from day name to that day's partition.

    Every day in ``DAYS`` is always present; updates return a new schedule.
    """

    __slots__ = ("_days",)

    def __init__(self, days: Mapping[str, Partition]) -> None:
        missing = [name for name in DAYS if name not in days]
        if missing:
            raise UnknownDayError(missing[0])
        extra = [name for name in days if name not in DAYS]
        if extra:
            raise UnknownDayError(extra[0])
        self._days: Dict[str, Partition] = {name: tuple(days[name]) for name in DAYS}

    @classmethod
    def default(cls) -> "WeeklySchedule":
        return cls({name: default_day() for name in DAYS})

    def __getitem__(self, day: str) -> Partition:
        return self.day(day)

    def __iter__(self) -> Iterator[str]:
        return iter(DAYS)

    def __len__(self) -> int:
        return len(DAYS)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, WeeklySchedule):
            return self._days == other._days
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(self._days[name] for name in DAYS))

    def __repr__(self) -> str:
        sizes = ", ".join(f"{name}={len(self._days[name])}" for name in DAYS)
        return f"WeeklySchedule({sizes})"

    def day(self, name: str) -> Partition:
        try:
            return self._days[name]
        except KeyError:
            raise UnknownDayError(name) from None

    def with_day(self, name: str, partition: Partition) -> "WeeklySchedule":
        if name not in self._days:
            raise UnknownDayError(name)
        if partition is self._days[name]:
            return self
        days = dict(self._days)
        days[name] = partition
        return WeeklySchedule(days)

    def reset_day(self, name: str) -> "WeeklySchedule":
        """Drop every block and task of ``name`` in favour of the default hourly day."""
        if name not in self._days:
            raise UnknownDayError(name)
        return self.with_day(name, default_day())

    def task_ids(self) -> Iterator[str]:
        for name in DAYS:
            for block in self._days[name]:
                for task in block.tasks:
                    yield task.id

    def to_snapshot(self) -> Dict[str, List[Dict[str, Any]]]:
        return {
            name: [
                {
                    "start": block.start,
                    "span": block.span,
                    "tasks": [{"id": task.id, "text": task.text, "done": task.done} for task in block.tasks],
                }
                for block in self._days[name]
            ]
            for name in DAYS
        }

    @classmethod
    def from_snapshot(cls, data: Any) -> "WeeklySchedule":
        """Decode a snapshot, raising StorageCorruptError on any structural problem."""
        try:
            record = _SnapshotRecord.model_validate(data)
        except ValidationError as exc:
            raise StorageCorruptError(f"Snapshot does not match the schedule shape: {exc.error_count()} errors") from exc

        days: Dict[str, Partition] = {}
        for name in DAYS:
            if name not in record.root:
                raise StorageCorruptError(f"Snapshot is missing {name}")
            blocks: Tuple[Block, ...] = tuple(
                Block(
                    start=item.start,
                    span=item.span,
                    tasks=tuple(Task(id=task.id, text=task.text, done=task.done) for task in item.tasks),
                )
                for item in record.root[name]
            )
            try:
                days[name] = validate_partition(blocks)
            except InvalidPartitionError as exc:
                raise StorageCorruptError(f"{name}: {exc}") from exc
        return cls(days)


def load_schedule(raw: str | bytes | None) -> WeeklySchedule:
    """Decode a stored snapshot; anything missing or unreadable yields the default week."""
    if raw is None or (isinstance(raw, (str, bytes)) and not raw.strip()):
        return WeeklySchedule.default()
    try:
        return WeeklySchedule.from_snapshot(json.loads(raw))
    except (ValueError, RecursionError, StorageCorruptError) as exc:
        logger.warning("Stored schedule is unreadable, falling back to defaults: %s", exc)
        log_metric("schedule.load.corrupt", 1, metadata={"error": type(exc).__name__})
        return WeeklySchedule.default()


def dump_schedule(schedule: WeeklySchedule) -> str:
    return json.dumps(schedule.to_snapshot(), separators=(",", ":"))
