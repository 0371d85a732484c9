"""Replay one block's time range (and tasks) on every day of the week."""
from __future__ import annotations

import logging
from dataclasses import replace
from enum import Enum
from typing import Callable, Dict, Tuple

from dayplanner.services.partition import DAYS, Partition, Task, block_at
from dayplanner.services.range_splicer import splice_range
from dayplanner.services.task_ids import new_task_id
from dayplanner.services.task_ledger import copy_tasks
from dayplanner.services.weekly_schedule import WeeklySchedule

logger = logging.getLogger(__name__)


class PropagationMode(str, Enum):
    REPLACE = "replace"
    APPEND = "append"


def apply_block_to_all_days(
    schedule: WeeklySchedule,
    source_day: str,
    block_index: int,
    mode: PropagationMode | str = PropagationMode.REPLACE,
    id_factory: Callable[[], str] = new_task_id,
) -> WeeklySchedule:
    """Make the source block's ``[start, start + span)`` a block on all seven days.

    ``replace``: each day's new block holds fresh copies of the source tasks and
    nothing else. ``append``: tasks a day already had on exactly that range are
    kept and the copies are added after them. Copies get new ids per day.
    """
    mode = PropagationMode(mode)
    source = block_at(schedule.day(source_day), block_index)

    days: Dict[str, Partition] = {}
    for name in DAYS:
        if mode is PropagationMode.REPLACE:
            days[name] = splice_range(
                schedule.day(name), source.start, source.span, copy_tasks(source.tasks, id_factory)
            )
        else:
            days[name] = _append_into_range(schedule.day(name), source.start, source.span, source.tasks, id_factory)

    logger.debug(
        "Applied [%s, %s) from %s to all days (mode=%s, tasks=%s)",
        source.start,
        source.end,
        source_day,
        mode.value,
        len(source.tasks),
    )
    return WeeklySchedule(days)


def _append_into_range(
    partition: Partition,
    start: int,
    span: int,
    tasks: Tuple[Task, ...],
    id_factory: Callable[[], str],
) -> Partition:
    # The splice below only keeps existing tasks through its remainders, so an exact
    # pre-existing block must be carried over by hand. The widget this replaces spliced
    # with no tasks and lost them; append mode must keep what the day already had.
    existing = next((block for block in partition if block.start == start and block.span == span), None)
    reshaped = splice_range(partition, start, span, existing.tasks if existing else ())
    return tuple(
        replace(block, tasks=block.tasks + copy_tasks(tasks, id_factory))
        if block.start == start and block.span == span
        else block
        for block in reshaped
    )
