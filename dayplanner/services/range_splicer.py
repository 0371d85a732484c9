"""Splice an arbitrary time range into a day as a single block."""
from __future__ import annotations

from typing import Iterable, List

from dayplanner.services.errors import InvalidRangeError
from dayplanner.services.partition import MINUTES_PER_DAY, Block, Partition, Task
from dayplanner.services.time_range import parse_range


def splice_range(partition: Partition, start: int, span: int, new_tasks: Iterable[Task] = ()) -> Partition:
    """Return a partition in which ``[start, start + span)`` is exactly one block.

    Blocks overlapping the range collapse into: an optional left remainder (keeps
    the tasks of the first overlapping block), the new block holding ``new_tasks``,
    and an optional right remainder (keeps the tasks of the last overlapping block).

    NOTE: tasks of blocks lying wholly inside the range are dropped, not moved.
    Clients rely on this, so do not change it without a migration plan.
    """
    _check_range(start, span)
    end = start + span
    new_block = Block(start=start, span=span, tasks=tuple(new_tasks))

    result: List[Block] = []
    index = 0
    while index < len(partition) and partition[index].end <= start:
        result.append(partition[index])
        index += 1
    if index == len(partition):
        # A valid partition always reaches the end of the day.
        raise InvalidRangeError(f"Range [{start}, {end}) lies beyond the last block")

    first = partition[index]
    if first.start < start:
        result.append(Block(start=first.start, span=start - first.start, tasks=first.tasks))

    right_remainder = None
    while index < len(partition):
        current = partition[index]
        index += 1
        if current.end >= end:
            if current.end > end:
                right_remainder = Block(start=end, span=current.end - end, tasks=current.tasks)
            break

    result.append(new_block)
    if right_remainder is not None:
        result.append(right_remainder)
    result.extend(partition[index:])
    return tuple(result)


def splice_text_range(partition: Partition, text: str) -> Partition:
    """Parse a free-text range like ``"9:30 - 10:15pm"`` and splice it in with no tasks."""
    requested = parse_range(text)
    if requested.end_minute <= requested.start_minute:
        raise InvalidRangeError("End time must be after start time.")
    start = max(0, min(MINUTES_PER_DAY - 1, requested.start_minute))
    end = max(1, min(MINUTES_PER_DAY, requested.end_minute))
    return splice_range(partition, start, end - start)


def _check_range(start: int, span: int) -> None:
    if not 0 <= start < MINUTES_PER_DAY:
        raise InvalidRangeError(f"Start minute {start} is outside the day")
    if span < 1:
        raise InvalidRangeError(f"Span must be at least one minute, got {span}")
    if start + span > MINUTES_PER_DAY:
        raise InvalidRangeError(f"Range [{start}, {start + span}) runs past midnight")
