"""Immutable representation of one day as a partition of time blocks."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from dayplanner.services.errors import BlockNotFoundError, InvalidPartitionError

MINUTES_PER_DAY = 1440
DAYS: Tuple[str, ...] = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)


@dataclass(frozen=True)
class Task:
    id: str
    text: str
    done: bool = False


@dataclass(frozen=True)
class Block:
    start: int
    span: int
    tasks: Tuple[Task, ...] = field(default=())

    @property
    def end(self) -> int:
        return self.start + self.span


Partition = Tuple[Block, ...]


def default_day() -> Partition:
    """Return 24 empty one-hour blocks."""
    return tuple(Block(start=hour * 60, span=60) for hour in range(24))


def covers(partition: Partition) -> bool:
    """True when the blocks are sorted, contiguous, positive and span exactly one day."""
    return _first_violation(partition) is None


def validate_partition(partition: Partition) -> Partition:
    """Return ``partition`` unchanged or raise InvalidPartitionError."""
    problem = _first_violation(partition)
    if problem:
        raise InvalidPartitionError(problem)
    return partition


def _first_violation(partition: Partition) -> str | None:
    if not partition:
        return "partition has no blocks"
    if partition[0].start != 0:
        return f"first block starts at {partition[0].start}, expected 0"
    previous_end = 0
    for index, block in enumerate(partition):
        if block.span < 1:
            return f"block {index} has span {block.span}"
        if block.start != previous_end:
            return f"block {index} starts at {block.start}, expected {previous_end}"
        previous_end = block.end
    if previous_end != MINUTES_PER_DAY:
        return f"last block ends at {previous_end}, expected {MINUTES_PER_DAY}"
    return None


def block_at(partition: Partition, index: int) -> Block:
    if not 0 <= index < len(partition):
        raise BlockNotFoundError(f"No block at index {index} (day has {len(partition)} blocks)")
    return partition[index]


def replace_block(partition: Partition, index: int, block: Block) -> Partition:
    """Swap the block at ``index`` for one covering exactly the same minutes."""
    current = block_at(partition, index)
    if (current.start, current.span) != (block.start, block.span):
        raise InvalidPartitionError(
            f"replacement for block {index} must keep [{current.start}, {current.end})"
        )
    return partition[:index] + (block,) + partition[index + 1 :]


def find_current_block_index(partition: Partition, minute: int) -> int:
    """Index of the block containing ``minute`` (taken modulo one day)."""
    minute %= MINUTES_PER_DAY
    for index, block in enumerate(partition):
        if block.start <= minute < block.end:
            return index
    # Unreachable for a valid partition; mirror the widget and fall back to the last block.
    return max(0, len(partition) - 1)


def upcoming_window(partition: Partition, minute: int, size: int = 3) -> Partition:
    """The block holding ``minute`` followed by up to ``size - 1`` later blocks."""
    index = find_current_block_index(partition, minute)
    return partition[index : index + max(size, 1)]
