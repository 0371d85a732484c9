"""Merge adjacent blocks and split oversized ones."""
from __future__ import annotations

import logging

from dayplanner.services.partition import Block, Partition

logger = logging.getLogger(__name__)

BASE_UNIT_MINUTES = 60


def merge_adjacent(partition: Partition, index: int) -> Partition:
    """Fold block ``index + 1`` into block ``index``.

    Tasks are concatenated left block first. Returns ``partition`` itself when there
    is no following block or the pair is not adjacent.
    """
    if not 0 <= index < len(partition) - 1:
        logger.debug("Merge at index %s ignored: no following block", index)
        return partition
    left, right = partition[index], partition[index + 1]
    if left.end != right.start:
        logger.debug("Merge at index %s ignored: blocks are not adjacent", index)
        return partition

    merged = Block(start=left.start, span=left.span + right.span, tasks=left.tasks + right.tasks)
    return partition[:index] + (merged,) + partition[index + 2 :]


def split_slot(partition: Partition, index: int, base_unit: int = BASE_UNIT_MINUTES) -> Partition:
    """Cut one ``base_unit`` off the front of block ``index``.

    The head keeps every task and the remainder starts empty, so a split never
    restores the boundaries of an earlier merge. Blocks no longer than
    ``base_unit`` are left alone.
    """
    if base_unit < 1:
        raise ValueError("base_unit must be at least one minute")
    if not 0 <= index < len(partition) or partition[index].span <= base_unit:
        logger.debug("Split at index %s ignored: block is not longer than %s minutes", index, base_unit)
        return partition

    block = partition[index]
    head = Block(start=block.start, span=base_unit, tasks=block.tasks)
    rest = Block(start=block.start + base_unit, span=block.span - base_unit)
    return partition[:index] + (head, rest) + partition[index + 1 :]
