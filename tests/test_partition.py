"""Tests for day partition invariants and lookups."""
from __future__ import annotations

import random

import pytest

from dayplanner.services.errors import BlockNotFoundError, InvalidPartitionError
from dayplanner.services.partition import (
    MINUTES_PER_DAY,
    Block,
    Task,
    block_at,
    covers,
    default_day,
    find_current_block_index,
    replace_block,
    upcoming_window,
    validate_partition,
)
from dayplanner.services.range_splicer import splice_range
from dayplanner.services.slot_merger import merge_adjacent, split_slot
from dayplanner.services.task_ledger import add_task


def test_default_day_is_24_hourly_blocks() -> None:
    day = default_day()

    assert len(day) == 24
    assert [(block.start, block.span) for block in day] == [(hour * 60, 60) for hour in range(24)]
    assert all(block.tasks == () for block in day)
    assert covers(day)


@pytest.mark.parametrize(
    "blocks",
    [
        (),
        (Block(start=5, span=MINUTES_PER_DAY - 5),),
        (Block(start=0, span=60), Block(start=90, span=MINUTES_PER_DAY - 90)),
        (Block(start=0, span=60), Block(start=30, span=MINUTES_PER_DAY - 30)),
        (Block(start=0, span=0), Block(start=0, span=MINUTES_PER_DAY)),
        (Block(start=0, span=600),),
    ],
)
def test_covers_rejects_broken_partitions(blocks) -> None:
    assert covers(blocks) is False
    with pytest.raises(InvalidPartitionError):
        validate_partition(blocks)


def test_single_block_day_is_valid() -> None:
    day = (Block(start=0, span=MINUTES_PER_DAY),)
    assert validate_partition(day) is day


def test_block_at_rejects_out_of_range_indices() -> None:
    day = default_day()
    assert block_at(day, 23).start == 23 * 60
    with pytest.raises(BlockNotFoundError):
        block_at(day, 24)
    with pytest.raises(BlockNotFoundError):
        block_at(day, -1)


def test_replace_block_must_keep_the_same_minutes() -> None:
    day = default_day()
    with_task = Block(start=60, span=60, tasks=(Task(id="t1", text="stretch"),))

    updated = replace_block(day, 1, with_task)
    assert updated[1] is with_task
    assert day[1].tasks == ()

    with pytest.raises(InvalidPartitionError):
        replace_block(day, 1, Block(start=60, span=30))


def test_find_current_block_index_and_upcoming_window() -> None:
    day = splice_range(default_day(), 9 * 60 + 30, 45)

    index = find_current_block_index(day, 9 * 60 + 40)
    assert (day[index].start, day[index].span) == (570, 45)

    window = upcoming_window(day, 9 * 60 + 40, size=3)
    assert [(block.start, block.end) for block in window] == [(570, 615), (615, 660), (660, 720)]

    # Minutes wrap around midnight.
    assert find_current_block_index(day, MINUTES_PER_DAY + 5) == 0


def test_upcoming_window_is_truncated_at_end_of_day() -> None:
    window = upcoming_window(default_day(), 23 * 60 + 10, size=3)
    assert [block.start for block in window] == [23 * 60]


def test_random_operation_sequences_keep_the_day_partitioned() -> None:
    rng = random.Random(1440)
    day = default_day()

    for _ in range(500):
        op = rng.choice(["merge", "split", "splice", "task"])
        index = rng.randrange(len(day))
        if op == "merge":
            day = merge_adjacent(day, index)
        elif op == "split":
            day = split_slot(day, index)
        elif op == "splice":
            start = rng.randrange(MINUTES_PER_DAY)
            span = rng.randint(1, MINUTES_PER_DAY - start)
            day = splice_range(day, start, span, (Task(id=f"s{_}", text="spliced"),))
        else:
            day = replace_block(day, index, add_task(day[index], "note"))
        assert covers(day), op
