"""Tests for merging and splitting blocks."""
from __future__ import annotations

import pytest

from dayplanner.services.partition import Block, Task, covers, default_day, replace_block
from dayplanner.services.slot_merger import BASE_UNIT_MINUTES, merge_adjacent, split_slot


def _with_tasks(day, index, *texts):
    block = day[index]
    tasks = tuple(Task(id=f"{index}-{n}", text=text) for n, text in enumerate(texts))
    return replace_block(day, index, Block(start=block.start, span=block.span, tasks=tasks))


def test_merge_concatenates_tasks_left_first() -> None:
    day = _with_tasks(default_day(), 0, "a1", "a2")
    day = _with_tasks(day, 1, "b1")

    merged = merge_adjacent(day, 0)

    assert len(merged) == 23
    assert (merged[0].start, merged[0].span) == (0, 120)
    assert [task.text for task in merged[0].tasks] == ["a1", "a2", "b1"]
    assert merged[1:] == day[2:]
    assert covers(merged)


def test_merge_on_last_block_is_a_noop() -> None:
    day = default_day()
    assert merge_adjacent(day, len(day) - 1) is day
    assert merge_adjacent(day, 99) is day


def test_merge_on_non_adjacent_pair_is_a_noop() -> None:
    broken = (Block(start=0, span=60), Block(start=90, span=1350))
    assert merge_adjacent(broken, 0) is broken


def test_split_keeps_all_tasks_on_the_head() -> None:
    day = merge_adjacent(_with_tasks(default_day(), 0, "deep work"), 0)

    split = split_slot(day, 0)

    assert [(block.start, block.span) for block in split[:2]] == [(0, 60), (60, 60)]
    assert [task.text for task in split[0].tasks] == ["deep work"]
    assert split[1].tasks == ()
    assert covers(split)


def test_split_at_or_below_base_unit_is_a_noop() -> None:
    day = default_day()
    assert split_slot(day, 3) is day
    assert BASE_UNIT_MINUTES == 60


def test_merge_then_split_is_not_an_inverse() -> None:
    day = merge_adjacent(merge_adjacent(default_day(), 0), 0)
    assert (day[0].start, day[0].span) == (0, 180)

    split = split_slot(day, 0)

    assert [(block.start, block.span) for block in split[:2]] == [(0, 60), (60, 120)]
    assert split[2].start == 180


def test_split_honours_a_custom_base_unit() -> None:
    day = merge_adjacent(default_day(), 0)

    split = split_slot(day, 0, base_unit=30)

    assert [(block.start, block.span) for block in split[:2]] == [(0, 30), (30, 90)]
    assert split_slot(day, 0, base_unit=120) is day
    with pytest.raises(ValueError):
        split_slot(day, 0, base_unit=0)
