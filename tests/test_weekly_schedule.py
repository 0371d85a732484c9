"""Tests for the weekly schedule mapping and its snapshot codec."""
from __future__ import annotations

import json

import pytest

from dayplanner.services.errors import StorageCorruptError, UnknownDayError
from dayplanner.services.partition import DAYS, Task, default_day
from dayplanner.services.range_splicer import splice_range
from dayplanner.services.weekly_schedule import WeeklySchedule, dump_schedule, load_schedule


def _sample_schedule() -> WeeklySchedule:
    schedule = WeeklySchedule.default()
    friday = splice_range(schedule.day("Friday"), 1020, 90, (Task(id="f1", text="movie", done=True),))
    return schedule.with_day("Friday", friday)


def test_default_schedule_has_seven_hourly_days() -> None:
    schedule = WeeklySchedule.default()

    assert list(schedule) == list(DAYS)
    assert all(schedule[name] == default_day() for name in DAYS)


def test_with_day_returns_a_new_schedule() -> None:
    schedule = WeeklySchedule.default()

    updated = _sample_schedule()

    assert updated != schedule
    assert schedule.day("Friday") == default_day()
    assert updated.day("Monday") is not None
    assert schedule.with_day("Monday", schedule.day("Monday")) is schedule


def test_reset_day_restores_hourly_blocks_and_drops_tasks() -> None:
    schedule = _sample_schedule()

    reset = schedule.reset_day("Friday")

    assert reset.day("Friday") == default_day()
    assert list(reset.task_ids()) == []


def test_unknown_days_are_rejected() -> None:
    schedule = WeeklySchedule.default()
    with pytest.raises(UnknownDayError):
        schedule.day("Caturday")
    with pytest.raises(UnknownDayError):
        schedule.reset_day("Caturday")
    assert schedule.get("Caturday") is None


def test_snapshot_shape_matches_stored_format() -> None:
    snapshot = _sample_schedule().to_snapshot()

    assert set(snapshot) == set(DAYS)
    friday = snapshot["Friday"]
    movie_block = next(block for block in friday if block["start"] == 1020)
    assert movie_block == {"start": 1020, "span": 90, "tasks": [{"id": "f1", "text": "movie", "done": True}]}
    assert json.loads(dump_schedule(_sample_schedule())) == snapshot


def test_load_schedule_restores_a_dumped_schedule() -> None:
    schedule = _sample_schedule()
    assert load_schedule(dump_schedule(schedule)) == schedule


@pytest.mark.parametrize(
    "raw",
    [
        None,
        "",
        "{not json",
        "[]",
        json.dumps({"Monday": []}),
        json.dumps({name: [{"start": 0, "span": 60, "tasks": []}] for name in DAYS}),
        json.dumps({name: [{"start": 0, "span": "1440", "tasks": []}] for name in DAYS}),
        json.dumps({name: [{"start": 0, "span": 1440, "tasks": [{"text": "no id"}]}] for name in DAYS}),
        "[" * 100_000 + "]" * 100_000,
    ],
)
def test_load_schedule_falls_back_to_default(raw) -> None:
    assert load_schedule(raw) == WeeklySchedule.default()


def test_from_snapshot_reports_corruption() -> None:
    with pytest.raises(StorageCorruptError):
        WeeklySchedule.from_snapshot({"Monday": "nope"})
