"""Tests for task id minting."""
from __future__ import annotations

from dayplanner.services.task_ids import TaskIdFactory, new_task_id


def test_ids_never_repeat() -> None:
    ids = [new_task_id() for _ in range(10_000)]
    assert len(set(ids)) == len(ids)


def test_reserved_ids_are_never_minted() -> None:
    factory = TaskIdFactory(prefix="p")
    factory.reserve(["p-1", "p-2", "p-4"])

    minted = [factory() for _ in range(3)]

    assert minted == ["p-5", "p-6", "p-7"]
    assert not {"p-1", "p-2", "p-4"} & set(minted)


def test_reserving_lower_ids_does_not_rewind_the_counter() -> None:
    factory = TaskIdFactory(prefix="p")
    assert [factory(), factory(), factory()] == ["p-1", "p-2", "p-3"]

    factory.reserve(["p-2"])

    assert factory() == "p-4"


def test_reserve_keeps_no_state_for_foreign_or_malformed_ids() -> None:
    factory = TaskIdFactory(prefix="p")
    before = dict(vars(factory))

    factory.reserve(f"other-{n}" for n in range(5_000))
    factory.reserve(["p-", "p-x1", "p-12a", "pp-9", "p-٣"])

    assert vars(factory).keys() == before.keys()
    assert factory._next == before["_next"]
    assert factory() == "p-1"


def test_loading_many_schedules_keeps_the_default_factory_bounded() -> None:
    size_before = len(vars(new_task_id))

    for n in range(1_000):
        new_task_id.reserve([f"other-{n}"])

    assert len(vars(new_task_id)) == size_before
    assert not any(isinstance(value, (set, list, dict)) for value in vars(new_task_id).values())


def test_factories_use_distinct_prefixes_by_default() -> None:
    first, second = TaskIdFactory(), TaskIdFactory()
    assert first.prefix != second.prefix
