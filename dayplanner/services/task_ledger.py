"""Task CRUD inside a single block."""
from __future__ import annotations

from dataclasses import replace
from typing import Any, Callable, Iterable, Mapping, Tuple

from dayplanner.services.partition import Block, Task
from dayplanner.services.task_ids import new_task_id

PATCHABLE_FIELDS = frozenset({"text", "done"})


def add_task(block: Block, text: str, id_factory: Callable[[], str] = new_task_id) -> Block:
    """Append a new, not-done task."""
    task = Task(id=id_factory(), text=text, done=False)
    return replace(block, tasks=block.tasks + (task,))


def update_task(block: Block, task_id: str, patch: Mapping[str, Any]) -> Block:
    """Apply ``patch`` to the task with ``task_id``; unknown ids leave the block as is."""
    unknown = set(patch) - PATCHABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot patch task fields: {', '.join(sorted(unknown))}")
    if not any(task.id == task_id for task in block.tasks):
        return block
    tasks = tuple(replace(task, **patch) if task.id == task_id else task for task in block.tasks)
    return replace(block, tasks=tasks)


def remove_task(block: Block, task_id: str) -> Block:
    tasks = tuple(task for task in block.tasks if task.id != task_id)
    if len(tasks) == len(block.tasks):
        return block
    return replace(block, tasks=tasks)


def copy_tasks(tasks: Iterable[Task], id_factory: Callable[[], str] = new_task_id) -> Tuple[Task, ...]:
    """Duplicate tasks under fresh ids so the copies share no identity with the originals."""
    return tuple(Task(id=id_factory(), text=task.text, done=task.done) for task in tasks)
