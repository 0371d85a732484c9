"""Task id minting."""
from __future__ import annotations

import itertools
from threading import Lock
from typing import Iterable
from uuid import uuid4


class TaskIdFactory:
    """Mint task ids that cannot collide.

    Ids look like ``"<prefix>-<n>"``: ``prefix`` is fixed per factory and ``n`` only
    grows, so one factory never repeats itself. Ids already present in a loaded
    schedule are passed to :meth:`reserve`, which moves ``n`` past any of them
    that this factory could otherwise mint again.
    """

    def __init__(self, prefix: str | None = None) -> None:
        self.prefix = prefix or uuid4().hex[:8]
        self._next = 1
        self._counter = itertools.count(self._next)
        self._lock = Lock()

    def reserve(self, ids: Iterable[str]) -> None:
        # Ids under another prefix can never be minted here, so only the highest
        # own suffix matters and nothing is retained.
        marker = f"{self.prefix}-"
        highest = 0
        for task_id in ids:
            if not task_id.startswith(marker):
                continue
            suffix = task_id[len(marker) :]
            if suffix.isascii() and suffix.isdigit():
                highest = max(highest, int(suffix))
        with self._lock:
            if highest >= self._next:
                self._next = highest + 1
                self._counter = itertools.count(self._next)

    def __call__(self) -> str:
        with self._lock:
            self._next = next(self._counter) + 1
            return f"{self.prefix}-{self._next - 1}"


new_task_id = TaskIdFactory()
