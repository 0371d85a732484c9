"""Exceptions raised by the schedule engine."""
from __future__ import annotations


class ScheduleError(Exception):
    """Base class for schedule engine failures."""


class StorageCorruptError(ScheduleError):
    """A persisted snapshot could not be decoded into a valid weekly schedule."""


class InvalidPartitionError(ScheduleError):
    """A sequence of blocks does not partition the day."""


class InvalidRangeError(ScheduleError, ValueError):
    """A requested time range is unparsable, empty, or outside the day."""


class UnknownDayError(ScheduleError, KeyError):
    """The day name is not one of the seven schedule days."""

    def __str__(self) -> str:
        return f"Unknown day: {self.args[0]!r}" if self.args else "Unknown day"


class BlockNotFoundError(ScheduleError, IndexError):
    """A block index does not address a block of the partition."""
