"""Free-text time and time-range parsing.

Accepted forms for one side of a range: ``9``, ``9:30``, ``9 30``, ``930``,
``2130``, each optionally followed by ``am``/``pm``. Sides are separated by ``-``,
an en dash, ``~`` or the word ``to``.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

from dayplanner.services.errors import InvalidRangeError

_SEPARATOR = re.compile(r"-|–|~|to", re.IGNORECASE)
_COLON_FORM = re.compile(r"^(\d{1,2}):(\d{1,2})$")
_DIGITS_FORM = re.compile(r"^\d{3,4}$")


@dataclass(frozen=True)
class TimeRange:
    start_minute: int
    end_minute: int

    @property
    def span(self) -> int:
        return self.end_minute - self.start_minute


def parse_time_to_minutes(text: str) -> int:
    """Return the minute of day described by ``text``; hours clamp to 0-23, minutes to 0-59."""
    value = (text or "").strip().lower()
    if not value:
        raise InvalidRangeError("Empty time")

    meridiem = None
    if value.endswith("am") or value.endswith("pm"):
        meridiem = value[-2:]
        value = value[:-2].strip()
    value = re.sub(r"\s+", " ", re.sub(r"[^\d:]", " ", value)).strip()

    colon = _COLON_FORM.match(value)
    if colon:
        hour, minute = int(colon.group(1)), int(colon.group(2))
    elif _DIGITS_FORM.match(value):
        number = int(value)
        hour, minute = divmod(number, 100)
    else:
        parts = value.split(" ")
        if len(parts) > 2 or not all(part.isdigit() for part in parts):
            raise InvalidRangeError(f"Could not parse time {text!r}")
        hour = int(parts[0])
        minute = int(parts[1]) if len(parts) == 2 else 0

    if meridiem == "pm" and hour < 12:
        hour += 12
    elif meridiem == "am" and hour == 12:
        hour = 0
    hour = max(0, min(23, hour))
    minute = max(0, min(59, minute))
    return hour * 60 + minute


def parse_range(text: str) -> TimeRange:
    """Parse ``"<start> <sep> <end>"`` into minutes. Ordering is the caller's concern."""
    parts = _SEPARATOR.split(text or "")
    if len(parts) < 2:
        raise InvalidRangeError("Please enter a start and end time, like 9:30 - 10:00.")
    return TimeRange(
        start_minute=parse_time_to_minutes(parts[0]),
        end_minute=parse_time_to_minutes(parts[1]),
    )
