"""Wall-clock helpers.

Attendance times are stored as ``HH:MM`` strings (24-hour, local time) and all
shift arithmetic happens on minute-of-day integers in ``[0, 1440)``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..core.constants import MINUTES_PER_DAY, OPEN_DURATION_LABEL
from ..core.exceptions import InvalidTimeError


def parse_clock(value: str) -> int:
    """Parse ``HH:MM`` into minutes since midnight.

    Raises InvalidTimeError on anything that is not a valid 24-hour time.
    """
    if not isinstance(value, str):
        raise InvalidTimeError(f"Invalid time: {value!r}")

    parts = value.strip().split(":")
    if len(parts) != 2:
        raise InvalidTimeError(f"Invalid time: {value!r}")

    hh, mm = parts
    if not (1 <= len(hh) <= 2 and hh.isdigit()) or not (len(mm) == 2 and mm.isdigit()):
        raise InvalidTimeError(f"Invalid time: {value!r}")

    hours, minutes = int(hh), int(mm)
    if hours > 23 or minutes > 59:
        raise InvalidTimeError(f"Invalid time: {value!r}")
    return hours * 60 + minutes


def format_clock(minutes: int) -> str:
    minutes = int(minutes) % MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def duration_minutes(in_time: str, out_time: Optional[str]) -> Optional[int]:
    """Minutes on duty, wrapping past midnight.

    Returns None when the out-time is missing or unparsable: "not yet closed" is
    not the same thing as zero minutes. A malformed in-time is an error.
    """
    start = parse_clock(in_time)
    if is_blank(out_time):
        return None
    try:
        end = parse_clock(out_time)
    except InvalidTimeError:
        return None
    return (end - start) % MINUTES_PER_DAY


def format_duration(minutes: Optional[int]) -> str:
    if minutes is None:
        return OPEN_DURATION_LABEL
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def format_clock_12h(value: Optional[str]) -> str:
    """``19:05`` -> ``7:05 PM`` for printed reports."""
    if is_blank(value):
        return OPEN_DURATION_LABEL
    minutes = parse_clock(value)
    hours, mins = divmod(minutes, 60)
    ampm = "PM" if hours >= 12 else "AM"
    hours = hours % 12 or 12
    return f"{hours}:{mins:02d} {ampm}"


def clock_from_datetime(value: datetime) -> str:
    return f"{value.hour:02d}:{value.minute:02d}"
