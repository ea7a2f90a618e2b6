from __future__ import annotations

from dataclasses import dataclass

from ..common.clock import format_clock, parse_clock
from ..core.constants import MINUTES_PER_DAY


@dataclass(frozen=True)
class ShiftBand:
    """A named time-of-day band, half-open ``[start, end)`` on the 24h circle.

    ``end_minute <= start_minute`` means the band wraps past midnight.
    """

    band_id: str
    name: str
    start_minute: int
    end_minute: int

    def __post_init__(self):
        for value in (self.start_minute, self.end_minute):
            if not 0 <= value < MINUTES_PER_DAY:
                raise ValueError(f"Band minute out of range: {value}")
        if self.start_minute == self.end_minute:
            raise ValueError(f"Band {self.band_id!r} has zero length")

    @classmethod
    def from_clock(cls, band_id: str, name: str, start: str, end: str) -> "ShiftBand":
        return cls(band_id=band_id, name=name, start_minute=parse_clock(start), end_minute=parse_clock(end))

    @property
    def wraps(self) -> bool:
        return self.end_minute <= self.start_minute

    @property
    def label(self) -> str:
        return f"{format_clock(self.start_minute)} - {format_clock(self.end_minute)}"
