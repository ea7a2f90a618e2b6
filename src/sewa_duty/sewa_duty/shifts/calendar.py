"""Shift bands and circular interval overlap.

Every interval is split into at most two linear ``[start, end)`` segments
inside ``[0, 1440)``; two circular intervals overlap when any pair of their
segments does. That covers all four wrap/no-wrap combinations.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Optional, Sequence

from ..common.clock import is_blank, parse_clock
from ..core.constants import DEFAULT_SHIFT_CUTOVER, LEGACY_SHIFT_CUTOVER, MINUTES_PER_DAY
from .model import ShiftBand

Segment = tuple[int, int]


def _segments(start: int, end: int) -> list[Segment]:
    if end > start:
        return [(start, end)]
    # wraps midnight
    segments = [(start, MINUTES_PER_DAY)]
    if end > 0:
        segments.append((0, end))
    return segments


def duty_segments(in_time: str, out_time: Optional[str]) -> list[Segment]:
    """Linear segments covered by a duty interval.

    An open record (no out-time) and a zero-length record are probed at the
    check-in minute only.
    """
    start = parse_clock(in_time)
    if is_blank(out_time):
        return [(start, start + 1)]
    end = parse_clock(out_time)
    if end == start:
        return [(start, start + 1)]
    return _segments(start, end)


def band_segments(band: ShiftBand) -> list[Segment]:
    return _segments(band.start_minute, band.end_minute)


def segments_overlap(a: Iterable[Segment], b: Iterable[Segment]) -> bool:
    b = list(b)
    return any(a0 < b1 and b0 < a1 for a0, a1 in a for b0, b1 in b)


def covered_bands(in_time: str, out_time: Optional[str], bands: Sequence[ShiftBand]) -> set[str]:
    """Ids of every band sharing at least one minute with the duty interval."""
    if bands is None:
        raise ValueError("bands must not be None")
    duty = duty_segments(in_time, out_time)
    return {band.band_id for band in bands if segments_overlap(duty, band_segments(band))}


def default_bands(cutover: str = DEFAULT_SHIFT_CUTOVER) -> tuple[ShiftBand, ...]:
    """Day 07:00-<cutover>, Evening <cutover>-02:00, Night 02:00-07:00."""
    return (
        ShiftBand.from_clock("day", "Day", "07:00", cutover),
        ShiftBand.from_clock("evening", "Evening", cutover, "02:00"),
        ShiftBand.from_clock("night", "Night", "02:00", "07:00"),
    )


def legacy_bands() -> tuple[ShiftBand, ...]:
    return default_bands(LEGACY_SHIFT_CUTOVER)


class ShiftCalendar:
    """Ordered, immutable band table used for coverage reports."""

    def __init__(self, bands: Iterable[ShiftBand]):
        self._bands = tuple(bands)
        if not self._bands:
            raise ValueError("A shift calendar needs at least one band")
        ids = [b.band_id for b in self._bands]
        if len(set(ids)) != len(ids):
            raise ValueError(f"Duplicate band ids: {ids}")

    @property
    def bands(self) -> tuple[ShiftBand, ...]:
        return self._bands

    def band_ids(self) -> list[str]:
        return [b.band_id for b in self._bands]

    def get(self, band_id: str) -> Optional[ShiftBand]:
        for band in self._bands:
            if band.band_id == band_id:
                return band
        return None

    def covered_bands(self, in_time: str, out_time: Optional[str]) -> set[str]:
        return covered_bands(in_time, out_time, self._bands)

    def band_at(self, clock: str) -> Optional[ShiftBand]:
        """Band containing a single minute (live dashboards)."""
        for band in self._bands:
            if segments_overlap(duty_segments(clock, None), band_segments(band)):
                return band
        return None

    @classmethod
    def default(cls, cutover: str = DEFAULT_SHIFT_CUTOVER) -> "ShiftCalendar":
        return cls(default_bands(cutover))

    @classmethod
    def from_config(cls, entries: Optional[Sequence[Mapping[str, str]]] = None, *, cutover: Optional[str] = None) -> "ShiftCalendar":
        """Build from settings: explicit ``SHIFT_BANDS`` entries win over ``SHIFT_CUTOVER``."""
        if entries:
            return cls(
                ShiftBand.from_clock(
                    str(e["band_id"]),
                    str(e.get("name") or e["band_id"]),
                    str(e["start"]),
                    str(e["end"]),
                )
                for e in entries
            )
        return cls.default(cutover or DEFAULT_SHIFT_CUTOVER)
