"""Manpower aggregation over attendance records.

All functions here are pure: same records and bands in, same rows out, in any
input order.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from ..common.clock import duration_minutes, format_duration
from ..core.constants import DEFAULT_LOCATION, DEFAULT_POINT, UNASSIGNED_POINT_LABEL
from ..shifts.calendar import covered_bands
from ..shifts.model import ShiftBand
from ..attendance.model import AttendanceRecord


@dataclass(frozen=True, order=True)
class DeploymentKey:
    location: str
    point: str

    @classmethod
    def for_record(cls, record: AttendanceRecord) -> "DeploymentKey":
        return cls(
            location=(record.location or "").strip() or DEFAULT_LOCATION,
            point=(record.point or "").strip() or DEFAULT_POINT,
        )


@dataclass(frozen=True)
class DeploymentRow:
    location: str
    point: str
    counts: dict[str, int] = field(default_factory=dict)
    records: int = 0


def _count_bands(records: Iterable[AttendanceRecord], bands: Sequence[ShiftBand]) -> dict[str, int]:
    totals = {b.band_id: 0 for b in bands}
    for r in records:
        for band_id in covered_bands(r.in_time, r.out_time, bands):
            totals[band_id] += 1
    return totals


def shift_totals(records: Iterable[AttendanceRecord], bands: Sequence[ShiftBand]) -> dict[str, int]:
    """Records per band, every band present, in band order.

    A record spanning a boundary counts once in each band it touches.
    """
    if bands is None:
        raise ValueError("bands must not be None")
    return _count_bands(records, bands)


def deployment_table(records: Iterable[AttendanceRecord], bands: Sequence[ShiftBand]) -> list[DeploymentRow]:
    if bands is None:
        raise ValueError("bands must not be None")

    groups: dict[DeploymentKey, list[AttendanceRecord]] = {}
    for r in records:
        groups.setdefault(DeploymentKey.for_record(r), []).append(r)

    return [
        DeploymentRow(location=key.location, point=key.point, counts=_count_bands(rows, bands), records=len(rows))
        for key, rows in sorted(groups.items())
    ]


def record_duration(record: AttendanceRecord) -> str:
    """``HH:MM`` on duty, or ``-`` while the record is open."""
    return format_duration(duration_minutes(record.in_time, record.out_time))


def total_duty_minutes(records: Iterable[AttendanceRecord]) -> int:
    total = 0
    for r in records:
        minutes = duration_minutes(r.in_time, r.out_time)
        if minutes is not None:
            total += minutes
    return total


def point_frequency(records: Iterable[AttendanceRecord]) -> list[tuple[str, int]]:
    """Sewa point usage, busiest first; ties broken by name."""
    counts = Counter((r.point or "").strip().upper() or UNASSIGNED_POINT_LABEL for r in records)
    return sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))


def group_counts(records: Iterable[AttendanceRecord], groups: Iterable[str]) -> dict[str, int]:
    groups = list(groups)
    counts = {g: 0 for g in groups}
    for r in records:
        g = r.group.value
        if g in counts:
            counts[g] += 1
    return counts


def distinct_locations(records: Iterable[AttendanceRecord]) -> list[str]:
    return sorted({r.location.strip() for r in records if r.location and r.location.strip()})
