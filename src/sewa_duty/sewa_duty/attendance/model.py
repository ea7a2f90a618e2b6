from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.clock import is_blank
from ..core.enums import ChangeKind, Gender, HomeGroup


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one duty point of one sewadar within one session.

    A sewadar may have several records in the same session. ``out_time`` stays
    None while the sewadar is still on duty.
    """

    record_id: str
    session_id: str
    sewadar_id: str
    name: str
    gender: Gender
    group: HomeGroup
    session_date: date
    location: str
    point: str
    in_time: str
    out_time: Optional[str] = None
    proper_uniform: bool = False
    incharge_id: Optional[str] = None
    recorded_at: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return is_blank(self.out_time)


# Fields an incharge may change after marking someone present.
EDITABLE_FIELDS = frozenset({"location", "point", "in_time", "out_time", "proper_uniform"})


@dataclass(frozen=True)
class LiveChange:
    """A create/update/delete event delivered by the live update feed."""

    kind: ChangeKind
    session_id: str
    record_id: str
    record: Optional[AttendanceRecord] = None
