"""Persistence boundary: snake_case table rows <-> AttendanceRecord.

The ``attendance`` table keeps the column names shared with the field
app (``sewa_points``, ``workshop_location``, ``volunteer_id``,
``timestamp`` in epoch milliseconds). Nothing outside this module should know
about them.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Mapping, Optional

from ..common.clock import format_clock, is_blank, parse_clock
from ..common.datetime_utils import parse_iso_date
from ..core.enums import Gender, HomeGroup
from ..core.exceptions import ValidationError
from ..database.mysql_base import mysql_time_to_clock
from .model import AttendanceRecord

RECORD_COLUMNS = (
    "id",
    "session_id",
    "sewadar_id",
    "name",
    "gender",
    "group",
    "date",
    "workshop_location",
    "sewa_points",
    "in_time",
    "out_time",
    "is_proper_uniform",
    "volunteer_id",
    "timestamp",
)


def _clock(value: Any) -> Optional[str]:
    """Normalise a stored time (``HH:MM``, ``HH:MM:SS``, TIME, timedelta) to ``HH:MM``."""
    if value is None or (isinstance(value, str) and is_blank(value)):
        return None
    if not isinstance(value, str) or value.count(":") != 1:
        value = mysql_time_to_clock(value)
    return format_clock(parse_clock(value))


def _date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_iso_date(str(value))


def _recorded_at(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromtimestamp(int(value) / 1000)


def record_from_row(r: Mapping[str, Any]) -> AttendanceRecord:
    try:
        in_time = _clock(r.get("in_time"))
        if in_time is None:
            raise ValidationError("Attendance row has no in_time")
        return AttendanceRecord(
            record_id=str(r["id"]),
            session_id=str(r["session_id"]),
            sewadar_id=str(r["sewadar_id"]),
            name=r.get("name") or "",
            gender=Gender(r["gender"]),
            group=HomeGroup(r["group"]),
            session_date=_date(r["date"]),
            location=(r.get("workshop_location") or "").strip(),
            point=(r.get("sewa_points") or "").strip(),
            in_time=in_time,
            out_time=_clock(r.get("out_time")),
            proper_uniform=bool(r.get("is_proper_uniform") or False),
            incharge_id=r.get("volunteer_id"),
            recorded_at=_recorded_at(r.get("timestamp")),
        )
    except KeyError as e:
        raise ValidationError(f"Attendance row is missing {e.args[0]!r}") from None
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Attendance row is invalid: {e}") from None


def record_to_row(rec: AttendanceRecord) -> dict[str, Any]:
    return {
        "id": rec.record_id,
        "session_id": rec.session_id,
        "sewadar_id": rec.sewadar_id,
        "name": rec.name,
        "gender": rec.gender.value,
        "group": rec.group.value,
        "date": rec.session_date,
        "workshop_location": rec.location,
        "sewa_points": rec.point,
        "in_time": rec.in_time,
        "out_time": rec.out_time,
        "is_proper_uniform": 1 if rec.proper_uniform else 0,
        "volunteer_id": rec.incharge_id,
        "timestamp": int(rec.recorded_at.timestamp() * 1000) if rec.recorded_at else None,
    }
