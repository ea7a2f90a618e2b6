from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Callable, Optional

from ..attendance.store import DutyRecordStore
from ..common.clock import format_clock_12h, format_duration
from ..common.datetime_utils import format_display_date, now_local
from ..core.enums import GENTS_GROUPS, HomeGroup, SessionGroup
from ..core.exceptions import OpenRecordsRemainError
from ..sessions.lifecycle import SessionLifecycle
from ..shifts.calendar import ShiftCalendar
from .coverage import (
    deployment_table,
    distinct_locations,
    group_counts,
    point_frequency,
    record_duration,
    shift_totals,
    total_duty_minutes,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionReport:
    """Structured report rows handed to the renderer (PDF/HTML/CSV)."""

    session_id: str
    title: str
    duty_date: str
    group: str
    generated_at: datetime
    shift_rows: list[dict]
    deployment_rows: list[dict]
    attendance_rows: list[dict]
    point_rows: list[dict]
    group_rows: list[dict]
    locations: list[str]
    total_present: int
    distinct_sewadars: int
    open_records: int
    total_duty_hours: str
    vehicle_count: int
    issue_count: int
    finalized: bool = False
    band_columns: list[dict] = field(default_factory=list)

    @property
    def downloadable(self) -> bool:
        return self.total_present > 0 and self.open_records == 0


class ReportService:
    """Builds shift/deployment reports from a consistent store snapshot.

    Building is always allowed; finalizing requires every record closed.
    """

    def __init__(
        self,
        store: DutyRecordStore,
        calendar: ShiftCalendar,
        *,
        lifecycle: Optional[SessionLifecycle] = None,
        session_loader: Optional[Callable[[str], object]] = None,
    ):
        self._store = store
        self._calendar = calendar
        self._lifecycle = lifecycle or SessionLifecycle()
        self._load = session_loader

    def build_session_report(self, session_id: str, *, now: Optional[datetime] = None) -> SessionReport:
        if self._load:
            self._load(session_id)

        view = self._store.session_view(session_id)
        session, records = view.session, view.records
        bands = self._calendar.bands

        totals = shift_totals(records, bands)
        shift_rows = [
            {"band_id": b.band_id, "name": b.name, "time_slot": b.label, "count": totals[b.band_id]}
            for b in bands
        ]

        deployment_rows = []
        for row in deployment_table(records, bands):
            out = {"location": row.location, "point": row.point, "total": row.records}
            out.update(row.counts)
            deployment_rows.append(out)

        attendance_rows = [
            {
                "name": r.name,
                "group": r.group.value,
                "location": r.location or "-",
                "point": r.point or "-",
                "in_time": format_clock_12h(r.in_time),
                "out_time": format_clock_12h(r.out_time),
                "duration": record_duration(r),
                "uniform": "Yes" if r.proper_uniform else "No",
            }
            for r in sorted(records, key=lambda r: (r.name.lower(), r.in_time))
        ]

        if session.group is SessionGroup.GLOBAL:
            groups = [g.value for g in GENTS_GROUPS] + [HomeGroup.LADIES.value]
            title = "Consolidated"
        else:
            groups = [session.group.value]
            title = session.group.value

        return SessionReport(
            session_id=session.session_id,
            title=f"Security Sewa Report - {title}",
            duty_date=format_display_date(session.duty_date),
            group=session.group.value,
            generated_at=now or now_local(),
            shift_rows=shift_rows,
            deployment_rows=deployment_rows,
            attendance_rows=attendance_rows,
            point_rows=[{"point": p, "count": c} for p, c in point_frequency(records)],
            group_rows=[{"group": g, "count": c} for g, c in group_counts(records, groups).items()],
            locations=distinct_locations(records),
            total_present=len(records),
            distinct_sewadars=len({r.sewadar_id for r in records}),
            open_records=self._lifecycle.open_count(session, records),
            total_duty_hours=format_duration(total_duty_minutes(records)),
            vehicle_count=len(view.vehicles),
            issue_count=len(view.issues),
            band_columns=[{"band_id": b.band_id, "name": b.name} for b in bands],
        )

    def finalize_report(self, session_id: str, *, now: Optional[datetime] = None) -> SessionReport:
        report = self.build_session_report(session_id, now=now)
        if report.open_records:
            raise OpenRecordsRemainError(report.open_records)
        logger.info("report_finalized", extra={"session_id": session_id, "present": report.total_present})
        return replace(report, finalized=True)
