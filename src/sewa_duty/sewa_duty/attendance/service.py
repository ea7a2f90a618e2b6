from __future__ import annotations

import logging
import uuid
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..common.clock import clock_from_datetime, format_clock_12h
from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_bool, require_enum, require_non_empty
from ..core.enums import HomeGroup, SessionGroup, SessionState, VehicleType
from ..core.exceptions import DomainError, NotFoundError, ValidationError
from ..incidents.model import Issue, VehicleRecord
from ..incidents.repository import IncidentRepository
from ..reports.coverage import record_duration
from ..roster.repository import RosterRepository
from ..sessions.lifecycle import SessionLifecycle
from ..sessions.model import DutySession
from ..sessions.repository import SessionRepository
from .model import AttendanceRecord, LiveChange
from .repository import AttendanceRepository
from .store import DutyRecordStore, LoadedSession

logger = logging.getLogger(__name__)


class AttendanceService:
    """Use cases of an incharge running a duty session.

    The in-memory store is updated first so completeness checks and reports
    see the change immediately; the change is then written through to the
    persistence collaborators.
    """

    def __init__(
        self,
        store: DutyRecordStore,
        records: AttendanceRepository,
        sessions: SessionRepository,
        roster: RosterRepository,
        incidents: Optional[IncidentRepository] = None,
        *,
        lifecycle: Optional[SessionLifecycle] = None,
        group_scope: Optional[HomeGroup] = None,
    ):
        self._store = store
        self._records = records
        self._sessions = sessions
        self._roster = roster
        self._incidents = incidents
        self._lifecycle = lifecycle or SessionLifecycle()
        self._group_scope = group_scope

    # --- sessions ---------------------------------------------------------

    def create_session(
        self,
        *,
        duty_date: date,
        group,
        start_at: datetime,
        end_at: datetime,
        locations: Sequence[str],
    ) -> DutySession:
        group = require_enum(SessionGroup, group, "Group")
        if not isinstance(locations, (list, tuple)):
            raise ValidationError("Locations must be a list of names")
        names = []
        for loc in locations:
            loc = optional_text(loc, "Location")
            if loc and loc not in names:
                names.append(loc)

        session = DutySession(
            session_id=uuid.uuid4().hex,
            duty_date=duty_date,
            group=group,
            start_at=start_at,
            end_at=end_at,
            locations=tuple(names),
        )
        self._sessions.save_session(session)
        self._store.register_session(session)
        logger.info("session_created", extra={"session_id": session.session_id, "group": group.value})
        return session

    def open_session(self, session_id: str) -> DutySession:
        """Make sure a session and its records are loaded in the store."""
        session = self._store.load_if_absent(session_id, self._load_persisted)
        if session is None:
            raise NotFoundError(f"Duty session {session_id} not found")
        return session

    def session_state(self, session_id: str, *, now: Optional[datetime] = None) -> SessionState:
        return self._lifecycle.state(self.open_session(session_id), now or now_local())

    def can_complete(self, session_id: str) -> bool:
        self.open_session(session_id)
        session, records = self._store.snapshot(session_id)
        return self._lifecycle.can_complete(session, records)

    def complete_session(self, session_id: str) -> DutySession:
        self.open_session(session_id)
        session = self._store.complete_session(session_id)
        self._sessions.save_session(session)
        logger.info("session_completed", extra={"session_id": session_id})
        return session

    # --- attendance -------------------------------------------------------

    def mark_present(
        self,
        session_id: str,
        *,
        sewadar_id: str,
        location: str = "",
        point: str = "",
        in_time: Optional[str] = None,
        out_time: Optional[str] = None,
        proper_uniform: bool = False,
        incharge_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        now = now or now_local()
        session = self.open_session(session_id)

        sewadar = self._roster.get_by_id(sewadar_id)
        if not sewadar:
            raise NotFoundError(f"Sewadar {sewadar_id} not found")
        if not session.covers_group(sewadar.home_group.value):
            raise ValidationError(f"{sewadar.name} is not in the {session.group.value} group")

        record = AttendanceRecord(
            record_id="",
            session_id=session.session_id,
            sewadar_id=sewadar.sewadar_id,
            name=sewadar.name,
            gender=sewadar.gender,
            group=sewadar.home_group,
            session_date=session.duty_date,
            location=self._check_location(session, location),
            point=optional_text(point, "Point"),
            in_time=optional_text(in_time, "In time") or clock_from_datetime(now),
            out_time=optional_text(out_time, "Out time") or None,
            proper_uniform=require_bool(proper_uniform, "Proper uniform"),
            incharge_id=incharge_id,
            recorded_at=now,
        )
        record_id = self._store.add(record)
        record = self._store.get(session_id, record_id)
        self._records.save_record(record)
        logger.debug("attendance_marked", extra={"session_id": session_id, "record_id": record_id})
        return record

    def check_out(
        self,
        session_id: str,
        record_id: str,
        *,
        out_time: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        out_time = optional_text(out_time, "Out time") or clock_from_datetime(now or now_local())
        return self.edit_record(session_id, record_id, {"out_time": out_time})

    def edit_record(self, session_id: str, record_id: str, changes: Mapping[str, Any]) -> AttendanceRecord:
        changes = dict(changes)
        session = self.open_session(session_id)
        if "location" in changes:
            changes["location"] = self._check_location(session, changes["location"])
        record = self._store.update(session_id, record_id, changes)
        self._records.save_record(record)
        logger.debug("attendance_updated", extra={"session_id": session_id, "record_id": record_id})
        return record

    def remove_record(self, session_id: str, record_id: str) -> bool:
        """Delete an erroneous entry; deleting twice is harmless."""
        self.open_session(session_id)
        removed = self._store.remove(session_id, record_id)
        if removed:
            self._records.delete_record(session_id, record_id)
            logger.debug("attendance_removed", extra={"session_id": session_id, "record_id": record_id})
        return removed

    def apply_external_change(self, change: LiveChange) -> bool:
        """Mirror a live-feed event into the store.

        Events for sessions that are not loaded here, or for other groups when
        this service is scoped to one group, are ignored.
        """
        if not self._store.has_session(change.session_id):
            logger.debug("live_change_ignored", extra={"session_id": change.session_id, "reason": "not_loaded"})
            return False
        if self._group_scope and change.record and change.record.group is not self._group_scope:
            logger.debug("live_change_ignored", extra={"session_id": change.session_id, "reason": "other_group"})
            return False

        try:
            return self._store.apply_external_change(change)
        except DomainError:
            logger.warning(
                "live_change_rejected",
                extra={"session_id": change.session_id, "record_id": change.record_id, "kind": change.kind.value},
            )
            raise

    def get_sheet_ui(self, session_id: str) -> list[dict]:
        """Attendance sheet rows sorted by name for display."""
        self.open_session(session_id)
        rows = sorted(self._store.list_by_session(session_id), key=lambda r: (r.name.lower(), r.in_time))
        return [self._to_ui(r) for r in rows]

    # --- side records -----------------------------------------------------

    def log_vehicle(
        self,
        session_id: str,
        *,
        vehicle_type,
        plate_number: str,
        model: str = "",
        remarks: str = "",
        incharge_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> VehicleRecord:
        self.open_session(session_id)
        vehicle = VehicleRecord(
            vehicle_id=uuid.uuid4().hex,
            session_id=session_id,
            vehicle_type=require_enum(VehicleType, vehicle_type, "Vehicle type"),
            plate_number=require_non_empty(plate_number, "Plate number").upper(),
            model=optional_text(model, "Model"),
            remarks=optional_text(remarks, "Remarks"),
            logged_by=incharge_id,
            logged_at=now or now_local(),
        )
        self._store.add_vehicle(vehicle)
        if self._incidents:
            self._incidents.save_vehicle(vehicle)
        return vehicle

    def report_issue(
        self,
        session_id: str,
        *,
        description: str,
        photo_url: Optional[str] = None,
        incharge_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Issue:
        self.open_session(session_id)
        issue = Issue(
            issue_id=uuid.uuid4().hex,
            session_id=session_id,
            description=require_non_empty(description, "Description"),
            photo_url=photo_url or None,
            reported_by=incharge_id,
            reported_at=now or now_local(),
        )
        self._store.add_issue(issue)
        if self._incidents:
            self._incidents.save_issue(issue)
        return issue

    # --- helpers ----------------------------------------------------------

    def _load_persisted(self, session_id: str) -> Optional[LoadedSession]:
        session = self._sessions.load_session(session_id)
        if not session:
            return None

        vehicles: Iterable[VehicleRecord] = ()
        issues: Iterable[Issue] = ()
        if self._incidents:
            vehicles = self._incidents.load_vehicles(session_id)
            issues = self._incidents.load_issues(session_id)

        return LoadedSession(
            session=session,
            records=self._records.load_session_records(session_id),
            vehicles=vehicles,
            issues=issues,
        )

    def _check_location(self, session: DutySession, location: Optional[str]) -> str:
        location = optional_text(location, "Location")
        if location and location not in session.locations:
            raise ValidationError(f"{location} is not a post of this session")
        return location

    def _to_ui(self, r: AttendanceRecord) -> dict:
        return {
            "record_id": r.record_id,
            "sewadar_id": r.sewadar_id,
            "name": r.name,
            "group": r.group.value,
            "location": r.location or "-",
            "point": r.point or "-",
            "in_time": format_clock_12h(r.in_time),
            "out_time": format_clock_12h(r.out_time),
            "duration": record_duration(r),
            "uniform": "Yes" if r.proper_uniform else "No",
            "css_class": "bg-warning text-dark" if r.is_open else "bg-success",
        }
