from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .attendance.store import DutyRecordStore
from .core.enums import HomeGroup
from .database.connection import DBConfig, DatabaseConnection
from .incidents.mysql_incident_repository import MySQLIncidentRepository
from .incidents.repository import IncidentRepository
from .reports.service import ReportService
from .roster.mysql_roster_repository import MySQLRosterRepository
from .roster.repository import RosterRepository
from .roster.service import RosterService
from .sessions.lifecycle import SessionLifecycle
from .sessions.mysql_session_repository import MySQLSessionRepository
from .sessions.repository import SessionRepository
from .shifts.calendar import ShiftCalendar


@dataclass(frozen=True)
class Container:
    calendar: ShiftCalendar
    store: DutyRecordStore

    roster_repo: RosterRepository
    sessions_repo: SessionRepository
    attendance_repo: AttendanceRepository
    incidents_repo: Optional[IncidentRepository]

    roster_service: RosterService
    attendance_service: AttendanceService
    report_service: ReportService


def wire(
    *,
    roster_repo: RosterRepository,
    sessions_repo: SessionRepository,
    attendance_repo: AttendanceRepository,
    incidents_repo: Optional[IncidentRepository] = None,
    calendar: Optional[ShiftCalendar] = None,
    group_scope: Optional[HomeGroup] = None,
) -> Container:
    """Assemble services around the given repositories (MySQL or in-memory)."""
    calendar = calendar or ShiftCalendar.default()
    lifecycle = SessionLifecycle()
    store = DutyRecordStore(lifecycle=lifecycle)

    attendance_service = AttendanceService(
        store,
        attendance_repo,
        sessions_repo,
        roster_repo,
        incidents_repo,
        lifecycle=lifecycle,
        group_scope=group_scope,
    )
    report_service = ReportService(
        store,
        calendar,
        lifecycle=lifecycle,
        session_loader=attendance_service.open_session,
    )

    return Container(
        calendar=calendar,
        store=store,
        roster_repo=roster_repo,
        sessions_repo=sessions_repo,
        attendance_repo=attendance_repo,
        incidents_repo=incidents_repo,
        roster_service=RosterService(roster_repo),
        attendance_service=attendance_service,
        report_service=report_service,
    )


def build_container(
    *,
    db_config: dict,
    shift_bands: Optional[Sequence[Mapping[str, str]]] = None,
    shift_cutover: Optional[str] = None,
    group_scope: Optional[str] = None,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire(
        roster_repo=MySQLRosterRepository(conn),
        sessions_repo=MySQLSessionRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        incidents_repo=MySQLIncidentRepository(conn),
        calendar=ShiftCalendar.from_config(shift_bands, cutover=shift_cutover),
        group_scope=HomeGroup(group_scope) if group_scope else None,
    )
