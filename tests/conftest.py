from __future__ import annotations

import os
from datetime import date, datetime
from types import SimpleNamespace
from typing import Optional

import pytest

os.environ.setdefault("APP_ENV", "testing")

from src.sewa_duty.sewa_duty.attendance.model import AttendanceRecord
from src.sewa_duty.sewa_duty.container import wire
from src.sewa_duty.sewa_duty.core.enums import Gender, HomeGroup, SessionGroup
from src.sewa_duty.sewa_duty.roster.model import Sewadar
from src.sewa_duty.sewa_duty.roster.repository import InMemoryRosterRepository
from src.sewa_duty.sewa_duty.sessions.model import DutySession


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 1, 20, 15, 0)


@pytest.fixture
def duty_session() -> DutySession:
    return DutySession(
        session_id="s1",
        duty_date=date(2026, 2, 1),
        group=SessionGroup.MONDAY,
        start_at=datetime(2026, 2, 1, 18, 0),
        end_at=datetime(2026, 2, 2, 6, 0),
        locations=("Gate 1", "Gate 2"),
    )


@pytest.fixture
def make_record():
    def _make(
        in_time: str,
        out_time: Optional[str] = None,
        *,
        record_id: str = "",
        session_id: str = "s1",
        sewadar_id: str = "MON-001",
        name: str = "Anil Gulati",
        location: str = "Gate 1",
        point: str = "",
        group: HomeGroup = HomeGroup.MONDAY,
        gender: Gender = Gender.GENTS,
    ) -> AttendanceRecord:
        return AttendanceRecord(
            record_id=record_id,
            session_id=session_id,
            sewadar_id=sewadar_id,
            name=name,
            gender=gender,
            group=group,
            session_date=date(2026, 2, 1),
            location=location,
            point=point,
            in_time=in_time,
            out_time=out_time,
        )

    return _make


class InMemorySessions:
    def __init__(self):
        self.sessions: dict[str, DutySession] = {}

    def load_session(self, session_id: str) -> Optional[DutySession]:
        return self.sessions.get(session_id)

    def save_session(self, session: DutySession) -> None:
        self.sessions[session.session_id] = session

    def list_open_sessions(self, *, group=None):
        return [s for s in self.sessions.values() if not s.completed and (group is None or s.group is group)]


class InMemoryAttendance:
    def __init__(self):
        self.rows: dict[str, AttendanceRecord] = {}
        self.deleted: list[str] = []

    def load_session_records(self, session_id: str):
        return [r for r in self.rows.values() if r.session_id == session_id]

    def save_record(self, record: AttendanceRecord) -> None:
        self.rows[record.record_id] = record

    def delete_record(self, session_id: str, record_id: str) -> bool:
        self.deleted.append(record_id)
        return self.rows.pop(record_id, None) is not None


class InMemoryIncidents:
    def __init__(self):
        self.vehicles = []
        self.issues = []

    def save_vehicle(self, vehicle) -> None:
        self.vehicles.append(vehicle)

    def save_issue(self, issue) -> None:
        self.issues.append(issue)

    def load_vehicles(self, session_id: str):
        return [v for v in self.vehicles if v.session_id == session_id]

    def load_issues(self, session_id: str):
        return [i for i in self.issues if i.session_id == session_id]


@pytest.fixture
def sewadars() -> list[Sewadar]:
    return [
        Sewadar("MON-001", "Anil Gulati", Gender.GENTS, HomeGroup.MONDAY),
        Sewadar("MON-002", "Baldev Singh", Gender.GENTS, HomeGroup.MONDAY),
        Sewadar("TUE-001", "Charan Das", Gender.GENTS, HomeGroup.TUESDAY),
        Sewadar("LAD-001", "Amrit Kaur", Gender.LADIES, HomeGroup.LADIES),
    ]


@pytest.fixture
def repos(sewadars):
    return SimpleNamespace(
        roster=InMemoryRosterRepository(sewadars),
        sessions=InMemorySessions(),
        attendance=InMemoryAttendance(),
        incidents=InMemoryIncidents(),
    )


@pytest.fixture
def container(repos):
    return wire(
        roster_repo=repos.roster,
        sessions_repo=repos.sessions,
        attendance_repo=repos.attendance,
        incidents_repo=repos.incidents,
    )
