from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import SessionGroup
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, quoted, upsert_sql
from .model import DutySession
from .repository import SessionRepository

_COLUMNS = ("session_id", "duty_date", "group", "start_at", "end_at", "locations", "completed")


def session_from_row(r: dict) -> DutySession:
    return DutySession(
        session_id=str(r["session_id"]),
        duty_date=r["duty_date"],
        group=SessionGroup(r["group"]),
        start_at=r["start_at"],
        end_at=r["end_at"],
        locations=tuple(x for x in (r.get("locations") or "").split("\n") if x),
        completed=bool(r.get("completed") or 0),
    )


def session_to_row(s: DutySession) -> dict:
    return {
        "session_id": s.session_id,
        "duty_date": s.duty_date,
        "group": s.group.value,
        "start_at": s.start_at,
        "end_at": s.end_at,
        # one location per line: names may contain commas
        "locations": "\n".join(s.locations),
        "completed": 1 if s.completed else 0,
    }


class MySQLSessionRepository(SessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def load_session(self, session_id: str) -> Optional[DutySession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {quoted(_COLUMNS)} FROM duty_sessions WHERE session_id=%s", (session_id,))
            r = fetchone(cur)
            return session_from_row(r) if r else None

    def save_session(self, session: DutySession) -> None:
        row = session_to_row(session)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(upsert_sql("duty_sessions", _COLUMNS, ("completed",)), tuple(row[c] for c in _COLUMNS))

    def list_open_sessions(self, *, group: Optional[SessionGroup] = None) -> Sequence[DutySession]:
        clauses = ["completed=0"]
        params: list[object] = []
        if group is not None:
            clauses.append("`group`=%s")
            params.append(group.value)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {quoted(_COLUMNS)} FROM duty_sessions WHERE {where} ORDER BY start_at ASC",
                tuple(params),
            )
            return [session_from_row(r) for r in fetchall(cur)]
