from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, quoted, upsert_sql
from .mapping import RECORD_COLUMNS, record_from_row, record_to_row
from .model import AttendanceRecord
from .repository import AttendanceRepository

_UPDATABLE = ("workshop_location", "sewa_points", "in_time", "out_time", "is_proper_uniform", "timestamp")


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def load_session_records(self, session_id: str) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {quoted(RECORD_COLUMNS)}
                FROM attendance
                WHERE session_id=%s
                ORDER BY `timestamp` ASC, id ASC
                """,
                (session_id,),
            )
            return [record_from_row(r) for r in fetchall(cur)]

    def save_record(self, record: AttendanceRecord) -> None:
        row = record_to_row(record)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                upsert_sql("attendance", RECORD_COLUMNS, _UPDATABLE),
                tuple(row[c] for c in RECORD_COLUMNS),
            )

    def delete_record(self, session_id: str, record_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance WHERE session_id=%s AND id=%s", (session_id, record_id))
            return cur.rowcount > 0
