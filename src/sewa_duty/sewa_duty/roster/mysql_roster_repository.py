from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Gender, HomeGroup
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Sewadar
from .repository import RosterRepository


def _sewadar_from_row(r: dict) -> Sewadar:
    return Sewadar(
        sewadar_id=str(r["sewadar_id"]),
        name=r["name"],
        gender=Gender(r["gender"]),
        home_group=HomeGroup(r["group"]),
        is_custom=bool(r.get("is_custom") or 0),
    )


class MySQLRosterRepository(RosterRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @property
    def version(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM sewadars")
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def list_all(self) -> Sequence[Sewadar]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT sewadar_id, name, gender, `group`, is_custom
                FROM sewadars
                ORDER BY name
                """
            )
            return [_sewadar_from_row(r) for r in fetchall(cur)]

    def get_by_id(self, sewadar_id: str) -> Optional[Sewadar]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT sewadar_id, name, gender, `group`, is_custom
                FROM sewadars
                WHERE sewadar_id=%s
                """,
                (sewadar_id,),
            )
            r = fetchone(cur)
            return _sewadar_from_row(r) if r else None

    def add(self, sewadar: Sewadar) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO sewadars(sewadar_id, name, gender, `group`, is_custom)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (
                    sewadar.sewadar_id,
                    sewadar.name,
                    sewadar.gender.value,
                    sewadar.home_group.value,
                    1 if sewadar.is_custom else 0,
                ),
            )
