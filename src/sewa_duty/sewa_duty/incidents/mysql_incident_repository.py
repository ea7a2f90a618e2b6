from __future__ import annotations

from typing import Sequence

from ..core.enums import VehicleType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Issue, VehicleRecord
from .repository import IncidentRepository


class MySQLIncidentRepository(IncidentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def save_vehicle(self, vehicle: VehicleRecord) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO vehicles(vehicle_id, session_id, type, plate_number, model, remarks, volunteer_id, logged_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    vehicle.vehicle_id,
                    vehicle.session_id,
                    vehicle.vehicle_type.value,
                    vehicle.plate_number,
                    vehicle.model,
                    vehicle.remarks,
                    vehicle.logged_by,
                    vehicle.logged_at,
                ),
            )

    def save_issue(self, issue: Issue) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO issues(issue_id, session_id, description, photo, volunteer_id, reported_at)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    issue.issue_id,
                    issue.session_id,
                    issue.description,
                    issue.photo_url,
                    issue.reported_by,
                    issue.reported_at,
                ),
            )

    def load_vehicles(self, session_id: str) -> Sequence[VehicleRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT vehicle_id, session_id, type, plate_number, model, remarks, volunteer_id, logged_at
                FROM vehicles
                WHERE session_id=%s
                ORDER BY logged_at ASC
                """,
                (session_id,),
            )
            return [
                VehicleRecord(
                    vehicle_id=str(r["vehicle_id"]),
                    session_id=str(r["session_id"]),
                    vehicle_type=VehicleType(r["type"]),
                    plate_number=r["plate_number"],
                    model=r.get("model") or "",
                    remarks=r.get("remarks") or "",
                    logged_by=r.get("volunteer_id"),
                    logged_at=r.get("logged_at"),
                )
                for r in fetchall(cur)
            ]

    def load_issues(self, session_id: str) -> Sequence[Issue]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT issue_id, session_id, description, photo, volunteer_id, reported_at
                FROM issues
                WHERE session_id=%s
                ORDER BY reported_at ASC
                """,
                (session_id,),
            )
            return [
                Issue(
                    issue_id=str(r["issue_id"]),
                    session_id=str(r["session_id"]),
                    description=r["description"],
                    photo_url=r.get("photo"),
                    reported_by=r.get("volunteer_id"),
                    reported_at=r.get("reported_at"),
                )
                for r in fetchall(cur)
            ]
