from __future__ import annotations

from typing import Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def load_session_records(self, session_id: str) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def save_record(self, record: AttendanceRecord) -> None:
        """Insert or update by record id."""

        raise NotImplementedError

    def delete_record(self, session_id: str, record_id: str) -> bool:
        raise NotImplementedError
