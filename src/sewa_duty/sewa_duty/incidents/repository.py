from __future__ import annotations

from typing import Protocol, Sequence

from .model import Issue, VehicleRecord


class IncidentRepository(Protocol):
    def save_vehicle(self, vehicle: VehicleRecord) -> None:
        raise NotImplementedError

    def save_issue(self, issue: Issue) -> None:
        raise NotImplementedError

    def load_vehicles(self, session_id: str) -> Sequence[VehicleRecord]:
        raise NotImplementedError

    def load_issues(self, session_id: str) -> Sequence[Issue]:
        raise NotImplementedError
