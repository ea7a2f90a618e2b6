from __future__ import annotations

import threading
from typing import Iterable, Optional, Protocol, Sequence

from ..core.exceptions import ValidationError
from .model import Sewadar


class RosterRepository(Protocol):
    @property
    def version(self) -> int:
        """Bumped on every append so callers can cache roster views."""

        raise NotImplementedError

    def list_all(self) -> Sequence[Sewadar]:
        raise NotImplementedError

    def get_by_id(self, sewadar_id: str) -> Optional[Sewadar]:
        raise NotImplementedError

    def add(self, sewadar: Sewadar) -> None:
        raise NotImplementedError


class InMemoryRosterRepository(RosterRepository):
    """Roster held in memory. Entries are only ever appended."""

    def __init__(self, sewadars: Iterable[Sewadar] = ()):
        self._lock = threading.Lock()
        self._by_id: dict[str, Sewadar] = {}
        self._version = 0
        for s in sewadars:
            self._by_id[s.sewadar_id] = s

    @property
    def version(self) -> int:
        return self._version

    def list_all(self) -> Sequence[Sewadar]:
        with self._lock:
            return list(self._by_id.values())

    def get_by_id(self, sewadar_id: str) -> Optional[Sewadar]:
        return self._by_id.get(sewadar_id)

    def add(self, sewadar: Sewadar) -> None:
        with self._lock:
            if sewadar.sewadar_id in self._by_id:
                raise ValidationError(f"Sewadar {sewadar.sewadar_id} already exists")
            self._by_id[sewadar.sewadar_id] = sewadar
            self._version += 1
