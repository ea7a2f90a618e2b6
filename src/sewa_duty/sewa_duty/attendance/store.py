"""In-memory attendance records of the duty sessions currently loaded.

Mutations on one session are serialized by that session's lock; sessions are
independent of each other. Readers get copies taken under the lock, so a
report never sees a half-applied update.
"""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Iterable, Mapping, Optional

from ..common.clock import format_clock, is_blank, parse_clock
from ..common.validators import optional_text, require_bool
from ..core.enums import ChangeKind
from ..core.exceptions import NotFoundError, SessionClosedError, ValidationError
from ..incidents.model import Issue, VehicleRecord
from ..sessions.lifecycle import SessionLifecycle
from ..sessions.model import DutySession
from .model import EDITABLE_FIELDS, AttendanceRecord, LiveChange


def _new_id() -> str:
    return uuid.uuid4().hex


def canonical_times(in_time: str, out_time: Optional[str]) -> tuple[str, Optional[str]]:
    """Validate both times and return them as zero-padded ``HH:MM``."""
    start = format_clock(parse_clock(in_time))
    if is_blank(out_time):
        return start, None
    return start, format_clock(parse_clock(out_time))


def _with_canonical_times(record: AttendanceRecord) -> AttendanceRecord:
    in_time, out_time = canonical_times(record.in_time, record.out_time)
    if (in_time, out_time) == (record.in_time, record.out_time):
        return record
    return replace(record, in_time=in_time, out_time=out_time)


@dataclass(frozen=True)
class LoadedSession:
    """What a loader returns for a session that is not in memory yet."""

    session: DutySession
    records: Iterable[AttendanceRecord] = ()
    vehicles: Iterable[VehicleRecord] = ()
    issues: Iterable[Issue] = ()


@dataclass(frozen=True)
class SessionView:
    session: DutySession
    records: tuple[AttendanceRecord, ...]
    vehicles: tuple[VehicleRecord, ...]
    issues: tuple[Issue, ...]


@dataclass
class _Ledger:
    session: DutySession
    records: dict[str, AttendanceRecord] = field(default_factory=dict)
    vehicles: list[VehicleRecord] = field(default_factory=list)
    issues: list[Issue] = field(default_factory=list)
    lock: threading.RLock = field(default_factory=threading.RLock)


class DutyRecordStore:
    def __init__(
        self,
        *,
        lifecycle: Optional[SessionLifecycle] = None,
        id_factory: Callable[[], str] = _new_id,
    ):
        self._lifecycle = lifecycle or SessionLifecycle()
        self._new_id = id_factory
        self._ledgers: dict[str, _Ledger] = {}
        self._loading: dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    # --- sessions ---------------------------------------------------------

    def register_session(
        self,
        session: DutySession,
        records: Iterable[AttendanceRecord] = (),
        *,
        vehicles: Iterable[VehicleRecord] = (),
        issues: Iterable[Issue] = (),
    ) -> DutySession:
        """Load a session and its persisted records.

        A session that is already loaded keeps its in-memory ledger: a stale
        load must never overwrite records marked since. Returns the session
        the store holds.
        """
        ledger = _Ledger(session=session)
        for r in records:
            if r.session_id != session.session_id:
                raise ValidationError(f"Record {r.record_id} belongs to another session")
            ledger.records[r.record_id] = _with_canonical_times(r)
        ledger.vehicles.extend(vehicles)
        ledger.issues.extend(issues)
        with self._registry_lock:
            return self._ledgers.setdefault(session.session_id, ledger).session

    def load_if_absent(
        self,
        session_id: str,
        loader: Callable[[str], Optional[LoadedSession]],
    ) -> Optional[DutySession]:
        """Return the loaded session, running ``loader`` at most once per session.

        Concurrent callers for the same session wait for the first load.
        Returns None when the loader does not know the session.
        """
        with self._registry_lock:
            ledger = self._ledgers.get(session_id)
            if ledger is not None:
                return ledger.session
            loading = self._loading.setdefault(session_id, threading.Lock())

        with loading:
            ledger = self._ledgers.get(session_id)
            if ledger is not None:
                return ledger.session
            loaded = loader(session_id)
            if loaded is None:
                return None
            return self.register_session(
                loaded.session,
                loaded.records,
                vehicles=loaded.vehicles,
                issues=loaded.issues,
            )

    def has_session(self, session_id: str) -> bool:
        return session_id in self._ledgers

    def get_session(self, session_id: str) -> DutySession:
        return self._ledger(session_id).session

    def session_ids(self) -> list[str]:
        with self._registry_lock:
            return list(self._ledgers)

    def complete_session(self, session_id: str) -> DutySession:
        ledger = self._ledger(session_id)
        with ledger.lock:
            ledger.session = self._lifecycle.complete(ledger.session, ledger.records.values())
            return ledger.session

    # --- attendance records ----------------------------------------------

    def add(self, record: AttendanceRecord) -> str:
        """Store a new record, assigning an id when it has none.

        Not safe to retry blindly: every call without an id creates a record.
        """
        ledger = self._ledger(record.session_id)
        with ledger.lock:
            self._guard(ledger)
            record = _with_canonical_times(record)
            if not record.record_id:
                record = replace(record, record_id=self._new_id())
            if record.record_id in ledger.records:
                raise ValidationError(f"Record {record.record_id} already exists")
            ledger.records[record.record_id] = record
            return record.record_id

    def update(self, session_id: str, record_id: str, patch: Mapping[str, Any]) -> AttendanceRecord:
        ledger = self._ledger(session_id)
        with ledger.lock:
            self._guard(ledger)
            unknown = set(patch) - EDITABLE_FIELDS
            if unknown:
                raise ValidationError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")
            current = ledger.records.get(record_id)
            if current is None:
                raise NotFoundError(f"Attendance record {record_id} not found")

            changes = dict(patch)
            for key in ("location", "point"):
                if key in changes:
                    changes[key] = optional_text(changes[key], key.capitalize())
            if "out_time" in changes and is_blank(changes["out_time"]):
                changes["out_time"] = None
            if "proper_uniform" in changes:
                changes["proper_uniform"] = require_bool(changes["proper_uniform"], "Proper uniform")

            updated = _with_canonical_times(replace(current, **changes))
            ledger.records[record_id] = updated
            return updated

    def remove(self, session_id: str, record_id: str) -> bool:
        """Delete a record. Unknown ids are a no-op and return False."""
        ledger = self._ledger(session_id)
        with ledger.lock:
            self._guard(ledger)
            return ledger.records.pop(record_id, None) is not None

    def get(self, session_id: str, record_id: str) -> AttendanceRecord:
        ledger = self._ledger(session_id)
        with ledger.lock:
            record = ledger.records.get(record_id)
        if record is None:
            raise NotFoundError(f"Attendance record {record_id} not found")
        return record

    def list_by_session(self, session_id: str) -> list[AttendanceRecord]:
        """Records in insertion order."""
        ledger = self._ledger(session_id)
        with ledger.lock:
            return list(ledger.records.values())

    def open_records(self, session_id: str) -> list[AttendanceRecord]:
        return [r for r in self.list_by_session(session_id) if r.is_open]

    def snapshot(self, session_id: str) -> tuple[DutySession, tuple[AttendanceRecord, ...]]:
        ledger = self._ledger(session_id)
        with ledger.lock:
            return ledger.session, tuple(ledger.records.values())

    def session_view(self, session_id: str) -> SessionView:
        """Session, records and side records taken in one locked read."""
        ledger = self._ledger(session_id)
        with ledger.lock:
            return SessionView(
                session=ledger.session,
                records=tuple(ledger.records.values()),
                vehicles=tuple(ledger.vehicles),
                issues=tuple(ledger.issues),
            )

    def apply_external_change(self, change: LiveChange) -> bool:
        """Apply a live-feed event with the same guards as a local mutation.

        INSERT and UPDATE upsert by id (the feed echoes our own writes back).
        Returns whether the store changed.
        """
        ledger = self._ledger(change.session_id)
        with ledger.lock:
            self._guard(ledger)
            if change.kind is ChangeKind.DELETE:
                return ledger.records.pop(change.record_id, None) is not None

            if change.record is None:
                raise ValidationError(f"{change.kind.value} change without a record")
            record = _with_canonical_times(change.record)
            if ledger.records.get(record.record_id) == record:
                return False
            ledger.records[record.record_id] = record
            return True

    # --- side records -----------------------------------------------------

    def add_vehicle(self, vehicle: VehicleRecord) -> None:
        ledger = self._ledger(vehicle.session_id)
        with ledger.lock:
            self._guard(ledger)
            ledger.vehicles.append(vehicle)

    def add_issue(self, issue: Issue) -> None:
        ledger = self._ledger(issue.session_id)
        with ledger.lock:
            self._guard(ledger)
            ledger.issues.append(issue)

    def vehicles(self, session_id: str) -> list[VehicleRecord]:
        ledger = self._ledger(session_id)
        with ledger.lock:
            return list(ledger.vehicles)

    def issues(self, session_id: str) -> list[Issue]:
        ledger = self._ledger(session_id)
        with ledger.lock:
            return list(ledger.issues)

    # --- internals --------------------------------------------------------

    def _ledger(self, session_id: str) -> _Ledger:
        ledger = self._ledgers.get(session_id)
        if ledger is None:
            raise NotFoundError(f"Duty session {session_id} is not loaded")
        return ledger

    def _guard(self, ledger: _Ledger) -> None:
        if not self._lifecycle.can_mutate(ledger.session):
            raise SessionClosedError(f"Duty session {ledger.session.session_id} is completed")
