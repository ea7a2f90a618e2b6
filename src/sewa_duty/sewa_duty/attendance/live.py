from __future__ import annotations

from typing import Any, Mapping

from ..core.enums import ChangeKind
from ..core.exceptions import ValidationError
from .mapping import record_from_row
from .model import LiveChange


def change_from_payload(payload: Mapping[str, Any]) -> LiveChange:
    """Translate a change-feed payload into a LiveChange.

    Payload shape: ``{"eventType": "INSERT"|"UPDATE"|"DELETE", "new": row, "old": row}``.
    DELETE events only carry the old row, and may carry only its keys.
    """
    try:
        kind = ChangeKind(str(payload.get("eventType", "")).upper())
    except ValueError:
        raise ValidationError(f"Unknown change type: {payload.get('eventType')!r}") from None

    if kind is ChangeKind.DELETE:
        old = payload.get("old") or {}
        if not old.get("id") or not old.get("session_id"):
            raise ValidationError("DELETE change without record keys")
        return LiveChange(kind=kind, session_id=str(old["session_id"]), record_id=str(old["id"]))

    new = payload.get("new") or {}
    record = record_from_row(new)
    return LiveChange(kind=kind, session_id=record.session_id, record_id=record.record_id, record=record)
