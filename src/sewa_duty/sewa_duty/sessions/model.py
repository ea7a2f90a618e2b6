from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from ..core.enums import SessionGroup
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class DutySession:
    """Domain entity: a scheduled window of security coverage."""

    session_id: str
    duty_date: date
    group: SessionGroup
    start_at: datetime
    end_at: datetime
    locations: tuple[str, ...]
    completed: bool = False

    def __post_init__(self):
        if not self.start_at < self.end_at:
            raise ValidationError("Session must start before it ends")
        if not self.locations:
            raise ValidationError("Session needs at least one location")

    def covers_group(self, group: str) -> bool:
        return self.group is SessionGroup.GLOBAL or self.group.value == group
