from __future__ import annotations

from enum import Enum


class Gender(str, Enum):
    GENTS = "Gents"
    LADIES = "Ladies"


class HomeGroup(str, Enum):
    """Weekday duty groups (gents) plus the single ladies group."""

    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"
    LADIES = "Ladies"


GENTS_GROUPS = tuple(g for g in HomeGroup if g is not HomeGroup.LADIES)


class SessionGroup(str, Enum):
    """Who a duty session is scheduled for. GLOBAL spans every group."""

    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"
    LADIES = "Ladies"
    GLOBAL = "Global"


class SessionState(str, Enum):
    SCHEDULED = "SCHEDULED"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"


class ChangeKind(str, Enum):
    """Event types delivered by the live update feed."""

    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class VehicleType(str, Enum):
    TWO_WHEELER = "2-wheeler"
    FOUR_WHEELER = "4-wheeler"
