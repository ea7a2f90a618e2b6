from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import VehicleType


@dataclass(frozen=True)
class VehicleRecord:
    """Vehicle entry logged at a post during a session."""

    vehicle_id: str
    session_id: str
    vehicle_type: VehicleType
    plate_number: str
    model: str = ""
    remarks: str = ""
    logged_by: Optional[str] = None
    logged_at: Optional[datetime] = None


@dataclass(frozen=True)
class Issue:
    """Free-text incident reported during a session."""

    issue_id: str
    session_id: str
    description: str
    photo_url: Optional[str] = None
    reported_by: Optional[str] = None
    reported_at: Optional[datetime] = None
