from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional

from ..common.datetime_utils import now_local
from ..common.validators import require_enum, require_non_empty
from ..core.constants import CUSTOM_SEWADAR_PREFIX
from ..core.enums import Gender, HomeGroup
from ..core.exceptions import ValidationError
from .model import Sewadar
from .repository import RosterRepository

logger = logging.getLogger(__name__)


class RosterService:
    """Use cases over the sewadar roster: lookup, search and runtime registration."""

    def __init__(self, roster: RosterRepository):
        self._roster = roster

    def get(self, sewadar_id: str) -> Optional[Sewadar]:
        return self._roster.get_by_id(sewadar_id)

    def search(
        self,
        term: str = "",
        *,
        gender: Optional[Gender] = None,
        group: Optional[HomeGroup] = None,
    ) -> list[Sewadar]:
        """Name search, sorted by name.

        A search term looks across every group; the group filter only applies
        to an empty term.
        """
        term = (term or "").strip().lower()
        out = []
        for s in self._roster.list_all():
            if gender and s.gender != gender:
                continue
            if term:
                if term not in s.name.lower():
                    continue
            elif group and s.home_group != group:
                continue
            out.append(s)
        out.sort(key=lambda s: s.name.lower())
        return out

    def present(self, sewadar_ids: Iterable[str]) -> list[Sewadar]:
        """Roster entries for the given ids, skipping ids the roster does not know."""
        seen: set[str] = set()
        out = []
        for sid in sewadar_ids:
            if sid in seen:
                continue
            seen.add(sid)
            s = self._roster.get_by_id(sid)
            if s:
                out.append(s)
        out.sort(key=lambda s: s.name.lower())
        return out

    def register_custom(self, *, name: str, gender, group, now: Optional[datetime] = None) -> Sewadar:
        name = require_non_empty(name, "Name")
        gender = require_enum(Gender, gender, "Gender")
        group = require_enum(HomeGroup, group, "Group")

        if (group is HomeGroup.LADIES) != (gender is Gender.LADIES):
            raise ValidationError("Ladies sewadars belong to the Ladies group only")

        now = now or now_local()
        sewadar_id = f"{CUSTOM_SEWADAR_PREFIX}{int(now.timestamp() * 1000)}"
        while self._roster.get_by_id(sewadar_id):
            sewadar_id = f"{sewadar_id}-1"

        sewadar = Sewadar(sewadar_id=sewadar_id, name=name, gender=gender, home_group=group, is_custom=True)
        self._roster.add(sewadar)
        logger.info("sewadar_registered", extra={"sewadar_id": sewadar_id, "group": group.value})
        return sewadar
