from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Gender, HomeGroup


@dataclass(frozen=True)
class Sewadar:
    """Domain entity: a volunteer eligible for security duty."""

    sewadar_id: str
    name: str
    gender: Gender
    home_group: HomeGroup
    is_custom: bool = False
