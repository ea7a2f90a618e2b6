from __future__ import annotations

from datetime import date, datetime


def parse_iso_date(value: str) -> date:
    """Duty dates travel as ``YYYY-MM-DD``."""
    return date.fromisoformat(value.strip())


def parse_iso_datetime(value: str) -> datetime:
    """Parse ``YYYY-MM-DDTHH:MM`` (seconds optional) into a naive datetime."""
    return datetime.fromisoformat(value.strip())


def format_display_date(value: date) -> str:
    """Reports print dates day-first (DD-MM-YYYY)."""
    return value.strftime("%d-%m-%Y")


def now_local() -> datetime:
    # Duty sheets use the ashram's wall clock; kept in one place so tests can patch it.
    return datetime.now()
