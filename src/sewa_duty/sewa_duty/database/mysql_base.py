from __future__ import annotations

from contextlib import contextmanager
from datetime import time, timedelta
from typing import Any, Dict, List, Optional, Sequence

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """One connection and cursor per unit of work; commit on success."""
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    return cur.fetchone() or None


def fetchall(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or [])


def quoted(columns: Sequence[str]) -> str:
    # `group`, `date` and `timestamp` are reserved words in MySQL
    return ", ".join(f"`{c}`" for c in columns)


def upsert_sql(table: str, columns: Sequence[str], updatable: Sequence[str]) -> str:
    """INSERT ... ON DUPLICATE KEY UPDATE for the given columns.

    Live-feed echoes and retries write the same row twice; only ``updatable``
    columns change on the second write.
    """
    placeholders = ",".join(["%s"] * len(columns))
    updates = ", ".join(f"`{c}`=VALUES(`{c}`)" for c in updatable)
    return f"INSERT INTO {table}({quoted(columns)}) VALUES({placeholders}) ON DUPLICATE KEY UPDATE {updates}"


def mysql_time_to_clock(value: Any) -> Optional[str]:
    """Normalize a stored TIME into ``HH:MM``.

    mysql-connector hands TIME columns back as timedelta (pure driver),
    datetime.time or string ('08:30:00') depending on version and settings.
    Seconds are dropped: attendance is kept to the minute.
    """
    if value is None:
        return None

    if isinstance(value, time):
        return f"{value.hour:02d}:{value.minute:02d}"

    if isinstance(value, timedelta):
        total_minutes = (int(value.total_seconds()) // 60) % (24 * 60)
        return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"

    if isinstance(value, str):
        parts = value.strip().split(":")
        if len(parts) < 2:
            raise ValueError(f"Invalid time string: {value!r}")
        return f"{int(parts[0]):02d}:{int(parts[1]):02d}"

    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")
