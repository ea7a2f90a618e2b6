from __future__ import annotations

import re
from pathlib import Path
from typing import Iterator

from .connection import DatabaseConnection, DBConfig

# Quoted strings, backtick identifiers, line comments, statement ends, and
# runs of everything else. A lone quote falls through to the last branch.
_TOKEN = re.compile(
    r"""'(?:[^'\\]|\\.)*'"""
    r'''|"(?:[^"\\]|\\.)*"'''
    r"|`[^`]*`"
    r"|--[^\n]*"
    r"|;"
    r"|[^;'\"`-]+"
    r"|.",
    re.S,
)

# The target database comes from DB_CONFIG, not from the SQL file.
_SERVER_LEVEL = re.compile(r"^(CREATE\s+DATABASE|USE)\b", re.I)


def iter_sql_statements(sql: str) -> Iterator[str]:
    """Split a schema/seed script on ``;`` outside quotes, dropping ``--`` comments."""
    parts: list[str] = []
    for token in _TOKEN.findall(sql):
        if token.startswith("--"):
            continue
        if token == ";":
            statement = "".join(parts).strip()
            parts = []
            if statement:
                yield statement
            continue
        parts.append(token)

    statement = "".join(parts).strip()
    if statement:
        yield statement


def _table_statements(sql: str) -> Iterator[str]:
    return (s for s in iter_sql_statements(sql) if not _SERVER_LEVEL.match(s))


def _run_sql_file(db_config: dict, path: str | Path) -> None:
    sql = Path(path).read_text(encoding="utf-8")
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        for stmt in _table_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_database_exists(db_config: dict) -> None:
    config = DBConfig.from_dict(db_config)
    conn = DatabaseConnection(config).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    _run_sql_file(db_config, schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    _run_sql_file(db_config, seed_path)


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
