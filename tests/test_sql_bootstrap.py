from pathlib import Path

from src.sewa_duty.sewa_duty.database.bootstrap import _table_statements, iter_sql_statements

REPO_ROOT = Path(__file__).resolve().parents[1]


def test_splitter_keeps_semicolons_inside_quotes():
    sql = "INSERT INTO issues(description) VALUES('gate; light');\nSELECT 1;  \n"
    assert list(iter_sql_statements(sql)) == [
        "INSERT INTO issues(description) VALUES('gate; light')",
        "SELECT 1",
    ]


def test_schema_file_creates_every_table():
    sql = (REPO_ROOT / "database" / "schema.sql").read_text(encoding="utf-8")
    created = [s for s in iter_sql_statements(sql) if s.upper().startswith("CREATE TABLE")]
    names = [s.split()[5] for s in created]
    assert names == ["sewadars", "duty_sessions", "attendance", "vehicles", "issues"]


def test_splitter_drops_line_comments():
    sql = "-- roster\nINSERT INTO sewadars(name) VALUES('A-1'); -- first\nSELECT 2 - 1 -- tail\n;"
    assert list(iter_sql_statements(sql)) == [
        "INSERT INTO sewadars(name) VALUES('A-1')",
        "SELECT 2 - 1",
    ]


def test_server_level_statements_are_skipped():
    sql = "CREATE DATABASE IF NOT EXISTS duty;\nuse duty;\nCREATE TABLE t (id INT);"
    assert list(_table_statements(sql)) == ["CREATE TABLE t (id INT)"]
