from datetime import date, datetime, time, timedelta

import pytest

from src.sewa_duty.sewa_duty.attendance.live import change_from_payload
from src.sewa_duty.sewa_duty.attendance.mapping import RECORD_COLUMNS, record_from_row, record_to_row
from src.sewa_duty.sewa_duty.core.enums import ChangeKind, Gender, HomeGroup, SessionGroup
from src.sewa_duty.sewa_duty.core.exceptions import ValidationError
from src.sewa_duty.sewa_duty.database.mysql_base import mysql_time_to_clock, upsert_sql
from src.sewa_duty.sewa_duty.sessions.mysql_session_repository import session_from_row, session_to_row


def _row(**overrides):
    row = {
        "id": "abc",
        "session_id": "s1",
        "sewadar_id": "MON-001",
        "name": "Anil Gulati",
        "gender": "Gents",
        "group": "Monday",
        "date": "2026-02-01",
        "workshop_location": " Gate 1 ",
        "sewa_points": "Main Door",
        "in_time": "19:05",
        "out_time": None,
        "is_proper_uniform": 1,
        "volunteer_id": "INC-7",
        "timestamp": 1769956500000,
    }
    row.update(overrides)
    return row


def test_record_from_row_maps_columns():
    rec = record_from_row(_row())

    assert rec.record_id == "abc"
    assert rec.gender is Gender.GENTS
    assert rec.group is HomeGroup.MONDAY
    assert rec.session_date == date(2026, 2, 1)
    assert rec.location == "Gate 1"
    assert rec.point == "Main Door"
    assert rec.in_time == "19:05"
    assert rec.is_open
    assert rec.proper_uniform is True
    assert rec.incharge_id == "INC-7"
    assert rec.recorded_at == datetime.fromtimestamp(1769956500)


@pytest.mark.parametrize(
    "stored, expected",
    [
        ("7:05", "07:05"),
        ("19:05:00", "19:05"),
        (time(6, 30), "06:30"),
        (timedelta(hours=23, minutes=15), "23:15"),
    ],
)
def test_record_from_row_normalizes_time_columns(stored, expected):
    assert record_from_row(_row(in_time=stored, out_time=stored)).out_time == expected


def test_blank_out_time_is_open():
    assert record_from_row(_row(out_time="")).out_time is None


def test_record_from_row_rejects_bad_rows():
    with pytest.raises(ValidationError):
        record_from_row(_row(gender="Other"))
    with pytest.raises(ValidationError):
        record_from_row(_row(in_time=None))
    with pytest.raises(ValidationError):
        record_from_row({k: v for k, v in _row().items() if k != "session_id"})


def test_record_to_row_uses_table_columns():
    rec = record_from_row(_row(out_time="23:00"))
    row = record_to_row(rec)

    assert tuple(row) == RECORD_COLUMNS
    assert row["gender"] == "Gents"
    assert row["workshop_location"] == "Gate 1"
    assert row["out_time"] == "23:00"
    assert row["is_proper_uniform"] == 1
    assert row["timestamp"] == 1769956500000


def test_live_insert_and_update_carry_records():
    change = change_from_payload({"eventType": "insert", "new": _row()})
    assert change.kind is ChangeKind.INSERT
    assert change.session_id == "s1"
    assert change.record.record_id == "abc"

    change = change_from_payload({"eventType": "UPDATE", "new": _row(out_time="22:00"), "old": {"id": "abc"}})
    assert change.kind is ChangeKind.UPDATE
    assert change.record.out_time == "22:00"


def test_live_delete_uses_old_keys():
    change = change_from_payload({"eventType": "DELETE", "old": {"id": "abc", "session_id": "s1"}})
    assert change.kind is ChangeKind.DELETE
    assert (change.session_id, change.record_id, change.record) == ("s1", "abc", None)


def test_live_payload_errors():
    with pytest.raises(ValidationError):
        change_from_payload({"eventType": "TRUNCATE"})
    with pytest.raises(ValidationError):
        change_from_payload({"eventType": "DELETE", "old": {"id": "abc"}})
    with pytest.raises(ValidationError):
        change_from_payload({"eventType": "INSERT", "new": {}})


def test_session_rows_keep_location_names_with_commas():
    row = {
        "session_id": "s1",
        "duty_date": date(2026, 2, 1),
        "group": "Global",
        "start_at": datetime(2026, 2, 1, 18, 0),
        "end_at": datetime(2026, 2, 2, 6, 0),
        "locations": "Gate 1, North\nParking",
        "completed": 0,
    }
    session = session_from_row(row)

    assert session.group is SessionGroup.GLOBAL
    assert session.locations == ("Gate 1, North", "Parking")
    assert not session.completed
    assert session_to_row(session) == row


def test_upsert_sql_quotes_reserved_columns():
    sql = upsert_sql("attendance", ("id", "group", "out_time"), ("out_time",))
    assert sql == (
        "INSERT INTO attendance(`id`, `group`, `out_time`) VALUES(%s,%s,%s) "
        "ON DUPLICATE KEY UPDATE `out_time`=VALUES(`out_time`)"
    )


def test_mysql_time_to_clock():
    assert mysql_time_to_clock(None) is None
    assert mysql_time_to_clock(timedelta(hours=25, minutes=5)) == "01:05"
    assert mysql_time_to_clock("8:30:59") == "08:30"
    with pytest.raises(TypeError):
        mysql_time_to_clock(830)
