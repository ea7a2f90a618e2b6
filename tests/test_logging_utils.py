import json
import logging

from src.sewa_duty.sewa_duty.logging_utils import JsonFormatter


def test_json_formatter_lifts_extra_fields():
    record = logging.LogRecord("sewa_duty.reports", logging.INFO, __file__, 1, "report_finalized", (), None)
    record.session_id = "s1"
    record.present = 12

    payload = json.loads(JsonFormatter().format(record))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "sewa_duty.reports"
    assert payload["message"] == "report_finalized"
    assert payload["session_id"] == "s1"
    assert payload["present"] == 12
    assert "levelno" not in payload
