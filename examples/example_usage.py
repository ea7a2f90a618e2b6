"""Example: use the service layer without Flask.

Opens a duty session from MySQL and prints its shift distribution.
Usage: python -m examples.example_usage <session_id>
"""

import importlib
import sys

from config import get_settings_module

from src.sewa_duty.sewa_duty.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=settings.DB_CONFIG,
        shift_cutover=getattr(settings, "SHIFT_CUTOVER", None),
    )
    report = container.report_service.build_session_report(sys.argv[1])
    for row in report.shift_rows:
        print(f"{row['time_slot']:<15} {row['name']:<10} {row['count']}")
    print(f"open records: {report.open_records}")


if __name__ == "__main__":
    main()
