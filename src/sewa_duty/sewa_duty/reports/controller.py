from __future__ import annotations

import csv
import io
from dataclasses import asdict

from flask import Flask, jsonify

from ..container import Container
from .service import SessionReport


def _report_json(report: SessionReport) -> dict:
    data = asdict(report)
    data["generated_at"] = report.generated_at.isoformat(timespec="seconds")
    data["downloadable"] = report.downloadable
    return data


def register(app: Flask, container: Container) -> None:
    def _write_deployment_csv(*, report: SessionReport, filename: str):
        band_ids = [c["band_id"] for c in report.band_columns]
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=["location", "point", *band_ids, "total"])
        writer.writeheader()
        for row in report.deployment_rows:
            writer.writerow(row)

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/sessions/<session_id>/report", methods=["GET"], endpoint="api_session_report")
    def api_session_report(session_id: str):
        report = container.report_service.build_session_report(session_id)
        return jsonify({"success": True, "report": _report_json(report)})

    @app.route("/api/sessions/<session_id>/report/finalize", methods=["POST"], endpoint="api_finalize_report")
    def api_finalize_report(session_id: str):
        report = container.report_service.finalize_report(session_id)
        return jsonify({"success": True, "report": _report_json(report)})

    @app.route("/api/sessions/<session_id>/report/deployment.csv", methods=["GET"], endpoint="api_deployment_csv")
    def api_deployment_csv(session_id: str):
        report = container.report_service.build_session_report(session_id)
        filename = f"deployment_{report.group.lower()}_{report.duty_date}.csv"
        return _write_deployment_csv(report=report, filename=filename)
