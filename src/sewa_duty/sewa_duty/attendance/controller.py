from __future__ import annotations

from datetime import datetime

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date, parse_iso_datetime
from ..core.exceptions import ValidationError
from ..container import Container
from .live import change_from_payload


def _session_json(container: Container, session_id: str) -> dict:
    svc = container.attendance_service
    session = svc.open_session(session_id)
    return {
        "session_id": session.session_id,
        "duty_date": session.duty_date.strftime("%Y-%m-%d"),
        "group": session.group.value,
        "start_at": session.start_at.isoformat(timespec="minutes"),
        "end_at": session.end_at.isoformat(timespec="minutes"),
        "locations": list(session.locations),
        "completed": session.completed,
        "state": svc.session_state(session_id).value,
        "can_complete": svc.can_complete(session_id),
    }


def register(app: Flask, container: Container) -> None:
    def _body() -> dict:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")
        return data

    def _parse_dt(value) -> datetime:
        try:
            return parse_iso_datetime(str(value or ""))
        except ValueError:
            raise ValidationError(f"Invalid date/time: {value!r}") from None

    @app.route("/api/sessions", methods=["POST"], endpoint="api_create_session")
    def api_create_session():
        data = _body()
        try:
            duty_date = parse_iso_date(str(data.get("duty_date") or ""))
        except ValueError:
            raise ValidationError("duty_date must be YYYY-MM-DD") from None

        session = container.attendance_service.create_session(
            duty_date=duty_date,
            group=data.get("group"),
            start_at=_parse_dt(data.get("start_at")),
            end_at=_parse_dt(data.get("end_at")),
            locations=data.get("locations") or [],
        )
        return jsonify({"success": True, "session": _session_json(container, session.session_id)}), 201

    @app.route("/api/sessions/<session_id>", methods=["GET"], endpoint="api_get_session")
    def api_get_session(session_id: str):
        return jsonify({"success": True, "session": _session_json(container, session_id)})

    @app.route("/api/sessions/<session_id>/complete", methods=["POST"], endpoint="api_complete_session")
    def api_complete_session(session_id: str):
        container.attendance_service.complete_session(session_id)
        return jsonify({"success": True, "session": _session_json(container, session_id)})

    @app.route("/api/sessions/<session_id>/records", methods=["GET"], endpoint="api_list_records")
    def api_list_records(session_id: str):
        rows = container.attendance_service.get_sheet_ui(session_id)
        return jsonify({"success": True, "records": rows})

    @app.route("/api/sessions/<session_id>/records", methods=["POST"], endpoint="api_mark_present")
    def api_mark_present(session_id: str):
        data = _body()
        record = container.attendance_service.mark_present(
            session_id,
            sewadar_id=str(data.get("sewadar_id") or ""),
            location=data.get("location") or "",
            point=data.get("point") or "",
            in_time=data.get("in_time"),
            out_time=data.get("out_time"),
            proper_uniform=data.get("proper_uniform", False),
            incharge_id=data.get("incharge_id"),
        )
        return jsonify({"success": True, "record_id": record.record_id}), 201

    @app.route("/api/sessions/<session_id>/records/<record_id>", methods=["PATCH"], endpoint="api_edit_record")
    def api_edit_record(session_id: str, record_id: str):
        record = container.attendance_service.edit_record(session_id, record_id, _body())
        return jsonify({"success": True, "record_id": record.record_id, "out_time": record.out_time})

    @app.route(
        "/api/sessions/<session_id>/records/<record_id>/checkout",
        methods=["POST"],
        endpoint="api_check_out",
    )
    def api_check_out(session_id: str, record_id: str):
        data = request.get_json(silent=True) or {}
        record = container.attendance_service.check_out(session_id, record_id, out_time=data.get("out_time"))
        return jsonify({"success": True, "record_id": record.record_id, "out_time": record.out_time})

    @app.route("/api/sessions/<session_id>/records/<record_id>", methods=["DELETE"], endpoint="api_remove_record")
    def api_remove_record(session_id: str, record_id: str):
        removed = container.attendance_service.remove_record(session_id, record_id)
        return jsonify({"success": True, "removed": removed})

    @app.route("/api/sessions/<session_id>/vehicles", methods=["POST"], endpoint="api_log_vehicle")
    def api_log_vehicle(session_id: str):
        data = _body()
        vehicle = container.attendance_service.log_vehicle(
            session_id,
            vehicle_type=data.get("type"),
            plate_number=data.get("plate_number") or "",
            model=data.get("model") or "",
            remarks=data.get("remarks") or "",
            incharge_id=data.get("incharge_id"),
        )
        return jsonify({"success": True, "vehicle_id": vehicle.vehicle_id}), 201

    @app.route("/api/sessions/<session_id>/issues", methods=["POST"], endpoint="api_report_issue")
    def api_report_issue(session_id: str):
        data = _body()
        issue = container.attendance_service.report_issue(
            session_id,
            description=data.get("description") or "",
            photo_url=data.get("photo_url"),
            incharge_id=data.get("incharge_id"),
        )
        return jsonify({"success": True, "issue_id": issue.issue_id}), 201

    @app.route("/api/live/attendance", methods=["POST"], endpoint="api_live_attendance")
    def api_live_attendance():
        """Webhook for the live update feed."""
        applied = container.attendance_service.apply_external_change(change_from_payload(_body()))
        return jsonify({"success": True, "applied": applied})
