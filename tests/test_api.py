import pytest

from src.sewa_duty.sewa_duty.main import create_app


@pytest.fixture
def client(container):
    app = create_app(container)
    return app.test_client()


def _new_session(client, group="Monday"):
    resp = client.post(
        "/api/sessions",
        json={
            "duty_date": "2026-02-01",
            "group": group,
            "start_at": "2026-02-01T18:00",
            "end_at": "2026-02-02T06:00",
            "locations": ["Gate 1", "Gate 2"],
        },
    )
    assert resp.status_code == 201
    return resp.get_json()["session"]


def test_session_flow(client):
    session = _new_session(client)
    sid = session["session_id"]
    assert session["locations"] == ["Gate 1", "Gate 2"]
    assert session["can_complete"] is True

    resp = client.post(f"/api/sessions/{sid}/records", json={"sewadar_id": "MON-001", "location": "Gate 1", "in_time": "20:00"})
    assert resp.status_code == 201
    rid = resp.get_json()["record_id"]

    resp = client.post(f"/api/sessions/{sid}/complete")
    assert resp.status_code == 409
    assert resp.get_json() == {
        "success": False,
        "message": "1 attendance record(s) still have no out-time",
        "open_records": 1,
    }

    resp = client.post(f"/api/sessions/{sid}/records/{rid}/checkout", json={"out_time": "01:30"})
    assert resp.get_json()["out_time"] == "01:30"

    rows = client.get(f"/api/sessions/{sid}/records").get_json()["records"]
    assert rows[0]["duration"] == "05:30"

    resp = client.post(f"/api/sessions/{sid}/complete")
    assert resp.status_code == 200
    assert resp.get_json()["session"]["state"] == "COMPLETED"

    resp = client.patch(f"/api/sessions/{sid}/records/{rid}", json={"point": "Main Door"})
    assert resp.status_code == 409


def test_validation_errors_are_400(client):
    sid = _new_session(client)["session_id"]

    resp = client.post(f"/api/sessions/{sid}/records", json={"sewadar_id": "MON-001", "in_time": "25:00"})
    assert resp.status_code == 400
    assert resp.get_json()["success"] is False

    resp = client.patch(f"/api/sessions/{sid}/records/x", data="not json", content_type="text/plain")
    assert resp.status_code == 400

    resp = client.post("/api/sessions", json={"duty_date": "01-02-2026"})
    assert resp.status_code == 400


def test_fields_of_the_wrong_type_are_400(client):
    sid = _new_session(client)["session_id"]

    resp = client.post(f"/api/sessions/{sid}/records", json={"sewadar_id": "MON-001", "point": 5})
    assert resp.status_code == 400
    assert resp.get_json()["success"] is False

    rid = client.post(f"/api/sessions/{sid}/records", json={"sewadar_id": "MON-001"}).get_json()["record_id"]
    resp = client.patch(f"/api/sessions/{sid}/records/{rid}", json={"location": 7})
    assert resp.status_code == 400
    resp = client.patch(f"/api/sessions/{sid}/records/{rid}", json={"proper_uniform": "maybe"})
    assert resp.status_code == 400

    resp = client.post(f"/api/sessions/{sid}/records", json={"sewadar_id": "MON-002", "proper_uniform": "false"})
    assert resp.status_code == 201
    rows = client.get(f"/api/sessions/{sid}/records").get_json()["records"]
    assert {r["sewadar_id"]: r["uniform"] for r in rows}["MON-002"] == "No"


def test_unknown_ids_are_404(client):
    assert client.get("/api/sessions/missing").status_code == 404
    sid = _new_session(client)["session_id"]
    assert client.post(f"/api/sessions/{sid}/records", json={"sewadar_id": "NOPE"}).status_code == 404


def test_delete_is_idempotent(client):
    sid = _new_session(client)["session_id"]
    rid = client.post(f"/api/sessions/{sid}/records", json={"sewadar_id": "MON-001"}).get_json()["record_id"]

    assert client.delete(f"/api/sessions/{sid}/records/{rid}").get_json()["removed"] is True
    assert client.delete(f"/api/sessions/{sid}/records/{rid}").get_json()["removed"] is False


def test_report_and_csv(client):
    sid = _new_session(client)["session_id"]
    client.post(
        f"/api/sessions/{sid}/records",
        json={"sewadar_id": "MON-001", "location": "Gate 2", "point": "Parking", "in_time": "20:00", "out_time": "01:30"},
    )

    report = client.get(f"/api/sessions/{sid}/report").get_json()["report"]
    assert report["downloadable"] is True
    assert {r["band_id"]: r["count"] for r in report["shift_rows"]} == {"day": 0, "evening": 1, "night": 0}

    final = client.post(f"/api/sessions/{sid}/report/finalize").get_json()["report"]
    assert final["finalized"] is True

    resp = client.get(f"/api/sessions/{sid}/report/deployment.csv")
    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert "deployment_monday_01-02-2026.csv" in resp.headers["Content-Disposition"]
    lines = resp.data.decode("utf-8-sig").splitlines()
    assert lines == ["location,point,day,evening,night,total", "Gate 2,Parking,0,1,0,1"]


def test_live_feed_webhook(client):
    sid = _new_session(client)["session_id"]
    row = {
        "id": "ext-1",
        "session_id": sid,
        "sewadar_id": "MON-002",
        "name": "Baldev Singh",
        "gender": "Gents",
        "group": "Monday",
        "date": "2026-02-01",
        "in_time": "19:10",
    }

    resp = client.post("/api/live/attendance", json={"eventType": "INSERT", "new": row})
    assert resp.get_json() == {"success": True, "applied": True}

    resp = client.post("/api/live/attendance", json={"eventType": "DELETE", "old": {"id": "ext-1", "session_id": sid}})
    assert resp.get_json()["applied"] is True

    resp = client.post("/api/live/attendance", json={"eventType": "NOPE"})
    assert resp.status_code == 400


def test_side_records(client):
    sid = _new_session(client)["session_id"]
    resp = client.post(f"/api/sessions/{sid}/vehicles", json={"type": "2-wheeler", "plate_number": "pb10x1"})
    assert resp.status_code == 201
    resp = client.post(f"/api/sessions/{sid}/issues", json={"description": "Light broken"})
    assert resp.status_code == 201

    report = client.get(f"/api/sessions/{sid}/report").get_json()["report"]
    assert report["vehicle_count"] == 1
    assert report["issue_count"] == 1


def test_roster_endpoints(client):
    resp = client.get("/api/sewadars?group=Monday")
    assert [s["sewadar_id"] for s in resp.get_json()["sewadars"]] == ["MON-001", "MON-002"]

    resp = client.post("/api/sewadars", json={"name": "Dev Raj", "gender": "Gents", "group": "Friday"})
    assert resp.status_code == 201
    assert resp.get_json()["sewadar"]["sewadar_id"].startswith("ADDED-")

    assert client.get("/api/sewadars?gender=Other").status_code == 400
