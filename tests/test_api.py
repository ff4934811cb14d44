from __future__ import annotations

import pytest

from src.attendx.attendx.container import build_container
from src.attendx.attendx.main import create_app

LAT, LNG = 6.5244, 3.3792


class FakeSummarizer:
    def __init__(self):
        self.calls = []

    def summarize(self, stats):
        self.calls.append(list(stats))
        return f"{len(stats)} students analyzed"


@pytest.fixture()
def summarizer():
    return FakeSummarizer()


@pytest.fixture()
def client(summarizer):
    container = build_container(backend="memory", summarizer=summarizer)
    app = create_app(settings_module="config.testing", container=container)
    return app.test_client()


def start_session(client, **overrides):
    payload = {"lecturerId": "lect-1", "departmentId": "cpe", "level": "300", "courseId": "cpe301", "lat": LAT, "lng": LNG}
    payload.update(overrides)
    return client.post("/api/sessions", json=payload)


def submit(client, session, *, device="dev-1", **overrides):
    payload = {
        "sessionKey": session["sessionKey"].lower(),
        "matricNo": "ENG/21/0001",
        "name": "Ada Obi",
        "department": "cpe",
        "lat": LAT,
        "lng": LNG,
    }
    payload.update(overrides)
    headers = {"X-Device-Id": device} if device else {}
    return client.post(f"/api/portal/{session['id']}/submit", json=payload, headers=headers)


def test_catalog_lists_courses(client):
    body = client.get("/api/catalog").get_json()
    assert "cpe301" in [c["id"] for c in body["courses"]]
    assert body["levels"] == ["100", "200", "300", "400", "500"]


def test_start_session_returns_key_and_portal_link(client):
    resp = start_session(client)
    assert resp.status_code == 201
    session = resp.get_json()["session"]

    assert len(session["sessionKey"]) == 6
    assert session["active"] is True
    assert session["countdown"] == "30:00" or session["countdown"].startswith("29:")
    assert session["portalUrl"].endswith(f"/#/portal/{session['id']}")
    assert session["courseLabel"] == "CPE 301 - Digital Logic Design"


def test_start_session_validation_and_location_errors(client):
    assert start_session(client, courseId="").status_code == 400
    resp = start_session(client, lat=None, lng=None)
    assert resp.status_code == 400
    assert "location" in resp.get_json()["message"]


def test_submit_flow_and_duplicate(client):
    session = start_session(client).get_json()["session"]

    first = submit(client, session)
    assert first.status_code == 201
    assert first.get_json()["record"]["matricNo"] == "ENG/21/0001"

    again = submit(client, session, device="dev-2")
    assert again.status_code == 400
    assert again.get_json()["reason"] == "DUPLICATE_SUBMISSION"

    records = client.get(f"/api/sessions/{session['id']}/records").get_json()["records"]
    assert [r["matricNo"] for r in records] == ["ENG/21/0001"]


def test_device_cookie_is_issued_and_locks_device(client):
    session = start_session(client).get_json()["session"]

    first = submit(client, session, device=None)
    assert first.status_code == 201
    assert "attendx_device=" in first.headers.get("Set-Cookie", "")

    # The test client replays the cookie on the next request.
    second = submit(client, session, device=None, matricNo="ENG/21/0002")
    body = second.get_json()
    assert body["reason"] == "DEVICE_LOCKED"
    assert "ENG/21/0001" in body["message"]


def test_out_of_range_submission(client):
    session = start_session(client).get_json()["session"]
    resp = submit(client, session, lat=LAT + 0.01)
    assert resp.get_json()["reason"] == "OUT_OF_RANGE"


def test_missing_form_fields(client):
    session = start_session(client).get_json()["session"]
    resp = submit(client, session, name="")
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Full name is required"


def test_portal_view_hides_the_key(client):
    session = start_session(client).get_json()["session"]
    body = client.get(f"/api/portal/{session['id']}").get_json()
    assert "sessionKey" not in body["session"]
    assert client.get("/api/portal/missing").status_code == 404


def test_end_session_then_submit_is_inactive(client):
    session = start_session(client).get_json()["session"]
    ended = client.post(f"/api/sessions/{session['id']}/end").get_json()["session"]
    assert ended["active"] is False
    assert ended["endTime"] is not None

    assert client.post(f"/api/sessions/{session['id']}/end").status_code == 200
    assert submit(client, session).get_json()["reason"] == "SESSION_INACTIVE"
    assert client.post("/api/sessions/missing/end").status_code == 404


def test_active_and_history(client):
    first = start_session(client).get_json()["session"]
    second = start_session(client, courseId="cpe305").get_json()["session"]

    assert client.get("/api/sessions/active").get_json()["session"]["id"] == second["id"]
    history = client.get("/api/sessions/history").get_json()["sessions"]
    assert {h["id"] for h in history} == {first["id"], second["id"]}
    assert [h["active"] for h in history if h["id"] == first["id"]] == [False]


def test_audit_json_and_csv(client):
    session = start_session(client).get_json()["session"]
    submit(client, session)

    audit = client.get("/api/audit/cpe301").get_json()
    assert audit["totalSessions"] == 1
    assert audit["eligibleCount"] == 1
    assert audit["stats"][0]["percentage"] == 100.0

    csv_resp = client.get("/api/audit/cpe301/export.csv")
    assert csv_resp.mimetype == "text/csv"
    assert b"ENG/21/0001" in csv_resp.data


def test_session_insights_uses_summarizer(client, summarizer):
    session = start_session(client).get_json()["session"]
    assert client.post(f"/api/sessions/{session['id']}/insights").status_code == 400

    submit(client, session)
    body = client.post(f"/api/sessions/{session['id']}/insights").get_json()
    assert body["summary"] == "1 students analyzed"
    assert summarizer.calls[0][0].matric_no == "ENG/21/0001"


def test_reset_requires_confirmation(client):
    session = start_session(client).get_json()["session"]
    assert client.post("/api/admin/reset", json={}).status_code == 400
    assert client.post("/api/admin/reset", json={"confirm": True}).status_code == 200
    assert client.get(f"/api/sessions/{session['id']}").status_code == 404


def test_portal_qr_image(client):
    session = start_session(client).get_json()["session"]
    resp = client.get(f"/api/sessions/{session['id']}/portal.png")
    assert resp.status_code == 200
    assert resp.mimetype == "image/png"
    assert resp.data[:8] == b"\x89PNG\r\n\x1a\n"
    assert client.get("/api/sessions/missing/portal.png").status_code == 404


def test_catalog_filters_courses_by_department(client):
    body = client.get("/api/catalog?dept=ele").get_json()
    assert [c["id"] for c in body["courses"]] == ["ele201", "ele401"]


def test_start_session_rejects_nan_radius(client):
    resp = start_session(client, radius="nan")
    assert resp.status_code == 400


def test_camera_flag_must_be_a_json_boolean(client):
    session = start_session(client).get_json()["session"]

    resp = submit(client, session, cameraActive="false")
    assert resp.status_code == 201

    session = start_session(client).get_json()["session"]
    resp = submit(client, session, device="dev-9", cameraActive=True)
    assert resp.get_json()["reason"] == "FACE_CAPTURE_FAILED"
