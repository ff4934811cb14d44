from __future__ import annotations

import io
import json
import logging

from flask import Flask, jsonify, request, send_file, stream_with_context

from ..common.http import json_body, json_error, optional_float
from ..core.catalog import COURSES, DEPARTMENTS, LEVELS, courses_for_department, find_course
from ..core.constants import POLL_INTERVAL_SECONDS
from ..core.exceptions import LocationUnavailableError, SessionNotFoundError, ValidationError
from ..container import Container
from ..events.bus import EventQueue
from ..geo.location import StaticLocationProvider
from .model import CourseSelection, Session
from .qr import portal_qr_png
from .service import portal_link

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    lifecycle = container.session_lifecycle

    def _session_view(session: Session) -> dict:
        course = find_course(session.course_id)
        data = session.to_dict()
        data["courseLabel"] = course.label if course else session.course_id
        data["portalUrl"] = portal_link(request.host_url.rstrip("/"), request.args.get("path", "/"), session.session_id)
        if session.active:
            data["timeLeftMs"] = max(lifecycle.time_left_ms(session), 0)
            data["countdown"] = lifecycle.countdown_label(session)
        return data

    @app.route("/api/catalog", methods=["GET"], endpoint="catalog")
    def catalog():
        dept_id = request.args.get("dept")
        courses = courses_for_department(dept_id) if dept_id else COURSES
        return jsonify(
            {
                "departments": [{"id": d.dept_id, "name": d.name} for d in DEPARTMENTS],
                "courses": [{"id": c.course_id, "code": c.code, "name": c.name, "deptId": c.dept_id} for c in courses],
                "levels": list(LEVELS),
            }
        )

    @app.route("/api/sessions", methods=["POST"], endpoint="start_session")
    def start_session():
        try:
            data = json_body()
            selection = CourseSelection(
                department_id=str(data.get("departmentId") or ""),
                level=str(data.get("level") or ""),
                course_id=str(data.get("courseId") or ""),
            )
            locator = StaticLocationProvider(data.get("lat"), data.get("lng"))
            session = lifecycle.start(
                str(data.get("lecturerId") or "anonymous"),
                selection,
                locator,
                radius=optional_float(data.get("radius")),
            )
            return jsonify({"success": True, "session": _session_view(session)}), 201
        except ValidationError as e:
            return json_error(str(e), 400)
        except LocationUnavailableError:
            return json_error("Failed to get your location. Please enable location services.", 400)
        except Exception:
            logger.exception("failed to start session")
            return json_error("Internal error while starting the session", 500)

    @app.route("/api/sessions/<session_id>/end", methods=["POST"], endpoint="end_session")
    def end_session(session_id: str):
        try:
            session = lifecycle.end(session_id)
            return jsonify({"success": True, "session": _session_view(session)})
        except SessionNotFoundError as e:
            return json_error(str(e), 404)
        except Exception:
            logger.exception("failed to end session %s", session_id)
            return json_error("Internal error while ending the session", 500)

    @app.route("/api/sessions/active", methods=["GET"], endpoint="active_session")
    def active_session():
        session = lifecycle.get_active()
        return jsonify({"success": True, "session": _session_view(session) if session else None})

    @app.route("/api/sessions/history", methods=["GET"], endpoint="session_history")
    def session_history():
        items = []
        for summary in lifecycle.history():
            item = summary.session.to_dict()
            item["courseLabel"] = summary.course_label
            item["attendanceCount"] = summary.attendance_count
            items.append(item)
        return jsonify({"success": True, "sessions": items})

    @app.route("/api/sessions/<session_id>", methods=["GET"], endpoint="get_session")
    def get_session(session_id: str):
        session = lifecycle.get(session_id)
        if not session:
            return json_error("Session Not Found", 404)
        return jsonify({"success": True, "session": _session_view(session)})

    @app.route("/api/sessions/<session_id>/records", methods=["GET"], endpoint="session_records")
    def session_records(session_id: str):
        """Live roll. With ?since=<epoch ms> only newer records are returned (polling fallback)."""
        try:
            since = request.args.get("since", type=int)
            records = lifecycle.records_since(session_id, since) if since is not None else lifecycle.roster(session_id)
        except SessionNotFoundError as e:
            return json_error(str(e), 404)
        return jsonify({"success": True, "records": [r.to_dict() for r in records]})

    @app.route("/api/sessions/<session_id>/events", methods=["GET"], endpoint="session_events")
    def session_events(session_id: str):
        if not lifecycle.get(session_id):
            return json_error("Session Not Found", 404)

        subscription = EventQueue(container.events)
        heartbeat = POLL_INTERVAL_SECONDS * 10

        def stream():
            try:
                yield f"retry: {int(POLL_INTERVAL_SECONDS * 1000)}\n\n"
                while True:
                    event = subscription.get(timeout=heartbeat)
                    if event is None:
                        yield ": keep-alive\n\n"
                        continue
                    if event.payload.get("session_id") not in (None, session_id):
                        continue
                    yield f"event: {event.topic.value}\ndata: {json.dumps(event.payload)}\n\n"
            finally:
                subscription.close()

        return app.response_class(
            stream_with_context(stream()),
            mimetype="text/event-stream",
            headers={"Cache-Control": "no-cache"},
        )

    @app.route("/api/sessions/<session_id>/portal.png", methods=["GET"], endpoint="session_portal_qr")
    def session_portal_qr(session_id: str):
        session = lifecycle.get(session_id)
        if not session:
            return json_error("Session Not Found", 404)
        try:
            url = portal_link(request.host_url.rstrip("/"), request.args.get("path", "/"), session.session_id)
            return send_file(io.BytesIO(portal_qr_png(url)), mimetype="image/png")
        except Exception:
            logger.exception("failed to render portal QR for %s", session_id)
            return json_error("Internal error while rendering the QR code", 500)
