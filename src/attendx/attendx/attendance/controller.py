from __future__ import annotations

import logging
import uuid

from flask import Flask, jsonify, request

from ..common.http import json_body, json_error
from ..common.validators import normalize_matric, require_non_empty
from ..core.catalog import find_course, find_department
from ..core.constants import DEVICE_COOKIE_NAME, DEVICE_HEADER_NAME
from ..core.exceptions import ValidationError
from ..container import Container
from ..geo.location import StaticLocationProvider
from .model import Submission

logger = logging.getLogger(__name__)

# One year; the device cookie identifies a browser, not a login.
_DEVICE_COOKIE_MAX_AGE = 365 * 24 * 3600


def register(app: Flask, container: Container) -> None:
    validator = container.submission_validator
    lifecycle = container.session_lifecycle

    def _device_id() -> tuple[str, bool]:
        """Return (device_id, issued) where issued means a new cookie must be set."""
        device_id = request.headers.get(DEVICE_HEADER_NAME) or request.cookies.get(DEVICE_COOKIE_NAME)
        if device_id:
            return device_id.strip()[:64], False
        return uuid.uuid4().hex, True

    @app.route("/api/portal/<session_id>", methods=["GET"], endpoint="portal_session")
    def portal_session(session_id: str):
        """Public view of a session for the student form. Never exposes the key."""
        session = lifecycle.get(session_id)
        if not session:
            return json_error("Session Not Found", 404)
        course = find_course(session.course_id)
        department = find_department(session.department_id)
        return jsonify(
            {
                "success": True,
                "session": {
                    "id": session.session_id,
                    "courseLabel": course.label if course else session.course_id,
                    "departmentId": session.department_id,
                    "departmentName": department.name if department else session.department_id,
                    "level": session.level,
                    "active": session.active,
                },
            }
        )

    @app.route("/api/portal/<session_id>/submit", methods=["POST"], endpoint="portal_submit")
    def portal_submit(session_id: str):
        try:
            data = json_body()
            submission = Submission(
                session_key=require_non_empty(data.get("sessionKey"), "Session key"),
                matric_no=normalize_matric(data.get("matricNo")),
                name=require_non_empty(data.get("name"), "Full name"),
                department=require_non_empty(data.get("department"), "Department"),
                face_image=data.get("faceImage") or None,
                camera_active=data.get("cameraActive") is True,
            )
        except ValidationError as e:
            return json_error(str(e), 400)

        device_id, issued = _device_id()
        try:
            result = validator.submit(
                session_id,
                submission,
                locator=StaticLocationProvider(data.get("lat"), data.get("lng")),
                device_id=device_id,
            )
        except Exception:
            logger.exception("submission failed unexpectedly for session %s", session_id)
            return json_error("Internal error while recording attendance", 500)

        response = jsonify(result.to_dict())
        response.status_code = 201 if result.ok else 400
        if issued:
            response.set_cookie(DEVICE_COOKIE_NAME, device_id, max_age=_DEVICE_COOKIE_MAX_AGE, samesite="Lax")
        return response
