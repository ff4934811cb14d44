from __future__ import annotations

import logging

from flask import Flask, jsonify

from ..common.http import json_error
from ..core.exceptions import SessionNotFoundError
from ..container import Container
from .service import audit_to_csv

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    eligibility = container.eligibility

    @app.route("/api/audit/<course_id>", methods=["GET"], endpoint="course_audit")
    def course_audit(course_id: str):
        report = eligibility.build_audit(course_id)
        return jsonify(
            {
                "success": True,
                "courseId": report.course_id,
                "courseLabel": report.course_label,
                "totalSessions": report.total_sessions,
                "eligibleCount": report.eligible_count,
                "ineligibleCount": report.ineligible_count,
                "stats": [s.to_dict() for s in report.stats],
            }
        )

    @app.route("/api/audit/<course_id>/export.csv", methods=["GET"], endpoint="course_audit_csv")
    def course_audit_csv(course_id: str):
        report = eligibility.build_audit(course_id)
        return app.response_class(
            audit_to_csv(report),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename=eligibility_{course_id}.csv"},
        )

    @app.route("/api/sessions/<session_id>/insights", methods=["POST"], endpoint="session_insights")
    def session_insights(session_id: str):
        try:
            stats = eligibility.for_session(session_id)
        except SessionNotFoundError as e:
            return json_error(str(e), 404)

        if not stats:
            return json_error("No attendance records to analyze yet", 400)

        # The summarizer never raises; failures come back as placeholder text.
        summary = container.summarizer.summarize(stats)
        return jsonify({"success": True, "summary": summary, "stats": [s.to_dict() for s in stats]})
