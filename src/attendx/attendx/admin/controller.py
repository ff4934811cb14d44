from __future__ import annotations

import logging

from flask import Flask, jsonify

from ..common.http import json_body, json_error
from ..core.exceptions import ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/reset", methods=["POST"], endpoint="admin_reset")
    def admin_reset():
        """Permanently delete all sessions, records and device locks."""
        try:
            data = json_body()
            if data.get("confirm") is not True:
                raise ValidationError("Reset must be confirmed with {\"confirm\": true}")
            container.reset_service.reset_all()
            return jsonify({"success": True, "message": "All attendance data has been reset."})
        except ValidationError as e:
            return json_error(str(e), 400)
        except Exception:
            logger.exception("reset failed")
            return json_error("Internal error while resetting data", 500)
