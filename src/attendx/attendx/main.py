from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .admin.controller import register as register_admin
from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .eligibility.controller import register as register_eligibility
from .sessions.controller import register as register_sessions

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level_name: str) -> None:
    level = getattr(logging, str(level_name).upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("attendx").setLevel(level)


def create_app(*, settings_module: Optional[str] = None, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    backend = str(getattr(settings, "STORAGE_BACKEND", "memory")).lower()
    db_config = getattr(settings, "DB_CONFIG", {})
    logger.info("settings=%s storage=%s", settings_module, backend)

    if container is None:
        if backend == "mysql" and bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            backend=backend,
            db_config=db_config,
            default_radius=float(getattr(settings, "DEFAULT_RADIUS_METERS", 100.0)),
            enforce_key_expiry=bool(getattr(settings, "ENFORCE_KEY_EXPIRY", True)),
            gemini_api_key=getattr(settings, "GEMINI_API_KEY", None),
            gemini_model=getattr(settings, "GEMINI_MODEL", "gemini-2.5-flash"),
        )

    app.extensions["attendx"] = container

    register_sessions(app, container)
    register_attendance(app, container)
    register_eligibility(app, container)
    register_admin(app, container)

    return app
