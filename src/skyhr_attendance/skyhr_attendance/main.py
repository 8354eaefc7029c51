from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import Container, build_container
from .core.http import register_error_handlers, success_response
from .database.bootstrap import apply_schema, list_tables
from .settings import load_settings

from .attendance.controller import register as register_attendance
from .biometrics.controller import register as register_biometrics
from .geofence.controller import register as register_geofence
from .qr.controller import register as register_qr
from .storage.controller import register as register_storage

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(settings_module: Optional[str] = None, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = load_settings(importlib.import_module(settings_module))
    configure_logging(settings.log_level)

    app.secret_key = settings.secret_key
    app.config["DEBUG"] = settings.debug
    app.config["TESTING"] = settings.testing

    db = settings.db_config
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db.get("user"),
        db.get("host"),
        db.get("port", 3306),
        db.get("database"),
    )

    if settings.auto_init_db and container is None:
        apply_schema(db, schema_path=SCHEMA_PATH)
        logger.info("Schema ready (tables=%d)", len(list_tables(db)))

    container = container or build_container(settings)

    register_error_handlers(app)
    register_attendance(app, container)
    register_geofence(app, container)
    register_qr(app, container)
    register_biometrics(app, container)
    register_storage(app, container)

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return success_response("OK", {"status": "ok"})

    return app
