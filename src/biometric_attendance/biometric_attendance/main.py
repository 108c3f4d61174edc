from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.api import error_response
from .core.exceptions import DomainError
from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .devices.controller import register as register_devices
from .stats.controller import register as register_stats
from .sync.controller import register as register_sync

logger = logging.getLogger(__name__)

_SETTING_NAMES = (
    "LINK_DELAY_SECONDS",
    "CONNECT_TIMEOUT_SECONDS",
    "FAILING_DEVICE_IDS",
    "SYNC_HISTORY_LIMIT",
)


def create_app(container: Optional[Container] = None, *, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["API_TOKEN"] = getattr(settings, "API_TOKEN", None)

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        container = build_container(
            db_config=db_config,
            settings={name: getattr(settings, name) for name in _SETTING_NAMES if hasattr(settings, name)},
        )
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(container.conn, schema_path=schema_path)
            logger.info("schema ready (tables=%d)", len(list_tables(container.conn)))

    app.extensions["biometric_attendance"] = container

    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        return error_response(exc)

    @app.errorhandler(Exception)
    def handle_unexpected_error(exc: Exception):
        if isinstance(exc, HTTPException):
            return jsonify({"success": False, "message": exc.description}), exc.code
        logger.exception("unhandled error")
        return jsonify({"success": False, "message": "Internal server error"}), 500

    register_devices(app, container)
    register_sync(app, container)
    register_stats(app, container)
    register_attendance(app, container)

    return app
