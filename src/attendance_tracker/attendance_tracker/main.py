from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.http import register_error_handlers
from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .logging_config import setup_logging
from .reports.controller import register as register_reports
from .sessions.controller import register as register_sessions
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    storage_backend = getattr(settings, "STORAGE_BACKEND", "mysql")
    db_config = getattr(settings, "DB_CONFIG", None)

    if container is None:
        if str(storage_backend).strip().lower() == "mysql" and bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("schema ready (tables=%s)", len(list_tables(db_config)))

        container = build_container(
            storage_backend=storage_backend,
            db_config=db_config,
            timezone_offset_minutes=int(getattr(settings, "TIMEZONE_OFFSET_MINUTES", 330)),
            panel_index_path=getattr(settings, "PANEL_INDEX_PATH", "panel/index"),
            panel_config_ttl_seconds=float(getattr(settings, "PANEL_CONFIG_TTL_SECONDS", 300)),
            session_list_limit=int(getattr(settings, "SESSION_LIST_LIMIT", 5)),
        )

    if container.conn is not None:
        cfg = container.conn.config
        logger.info("settings=%s db=%s@%s:%s/%s", settings_module, cfg.user, cfg.host, cfg.port, cfg.database)
    else:
        logger.info("settings=%s storage=memory", settings_module)

    app.extensions["attendance_tracker"] = container
    register_error_handlers(app)
    register_attendance(app, container)
    register_sessions(app, container)
    register_reports(app, container)
    register_users(app, container)

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok", "today": container.clock.today().isoformat()})

    return app
