from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.web import register_error_handlers
from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .goals.controller import register as register_goals
from .logging_config import init_logging
from .students.controller import register as register_students
from .teachers.controller import register as register_teachers
from .tokens.controller import register as register_tokens

logger = logging.getLogger(__name__)


def create_app(*, container: Optional[Container] = None, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["SESSION_LIFETIME_HOURS"] = int(getattr(settings, "SESSION_LIFETIME_HOURS", 24))
    app.config["SESSION_COOKIE_HTTPONLY"] = True
    app.config["SESSION_COOKIE_SECURE"] = bool(getattr(settings, "SESSION_COOKIE_SECURE", False))
    app.config["LOG_LEVEL"] = getattr(settings, "LOG_LEVEL", "INFO")
    app.config["LOG_FORMAT"] = getattr(settings, "LOG_FORMAT", "text")

    init_logging(app)
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        container = build_container(
            db_config=db_config,
            registration_code=getattr(settings, "TEACHER_REGISTRATION_CODE", None),
        )
    app.extensions["resource_room"] = container

    register_error_handlers(app)
    register_teachers(app, container)
    register_students(app, container)
    register_attendance(app, container)
    register_tokens(app, container)
    register_goals(app, container)

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "OK", "message": "Resource Room API is running"})

    return app
