from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Dict

from flask import Flask, current_app, g, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.exceptions import (
    AlreadyCheckedIn,
    AuthenticationError,
    DomainError,
    DuplicateEntity,
    NotFound,
    PersistenceError,
)
from ..logging_config import current_request_id

logger = logging.getLogger(__name__)

SESSION_KEY = "teacher_id"


def status_for(error: DomainError) -> int:
    if isinstance(error, NotFound):
        return 404
    if isinstance(error, (AlreadyCheckedIn, DuplicateEntity)):
        return 409
    if isinstance(error, AuthenticationError):
        return 401
    if isinstance(error, PersistenceError):
        return 503
    return 400


def error_body(kind: str, message: str) -> Dict[str, str]:
    return {"error": kind, "message": message, "requestId": current_request_id()}


def json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def teacher_required(view):
    """Resolve the session's teacher into ``g.teacher`` or answer 401."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        teacher_id = session.get(SESSION_KEY)
        if not teacher_id:
            return jsonify(error_body("authentication_required", "Please log in to access this resource")), 401

        container = current_app.extensions["resource_room"]
        teacher = container.teacher_service.get_active(int(teacher_id))
        if not teacher:
            session.clear()
            return jsonify(error_body("invalid_session", "Please log in again")), 401

        g.teacher = teacher
        return view(*args, **kwargs)

    return wrapper


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(error: DomainError):
        status = status_for(error)
        extra = {"error_kind": error.kind, "status": status}
        if status >= 500:
            logger.error("%s %s failed: %s", request.method, request.path, error, extra=extra)
        else:
            logger.info("%s %s rejected: %s", request.method, request.path, error, extra=extra)
        return jsonify(error_body(error.kind, str(error))), status

    @app.errorhandler(404)
    def handle_not_found(_error):
        return jsonify(error_body("not_found", "Resource not found")), 404

    @app.errorhandler(Exception)
    def handle_unexpected(error: Exception):
        if isinstance(error, HTTPException):
            return jsonify(error_body("http_error", error.description or error.name)), error.code or 500
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify(error_body("internal_error", "Something went wrong")), 500
