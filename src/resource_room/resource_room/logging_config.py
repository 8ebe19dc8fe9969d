"""Logging configuration.

Every record emitted while a request is active carries the request id and the
logged-in teacher, so service and repository log lines can be traced back to
the API call (and the error body) that produced them.
"""

from __future__ import annotations

import json
import logging
import re
import time
import uuid

from flask import Flask, g, has_request_context, request

REQUEST_ID_HEADER = "X-Request-ID"
ACCESS_LOGGER = "resource_room.access"

_INBOUND_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")
_TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s [req=%(request_id)s teacher=%(teacher_id)s]: %(message)s"


def current_request_id() -> str:
    if has_request_context():
        return getattr(g, "request_id", "-")
    return "-"


class RequestContextFilter(logging.Filter):
    """Stamp ``request_id`` and ``teacher_id`` on every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = current_request_id()
        if not hasattr(record, "teacher_id"):
            teacher = getattr(g, "teacher", None) if has_request_context() else None
            record.teacher_id = teacher.teacher_id if teacher is not None else "-"
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per line; request fields are omitted outside requests."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in ("request_id", "teacher_id", "error_kind", "status"):
            value = getattr(record, field, "-")
            if value != "-":
                entry[field] = value
        if record.exc_info and record.exc_info[0]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def configure_logging(level: str = "INFO", fmt: str = "text") -> None:
    root = logging.getLogger()
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    root.handlers.clear()

    handler = logging.StreamHandler()
    handler.addFilter(RequestContextFilter())
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root.addHandler(handler)

    logging.getLogger("werkzeug").setLevel(logging.WARNING)
    logging.getLogger("mysql.connector").setLevel(logging.WARNING)


def init_logging(app: Flask) -> None:
    """Configure logging from app config and install the request id hooks."""
    configure_logging(app.config.get("LOG_LEVEL", "INFO"), app.config.get("LOG_FORMAT", "text"))
    access = logging.getLogger(ACCESS_LOGGER)

    @app.before_request
    def _attach_request_id():
        # Reuse a well-formed id from a proxy or client; mint one otherwise.
        inbound = request.headers.get(REQUEST_ID_HEADER, "")
        g.request_id = inbound if _INBOUND_ID.match(inbound) else uuid.uuid4().hex[:12]
        g.request_start = time.time()

    @app.after_request
    def _log_request(response):
        duration_ms = (time.time() - getattr(g, "request_start", time.time())) * 1000
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        access.log(
            level,
            "%s %s %s %.0fms",
            request.method,
            request.path,
            response.status_code,
            duration_ms,
            extra={"status": response.status_code},
        )
        response.headers[REQUEST_ID_HEADER] = current_request_id()
        return response
