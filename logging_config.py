"""
Structured logging configuration.

- JSON lines in production, readable text in development
- A short request id on every request (also sent back as ``X-Request-ID``)
- One access line per API call; file downloads and health probes stay quiet,
  and long-lived event streams are logged when they open
"""

from __future__ import annotations

import json
import logging
import time
import uuid

from flask import Flask, g, has_request_context, request

# Paths that never get an access line
QUIET_PREFIXES = ("/uploads/", "/api/health", "/live")

TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s [%(request_id)s] %(message)s"


class RequestIdFilter(logging.Filter):
    """Stamp records emitted inside a request with its id."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = getattr(g, "request_id", "-") if has_request_context() else "-"
        return True


class JSONFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "request_id": getattr(record, "request_id", "-"),
            "msg": record.getMessage(),
        }
        for key in ("method", "path", "status", "duration_ms", "remote_addr"):
            if hasattr(record, key):
                entry[key] = getattr(record, key)
        if record.exc_info and record.exc_info[0]:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def _build_handler(log_format: str) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.addFilter(RequestIdFilter())
    if log_format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt="%H:%M:%S"))
    return handler


def init_logging(app: Flask) -> None:
    level_name = str(app.config.get("LOG_LEVEL", "INFO")).upper()

    root = logging.getLogger()
    root.setLevel(getattr(logging, level_name, logging.INFO))
    root.handlers = [_build_handler(app.config.get("LOG_FORMAT", "text"))]

    # Flask's dev server repeats every request otherwise
    logging.getLogger("werkzeug").setLevel(logging.WARNING)

    access = logging.getLogger("campus.access")

    @app.before_request
    def _start_request():
        g.request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]
        g.request_start = time.perf_counter()

    @app.after_request
    def _access_line(response):
        response.headers["X-Request-ID"] = g.get("request_id", "-")
        if request.path.startswith(QUIET_PREFIXES):
            return response

        elapsed = (time.perf_counter() - g.get("request_start", time.perf_counter())) * 1000
        streaming = response.mimetype == "text/event-stream"
        access.info(
            "%s %s -> %s%s (%.1f ms)",
            request.method, request.path, response.status_code,
            " stream opened" if streaming else "", elapsed,
            extra={
                "method": request.method,
                "path": request.path,
                "status": response.status_code,
                "duration_ms": round(elapsed, 1),
                "remote_addr": request.remote_addr,
            },
        )
        return response
