"""
Error taxonomy and JSON error handlers.

Handlers raise one of the CampusError subclasses; the registered Flask error
handlers turn them into the wire shape clients already understand:

    {"success": false, "message": "...", "error": "not_found"}
"""

from __future__ import annotations

import logging
from enum import Enum

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    VALIDATION = "validation"
    INTERNAL = "internal"


class CampusError(Exception):
    """Base class for failures that map onto a JSON error response."""

    kind = ErrorKind.INTERNAL
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"success": False, "message": self.message, "error": self.kind.value}


class NotFoundError(CampusError):
    kind = ErrorKind.NOT_FOUND
    status_code = 404


class ConflictError(CampusError):
    kind = ErrorKind.CONFLICT
    status_code = 409


class ValidationError(CampusError):
    kind = ErrorKind.VALIDATION
    status_code = 400


def register_error_handlers(app: Flask) -> None:
    """Install JSON handlers for CampusError, HTTP errors and crashes."""

    @app.errorhandler(CampusError)
    def _handle_campus_error(exc: CampusError):
        if exc.status_code >= 500:
            logger.error("Request failed: %s", exc.message)
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(404)
    def _handle_not_found(exc):
        return jsonify({
            "success": False,
            "message": "Endpoint not found",
            "error": ErrorKind.NOT_FOUND.value,
        }), 404

    @app.errorhandler(HTTPException)
    def _handle_http_error(exc: HTTPException):
        kind = ErrorKind.VALIDATION if exc.code and exc.code < 500 else ErrorKind.INTERNAL
        return jsonify({
            "success": False,
            "message": exc.description or exc.name,
            "error": kind.value,
        }), exc.code or 500

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return jsonify({
            "success": False,
            "message": "Internal server error",
            "error": ErrorKind.INTERNAL.value,
        }), 500
