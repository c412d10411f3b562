"""Core routes: help-desk chatbot, uploaded files, health checks."""

from __future__ import annotations

import logging
import time

from flask import Blueprint, current_app, jsonify, send_from_directory

from campus_data import chatbot_reply
from database import get_store
from helpers import request_data, require_fields, success

logger = logging.getLogger(__name__)

bp = Blueprint("core", __name__)


@bp.route("/api/chatbot", methods=["POST"])
def api_chatbot():
    data = request_data()
    require_fields(data, "message")
    return success(response=chatbot_reply(data["message"]))


@bp.route("/uploads/<path:filename>")
def uploaded_file(filename):
    return send_from_directory(current_app.config["UPLOAD_FOLDER"], filename)


# ── Health checks ─────────────────────────────────────────

_start_time = time.time()


@bp.route("/api/health")
def health():
    uptime = int(time.time() - _start_time)
    store = get_store()
    return jsonify({
        "status": "ok",
        "uptime_seconds": uptime,
        "timestamp": store.now(),
        "users": store.count("users"),
    })


@bp.route("/live")
def live():
    return jsonify({"status": "alive"}), 200
