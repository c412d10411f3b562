"""Notification routes and the per-recipient push stream."""

from __future__ import annotations

from flask import Blueprint, Response, current_app, stream_with_context

from helpers import dicts, request_data, require_fields, success
from notifier import NotificationDispatcher
from push import event_stream, get_hub

bp = Blueprint("notifications", __name__)


@bp.route("/api/notifications/<email>")
def api_notifications(email):
    dispatcher = NotificationDispatcher()
    return success(
        notifications=dicts(dispatcher.list_for(email)),
        unread_count=dispatcher.unread_count(email),
    )


@bp.route("/api/notifications/mark-read", methods=["POST"])
def api_notifications_read():
    """Mark one notification read, or every notification of ``user_email`` when id is "all"."""
    data = request_data()
    require_fields(data, "notification_id")
    dispatcher = NotificationDispatcher()
    if data["notification_id"] == "all":
        require_fields(data, "user_email")
        changed = dispatcher.mark_all_read(data["user_email"])
        return success("Notifications marked as read", updated=changed)
    notif = dispatcher.mark_read(data["notification_id"])
    return success("Notification marked as read", notification=notif.to_dict())


@bp.route("/api/notifications/stream/<email>")
def api_notifications_stream(email):
    keepalive = current_app.config.get("STREAM_KEEPALIVE_SECONDS", 15)
    stream = event_stream(get_hub(), email, keepalive)
    return Response(
        stream_with_context(stream),
        mimetype="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
