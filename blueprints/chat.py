"""Parent/teacher chat: history, send, and a live stream per conversation."""

from __future__ import annotations

from flask import Blueprint, Response, current_app, stream_with_context

from db_stores import ChatStore
from errors import ValidationError
from helpers import dicts, request_data, require_fields, success
from push import chat_room, event_stream, get_hub

bp = Blueprint("chat", __name__)

CHAT_SENDERS = ("parent", "teacher")


@bp.route("/api/chat-messages/<parent_email>/<teacher_email>")
def api_chat_history(parent_email, teacher_email):
    return success(messages=dicts(ChatStore.conversation(parent_email, teacher_email)))


@bp.route("/api/chat-messages", methods=["POST"])
def api_send_chat():
    data = request_data()
    require_fields(data, "parent_email", "teacher_email", "message", "sender")
    if data["sender"] not in CHAT_SENDERS:
        raise ValidationError("sender must be 'parent' or 'teacher'")

    msg = ChatStore.add(
        data["parent_email"], data["teacher_email"], data["message"], data["sender"],
    )
    get_hub().publish(
        chat_room(msg.parent_email, msg.teacher_email), "new-chat-message", msg.to_dict(),
    )
    return success(message=msg.to_dict())


@bp.route("/api/chat/stream/<parent_email>/<teacher_email>")
def api_chat_stream(parent_email, teacher_email):
    keepalive = current_app.config.get("STREAM_KEEPALIVE_SECONDS", 15)
    stream = event_stream(get_hub(), chat_room(parent_email, teacher_email), keepalive)
    return Response(
        stream_with_context(stream),
        mimetype="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
