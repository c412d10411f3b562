"""Course discussion forum."""

from __future__ import annotations

from flask import Blueprint

from db_stores import EnrollmentStore, ForumStore
from helpers import dicts, request_data, require_fields, success
from notifier import NotificationDispatcher

bp = Blueprint("forum", __name__)


@bp.route("/api/forum-posts", methods=["POST"])
def api_create_post():
    data = request_data()
    require_fields(data, "user_email", "course_id", "title", "content")
    post = ForumStore.create_post(
        data["user_email"], data["course_id"], data["title"], data["content"],
    )

    # Everyone enrolled except the author
    recipients = [e for e in EnrollmentStore.student_emails(post.course_id) if e != post.user_email]
    NotificationDispatcher().notify_many(
        recipients,
        "New Forum Post",
        f'A new discussion has been started in your course forum: "{post.title}"',
    )
    return success("Post created successfully", post=post.to_dict())


@bp.route("/api/forum-replies", methods=["POST"])
def api_create_reply():
    data = request_data()
    require_fields(data, "post_id", "user_email", "content")
    post, reply = ForumStore.reply(data["post_id"], data["user_email"], data["content"])

    if post.user_email != reply.user_email:
        NotificationDispatcher().notify(
            post.user_email,
            "New Forum Reply",
            f'Someone replied to your post: "{post.title}"',
        )
    return success("Reply posted successfully", reply=reply.to_dict())


@bp.route("/api/forum-posts/<course_id>")
def api_course_posts(course_id):
    return success(posts=dicts(ForumStore.for_course(course_id)))
