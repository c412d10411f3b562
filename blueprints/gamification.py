"""Leaderboards and credits."""

from __future__ import annotations

from flask import Blueprint, current_app

from audit import log_event
from credit_store import CreditLedger
from db_stores import UserStore
from helpers import as_list, dicts, request_data, require_fields, success
from leaderboard import LeaderboardPublisher

bp = Blueprint("gamification", __name__)


@bp.route("/api/leaderboard", methods=["POST"])
def api_publish_leaderboard():
    data = request_data()
    require_fields(data, "teacher_email", "month", "year", "top_students")
    top_students = as_list(data["top_students"], "top_students")

    snapshot = LeaderboardPublisher().publish(
        data["teacher_email"], data["month"], data["year"], top_students,
    )
    log_event("leaderboard_published", snapshot.teacher_email,
              f"{snapshot.month} {snapshot.year} ranked={len(snapshot.top_students)}")
    return success("Leaderboard published successfully", leaderboard=snapshot.to_dict())


@bp.route("/api/leaderboard/<month>/<year>")
def api_get_leaderboard(month, year):
    return success(leaderboard=LeaderboardPublisher().get(month, year).to_dict())


@bp.route("/api/leaderboards")
def api_list_leaderboards():
    return success(leaderboards=dicts(LeaderboardPublisher().list_all()))


@bp.route("/api/student-credits/<student_email>")
def api_student_credits(student_email):
    return success(credits=CreditLedger().get(student_email).to_dict())


@bp.route("/api/top-students")
def api_top_students():
    limit = current_app.config.get("TOP_STUDENTS_LIMIT", 10)
    students = []
    for entry in CreditLedger().top_n(limit):
        user = UserStore.get_by_email(entry.student_email)
        students.append({
            "email": entry.student_email,
            "name": user.name if user else "Unknown",
            "roll_number": (user.roll_number if user else None) or "N/A",
            "department": (user.department if user else None) or "N/A",
            "total_credits": entry.total_credits,
        })
    return success(students=students)
