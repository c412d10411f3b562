"""Leave requests and complaints."""

from __future__ import annotations

from flask import Blueprint

from db_stores import ComplaintStore, LeaveStore, UserStore
from errors import ValidationError
from helpers import dicts, request_data, require_fields, success
from notifier import NotificationDispatcher
from uploads import save_single

bp = Blueprint("leave", __name__)

LEAVE_STATUSES = ("pending", "approved", "rejected")
COMPLAINT_STATUSES = ("open", "in_progress", "resolved", "closed")


def _department_teacher_emails(student_email: str) -> list[str]:
    student = UserStore.get_by_email(student_email)
    if student is None:
        return []
    return [t.email for t in UserStore.teachers(student.department)]


# ── Leave ─────────────────────────────────────────────────

@bp.route("/api/leave", methods=["POST"])
def api_submit_leave():
    data = request_data()
    require_fields(data, "user_email", "type", "start_date", "end_date", "reason")
    document = save_single("document")
    leave = LeaveStore.submit(
        user_email=data["user_email"],
        requester_type=data["type"],
        start_date=data["start_date"],
        end_date=data["end_date"],
        reason=data["reason"],
        document=document,
    )

    if leave.type == "student":
        NotificationDispatcher().notify_many(
            _department_teacher_emails(leave.user_email),
            "New Leave Request",
            "A student has submitted a leave request with "
            f"{'supporting document' if document else 'no document'}.",
        )
    return success("Leave request submitted successfully", leave_request=leave.to_dict())


@bp.route("/api/leave-requests/<department>")
def api_pending_leave(department):
    return success(leave_requests=dicts(LeaveStore.pending_for_department(department)))


@bp.route("/api/leave-status", methods=["POST"])
def api_leave_status():
    data = request_data()
    require_fields(data, "leave_id", "status")
    if data["status"] not in LEAVE_STATUSES:
        raise ValidationError(f"status must be one of: {', '.join(LEAVE_STATUSES)}")

    leave = LeaveStore.set_status(data["leave_id"], data["status"])
    NotificationDispatcher().notify(
        leave.user_email,
        "Leave Request Update",
        f"Your leave request has been {leave.status}.",
        "success" if leave.status == "approved" else "warning",
    )
    return success("Leave request updated successfully", leave_request=leave.to_dict())


# ── Complaints ────────────────────────────────────────────

@bp.route("/api/complaint", methods=["POST"])
def api_submit_complaint():
    data = request_data()
    require_fields(data, "student_email", "title", "description")
    complaint = ComplaintStore.submit(
        student_email=data["student_email"],
        title=data["title"],
        description=data["description"],
        category=data.get("category", "general"),
    )
    NotificationDispatcher().notify_many(
        _department_teacher_emails(complaint.student_email),
        "New Complaint",
        "A new complaint has been submitted in your department.",
        "warning",
    )
    return success("Complaint submitted successfully", complaint=complaint.to_dict())


@bp.route("/api/complaints/<department>")
def api_department_complaints(department):
    return success(complaints=dicts(ComplaintStore.for_department(department)))


@bp.route("/api/complaint-status", methods=["POST"])
def api_complaint_status():
    data = request_data()
    require_fields(data, "complaint_id", "status")
    if data["status"] not in COMPLAINT_STATUSES:
        raise ValidationError(f"status must be one of: {', '.join(COMPLAINT_STATUSES)}")

    complaint = ComplaintStore.set_status(data["complaint_id"], data["status"])
    NotificationDispatcher().notify(
        complaint.student_email,
        "Complaint Status Update",
        f"Your complaint status has been updated to {complaint.status}.",
    )
    return success("Complaint status updated successfully", complaint=complaint.to_dict())
