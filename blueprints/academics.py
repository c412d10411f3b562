"""Attendance, grades, assignments, submissions, mock tests and analytics."""

from __future__ import annotations

from flask import Blueprint

from credit_store import CreditLedger, mock_test_credits
from db_stores import (
    AssignmentStore,
    AttendanceStore,
    CourseStore,
    EnrollmentStore,
    GradeStore,
    MockTestStore,
    SubmissionStore,
)
from errors import ValidationError
from helpers import as_list, as_number, dicts, request_data, require_fields, success
from notifier import NotificationDispatcher
from recommendations import attendance_summary, overall_grades
from uploads import save_many, save_single

bp = Blueprint("academics", __name__)

ATTENDANCE_STATUSES = ("present", "absent", "late", "excused")


# ── Attendance ────────────────────────────────────────────

@bp.route("/api/attendance", methods=["POST"])
def api_record_attendance():
    data = request_data()
    require_fields(data, "student_email", "course", "date", "status")
    if data["status"] not in ATTENDANCE_STATUSES:
        raise ValidationError(f"status must be one of: {', '.join(ATTENDANCE_STATUSES)}")

    record, created = AttendanceStore.record(
        teacher_email=data.get("teacher_email", ""),
        student_email=data["student_email"],
        course=data["course"],
        date=data["date"],
        status=data["status"],
    )
    message = "Attendance recorded successfully" if created else "Attendance updated successfully"
    return success(message, attendance=record.to_dict())


@bp.route("/api/attendance/<student_email>")
def api_student_attendance(student_email):
    return success(attendance=dicts(AttendanceStore.for_student(student_email)))


# ── Grades ────────────────────────────────────────────────

@bp.route("/api/grades", methods=["POST"])
def api_record_grade():
    data = request_data()
    require_fields(data, "student_email", "course", "grade", "semester")

    record, created = GradeStore.record(
        teacher_email=data.get("teacher_email", ""),
        student_email=data["student_email"],
        course=data["course"],
        grade=data["grade"],
        semester=data["semester"],
        assignment_id=data.get("assignment_id") or None,
    )

    notifier = NotificationDispatcher()
    if created:
        notifier.notify(record.student_email, "New Grade Available",
                        f"You have received a grade for {record.course}: {record.grade}.")
        message = "Grade uploaded successfully"
    else:
        notifier.notify(record.student_email, "Grade Updated",
                        f"Your grade for {record.course} has been updated to {record.grade}.")
        message = "Grade updated successfully"
    return success(message, grade=record.to_dict())


@bp.route("/api/grades/<student_email>")
def api_student_grades(student_email):
    return success(grades=dicts(GradeStore.for_student(student_email)))


@bp.route("/api/overall-grades/<student_email>")
def api_overall_grades(student_email):
    return success(overall_grades=overall_grades(student_email))


@bp.route("/api/performance/<student_email>")
def api_performance(student_email):
    return success(
        attendance=attendance_summary(student_email),
        grades=dicts(GradeStore.for_student(student_email)),
    )


# ── Assignments ───────────────────────────────────────────

@bp.route("/api/assignments", methods=["POST"])
def api_create_assignment():
    data = request_data()
    require_fields(data, "teacher_email", "title", "due_date", "course", "department")
    assignment = AssignmentStore.create(
        teacher_email=data["teacher_email"],
        title=data["title"],
        description=data.get("description", ""),
        due_date=data["due_date"],
        course=data["course"],
        department=data["department"],
        files=save_many("files"),
    )

    course = CourseStore.by_name(assignment.course)
    if course:
        NotificationDispatcher().notify_many(
            EnrollmentStore.student_emails(course.id),
            "New Assignment",
            f'A new assignment "{assignment.title}" has been posted for {assignment.course}. '
            f"Due date: {assignment.due_date}",
            "warning",
        )
    return success("Assignment uploaded successfully", assignment=assignment.to_dict())


@bp.route("/api/assignments/<department>")
def api_department_assignments(department):
    return success(assignments=dicts(AssignmentStore.by_department(department)))


@bp.route("/api/submit-assignment", methods=["POST"])
def api_submit_assignment():
    data = request_data()
    require_fields(data, "assignment_id", "student_email")
    submission = SubmissionStore.submit(
        data["assignment_id"], data["student_email"], save_single("file"),
    )

    assignment = AssignmentStore.get(submission.assignment_id)
    if assignment:
        NotificationDispatcher().notify(
            assignment.teacher_email,
            "Assignment Submitted",
            f'A student has submitted the assignment "{assignment.title}".',
        )
    return success("Assignment submitted successfully", submission=submission.to_dict())


@bp.route("/api/assignment-submissions/<assignment_id>")
def api_assignment_submissions(assignment_id):
    return success(submissions=dicts(SubmissionStore.for_assignment(assignment_id)))


# ── Mock tests ────────────────────────────────────────────

@bp.route("/api/mock-tests", methods=["POST"])
def api_submit_mock_test():
    data = request_data()
    require_fields(data, "student_email", "subject", "score", "total_marks")
    score = as_number(data["score"], "score")
    total = as_number(data["total_marks"], "total_marks")
    if total <= 0:
        raise ValidationError("total_marks must be positive")
    if score < 0 or score > total:
        raise ValidationError("score must be between 0 and total_marks")

    credits = mock_test_credits(score, total)
    test = MockTestStore.add(
        student_email=data["student_email"],
        subject=data["subject"],
        questions=as_list(data.get("questions"), "questions"),
        score=score,
        total_marks=total,
        credits_earned=credits,
    )
    CreditLedger().award(test.student_email, credits, "Mock Test Performance")
    return success("Mock test submitted successfully", mock_test=test.to_dict(),
                   credits_earned=credits)


@bp.route("/api/mock-tests/<student_email>")
def api_student_mock_tests(student_email):
    return success(mock_tests=dicts(MockTestStore.for_student(student_email)))
