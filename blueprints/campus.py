"""Timetables, events, live sessions, question papers and the holiday calendar."""

from __future__ import annotations

from flask import Blueprint

from campus_data import holidays_for
from database import get_store
from db_stores import (
    CourseStore,
    EnrollmentStore,
    EventStore,
    LiveSessionStore,
    QuestionPaperStore,
    TimetableStore,
    UserStore,
)
from errors import NotFoundError
from helpers import as_number, dicts, request_data, require_fields, success
from notifier import NotificationDispatcher
from uploads import save_many, save_single

bp = Blueprint("campus", __name__)


# ── Timetable ─────────────────────────────────────────────

@bp.route("/api/timetable", methods=["POST"])
def api_upload_timetable():
    data = request_data()
    require_fields(data, "teacher_email", "department")
    image = save_single("image")
    timetable = TimetableStore.upload(
        data["teacher_email"],
        data["department"],
        data.get("description", ""),
        image["url"] if image else data.get("image") or None,
    )
    NotificationDispatcher().notify_many(
        [s.email for s in UserStore.students(timetable.department)],
        "Timetable Updated",
        "A new timetable has been published for your department.",
    )
    return success("Timetable uploaded successfully", timetable=timetable.to_dict())


@bp.route("/api/timetable/<department>")
def api_latest_timetable(department):
    timetable = TimetableStore.latest(department)
    if timetable is None:
        raise NotFoundError("No timetable found for this department")
    return success(timetable=timetable.to_dict())


# ── Events ────────────────────────────────────────────────

@bp.route("/api/events", methods=["POST"])
def api_create_event():
    data = request_data()
    require_fields(data, "teacher_email", "title", "date", "type")
    event = EventStore.create(
        teacher_email=data["teacher_email"],
        title=data["title"],
        description=data.get("description", ""),
        date=data["date"],
        event_type=data["type"],
        registration_link=data.get("registration_link", ""),
        files=save_many("files"),
    )
    NotificationDispatcher().notify_many(
        [s.email for s in UserStore.students()],
        "New Event",
        f'A new {event.type} event "{event.title}" is scheduled on {event.date}.',
    )
    return success("Event created successfully", event=event.to_dict())


@bp.route("/api/events")
def api_list_events():
    return success(events=dicts(EventStore.list_recent()))


@bp.route("/api/events/<event_id>", methods=["DELETE"])
def api_delete_event(event_id):
    EventStore.delete(event_id)
    return success("Event deleted successfully")


# ── Live sessions ─────────────────────────────────────────

@bp.route("/api/live-sessions", methods=["POST"])
def api_create_live_session():
    data = request_data()
    require_fields(data, "teacher_email", "title", "date_time", "course", "link")
    session = LiveSessionStore.create(
        teacher_email=data["teacher_email"],
        title=data["title"],
        description=data.get("description", ""),
        date_time=data["date_time"],
        duration=int(as_number(data.get("duration", 60), "duration")),
        course=data["course"],
        link=data["link"],
    )

    course = CourseStore.by_name(session.course)
    if course:
        NotificationDispatcher().notify_many(
            EnrollmentStore.student_emails(course.id),
            "New Live Session",
            f'A live session "{session.title}" for {session.course} starts at {session.date_time}.',
        )
    return success("Live session scheduled successfully", live_session=session.to_dict())


@bp.route("/api/live-sessions")
def api_list_live_sessions():
    return success(live_sessions=dicts(LiveSessionStore.list_recent()))


@bp.route("/api/live-sessions/<session_id>", methods=["DELETE"])
def api_delete_live_session(session_id):
    LiveSessionStore.delete(session_id)
    return success("Live session deleted successfully")


# ── Question papers ───────────────────────────────────────

@bp.route("/api/question-papers", methods=["POST"])
def api_upload_question_paper():
    data = request_data()
    require_fields(data, "teacher_email", "title", "course", "year")
    paper = QuestionPaperStore.create(
        teacher_email=data["teacher_email"],
        title=data["title"],
        description=data.get("description", ""),
        course=data["course"],
        year=data["year"],
        files=save_many("files"),
    )

    teacher = UserStore.get_by_email(paper.teacher_email)
    if teacher:
        NotificationDispatcher().notify_many(
            [s.email for s in UserStore.students(teacher.department)],
            "New Question Paper",
            f'Question paper "{paper.title}" ({paper.year}) is now available for {paper.course}.',
        )
    return success("Question paper uploaded successfully", question_paper=paper.to_dict())


@bp.route("/api/question-papers")
def api_list_question_papers():
    return success(question_papers=dicts(QuestionPaperStore.list_recent()))


@bp.route("/api/question-papers/<paper_id>", methods=["DELETE"])
def api_delete_question_paper(paper_id):
    QuestionPaperStore.delete(paper_id)
    return success("Question paper deleted successfully")


# ── Holidays ──────────────────────────────────────────────

@bp.route("/api/holidays")
@bp.route("/api/holidays/<year>")
def api_holidays(year=None):
    if year is None:
        year = str(get_store().clock().year)
    return success(year=str(year), holidays=holidays_for(year))
