"""
Repository classes over the in-memory EntityStore.

One class per entity kind. Handlers talk to these instead of touching the
store's collections, so a persistent backend only has to reimplement this
module.
"""

from __future__ import annotations

from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from database import get_store
from errors import ConflictError, NotFoundError, ValidationError
from models import (
    USER_TYPES,
    Assignment,
    AttendanceRecord,
    ChatMessage,
    Complaint,
    ConceptMap,
    Course,
    Enrollment,
    Event,
    ForumPost,
    ForumReply,
    Grade,
    LeaveRequest,
    LiveSession,
    MockTest,
    QuestionPaper,
    Submission,
    Timetable,
    User,
)


def _by_date_desc(records, attr: str) -> list:
    """Newest first; on equal dates the later insertion wins."""
    indexed = sorted(
        enumerate(records),
        key=lambda pair: (str(getattr(pair[1], attr) or ""), pair[0]),
        reverse=True,
    )
    return [record for _, record in indexed]


# ── Users ────────────────────────────────────────────────────────────


class UserStore:
    """Students, teachers and parents keyed by email."""

    @staticmethod
    def get_by_email(email: str) -> Optional[User]:
        return get_store().find("users", lambda u: u.email == email)

    @staticmethod
    def exists(email: str) -> bool:
        return UserStore.get_by_email(email) is not None

    @staticmethod
    def next_roll_number(department: str) -> str:
        """Department prefix plus 1-based sequence, e.g. ``COM003``."""
        count = sum(
            1 for u in get_store().collection("users")
            if u.is_student and u.department == department
        )
        return f"{department[:3].upper()}{count + 1:03d}"

    @staticmethod
    def create(user_type: str, email: str, password: str, name: str, department: str = "",
               *, roll_number: str | None = None, subject: str | None = None,
               father_name: str | None = None, student_email: str | None = None,
               photo: str | None = None) -> User:
        if user_type not in USER_TYPES:
            raise ValidationError(f"Unknown user type: {user_type}")
        store = get_store()
        with store.lock:
            if UserStore.exists(email):
                raise ConflictError("User already exists")
            if user_type == "student" and not roll_number:
                roll_number = UserStore.next_roll_number(department)
            user = User(
                id=store.new_id(),
                type=user_type,
                email=email,
                password_hash=generate_password_hash(password),
                name=name,
                department=department,
                roll_number=roll_number if user_type == "student" else None,
                subject=subject if user_type == "teacher" else None,
                father_name=father_name if user_type == "student" else None,
                student_email=student_email if user_type == "parent" else None,
                photo=photo,
                registration_date=store.now(),
            )
            store.append("users", user)
        return user

    @staticmethod
    def authenticate(email: str, password: str) -> Optional[User]:
        user = UserStore.get_by_email(email)
        if user is None or not check_password_hash(user.password_hash, password):
            return None
        return user

    @staticmethod
    def students(department: str | None = None) -> list[User]:
        return get_store().filter(
            "users",
            lambda u: u.is_student and (department is None or u.department == department),
        )

    @staticmethod
    def teachers(department: str) -> list[User]:
        return get_store().filter(
            "users", lambda u: u.type == "teacher" and u.department == department,
        )

    @staticmethod
    def linked_student(parent_email: str) -> User:
        parent = get_store().find(
            "users", lambda u: u.email == parent_email and u.type == "parent",
        )
        if parent is None:
            raise NotFoundError("Parent not found")
        student = get_store().find(
            "users", lambda u: u.email == parent.student_email and u.is_student,
        )
        if student is None:
            raise NotFoundError("Student not found")
        return student


# ── Courses & enrollment ─────────────────────────────────────────────


class CourseStore:

    @staticmethod
    def create(teacher_email: str, course_name: str, description: str, department: str,
               duration: str = "", files: list[dict] | None = None) -> Course:
        store = get_store()
        course = Course(
            id=store.new_id(),
            teacher_email=teacher_email,
            course_name=course_name,
            description=description,
            department=department,
            duration=duration or "1 semester",
            files=files or [],
            created_date=store.now(),
        )
        return store.append("courses", course)

    @staticmethod
    def get(course_id: str) -> Optional[Course]:
        return get_store().find("courses", lambda c: c.id == course_id)

    @staticmethod
    def by_name(course_name: str) -> Optional[Course]:
        return get_store().find("courses", lambda c: c.course_name == course_name)

    @staticmethod
    def by_department(department: str) -> list[Course]:
        return get_store().filter("courses", lambda c: c.department == department)

    @staticmethod
    def all() -> list[Course]:
        return list(get_store().collection("courses"))


class EnrollmentStore:

    @staticmethod
    def enroll(student_email: str, course_id: str) -> Enrollment:
        """Create the (student, course) pair; ConflictError if it exists."""
        store = get_store()
        with store.lock:
            key = (student_email, course_id)
            if key in store.keyed("enrollments"):
                raise ConflictError("Already enrolled in this course")
            enrollment = Enrollment(
                id=store.new_id(),
                student_email=student_email,
                course_id=course_id,
                enrolled_date=store.now(),
            )
            return store.append("enrollments", enrollment, key=key)

    @staticmethod
    def for_student(student_email: str) -> list[Enrollment]:
        return get_store().filter("enrollments", lambda e: e.student_email == student_email)

    @staticmethod
    def for_course(course_id: str) -> list[Enrollment]:
        return get_store().filter("enrollments", lambda e: e.course_id == course_id)

    @staticmethod
    def student_emails(course_id: str) -> list[str]:
        return [e.student_email for e in EnrollmentStore.for_course(course_id)]


# ── Attendance & grades (composite-key upserts) ──────────────────────


class AttendanceStore:
    """Upsert keyed by (student, course, date)."""

    @staticmethod
    def record(teacher_email: str, student_email: str, course: str, date: str,
               status: str) -> tuple[AttendanceRecord, bool]:
        """Insert or update. Returns (record, created)."""
        store = get_store()
        key = (student_email, course, date)
        with store.lock:
            existing = store.keyed("attendance").get(key)
            if existing is not None:
                existing.status = status
                existing.updated_date = store.now()
                return existing, False
            record = AttendanceRecord(
                id=store.new_id(),
                teacher_email=teacher_email,
                student_email=student_email,
                course=course,
                date=date,
                status=status,
                recorded_date=store.now(),
            )
            store.append("attendance", record, key=key)
            return record, True

    @staticmethod
    def for_student(student_email: str) -> list[AttendanceRecord]:
        return get_store().filter("attendance", lambda a: a.student_email == student_email)


class GradeStore:
    """Upsert keyed by (student, course, semester, assignment)."""

    @staticmethod
    def record(teacher_email: str, student_email: str, course: str, grade: str,
               semester: str, assignment_id: str | None = None) -> tuple[Grade, bool]:
        store = get_store()
        key = (student_email, course, semester, assignment_id)
        with store.lock:
            existing = store.keyed("grades").get(key)
            if existing is not None:
                existing.grade = grade
                existing.updated_date = store.now()
                return existing, False
            record = Grade(
                id=store.new_id(),
                teacher_email=teacher_email,
                student_email=student_email,
                course=course,
                grade=grade,
                semester=semester,
                assignment_id=assignment_id,
                uploaded_date=store.now(),
            )
            store.append("grades", record, key=key)
            return record, True

    @staticmethod
    def for_student(student_email: str) -> list[Grade]:
        return get_store().filter("grades", lambda g: g.student_email == student_email)


# ── Assignments, submissions, mock tests ─────────────────────────────


class AssignmentStore:

    @staticmethod
    def create(teacher_email: str, title: str, description: str, due_date: str,
               course: str, department: str, files: list[dict] | None = None) -> Assignment:
        store = get_store()
        assignment = Assignment(
            id=store.new_id(),
            teacher_email=teacher_email,
            title=title,
            description=description,
            due_date=due_date,
            course=course,
            department=department,
            files=files or [],
            created_date=store.now(),
        )
        return store.append("assignments", assignment)

    @staticmethod
    def get(assignment_id: str) -> Optional[Assignment]:
        return get_store().find("assignments", lambda a: a.id == assignment_id)

    @staticmethod
    def by_department(department: str) -> list[Assignment]:
        return get_store().filter("assignments", lambda a: a.department == department)


class SubmissionStore:

    @staticmethod
    def submit(assignment_id: str, student_email: str, file: dict | None = None) -> Submission:
        store = get_store()
        submission = Submission(
            id=store.new_id(),
            assignment_id=assignment_id,
            student_email=student_email,
            file=file,
            submitted_date=store.now(),
        )
        return store.append("submissions", submission)

    @staticmethod
    def for_assignment(assignment_id: str) -> list[Submission]:
        return get_store().filter("submissions", lambda s: s.assignment_id == assignment_id)


class MockTestStore:

    @staticmethod
    def add(student_email: str, subject: str, questions: list, score: float,
            total_marks: float, credits_earned: int) -> MockTest:
        store = get_store()
        test = MockTest(
            id=store.new_id(),
            student_email=student_email,
            subject=subject,
            questions=questions,
            score=score,
            total_marks=total_marks,
            credits_earned=credits_earned,
            submitted_date=store.now(),
        )
        return store.append("mock_tests", test)

    @staticmethod
    def for_student(student_email: str) -> list[MockTest]:
        return get_store().filter("mock_tests", lambda t: t.student_email == student_email)


# ── Leave & complaints ───────────────────────────────────────────────


class LeaveStore:

    @staticmethod
    def submit(user_email: str, requester_type: str, start_date: str, end_date: str,
               reason: str, document: dict | None = None) -> LeaveRequest:
        store = get_store()
        leave = LeaveRequest(
            id=store.new_id(),
            user_email=user_email,
            type=requester_type,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            document=document,
            submitted_date=store.now(),
        )
        return store.append("leave_requests", leave)

    @staticmethod
    def pending_for_department(department: str) -> list[LeaveRequest]:
        emails = {s.email for s in UserStore.students(department)}
        return get_store().filter(
            "leave_requests",
            lambda r: r.user_email in emails and r.status == "pending",
        )

    @staticmethod
    def set_status(leave_id: str, status: str) -> LeaveRequest:
        store = get_store()
        with store.lock:
            leave = store.find("leave_requests", lambda r: r.id == leave_id)
            if leave is None:
                raise NotFoundError("Leave request not found")
            leave.status = status
            leave.processed_date = store.now()
        return leave


class ComplaintStore:

    @staticmethod
    def submit(student_email: str, title: str, description: str, category: str) -> Complaint:
        store = get_store()
        complaint = Complaint(
            id=store.new_id(),
            student_email=student_email,
            title=title,
            description=description,
            category=category,
            submitted_date=store.now(),
        )
        return store.append("complaints", complaint)

    @staticmethod
    def for_department(department: str) -> list[Complaint]:
        emails = {s.email for s in UserStore.students(department)}
        return get_store().filter("complaints", lambda c: c.student_email in emails)

    @staticmethod
    def set_status(complaint_id: str, status: str) -> Complaint:
        store = get_store()
        with store.lock:
            complaint = store.find("complaints", lambda c: c.id == complaint_id)
            if complaint is None:
                raise NotFoundError("Complaint not found")
            complaint.status = status
            complaint.updated_date = store.now()
        return complaint


# ── Forum ────────────────────────────────────────────────────────────


class ForumStore:

    @staticmethod
    def create_post(user_email: str, course_id: str, title: str, content: str) -> ForumPost:
        store = get_store()
        post = ForumPost(
            id=store.new_id(),
            user_email=user_email,
            course_id=course_id,
            title=title,
            content=content,
            created_date=store.now(),
        )
        return store.append("forum_posts", post)

    @staticmethod
    def reply(post_id: str, user_email: str, content: str) -> tuple[ForumPost, ForumReply]:
        store = get_store()
        with store.lock:
            post = store.find("forum_posts", lambda p: p.id == post_id)
            if post is None:
                raise NotFoundError("Post not found")
            reply = ForumReply(
                id=store.new_id(),
                user_email=user_email,
                content=content,
                created_date=store.now(),
            )
            post.replies.append(reply)
        return post, reply

    @staticmethod
    def for_course(course_id: str) -> list[ForumPost]:
        return get_store().filter("forum_posts", lambda p: p.course_id == course_id)


# ── Timetables, events, live sessions, question papers ───────────────


class TimetableStore:

    @staticmethod
    def upload(teacher_email: str, department: str, description: str,
               image: str | None = None) -> Timetable:
        store = get_store()
        timetable = Timetable(
            id=store.new_id(),
            teacher_email=teacher_email,
            department=department,
            description=description,
            image=image,
            uploaded_date=store.now(),
        )
        return store.append("timetables", timetable)

    @staticmethod
    def latest(department: str) -> Optional[Timetable]:
        matches = get_store().filter("timetables", lambda t: t.department == department)
        ordered = _by_date_desc(matches, "uploaded_date")
        return ordered[0] if ordered else None


class EventStore:

    @staticmethod
    def create(teacher_email: str, title: str, description: str, date: str, event_type: str,
               registration_link: str = "", files: list[dict] | None = None) -> Event:
        store = get_store()
        event = Event(
            id=store.new_id(),
            teacher_email=teacher_email,
            title=title,
            description=description,
            date=date,
            type=event_type,
            registration_link=registration_link,
            files=files or [],
            created_date=store.now(),
        )
        return store.append("events", event)

    @staticmethod
    def list_recent() -> list[Event]:
        return _by_date_desc(get_store().collection("events"), "date")

    @staticmethod
    def delete(event_id: str) -> Event:
        removed = get_store().remove("events", lambda e: e.id == event_id)
        if removed is None:
            raise NotFoundError("Event not found")
        return removed


class LiveSessionStore:

    @staticmethod
    def create(teacher_email: str, title: str, description: str, date_time: str,
               duration: int, course: str, link: str) -> LiveSession:
        store = get_store()
        session = LiveSession(
            id=store.new_id(),
            teacher_email=teacher_email,
            title=title,
            description=description,
            date_time=date_time,
            duration=duration,
            course=course,
            link=link,
            created_date=store.now(),
        )
        return store.append("live_sessions", session)

    @staticmethod
    def list_recent() -> list[LiveSession]:
        return _by_date_desc(get_store().collection("live_sessions"), "date_time")

    @staticmethod
    def delete(session_id: str) -> LiveSession:
        removed = get_store().remove("live_sessions", lambda s: s.id == session_id)
        if removed is None:
            raise NotFoundError("Live session not found")
        return removed


class QuestionPaperStore:

    @staticmethod
    def create(teacher_email: str, title: str, description: str, course: str, year: str,
               files: list[dict] | None = None) -> QuestionPaper:
        store = get_store()
        paper = QuestionPaper(
            id=store.new_id(),
            teacher_email=teacher_email,
            title=title,
            description=description,
            course=course,
            year=str(year),
            files=files or [],
            created_date=store.now(),
        )
        return store.append("question_papers", paper)

    @staticmethod
    def list_recent() -> list[QuestionPaper]:
        def year_key(p: QuestionPaper) -> int:
            return int(p.year) if str(p.year).isdigit() else 0
        return sorted(get_store().collection("question_papers"), key=year_key, reverse=True)

    @staticmethod
    def delete(paper_id: str) -> QuestionPaper:
        removed = get_store().remove("question_papers", lambda p: p.id == paper_id)
        if removed is None:
            raise NotFoundError("Question paper not found")
        return removed


# ── Chat ─────────────────────────────────────────────────────────────


class ChatStore:
    """Parent/teacher messages; a conversation is the unordered email pair."""

    @staticmethod
    def add(parent_email: str, teacher_email: str, message: str, sender: str) -> ChatMessage:
        store = get_store()
        msg = ChatMessage(
            id=store.new_id(),
            parent_email=parent_email,
            teacher_email=teacher_email,
            message=message,
            sender=sender,
            timestamp=store.now(),
        )
        return store.append("chat_messages", msg)

    @staticmethod
    def conversation(email_a: str, email_b: str) -> list[ChatMessage]:
        pair = {email_a, email_b}
        messages = get_store().filter(
            "chat_messages", lambda m: {m.parent_email, m.teacher_email} == pair,
        )
        return sorted(messages, key=lambda m: m.timestamp)


# ── Concept maps ─────────────────────────────────────────────────────


class ConceptMapStore:

    @staticmethod
    def get_or_generate(course_id: str) -> ConceptMap:
        from campus_data import concept_outline

        store = get_store()
        with store.lock:
            existing = store.find("concept_maps", lambda m: m.course_id == course_id)
            if existing is not None:
                return existing
            course = CourseStore.get(course_id)
            if course is None:
                raise NotFoundError("Concept map not available for this course")
            concept_map = ConceptMap(
                id=store.new_id(),
                course_id=course.id,
                course_name=course.course_name,
                concepts=concept_outline(),
                generated_date=store.now(),
            )
            return store.append("concept_maps", concept_map)
