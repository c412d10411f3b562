"""
Campus entity records.

Plain dataclasses held by the in-memory EntityStore. Handlers serialize them
with ``to_dict()``; users additionally strip their password hash.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Optional

USER_TYPES = ("student", "teacher", "parent")
NOTIFICATION_TYPES = ("info", "warning", "success")


class Record:
    """Mixin giving every entity a JSON-ready dict."""

    def to_dict(self) -> dict:
        return asdict(self)


# ── People ───────────────────────────────────────────────────────────


@dataclass
class User(Record):
    id: str
    type: str
    email: str
    password_hash: str
    name: str
    department: str = ""
    roll_number: Optional[str] = None
    subject: Optional[str] = None
    father_name: Optional[str] = None
    student_email: Optional[str] = None
    photo: Optional[str] = None
    registration_date: str = ""

    @property
    def is_student(self) -> bool:
        return self.type == "student"

    def to_dict(self) -> dict:
        data = asdict(self)
        data.pop("password_hash", None)
        return data


@dataclass
class AuditEntry(Record):
    action: str
    email: str
    detail: str
    ip_address: str
    created_at: str


# ── Courses & academics ──────────────────────────────────────────────


@dataclass
class Course(Record):
    id: str
    teacher_email: str
    course_name: str
    description: str
    department: str
    duration: str = "1 semester"
    files: list[dict] = field(default_factory=list)
    created_date: str = ""


@dataclass
class Enrollment(Record):
    id: str
    student_email: str
    course_id: str
    enrolled_date: str


@dataclass
class AttendanceRecord(Record):
    id: str
    teacher_email: str
    student_email: str
    course: str
    date: str
    status: str
    recorded_date: str
    updated_date: Optional[str] = None


@dataclass
class Grade(Record):
    id: str
    teacher_email: str
    student_email: str
    course: str
    grade: str
    semester: str
    assignment_id: Optional[str]
    uploaded_date: str
    updated_date: Optional[str] = None


@dataclass
class Assignment(Record):
    id: str
    teacher_email: str
    title: str
    description: str
    due_date: str
    course: str
    department: str
    files: list[dict] = field(default_factory=list)
    created_date: str = ""


@dataclass
class Submission(Record):
    id: str
    assignment_id: str
    student_email: str
    file: Optional[dict]
    submitted_date: str
    status: str = "submitted"


@dataclass
class MockTest(Record):
    id: str
    student_email: str
    subject: str
    questions: list
    score: float
    total_marks: float
    credits_earned: int
    submitted_date: str


@dataclass
class ConceptMap(Record):
    id: str
    course_id: str
    course_name: str
    concepts: list[dict]
    generated_date: str


# ── Requests & community ─────────────────────────────────────────────


@dataclass
class LeaveRequest(Record):
    id: str
    user_email: str
    type: str
    start_date: str
    end_date: str
    reason: str
    document: Optional[dict]
    submitted_date: str
    status: str = "pending"
    processed_date: Optional[str] = None


@dataclass
class Complaint(Record):
    id: str
    student_email: str
    title: str
    description: str
    category: str
    submitted_date: str
    status: str = "open"
    updated_date: Optional[str] = None


@dataclass
class ForumReply(Record):
    id: str
    user_email: str
    content: str
    created_date: str


@dataclass
class ForumPost(Record):
    id: str
    user_email: str
    course_id: str
    title: str
    content: str
    created_date: str
    replies: list[ForumReply] = field(default_factory=list)


@dataclass
class Notification(Record):
    id: str
    user_email: str
    title: str
    message: str
    type: str
    timestamp: str
    read: bool = False


@dataclass
class ChatMessage(Record):
    id: str
    parent_email: str
    teacher_email: str
    message: str
    sender: str
    timestamp: str


# ── Campus calendar ──────────────────────────────────────────────────


@dataclass
class Timetable(Record):
    id: str
    teacher_email: str
    department: str
    description: str
    image: Optional[str]
    uploaded_date: str


@dataclass
class Event(Record):
    id: str
    teacher_email: str
    title: str
    description: str
    date: str
    type: str
    registration_link: str = ""
    files: list[dict] = field(default_factory=list)
    created_date: str = ""


@dataclass
class LiveSession(Record):
    id: str
    teacher_email: str
    title: str
    description: str
    date_time: str
    duration: int
    course: str
    link: str
    created_date: str


@dataclass
class QuestionPaper(Record):
    id: str
    teacher_email: str
    title: str
    description: str
    course: str
    year: str
    files: list[dict] = field(default_factory=list)
    created_date: str = ""


# ── Gamification ─────────────────────────────────────────────────────


@dataclass
class CreditActivity(Record):
    date: str
    credits: int
    reason: str


@dataclass
class MonthlyCredits(Record):
    month: str  # "YYYY-MM"
    credits: int = 0
    activities: list[CreditActivity] = field(default_factory=list)


@dataclass
class CreditLedgerEntry(Record):
    id: str
    student_email: str
    total_credits: int = 0
    monthly_credits: list[MonthlyCredits] = field(default_factory=list)
    updated_date: str = ""

    def bucket(self, month: str) -> Optional[MonthlyCredits]:
        for b in self.monthly_credits:
            if b.month == month:
                return b
        return None


@dataclass
class Leaderboard(Record):
    id: str
    teacher_email: str
    month: str
    year: str
    top_students: list[dict]
    created_date: str
