"""
Seed Demo Data: sample campus loaded at startup in development.

Creates two students (with parent accounts), a teacher, three courses,
enrollments, an assignment, attendance, grades, a timetable, events, a live
session, a question paper, credit history and a leaderboard.

Demo logins (password ``password123``):
    student1@example.com, student2@example.com, teacher@example.com,
    parent1@example.com, parent2@example.com
"""

from __future__ import annotations

from datetime import timedelta

from database import EntityStore
from db_stores import (
    AssignmentStore,
    AttendanceStore,
    CourseStore,
    EnrollmentStore,
    EventStore,
    GradeStore,
    LiveSessionStore,
    QuestionPaperStore,
    TimetableStore,
    UserStore,
)
from models import CreditActivity, CreditLedgerEntry, Leaderboard, MonthlyCredits

DEMO_PASSWORD = "password123"
DEPARTMENT = "computer_science"
TEACHER_EMAIL = "teacher@example.com"

DEMO_STUDENTS = [
    {"name": "John Doe", "email": "student1@example.com", "roll": "CS001",
     "father": "Robert Doe", "parent": "parent1@example.com"},
    {"name": "Jane Smith", "email": "student2@example.com", "roll": "CS002",
     "father": "Michael Smith", "parent": "parent2@example.com"},
]

DEMO_CREDITS = {
    "student1@example.com": [("2024-10-15", 50, "Assignment Excellence"),
                             ("2024-10-20", 100, "Leaderboard 1st Place")],
    "student2@example.com": [("2024-10-18", 75, "Leaderboard 2nd Place")],
}


def _seed_credits(store: EntityStore) -> None:
    for email, activities in DEMO_CREDITS.items():
        bucket = MonthlyCredits(month="2024-10")
        for date, credits, reason in activities:
            bucket.credits += credits
            bucket.activities.append(CreditActivity(date=date, credits=credits, reason=reason))
        entry = CreditLedgerEntry(
            id=store.new_id(),
            student_email=email,
            total_credits=bucket.credits,
            monthly_credits=[bucket],
            updated_date=store.now(),
        )
        store.append("credits", entry, key=email)


def seed(store: EntityStore) -> dict:
    """Load the sample campus into an empty store. Returns summary counts."""
    if store.count("users"):
        return {"skipped": True}

    now = store.clock()

    for s in DEMO_STUDENTS:
        UserStore.create("student", s["email"], DEMO_PASSWORD, s["name"], DEPARTMENT,
                         roll_number=s["roll"], father_name=s["father"])
    UserStore.create("teacher", TEACHER_EMAIL, DEMO_PASSWORD, "Dr. Sarah Johnson", DEPARTMENT,
                     subject="Programming")
    for s in DEMO_STUDENTS:
        UserStore.create("parent", s["parent"], DEMO_PASSWORD, f"{s['father']} (Parent)",
                         student_email=s["email"])

    _seed_credits(store)

    intro = CourseStore.create(TEACHER_EMAIL, "Introduction to Programming",
                               "Learn the fundamentals of programming with Python", DEPARTMENT)
    data_structures = CourseStore.create(TEACHER_EMAIL, "Data Structures",
                                         "Arrays, linked lists, trees, and algorithms", DEPARTMENT)
    CourseStore.create(TEACHER_EMAIL, "Advanced Python Programming",
                       "Deep dive into advanced Python concepts and frameworks", DEPARTMENT)

    EnrollmentStore.enroll("student1@example.com", intro.id)
    EnrollmentStore.enroll("student2@example.com", intro.id)
    EnrollmentStore.enroll("student1@example.com", data_structures.id)

    assignment = AssignmentStore.create(
        TEACHER_EMAIL, "Python Basics Assignment",
        "Complete the exercises on variables, loops, and functions",
        "2024-12-15", intro.course_name, DEPARTMENT,
    )

    today = now.date().isoformat()
    yesterday = (now - timedelta(days=1)).date().isoformat()
    for date, email, status in (
        (today, "student1@example.com", "present"),
        (today, "student2@example.com", "present"),
        (yesterday, "student1@example.com", "present"),
        (yesterday, "student2@example.com", "absent"),
    ):
        AttendanceStore.record(TEACHER_EMAIL, email, intro.course_name, date, status)

    GradeStore.record(TEACHER_EMAIL, "student1@example.com", intro.course_name, "A",
                      "2024-1", assignment.id)
    GradeStore.record(TEACHER_EMAIL, "student2@example.com", intro.course_name, "B+",
                      "2024-1", assignment.id)

    TimetableStore.upload(TEACHER_EMAIL, DEPARTMENT, "Fall 2024 Timetable")

    EventStore.create(
        TEACHER_EMAIL, "Annual Tech Fest 2024",
        "Coding competitions, workshops, and guest lectures.",
        "2024-11-15", "fest", "https://example.com/techfest-registration",
    )
    EventStore.create(
        TEACHER_EMAIL, "Machine Learning Workshop",
        "Hands-on workshop on machine learning fundamentals.",
        "2024-10-20", "workshop", "https://example.com/ml-workshop",
    )

    LiveSessionStore.create(
        TEACHER_EMAIL, "Python Programming Basics",
        "Introduction to Python programming with hands-on examples",
        (now + timedelta(days=1)).isoformat(), 60, intro.course_name,
        "https://meet.google.com/abc-def-ghi",
    )

    QuestionPaperStore.create(
        TEACHER_EMAIL, "Final Examination 2023",
        "Computer Science Final Examination Question Paper",
        intro.course_name, "2023",
        files=[{"name": "CS_Final_2023.pdf", "url": "/uploads/sample.pdf",
                "uploaded_date": store.now()}],
    )

    store.append("leaderboards", Leaderboard(
        id=store.new_id(),
        teacher_email=TEACHER_EMAIL,
        month=now.strftime("%B"),
        year=str(now.year),
        top_students=[
            {"name": "John Doe", "email": "student1@example.com", "roll_number": "CS001", "credits": 150},
            {"name": "Jane Smith", "email": "student2@example.com", "roll_number": "CS002", "credits": 75},
        ],
        created_date=store.now(),
    ))

    return {
        "users": store.count("users"),
        "courses": store.count("courses"),
        "enrollments": store.count("enrollments"),
    }
