"""
Course recommendations and grade analytics.

Recommendations favour "advanced" courses for students who are strong in some
subject, then fill with anything else in their department they have not taken.
"""

from __future__ import annotations

from database import EntityStore, get_store
from models import Course

GRADE_POINTS: dict[str, float] = {
    "A": 4.0, "A-": 3.7,
    "B+": 3.3, "B": 3.0, "B-": 2.7,
    "C+": 2.3, "C": 2.0, "C-": 1.7,
    "D+": 1.3, "D": 1.0,
    "F": 0.0,
}

STRONG_SUBJECT_THRESHOLD = 3.5
ADVANCED_MARKER = "advanced"
ADVANCED_PER_SUBJECT = 2
MAX_RECOMMENDATIONS = 5


def grade_points(letter: str) -> float:
    return GRADE_POINTS.get((letter or "").strip().upper(), 0.0)


def _course_averages(grades) -> dict[str, float]:
    totals: dict[str, list[float]] = {}
    for g in grades:
        totals.setdefault(g.course, []).append(grade_points(g.grade))
    return {course: sum(pts) / len(pts) for course, pts in totals.items()}


def completed_course_names(student_email: str, store: EntityStore | None = None) -> set[str]:
    store = store if store is not None else get_store()
    course_ids = {
        e.course_id for e in store.collection("enrollments")
        if e.student_email == student_email
    }
    return {c.course_name for c in store.collection("courses") if c.id in course_ids}


def generate_course_recommendations(student_email: str,
                                    store: EntityStore | None = None) -> list[Course]:
    """Up to five courses the student has not taken yet, best fits first."""
    store = store if store is not None else get_store()
    student = store.find("users", lambda u: u.email == student_email)
    if student is None:
        return []

    completed = completed_course_names(student_email, store)
    candidates = [
        c for c in store.collection("courses")
        if c.department == student.department and c.course_name not in completed
    ]
    grades = store.filter("grades", lambda g: g.student_email == student_email)

    picks: list[Course] = []
    for average in _course_averages(grades).values():
        if average >= STRONG_SUBJECT_THRESHOLD:
            advanced = [c for c in candidates if ADVANCED_MARKER in c.course_name.lower()]
            picks.extend(advanced[:ADVANCED_PER_SUBJECT])

    picked_ids = {c.id for c in picks}
    for course in candidates:
        if len(picked_ids) >= MAX_RECOMMENDATIONS:
            break
        if course.id not in picked_ids:
            picks.append(course)
            picked_ids.add(course.id)

    seen: set[str] = set()
    unique = []
    for course in picks:
        if course.id not in seen:
            seen.add(course.id)
            unique.append(course)
    return unique[:MAX_RECOMMENDATIONS]


def overall_grades(student_email: str, store: EntityStore | None = None) -> dict[str, dict]:
    """Per-course letter grades with their grade-point average."""
    store = store if store is not None else get_store()
    result: dict[str, dict] = {}
    for g in store.filter("grades", lambda g: g.student_email == student_email):
        result.setdefault(g.course, {"grades": [], "average": 0.0})["grades"].append(g.grade)
    for data in result.values():
        pts = [grade_points(letter) for letter in data["grades"]]
        data["average"] = round(sum(pts) / len(pts), 2)
    return result


def attendance_summary(student_email: str, store: EntityStore | None = None) -> dict[str, dict]:
    """Present/total/percentage per course."""
    store = store if store is not None else get_store()
    summary: dict[str, dict] = {}
    for record in store.filter("attendance", lambda a: a.student_email == student_email):
        row = summary.setdefault(record.course, {"present": 0, "total": 0, "percentage": 0.0})
        row["total"] += 1
        if record.status == "present":
            row["present"] += 1
    for row in summary.values():
        row["percentage"] = row["present"] / row["total"] * 100
    return summary
