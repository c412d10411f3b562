"""
Static campus reference data: holiday calendar, help-desk replies and the
default concept-map outline.
"""

from __future__ import annotations

import copy


# ── Holiday calendar ───────────────────────────────────────────────────

HOLIDAYS: list[dict[str, str]] = [
    {"date": "2024-01-26", "name": "Republic Day"},
    {"date": "2024-03-08", "name": "Maha Shivaratri"},
    {"date": "2024-03-25", "name": "Holi"},
    {"date": "2024-04-09", "name": "Gudi Padwa"},
    {"date": "2024-04-11", "name": "Ram Navami"},
    {"date": "2024-04-17", "name": "Mahavir Jayanti"},
    {"date": "2024-05-01", "name": "May Day"},
    {"date": "2024-05-23", "name": "Buddha Purnima"},
    {"date": "2024-08-15", "name": "Independence Day"},
    {"date": "2024-08-19", "name": "Raksha Bandhan"},
    {"date": "2024-09-02", "name": "Ganesh Chaturthi"},
    {"date": "2024-10-02", "name": "Gandhi Jayanti"},
    {"date": "2024-10-12", "name": "Dussehra"},
    {"date": "2024-10-31", "name": "Diwali"},
    {"date": "2024-11-15", "name": "Guru Nanak Jayanti"},
    {"date": "2024-12-25", "name": "Christmas Day"},
]


def holidays_for(year: str) -> list[dict[str, str]]:
    return [h for h in HOLIDAYS if h["date"].startswith(str(year))]


# ── Help-desk chatbot ──────────────────────────────────────────────────

# Checked in order; first keyword found in the message wins.
CHATBOT_RESPONSES: dict[str, str] = {
    "book": "You can find books in the library section. For a specific search, give the title or author.",
    "assignment": "Assignments are on your dashboard. Submit before the due date to avoid penalties.",
    "attendance": "Attendance is calculated from the classes you attend. At least 75% is required.",
    "result": "Results are published at the end of each semester. See your grade report for details.",
    "course": "Courses are assigned by department and semester. Contact your department head for changes.",
    "library": "The library is open 9 AM to 6 PM. You can borrow up to 3 books for 15 days.",
    "fee": "Fee deadlines are listed in the academic calendar. Late payments may incur penalties.",
    "exam": "Exam schedules are in the academic calendar. Hall tickets are issued one week before exams.",
    "leave": "Request leave from the Leave section. Approved leave does not affect attendance.",
    "complaint": "Raise complaints from the Complaints section; the administration reviews them.",
    "forum": "Use the Forum section to discuss course topics with classmates and teachers.",
    "enroll": "Browse and join courses for your department from the Courses section.",
    "timetable": "Your class schedule is in the Timetable section.",
    "event": "Upcoming fests and technical events are listed in the Events section.",
    "live": "Join scheduled live sessions from the Live Sessions section using the provided link.",
    "question": "Past question papers are in the Question Papers section, organised by course and year.",
    "holiday": "The holiday calendar lists upcoming holidays and breaks.",
    "leaderboard": "The leaderboard shows each month's top students. Strong assignment and exam results earn credits.",
    "credit": "Credits come from academic performance and leaderboard rankings.",
    "concept": "Concept maps show how the topics of a course relate. Open the Concept Map section.",
    "recommendation": "Course recommendations are based on your grades and department.",
}

DEFAULT_CHATBOT_RESPONSE = (
    "I'm here to help with academic queries. Ask about books, assignments, attendance, "
    "results, courses, the library, fees, exams, leave, complaints, the forum, enrollment, "
    "the timetable, events, live sessions, question papers, holidays, the leaderboard, "
    "credits, concept maps or course recommendations."
)

# Topic overrides checked after the keyword table
_TOPIC_RESPONSES: list[tuple[tuple[str, ...], str]] = [
    (("python", "programming"),
     "Python is a great first language: simple syntax, and widely used in data science, "
     "web development and automation. Which concept would you like help with?"),
    (("math", "calculus"),
     "Mathematics needs practice and solid fundamentals. Which topic are you struggling with?"),
    (("deadline", "due date"),
     "Check the Assignments section for all due dates and submit before the deadline."),
]


def chatbot_reply(message: str) -> str:
    text = (message or "").lower()
    reply = DEFAULT_CHATBOT_RESPONSE
    for keyword, response in CHATBOT_RESPONSES.items():
        if keyword in text:
            reply = response
            break
    for keywords, response in _TOPIC_RESPONSES:
        if any(k in text for k in keywords):
            reply = response
    return reply


# ── Concept maps ───────────────────────────────────────────────────────

_CONCEPT_OUTLINE: list[dict] = [
    {"id": "concept-1", "name": "Introduction", "description": "Basic concepts and fundamentals",
     "connections": ["concept-2", "concept-3"], "level": 1},
    {"id": "concept-2", "name": "Core Principles", "description": "Main principles and theories",
     "connections": ["concept-4", "concept-5"], "level": 2},
    {"id": "concept-3", "name": "Applications", "description": "Practical applications and use cases",
     "connections": ["concept-5", "concept-6"], "level": 2},
    {"id": "concept-4", "name": "Advanced Topics", "description": "Complex and specialized areas",
     "connections": ["concept-6"], "level": 3},
    {"id": "concept-5", "name": "Case Studies", "description": "Real-world examples and analysis",
     "connections": ["concept-4"], "level": 3},
    {"id": "concept-6", "name": "Future Trends", "description": "Emerging developments and research",
     "connections": [], "level": 4},
]


def concept_outline() -> list[dict]:
    """A fresh copy of the default six-node outline."""
    return copy.deepcopy(_CONCEPT_OUTLINE)
