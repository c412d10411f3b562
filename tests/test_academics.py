"""Attendance, grade, assignment, submission and mock test endpoints."""

from __future__ import annotations

import io

import pytest

from credit_store import CreditLedger
from notifier import NotificationDispatcher


def _titles(store, email):
    return [n.title for n in NotificationDispatcher(store).list_for(email)]


class TestAttendance:
    def test_record_then_update(self, client, store):
        body = {"teacher_email": "t@example.com", "student_email": "s@example.com",
                "course": "Intro", "date": "2024-10-01", "status": "absent"}
        first = client.post("/api/attendance", json=body).get_json()
        assert first["message"] == "Attendance recorded successfully"

        second = client.post("/api/attendance", json={**body, "status": "present"}).get_json()
        assert second["message"] == "Attendance updated successfully"

        records = client.get("/api/attendance/s@example.com").get_json()["attendance"]
        assert len(records) == 1
        assert records[0]["status"] == "present"

    def test_invalid_status(self, client, store):
        resp = client.post("/api/attendance", json={
            "student_email": "s@example.com", "course": "Intro", "date": "2024-10-01", "status": "maybe",
        })
        assert resp.status_code == 400


class TestGrades:
    def test_new_then_updated_grade_notifications(self, client, store):
        body = {"teacher_email": "t@example.com", "student_email": "s@example.com",
                "course": "Intro", "grade": "B", "semester": "2024-1"}
        assert client.post("/api/grades", json=body).status_code == 200
        client.post("/api/grades", json={**body, "grade": "A"})

        assert _titles(store, "s@example.com") == ["Grade Updated", "New Grade Available"]
        grades = client.get("/api/grades/s@example.com").get_json()["grades"]
        assert [g["grade"] for g in grades] == ["A"]

    def test_overall_and_performance(self, client, seeded):
        overall = client.get("/api/overall-grades/student2@example.com").get_json()["overall_grades"]
        assert overall["Introduction to Programming"]["average"] == 3.3

        perf = client.get("/api/performance/student2@example.com").get_json()
        row = perf["attendance"]["Introduction to Programming"]
        assert (row["present"], row["total"], row["percentage"]) == (1, 2, 50.0)
        assert len(perf["grades"]) == 1


class TestAssignments:
    def test_create_notifies_enrolled_students(self, client, seeded):
        resp = client.post("/api/assignments", json={
            "teacher_email": "teacher@example.com",
            "title": "Linked Lists",
            "due_date": "2024-11-01",
            "course": "Data Structures",
            "department": "computer_science",
        })
        assert resp.status_code == 200
        assert "New Assignment" in _titles(seeded, "student1@example.com")
        # student2 is not enrolled in Data Structures
        assert "New Assignment" not in _titles(seeded, "student2@example.com")

        notif = NotificationDispatcher(seeded).list_for("student1@example.com")[0]
        assert notif.type == "warning"

        listed = client.get("/api/assignments/computer_science").get_json()["assignments"]
        assert {a["title"] for a in listed} == {"Python Basics Assignment", "Linked Lists"}

    def test_create_with_files(self, client, store):
        resp = client.post("/api/assignments", data={
            "teacher_email": "t@example.com",
            "title": "Essay",
            "due_date": "2024-11-01",
            "course": "Writing",
            "department": "english",
            "files": [(io.BytesIO(b"one"), "a.pdf"), (io.BytesIO(b"two"), "b.txt")],
        }, content_type="multipart/form-data")
        assert resp.status_code == 200
        files = resp.get_json()["assignment"]["files"]
        assert [f["name"] for f in files] == ["a.pdf", "b.txt"]

    def test_disallowed_extension(self, client, store):
        resp = client.post("/api/assignments", data={
            "teacher_email": "t@example.com",
            "title": "Essay",
            "due_date": "2024-11-01",
            "course": "Writing",
            "department": "english",
            "files": [(io.BytesIO(b"MZ"), "virus.exe")],
        }, content_type="multipart/form-data")
        assert resp.status_code == 400
        assert store.count("assignments") == 0

    def test_submission_notifies_teacher(self, client, seeded):
        assignment = seeded.collection("assignments")[0]
        resp = client.post("/api/submit-assignment", data={
            "assignment_id": assignment.id,
            "student_email": "student1@example.com",
            "file": (io.BytesIO(b"print('hi')"), "answer.txt"),
        }, content_type="multipart/form-data")
        assert resp.status_code == 200
        assert resp.get_json()["submission"]["file"]["name"] == "answer.txt"
        assert "Assignment Submitted" in _titles(seeded, "teacher@example.com")

        subs = client.get(f"/api/assignment-submissions/{assignment.id}").get_json()["submissions"]
        assert [s["student_email"] for s in subs] == ["student1@example.com"]


class TestMockTests:
    def test_submit_awards_tier_credits(self, client, store):
        resp = client.post("/api/mock-tests", json={
            "student_email": "s@example.com",
            "subject": "Python",
            "score": 17,
            "total_marks": 20,
            "questions": [{"q": "What is a list?"}],
        })
        assert resp.status_code == 200
        assert resp.get_json()["credits_earned"] == 40

        entry = CreditLedger(store).get("s@example.com")
        assert entry.total_credits == 40
        assert entry.monthly_credits[0].activities[0].reason == "Mock Test Performance"

        tests = client.get("/api/mock-tests/s@example.com").get_json()["mock_tests"]
        assert tests[0]["credits_earned"] == 40

    def test_low_score_gets_floor(self, client, store):
        resp = client.post("/api/mock-tests", json={
            "student_email": "s@example.com", "subject": "Python", "score": 1, "total_marks": 20,
        })
        assert resp.get_json()["credits_earned"] == 10

    def test_score_must_be_numeric_and_in_range(self, client, store):
        base = {"student_email": "s@example.com", "subject": "Python", "total_marks": 20}
        assert client.post("/api/mock-tests", json={**base, "score": "lots"}).status_code == 400
        assert client.post("/api/mock-tests", json={**base, "score": 21}).status_code == 400
        assert client.post("/api/mock-tests", json={**base, "score": 5, "total_marks": 0}).status_code == 400
        assert store.count("mock_tests") == 0

    @pytest.mark.parametrize("field,value", [
        ("total_marks", "nan"), ("score", "inf"), ("total_marks", "Infinity"), ("score", "-inf"),
    ])
    def test_non_finite_numbers_rejected(self, client, store, field, value):
        body = {"student_email": "s@example.com", "subject": "Python", "score": 5, "total_marks": 20}
        body[field] = value
        resp = client.post("/api/mock-tests", json=body)
        assert resp.status_code == 400
        assert resp.get_json()["message"] == f"{field} must be a finite number"
        assert store.count("mock_tests") == 0
        assert CreditLedger(store).get("s@example.com").total_credits == 0
