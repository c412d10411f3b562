"""Timetable, event, live session, question paper, holiday and core endpoints."""

from __future__ import annotations

import io

from notifier import NotificationDispatcher


def _titles(store, email):
    return [n.title for n in NotificationDispatcher(store).list_for(email)]


class TestTimetable:
    def test_upload_with_image_and_fetch_latest(self, client, seeded):
        resp = client.post("/api/timetable", data={
            "teacher_email": "teacher@example.com",
            "department": "computer_science",
            "description": "Spring 2025",
            "image": (io.BytesIO(b"img"), "spring.png"),
        }, content_type="multipart/form-data")
        assert resp.status_code == 200
        assert "Timetable Updated" in _titles(seeded, "student1@example.com")

        latest = client.get("/api/timetable/computer_science").get_json()["timetable"]
        assert latest["image"].endswith("-spring.png")

    def test_no_timetable(self, client, store):
        assert client.get("/api/timetable/history").status_code == 404


class TestEvents:
    def test_create_list_delete(self, client, seeded):
        resp = client.post("/api/events", json={
            "teacher_email": "teacher@example.com",
            "title": "Hackathon",
            "description": "24 hours",
            "date": "2024-12-01",
            "type": "competition",
        })
        assert resp.status_code == 200
        event_id = resp.get_json()["event"]["id"]
        assert "New Event" in _titles(seeded, "student2@example.com")

        titles = [e["title"] for e in client.get("/api/events").get_json()["events"]]
        assert titles == ["Hackathon", "Annual Tech Fest 2024", "Machine Learning Workshop"]

        assert client.delete(f"/api/events/{event_id}").status_code == 200
        assert client.delete(f"/api/events/{event_id}").status_code == 404


class TestLiveSessions:
    def test_create_notifies_course_enrollees(self, client, seeded):
        resp = client.post("/api/live-sessions", json={
            "teacher_email": "teacher@example.com",
            "title": "Trees",
            "date_time": "2024-10-25T10:00:00",
            "duration": "45",
            "course": "Data Structures",
            "link": "https://meet.example.com/trees",
        })
        assert resp.status_code == 200
        assert resp.get_json()["live_session"]["duration"] == 45
        assert "New Live Session" in _titles(seeded, "student1@example.com")
        assert "New Live Session" not in _titles(seeded, "student2@example.com")

        sessions = client.get("/api/live-sessions").get_json()["live_sessions"]
        assert [s["title"] for s in sessions][0] == "Trees"

    def test_delete_unknown(self, client, store):
        resp = client.delete("/api/live-sessions/missing")
        assert resp.status_code == 404
        assert resp.get_json()["message"] == "Live session not found"


class TestQuestionPapers:
    def test_upload_notifies_teacher_department(self, client, seeded):
        resp = client.post("/api/question-papers", json={
            "teacher_email": "teacher@example.com",
            "title": "Midterm 2024",
            "course": "Data Structures",
            "year": 2024,
        })
        assert resp.status_code == 200
        assert resp.get_json()["question_paper"]["year"] == "2024"
        assert "New Question Paper" in _titles(seeded, "student2@example.com")

        papers = client.get("/api/question-papers").get_json()["question_papers"]
        assert [p["year"] for p in papers] == ["2024", "2023"]

        paper_id = papers[0]["id"]
        assert client.delete(f"/api/question-papers/{paper_id}").status_code == 200
        assert len(client.get("/api/question-papers").get_json()["question_papers"]) == 1


class TestHolidays:
    def test_by_year(self, client, store):
        body = client.get("/api/holidays/2024").get_json()
        assert body["year"] == "2024"
        assert {"date": "2024-12-25", "name": "Christmas Day"} in body["holidays"]
        assert client.get("/api/holidays/1999").get_json()["holidays"] == []

    def test_defaults_to_current_year(self, client, store):
        body = client.get("/api/holidays").get_json()
        assert body["year"] == "2024"
        assert body["holidays"]


class TestCore:
    def test_chatbot_keyword(self, client):
        resp = client.post("/api/chatbot", json={"message": "When is the library open?"})
        assert "9 AM to 6 PM" in resp.get_json()["response"]

    def test_chatbot_default(self, client):
        resp = client.post("/api/chatbot", json={"message": "hello there"})
        assert resp.get_json()["response"].startswith("I'm here to help")

    def test_health(self, client, seeded):
        body = client.get("/api/health").get_json()
        assert body["status"] == "ok"
        assert body["users"] == 5

    def test_unknown_upload(self, client):
        assert client.get("/uploads/nope.pdf").status_code == 404
