"""Registration, login, profile and directory endpoints."""

from __future__ import annotations

import io
import threading
from pathlib import Path

from credit_store import CreditLedger
from db_stores import UserStore


def _register_with_photo(client, **fields):
    body = {"type": "student", "email": "alice@example.com", "password": "pw",
            "name": "Alice", "department": "physics",
            "photo": (io.BytesIO(b"\x89PNG fake"), "me.png")}
    body.update(fields)
    return client.post("/api/register", data=body, content_type="multipart/form-data")


class TestRegister:
    def test_student_registration(self, client, store, register):
        resp = register()
        assert resp.status_code == 200
        body = resp.get_json()
        assert body["success"] is True
        assert body["user"]["email"] == "alice@example.com"
        assert body["user"]["roll_number"] == "COM001"
        assert "password_hash" not in body["user"]
        # Ledger entry created up front
        assert store.keyed("credits")["alice@example.com"].total_credits == 0

    def test_missing_fields(self, client, register):
        resp = register(name="")
        assert resp.status_code == 400
        body = resp.get_json()
        assert body == {
            "success": False,
            "message": "Missing required field(s): name",
            "error": "validation",
        }

    def test_student_requires_department(self, client, register):
        resp = register(department="")
        assert resp.status_code == 400

    def test_duplicate_email(self, client, register):
        register()
        resp = register(name="Alice Again")
        assert resp.status_code == 409
        assert resp.get_json()["error"] == "conflict"

    def test_parent_account_created_with_student(self, client, store, register):
        resp = register(parent_email="mum@example.com", parent_password="pw", father_name="Bob")
        assert resp.status_code == 200
        parent = UserStore.get_by_email("mum@example.com")
        assert parent.type == "parent"
        assert parent.student_email == "alice@example.com"
        assert parent.name == "Bob (Parent)"

    def test_parent_email_must_differ(self, client, store, register):
        resp = register(parent_email="alice@example.com", parent_password="pw")
        assert resp.status_code == 400
        assert store.count("users") == 0

    def test_existing_parent_email_conflicts_before_any_write(self, client, store, register):
        register(email="first@example.com", parent_email="mum@example.com", parent_password="pw")
        resp = register(parent_email="mum@example.com", parent_password="pw")
        assert resp.status_code == 409
        assert not UserStore.exists("alice@example.com")

    def test_rejected_registration_leaves_no_photo(self, client, app, store, register):
        register(email="first@example.com", parent_email="mum@example.com", parent_password="pw")
        register(email="taken@example.com")
        uploads = Path(app.config["UPLOAD_FOLDER"])

        assert _register_with_photo(client, parent_email="mum@example.com").status_code == 409
        assert _register_with_photo(client, email="taken@example.com").status_code == 409
        assert _register_with_photo(client, type="admin").status_code == 400

        assert not UserStore.exists("alice@example.com")
        assert not uploads.exists() or list(uploads.iterdir()) == []

    def test_concurrent_registrations_share_one_parent(self, app, store):
        statuses = []

        def attempt(i):
            with app.test_client() as client:
                resp = client.post("/api/register", json={
                    "type": "student", "email": f"kid{i}@example.com", "password": "pw",
                    "name": f"Kid {i}", "department": "physics",
                    "parent_email": "mum@example.com", "parent_password": "pw",
                })
                statuses.append(resp.status_code)

        threads = [threading.Thread(target=attempt, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sorted(statuses) == [200] + [409] * 7
        assert len(UserStore.students("physics")) == 1
        assert UserStore.linked_student("mum@example.com").email.startswith("kid")

    def test_non_string_email_rejected(self, client, store, register):
        resp = register(email=123)
        assert resp.status_code == 400
        assert resp.get_json()["message"] == "email must be a string"

        resp = register(parent_email=["mum@example.com"], parent_password="pw")
        assert resp.status_code == 400
        assert store.count("users") == 0

    def test_non_string_password_rejected(self, client, store, register):
        assert register(password=12345678).status_code == 400
        assert store.count("users") == 0

    def test_teacher_has_no_ledger(self, client, store, register):
        resp = register(type="teacher", email="t@example.com", subject="Physics")
        assert resp.status_code == 200
        assert resp.get_json()["user"]["subject"] == "Physics"
        assert "t@example.com" not in store.keyed("credits")

    def test_multipart_with_photo(self, client, app, store):
        resp = client.post("/api/register", data={
            "type": "student",
            "email": "pic@example.com",
            "password": "pw",
            "name": "Pic",
            "department": "physics",
            "photo": (io.BytesIO(b"\x89PNG fake"), "me.png"),
        }, content_type="multipart/form-data")
        assert resp.status_code == 200
        photo = resp.get_json()["user"]["photo"]
        assert photo.startswith("/uploads/") and photo.endswith("-me.png")

        served = client.get(photo)
        assert served.status_code == 200
        assert served.data == b"\x89PNG fake"

    def test_registration_is_audited(self, client, store, register):
        register()
        actions = [e.action for e in store.collection("audit_log")]
        assert actions == ["register"]


class TestLogin:
    def test_login_success(self, client, store, register):
        register()
        resp = client.post("/api/login", json={"email": "alice@example.com", "password": "s3cret-pass"})
        assert resp.status_code == 200
        assert resp.get_json()["user"]["name"] == "Alice"

    def test_login_wrong_password(self, client, store, register):
        register()
        resp = client.post("/api/login", json={"email": "alice@example.com", "password": "nope"})
        assert resp.status_code == 400
        assert resp.get_json()["message"] == "Invalid credentials"
        assert store.collection("audit_log")[-1].action == "login_failed"

    def test_login_non_string_fields(self, client, store, register):
        register()
        for body in ({"email": 123, "password": "s3cret-pass"},
                     {"email": {"$ne": ""}, "password": "s3cret-pass"},
                     {"email": "alice@example.com", "password": ["s3cret-pass"]}):
            resp = client.post("/api/login", json=body)
            assert resp.status_code == 400
            assert resp.get_json()["error"] == "validation"


class TestDirectories:
    def test_profile(self, client, seeded):
        resp = client.get("/api/profile/teacher@example.com")
        assert resp.status_code == 200
        assert resp.get_json()["user"]["type"] == "teacher"

    def test_profile_unknown(self, client, store):
        resp = client.get("/api/profile/ghost@example.com")
        assert resp.status_code == 404
        assert resp.get_json()["message"] == "User not found"

    def test_students_and_teachers_by_department(self, client, seeded):
        students = client.get("/api/students/computer_science").get_json()["students"]
        teachers = client.get("/api/teachers/computer_science").get_json()["teachers"]
        assert {s["email"] for s in students} == {"student1@example.com", "student2@example.com"}
        assert [t["email"] for t in teachers] == ["teacher@example.com"]
        assert client.get("/api/students/history").get_json()["students"] == []

    def test_parent_student(self, client, seeded):
        resp = client.get("/api/parent-student/parent1@example.com")
        assert resp.get_json()["student"]["email"] == "student1@example.com"
        assert client.get("/api/parent-student/nobody@example.com").status_code == 404

    def test_seeded_students_have_demo_credits(self, client, seeded):
        assert CreditLedger(seeded).get("student1@example.com").total_credits == 150
