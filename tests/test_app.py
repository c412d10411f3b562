"""App factory, config, error envelope and response headers."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from app import create_app
from config import ProductionConfig


class TestErrorEnvelope:
    def test_unknown_endpoint(self, client):
        resp = client.get("/api/does-not-exist")
        assert resp.status_code == 404
        assert resp.get_json() == {
            "success": False, "message": "Endpoint not found", "error": "not_found",
        }

    def test_method_not_allowed(self, client):
        resp = client.put("/api/login")
        assert resp.status_code == 405
        assert resp.get_json()["error"] == "validation"

    def test_unexpected_error_is_hidden(self, client, store):
        with patch("blueprints.gamification.CreditLedger.top_n", side_effect=RuntimeError("boom")):
            resp = client.get("/api/top-students")
        assert resp.status_code == 500
        assert resp.get_json()["message"] == "Internal server error"
        assert "boom" not in resp.get_data(as_text=True)


class TestHeaders:
    def test_request_id_echoed(self, client):
        resp = client.get("/api/health", headers={"X-Request-ID": "abc123"})
        assert resp.headers["X-Request-ID"] == "abc123"

    def test_security_and_cors_headers(self, client):
        resp = client.get("/api/health", headers={"Origin": "http://localhost:3000"})
        assert resp.headers["X-Content-Type-Options"] == "nosniff"
        assert resp.headers["Access-Control-Allow-Origin"] == "*"

    def test_cors_preflight(self, client):
        resp = client.options("/api/login", headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        })
        assert resp.headers["Access-Control-Allow-Origin"] == "*"
        assert "POST" in resp.headers["Access-Control-Allow-Methods"]

    def test_cors_allow_list(self, tmp_path):
        app = create_app({"TESTING": True, "UPLOAD_FOLDER": str(tmp_path),
                          "CORS_ORIGINS": "https://portal.example.edu, https://admin.example.edu"})
        with app.test_client() as client:
            allowed = client.get("/api/health", headers={"Origin": "https://admin.example.edu"})
            blocked = client.get("/api/health", headers={"Origin": "https://evil.example.com"})
        assert allowed.headers["Access-Control-Allow-Origin"] == "https://admin.example.edu"
        assert "Origin" in allowed.headers.get("Vary", "")
        assert "Access-Control-Allow-Origin" not in blocked.headers


class TestFactory:
    def test_testing_app_starts_empty(self, store):
        assert store.count("users") == 0

    def test_seed_on_startup(self, tmp_path):
        app = create_app({"TESTING": True, "SEED_DEMO_DATA": True,
                          "UPLOAD_FOLDER": str(tmp_path)})
        with app.test_client() as client:
            resp = client.post("/api/login", json={
                "email": "student1@example.com", "password": "password123",
            })
        assert resp.status_code == 200

    def test_production_requires_secret_key(self):
        with patch.object(ProductionConfig, "SECRET_KEY", "dev-key-change-in-production"):
            with pytest.raises(RuntimeError, match="SECRET_KEY"):
                ProductionConfig.validate()
