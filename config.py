"""
Application configuration: environment-aware settings.

All environment variables are documented here. A local ``.env`` file is loaded
on import.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).parent

load_dotenv(BASE_DIR / ".env")


class BaseConfig:
    # Core Flask
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-key-change-in-production")
    JSON_SORT_KEYS = False

    # Logging
    LOG_FORMAT = os.environ.get("LOG_FORMAT", "text")  # "json" or "text"
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Uploads
    UPLOAD_FOLDER = os.environ.get("UPLOAD_FOLDER", str(BASE_DIR / "uploads"))
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024  # 10 MB
    MAX_FILES_PER_UPLOAD = 10
    ALLOWED_UPLOAD_EXTENSIONS = {
        ".pdf", ".png", ".jpg", ".jpeg", ".gif", ".webp",
        ".doc", ".docx", ".ppt", ".pptx", ".txt", ".zip",
    }

    # Sample campus on startup
    SEED_DEMO_DATA = os.environ.get("SEED_DEMO_DATA", "1") == "1"

    # CORS (comma-separated origins, "*" for any)
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")

    # Rate limiting
    RATELIMIT_STORAGE_URI = os.environ.get("RATELIMIT_STORAGE_URI", "memory://")

    # Real-time streams
    STREAM_KEEPALIVE_SECONDS = int(os.environ.get("STREAM_KEEPALIVE_SECONDS", "15"))
    STREAM_QUEUE_SIZE = int(os.environ.get("STREAM_QUEUE_SIZE", "100"))

    # Gamification
    TOP_STUDENTS_LIMIT = 10

    PORT = int(os.environ.get("PORT", "3000"))


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_FORMAT = os.environ.get("LOG_FORMAT", "text")


class ProductionConfig(BaseConfig):
    DEBUG = False
    LOG_FORMAT = os.environ.get("LOG_FORMAT", "json")
    SEED_DEMO_DATA = os.environ.get("SEED_DEMO_DATA", "0") == "1"

    @classmethod
    def validate(cls):
        """Fail fast on missing or insecure configuration in production."""
        errors: list[str] = []

        if cls.SECRET_KEY in ("dev-key-change-in-production", ""):
            errors.append("SECRET_KEY must be set to a secure value in production.")

        if cls.CORS_ORIGINS == "*":
            errors.append("CORS_ORIGINS must list explicit origins in production.")

        if errors:
            raise RuntimeError(
                "Production configuration errors:\n" + "\n".join(f"  - {e}" for e in errors)
            )


class TestingConfig(BaseConfig):
    TESTING = True
    SEED_DEMO_DATA = False
    RATELIMIT_ENABLED = False
    STREAM_KEEPALIVE_SECONDS = 1


config_by_name = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}
