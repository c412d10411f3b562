"""
In-memory entity store for the campus portal.

Each entity kind is an ordered list of dataclass records. Kinds with a natural
key (grades, attendance, credit ledgers) also keep a keyed map so upserts are a
dict lookup instead of a scan. All read-modify-write sequences must hold
``store.lock``; it is re-entrant so repository methods can nest.
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections.abc import Callable, Hashable
from datetime import datetime
from typing import Any

from flask import Flask, current_app

logger = logging.getLogger(__name__)

EXTENSION_KEY = "campus_store"

ENTITY_KINDS = (
    "users",
    "courses",
    "enrollments",
    "attendance",
    "grades",
    "assignments",
    "submissions",
    "leave_requests",
    "complaints",
    "forum_posts",
    "notifications",
    "timetables",
    "events",
    "live_sessions",
    "question_papers",
    "mock_tests",
    "leaderboards",
    "credits",
    "chat_messages",
    "concept_maps",
    "audit_log",
)


class EntityStore:
    """Process-local collections plus clock and id generation."""

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self.lock = threading.RLock()
        self.clock: Callable[[], datetime] = clock or datetime.now
        self._collections: dict[str, list[Any]] = {}
        self._keyed: dict[str, dict[Hashable, Any]] = {}
        self.reset()

    def reset(self) -> None:
        with self.lock:
            self._collections = {kind: [] for kind in ENTITY_KINDS}
            self._keyed = {kind: {} for kind in ENTITY_KINDS}

    # --- clock / ids ---

    def now(self) -> str:
        return self.clock().isoformat()

    @staticmethod
    def new_id() -> str:
        return str(uuid.uuid4())

    # --- accessors ---

    def collection(self, kind: str) -> list[Any]:
        try:
            return self._collections[kind]
        except KeyError:
            raise KeyError(f"Unknown entity kind: {kind}") from None

    def keyed(self, kind: str) -> dict[Hashable, Any]:
        return self._keyed[kind]

    def append(self, kind: str, record: Any, key: Hashable | None = None) -> Any:
        with self.lock:
            self.collection(kind).append(record)
            if key is not None:
                self._keyed[kind][key] = record
        return record

    def find(self, kind: str, predicate: Callable[[Any], bool]) -> Any | None:
        for record in self.collection(kind):
            if predicate(record):
                return record
        return None

    def filter(self, kind: str, predicate: Callable[[Any], bool]) -> list[Any]:
        return [r for r in self.collection(kind) if predicate(r)]

    def remove(self, kind: str, predicate: Callable[[Any], bool]) -> Any | None:
        """Delete the first matching record. Returns it, or None."""
        with self.lock:
            items = self.collection(kind)
            for i, record in enumerate(items):
                if predicate(record):
                    del items[i]
                    keyed = self._keyed[kind]
                    for k, v in list(keyed.items()):
                        if v is record:
                            del keyed[k]
                    return record
        return None

    def count(self, kind: str) -> int:
        return len(self.collection(kind))


def init_app(app: Flask) -> EntityStore:
    """Attach a fresh store to the app."""
    store = EntityStore()
    app.extensions[EXTENSION_KEY] = store
    logger.debug("Entity store initialised with %d kinds", len(ENTITY_KINDS))
    return store


def get_store() -> EntityStore:
    """Return the store bound to the current Flask app."""
    return current_app.extensions[EXTENSION_KEY]
