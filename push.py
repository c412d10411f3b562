"""
Real-time push channel.

Clients open a Server-Sent Events stream for a room (a user's email for
notifications, a chat pair for chat) and receive every event published to that
room while they are connected. Delivery is at-most-once: publishing to a room
with no subscribers does nothing, and a subscriber whose queue is full simply
misses the event. Persisted records remain available through the pull APIs.
"""

from __future__ import annotations

import json
import logging
import queue
import threading
from collections.abc import Iterator
from typing import Any

from flask import Flask, current_app

logger = logging.getLogger(__name__)

EXTENSION_KEY = "push_hub"


class Subscription:
    """One connected stream listening on a room."""

    def __init__(self, room: str, maxsize: int) -> None:
        self.room = room
        self.queue: queue.Queue[tuple[str, Any]] = queue.Queue(maxsize=maxsize)

    def get(self, timeout: float) -> tuple[str, Any] | None:
        try:
            return self.queue.get(timeout=timeout)
        except queue.Empty:
            return None


class PushHub:
    """Room -> subscribers registry with non-blocking fan-out."""

    def __init__(self, queue_size: int = 100) -> None:
        self.queue_size = queue_size
        self._rooms: dict[str, list[Subscription]] = {}
        self._lock = threading.Lock()

    def subscribe(self, room: str) -> Subscription:
        sub = Subscription(room, self.queue_size)
        with self._lock:
            self._rooms.setdefault(room, []).append(sub)
        logger.debug("Subscribed to %s (%d listening)", room, self.subscriber_count(room))
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        with self._lock:
            subs = self._rooms.get(sub.room)
            if not subs:
                return
            if sub in subs:
                subs.remove(sub)
            # Drop the room once empty
            if not subs:
                del self._rooms[sub.room]

    def subscriber_count(self, room: str) -> int:
        with self._lock:
            return len(self._rooms.get(room, []))

    def publish(self, room: str, event: str, payload: Any) -> int:
        """Offer an event to every subscriber of ``room``.

        Returns the number of subscribers that accepted it.
        """
        with self._lock:
            targets = list(self._rooms.get(room, []))

        delivered = 0
        for sub in targets:
            try:
                sub.queue.put_nowait((event, payload))
                delivered += 1
            except queue.Full:
                logger.warning("Dropped %s event for slow subscriber on %s", event, room)
        return delivered


def chat_room(parent_email: str, teacher_email: str) -> str:
    """Room name for a parent/teacher pair, independent of argument order."""
    a, b = sorted((parent_email, teacher_email))
    return f"chat:{a}|{b}"


def format_sse(event: str, payload: Any) -> str:
    return f"event: {event}\ndata: {json.dumps(payload, default=str)}\n\n"


def event_stream(hub: PushHub, room: str, keepalive: float = 15.0) -> Iterator[str]:
    """Yield SSE frames for ``room`` until the client goes away."""
    sub = hub.subscribe(room)
    try:
        yield ": connected\n\n"
        while True:
            item = sub.get(timeout=keepalive)
            if item is None:
                # Comment frame; a write to a closed socket ends the generator
                yield ": keep-alive\n\n"
                continue
            event, payload = item
            yield format_sse(event, payload)
    finally:
        hub.unsubscribe(sub)


def init_push(app: Flask) -> PushHub:
    hub = PushHub(queue_size=app.config.get("STREAM_QUEUE_SIZE", 100))
    app.extensions[EXTENSION_KEY] = hub
    return hub


def get_hub() -> PushHub:
    return current_app.extensions[EXTENSION_KEY]
