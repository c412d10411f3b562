"""
Notification dispatcher.

Persists a notification for one recipient and pushes it to the recipient's
real-time room. The push is best-effort; the record is always stored.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from database import EntityStore, get_store
from errors import NotFoundError
from models import Notification
from push import PushHub, get_hub

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Create, list and acknowledge notifications."""

    def __init__(self, store: EntityStore | None = None, hub: PushHub | None = None):
        self.store = store if store is not None else get_store()
        self.hub = hub if hub is not None else get_hub()

    def notify(self, recipient_email: str, title: str, message: str,
               severity: str = "info") -> Notification:
        notif = Notification(
            id=self.store.new_id(),
            user_email=recipient_email,
            title=title,
            message=message,
            type=severity,
            timestamp=self.store.now(),
        )
        self.store.append("notifications", notif)
        delivered = self.hub.publish(recipient_email, "notification", notif.to_dict())
        logger.debug("notification %s -> %s (%d live)", title, recipient_email, delivered)
        return notif

    def notify_many(self, recipient_emails: Iterable[str], title: str, message: str,
                    severity: str = "info") -> list[Notification]:
        return [self.notify(email, title, message, severity) for email in recipient_emails]

    def list_for(self, recipient_email: str) -> list[Notification]:
        """All notifications for a recipient, newest first."""
        mine = [
            (i, n) for i, n in enumerate(self.store.collection("notifications"))
            if n.user_email == recipient_email
        ]
        mine.sort(key=lambda pair: (pair[1].timestamp, pair[0]), reverse=True)
        return [n for _, n in mine]

    def unread_count(self, recipient_email: str) -> int:
        return sum(
            1 for n in self.store.collection("notifications")
            if n.user_email == recipient_email and not n.read
        )

    def mark_read(self, notification_id: str) -> Notification:
        with self.store.lock:
            notif = self.store.find("notifications", lambda n: n.id == notification_id)
            if notif is None:
                raise NotFoundError("Notification not found")
            notif.read = True
        return notif

    def mark_all_read(self, recipient_email: str) -> int:
        changed = 0
        with self.store.lock:
            for n in self.store.collection("notifications"):
                if n.user_email == recipient_email and not n.read:
                    n.read = True
                    changed += 1
        return changed
