"""
Leaderboard publication.

A leaderboard is a ranked snapshot for one (month, year) period. Publishing it
awards podium credits through the CreditLedger and notifies every student,
ranked or not. A period can only be published once; later attempts raise
ConflictError and have no side effects. "October", "Oct" and "10" all name
the same month.
"""

from __future__ import annotations

import calendar
import logging

from credit_store import LEADERBOARD_AWARDS, CreditLedger
from database import EntityStore, get_store
from errors import ConflictError, NotFoundError, ValidationError
from models import Leaderboard
from notifier import NotificationDispatcher

logger = logging.getLogger(__name__)

_MONTH_NUMBERS: dict[str, int] = {}
for _i in range(1, 13):
    _MONTH_NUMBERS[calendar.month_name[_i].lower()] = _i
    _MONTH_NUMBERS[calendar.month_abbr[_i].lower()] = _i


def month_number(month: str) -> int:
    """1-12 for "October", "Oct", "10"; 0 when unrecognised."""
    text = str(month).strip().lower()
    if text.isdigit():
        value = int(text)
        return value if 1 <= value <= 12 else 0
    return _MONTH_NUMBERS.get(text, 0)


def _period_key(lb: Leaderboard) -> tuple[int, int]:
    year = str(lb.year).strip()
    return (int(year) if year.isdigit() else 0, month_number(lb.month))


def rank_award(rank: int) -> int:
    """Credits for a 0-based leaderboard position."""
    if 0 <= rank < len(LEADERBOARD_AWARDS):
        return LEADERBOARD_AWARDS[rank]
    return 0


class LeaderboardPublisher:
    def __init__(self, store: EntityStore | None = None,
                 ledger: CreditLedger | None = None,
                 notifier: NotificationDispatcher | None = None):
        self.store = store if store is not None else get_store()
        self.ledger = ledger if ledger is not None else CreditLedger(self.store)
        self.notifier = notifier if notifier is not None else NotificationDispatcher(self.store)

    def _find(self, month, year) -> Leaderboard | None:
        wanted = (month_number(month), str(year).strip())
        return self.store.find(
            "leaderboards",
            lambda lb: (month_number(lb.month), str(lb.year).strip()) == wanted,
        )

    def publish(self, teacher_email: str, month, year, top_students: list[dict]) -> Leaderboard:
        """Store the snapshot, award podium credits and notify students."""
        month = str(month).strip()
        if not month_number(month):
            raise ValidationError(f"Unknown month: {month}")
        for student in top_students:
            if not isinstance(student, dict) or not student.get("email"):
                raise ValidationError("Every ranked student needs an email")

        with self.store.lock:
            if self._find(month, year) is not None:
                raise ConflictError(f"Leaderboard for {month} {year} already published")

            snapshot = Leaderboard(
                id=self.store.new_id(),
                teacher_email=teacher_email,
                month=month,
                year=str(year).strip(),
                top_students=[dict(s) for s in top_students],
                created_date=self.store.now(),
            )
            self.store.append("leaderboards", snapshot)

            for rank, student in enumerate(top_students):
                credits = rank_award(rank)
                if credits:
                    self.ledger.award(
                        student["email"], credits,
                        f"Leaderboard {rank + 1} Place - {month}/{year}",
                    )
                self.notifier.notify(
                    student["email"],
                    "Leaderboard Achievement",
                    f"Congratulations! You ranked {rank + 1} in the {month} {year} "
                    f"leaderboard and earned {credits} credits!",
                    "success",
                )

            ranked = {s["email"] for s in top_students}
            others = [
                u.email for u in self.store.collection("users")
                if u.is_student and u.email not in ranked
            ]
            self.notifier.notify_many(
                others,
                "New Leaderboard Published",
                f"The {month} {year} leaderboard has been published. Check it out!",
                "info",
            )

        logger.info("Published leaderboard %s %s with %d ranked students",
                    month, year, len(top_students))
        return snapshot

    def get(self, month, year) -> Leaderboard:
        snapshot = self._find(month, year)
        if snapshot is None:
            raise NotFoundError("Leaderboard not found for this period")
        return snapshot

    def list_all(self) -> list[Leaderboard]:
        """All snapshots, most recent period first."""
        return sorted(self.store.collection("leaderboards"), key=_period_key, reverse=True)
