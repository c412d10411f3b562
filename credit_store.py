"""Student credit ledger: running totals bucketed by calendar month.

Every award lands in the bucket for the current ``YYYY-MM`` with an audit
activity, so ``total_credits`` always equals the sum of bucket credits and of
activity amounts.
"""

from __future__ import annotations

from database import EntityStore, get_store
from models import CreditActivity, CreditLedgerEntry, MonthlyCredits


LEADERBOARD_AWARDS = (100, 75, 50)

# (minimum percentage, credits) checked top-down
MOCK_TEST_TIERS = (
    (90, 50),
    (80, 40),
    (70, 30),
    (60, 20),
)
MOCK_TEST_FLOOR = 10


def mock_test_credits(score: float, total_marks: float) -> int:
    """Credits for a mock test result."""
    if not total_marks:
        return MOCK_TEST_FLOOR
    pct = score / total_marks * 100
    for threshold, credits in MOCK_TEST_TIERS:
        if pct >= threshold:
            return credits
    return MOCK_TEST_FLOOR


class CreditLedger:
    """In-memory credit ledger keyed by student email."""

    def __init__(self, store: EntityStore | None = None):
        self.store = store if store is not None else get_store()

    def _entry(self, student_email: str) -> CreditLedgerEntry | None:
        return self.store.keyed("credits").get(student_email)

    def ensure(self, student_email: str) -> CreditLedgerEntry:
        """Create an empty ledger entry if missing."""
        with self.store.lock:
            entry = self._entry(student_email)
            if entry is None:
                entry = CreditLedgerEntry(
                    id=self.store.new_id(),
                    student_email=student_email,
                    updated_date=self.store.now(),
                )
                self.store.append("credits", entry, key=student_email)
            return entry

    def award(self, student_email: str, amount: int, reason: str) -> CreditLedgerEntry:
        """Add ``amount`` credits to the student's total and this month's bucket."""
        with self.store.lock:
            entry = self.ensure(student_email)
            now = self.store.clock()
            month = now.strftime("%Y-%m")

            entry.total_credits += amount
            bucket = entry.bucket(month)
            if bucket is None:
                bucket = MonthlyCredits(month=month)
                entry.monthly_credits.append(bucket)
            bucket.credits += amount
            bucket.activities.append(
                CreditActivity(date=now.isoformat(), credits=amount, reason=reason)
            )
            entry.updated_date = now.isoformat()
            return entry

    def get(self, student_email: str) -> CreditLedgerEntry:
        """Ledger entry, or an unsaved zero entry for unknown students."""
        entry = self._entry(student_email)
        if entry is not None:
            return entry
        return CreditLedgerEntry(
            id="",
            student_email=student_email,
            updated_date=self.store.now(),
        )

    def top_n(self, n: int) -> list[CreditLedgerEntry]:
        """Highest totals first; ties keep ledger creation order."""
        entries = list(self.store.collection("credits"))
        return sorted(entries, key=lambda e: e.total_credits, reverse=True)[:n]
