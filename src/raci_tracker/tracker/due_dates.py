# src/raci_tracker/tracker/due_dates.py

"""
Due-date classification for task badges.

Due dates are plain calendar dates (YYYY-MM-DD) in the user's local time.
All arithmetic happens on datetime.date values, never on timestamps, so the
result for a given (due_date, today) pair does not depend on the machine's
time zone or on the time of day.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from enum import StrEnum

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

SOON_WINDOW_DAYS = 7


class DueStatus(StrEnum):
    OVERDUE = "overdue"
    DUE_TODAY = "due_today"
    DUE_SOON = "due_soon"
    NORMAL = "normal"


@dataclass(frozen=True, slots=True)
class DueInfo:
    status: DueStatus
    days: int
    due: date

    @property
    def magnitude(self) -> int | None:
        """Day count shown on the badge (None for DUE_TODAY / NORMAL)."""
        if self.status in (DueStatus.OVERDUE, DueStatus.DUE_SOON):
            return abs(self.days)
        return None

    @property
    def label(self) -> str:
        if self.status is DueStatus.OVERDUE:
            return f"{abs(self.days)}d overdue"
        if self.status is DueStatus.DUE_TODAY:
            return "Due today"
        if self.status is DueStatus.DUE_SOON:
            return f"Due in {self.days}d"
        return f"Due {self.due.isoformat()}"


def parse_due_date(raw: str) -> date:
    """Parse a strict YYYY-MM-DD string into a calendar date (ValueError if invalid)."""
    s = (raw or "").strip()
    if not _ISO_DATE_RE.match(s):
        raise ValueError(f"Invalid due date (expected YYYY-MM-DD): {raw!r}")
    return date.fromisoformat(s)


def is_valid_due_date(raw: str | None) -> bool:
    if not raw:
        return False
    try:
        parse_due_date(raw)
    except ValueError:
        return False
    return True


def classify(due_date: str | None, today: date | None = None) -> DueInfo | None:
    """
    Classify a due date relative to today.

    diff < 0      -> OVERDUE (days overdue = |diff|)
    diff == 0     -> DUE_TODAY
    0 < diff <= 7 -> DUE_SOON
    diff > 7      -> NORMAL
    """
    if not due_date:
        return None
    due = parse_due_date(due_date)
    if today is None:
        today = date.today()

    diff_days = (due - today).days

    if diff_days < 0:
        status = DueStatus.OVERDUE
    elif diff_days == 0:
        status = DueStatus.DUE_TODAY
    elif diff_days <= SOON_WINDOW_DAYS:
        status = DueStatus.DUE_SOON
    else:
        status = DueStatus.NORMAL

    return DueInfo(status=status, days=diff_days, due=due)
