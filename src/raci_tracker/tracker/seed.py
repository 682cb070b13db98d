# src/raci_tracker/tracker/seed.py

"""Built-in sample data used when local storage holds nothing yet."""

from __future__ import annotations

from datetime import date, timedelta

from .models import Active, RaciRoles, Task, TaskStatus

SEED_ROSTER: tuple[str, ...] = (
    "Sarah",
    "Mike",
    "Jessica",
    "Steve",
    "Amanda",
    "CEO",
    "CTO",
    "CFO",
    "Dev Team",
    "Design Team",
    "Marketing",
    "Legal",
    "Sales Team",
    "All Staff",
)


def seed_tasks(today: date | None = None) -> list[Task]:
    today = today or date.today()
    return [
        Task(
            id="1",
            title="Launch Marketing Campaign",
            description="Prepare assets and schedule social media posts for Q3 product launch.",
            lifecycle=Active(TaskStatus.IN_PROGRESS),
            due_date=(today + timedelta(days=5)).isoformat(),
            roles=RaciRoles(
                responsible=("Sarah", "Mike"),
                accountable="Jessica",
                consulted=("Dev Team", "Legal"),
                informed=("Sales Team",),
            ),
        ),
        Task(
            id="2",
            title="Update Privacy Policy",
            description="Review new GDPR compliance requirements and update the website.",
            lifecycle=Active(TaskStatus.TODO),
            due_date=(today - timedelta(days=2)).isoformat(),
            roles=RaciRoles(
                responsible=("Legal",),
                accountable="CEO",
                consulted=("CTO",),
                informed=("All Staff",),
            ),
        ),
    ]


def seed_roster() -> list[str]:
    return sorted(SEED_ROSTER)
