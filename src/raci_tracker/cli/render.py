# src/raci_tracker/cli/render.py

"""Plain-text rendering of tasks for the console."""

from __future__ import annotations

from datetime import date

from ..tracker.due_dates import DueStatus, classify
from ..tracker.models import RaciRoles, Task
from ..tracker.role_picker import ROLE_FIELDS

_BADGE_MARK = {
    DueStatus.OVERDUE: "!",
    DueStatus.DUE_TODAY: "*",
    DueStatus.DUE_SOON: "~",
    DueStatus.NORMAL: "",
}


def due_badge(task: Task, today: date | None = None) -> str:
    info = classify(task.due_date, today)
    if info is None:
        return ""
    mark = _BADGE_MARK[info.status]
    return f"{mark}{info.label}" if mark else info.label


def role_lines(roles: RaciRoles) -> list[str]:
    lines: list[str] = []
    for letter, rf in ROLE_FIELDS.items():
        val = getattr(roles, rf.attr)
        people = [val] if isinstance(val, str) else list(val)
        people = [p for p in people if p]
        if people:
            lines.append(f"{letter} {rf.label}: {', '.join(people)}")
    return lines


def task_line(position: int, task: Task, today: date | None = None) -> str:
    parts = [f"#{position}", f"[{task.status.label}]", task.title or "(untitled)"]
    badge = due_badge(task, today)
    if badge:
        parts.append(f"({badge})")
    parts.append(f"id={task.id[:8]}")
    return " ".join(parts)


def task_detail(task: Task, today: date | None = None) -> str:
    lines = [
        f"{task.title or '(untitled)'}",
        f"  id: {task.id}",
        f"  status: {task.status.label}",
    ]
    if task.previous_status is not None:
        lines.append(f"  restores to: {task.previous_status.label}")
    if task.due_date:
        lines.append(f"  due: {task.due_date} ({due_badge(task, today)})")
    if task.description:
        lines.append(f"  {task.description}")
    lines.extend(f"  {line}" for line in role_lines(task.roles))
    return "\n".join(lines)
