# src/raci_tracker/tracker/views.py

from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum

from .models import Task, TaskStatus


class TaskFilter(StrEnum):
    ALL = "ALL"
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"
    ARCHIVED = "ARCHIVED"

    @classmethod
    def parse(cls, raw: str | None) -> TaskFilter:
        """Accept 'all', 'todo', 'in-progress', 'in_progress', 'archived', ... (ValueError otherwise)."""
        if not raw:
            return cls.ALL
        key = raw.strip().upper().replace("-", "_").replace(" ", "_")
        return cls(key)


def _matches(task: Task, flt: TaskFilter) -> bool:
    if flt is TaskFilter.ALL:
        return task.status is not TaskStatus.ARCHIVED
    return task.status.value == flt.value


def visible_tasks(tasks: Iterable[Task], flt: TaskFilter = TaskFilter.ALL) -> list[Task]:
    """
    Tasks shown for a filter, ordered by due date.

    ISO dates compare correctly as strings. Dated tasks come first; undated
    tasks keep their store order (sorted() is stable).
    """
    picked = [t for t in tasks if _matches(t, flt)]
    return sorted(picked, key=lambda t: (t.due_date is None, t.due_date or ""))
