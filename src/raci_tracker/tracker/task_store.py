# src/raci_tracker/tracker/task_store.py

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import replace
from typing import Any

from .models import Task, TaskStatus, new_task_id

logger = logging.getLogger(__name__)

StoreListener = Callable[["TaskStore"], None]

_UPDATABLE_FIELDS = frozenset({"title", "description", "roles", "due_date"})


class TaskStore:
    """
    In-memory, ordered task collection.

    Tasks are immutable records; every mutation swaps a record in place so
    the store order (creation order) is stable. Listeners are notified after
    each mutation that actually changed something; persistence subscribes
    here.

    All operations are total: unknown ids are ignored.
    """

    def __init__(self, tasks: Iterable[Task] = ()) -> None:
        self._tasks: list[Task] = list(tasks)
        self._listeners: list[StoreListener] = []

    # ---- observation ----

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # ---- queries ----

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(list(self._tasks))

    def all(self) -> list[Task]:
        return list(self._tasks)

    def get(self, task_id: str) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def _index_of(self, task_id: str) -> int | None:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return None

    def _fresh_id(self) -> str:
        taken = {t.id for t in self._tasks}
        while True:
            tid = new_task_id()
            if tid not in taken:
                return tid

    # ---- mutations ----

    def create(self, task: Task) -> Task:
        """Append task under a freshly generated id. Contents are not validated."""
        stored = replace(task, id=self._fresh_id())
        self._tasks.append(stored)
        logger.debug("Task created id=%s title=%r", stored.id, stored.title)
        self._notify()
        return stored

    def create_many(self, tasks: Iterable[Task]) -> list[Task]:
        """Append several tasks with a single change notification."""
        created: list[Task] = []
        for task in tasks:
            stored = replace(task, id=self._fresh_id())
            self._tasks.append(stored)
            created.append(stored)
        if created:
            logger.debug("Tasks created count=%d", len(created))
            self._notify()
        return created

    def update(self, task_id: str, **fields: Any) -> Task | None:
        """
        Merge partial fields (title, description, roles, due_date) into a task.

        Status is not updatable here; use set_status().
        """
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise TypeError(f"Unsupported task field(s): {', '.join(sorted(unknown))}")

        idx = self._index_of(task_id)
        if idx is None:
            return None

        if "due_date" in fields:
            fields["due_date"] = fields["due_date"] or None

        current = self._tasks[idx]
        updated = replace(current, **fields)
        if updated == current:
            return current

        self._tasks[idx] = updated
        logger.debug("Task updated id=%s fields=%s", task_id, sorted(fields))
        self._notify()
        return updated

    def set_status(self, task_id: str, new_status: TaskStatus) -> Task | None:
        """
        The single status transition point.

        ARCHIVED snapshots the current status as the prior one; any other
        status clears it.
        """
        idx = self._index_of(task_id)
        if idx is None:
            return None

        current = self._tasks[idx]
        updated = current.with_status(new_status)
        if updated == current:
            return current

        self._tasks[idx] = updated
        logger.debug(
            "Task status id=%s %s -> %s",
            task_id,
            current.status.value,
            updated.status.value,
        )
        self._notify()
        return updated

    def restore(self, task_id: str) -> Task | None:
        """Move an archived task back to its prior status (TODO if unknown)."""
        task = self.get(task_id)
        if task is None:
            return None
        if not task.is_archived:
            return task
        return self.set_status(task_id, task.previous_status or TaskStatus.TODO)

    def delete(self, task_id: str) -> bool:
        """
        Remove a task permanently.

        The archive-first policy is the caller's job; the store deletes whatever
        it is asked to.
        """
        idx = self._index_of(task_id)
        if idx is None:
            return False
        removed = self._tasks.pop(idx)
        logger.debug("Task deleted id=%s status=%s", task_id, removed.status.value)
        self._notify()
        return True

    def replace_all(self, tasks: Iterable[Task]) -> None:
        """Bulk overwrite (used by import)."""
        self._tasks = list(tasks)
        logger.debug("Task store replaced total=%d", len(self._tasks))
        self._notify()
