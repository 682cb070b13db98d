# src/raci_tracker/storage/persistence.py

"""
Load/save of tracker state in durable key-value storage.

Keys:
- "tasks":  JSON array of task objects
- "roster": JSON array of names
- "theme":  "light" | "dark"

Loading happens once at startup. Anything missing or malformed falls back to
the built-in defaults; a broken stored value is logged, never fatal.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable
from dataclasses import replace
from datetime import date

from ..config import THEMES
from ..core.ports import KeyValueStorage
from ..tracker.models import Task, new_task_id
from ..tracker.roster import Roster
from ..tracker.seed import seed_roster, seed_tasks
from ..tracker.task_store import TaskStore

logger = logging.getLogger(__name__)

TASKS_KEY = "tasks"
ROSTER_KEY = "roster"
THEME_KEY = "theme"


def _load_json_list(storage: KeyValueStorage, key: str) -> list | None:
    raw = storage.get(key)
    if raw is None:
        return None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        logger.exception("Failed to parse %r from local storage; using defaults.", key)
        return None
    if not isinstance(data, list):
        logger.error("Stored %r is not a JSON array (got %s); using defaults.", key, type(data).__name__)
        return None
    return data


def tasks_from_wire(items: Iterable[object]) -> list[Task]:
    out: list[Task] = []
    seen: set[str] = set()
    for item in items:
        if not isinstance(item, dict):
            logger.warning("Skipping non-object task entry: %r", item)
            continue
        task = Task.from_dict(item)
        if task.id in seen:
            fresh = new_task_id()
            logger.warning("Duplicate task id %r; assigning %s", task.id, fresh)
            task = replace(task, id=fresh)
        seen.add(task.id)
        out.append(task)
    return out



def load_tasks(storage: KeyValueStorage, *, today: date | None = None) -> list[Task]:
    data = _load_json_list(storage, TASKS_KEY)
    if data is None:
        return seed_tasks(today)
    return tasks_from_wire(data)


def load_roster(storage: KeyValueStorage) -> list[str]:
    data = _load_json_list(storage, ROSTER_KEY)
    if data is None:
        return seed_roster()
    return [str(n) for n in data if isinstance(n, str)]


def load_theme(storage: KeyValueStorage, default: str = "light") -> str:
    raw = storage.get(THEME_KEY)
    if raw in THEMES:
        return raw
    return default


def save_tasks(storage: KeyValueStorage, tasks: Iterable[Task]) -> None:
    storage.set(TASKS_KEY, json.dumps([t.to_dict() for t in tasks], ensure_ascii=False))


def save_roster(storage: KeyValueStorage, names: Iterable[str]) -> None:
    storage.set(ROSTER_KEY, json.dumps(list(names), ensure_ascii=False))


def save_theme(storage: KeyValueStorage, theme: str) -> None:
    if theme not in THEMES:
        raise ValueError(f"Unknown theme: {theme!r}")
    storage.set(THEME_KEY, theme)


def attach_persistence(
    storage: KeyValueStorage,
    store: TaskStore,
    roster: Roster,
) -> Callable[[], None]:
    """
    Mirror every store/roster change into storage. Returns a detach callable.

    Also writes the current state once, so freshly seeded data is persisted.
    """
    save_tasks(storage, store.all())
    save_roster(storage, roster.names)

    unsub_tasks = store.subscribe(lambda s: save_tasks(storage, s.all()))
    unsub_roster = roster.subscribe(lambda r: save_roster(storage, r.names))

    def detach() -> None:
        unsub_tasks()
        unsub_roster()

    return detach
