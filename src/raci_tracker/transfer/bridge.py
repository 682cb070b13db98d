# src/raci_tracker/transfer/bridge.py

"""
Backup/restore of tasks + roster as a single JSON document.

Document shape:
    {"tasks": [...], "roster": [...], "exportedAt": "<ISO-8601>", "version": 1}

Import is all-or-nothing: the document is parsed and validated first, the
user confirms, and only then are the store and roster overwritten (no merge).
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Any

from ..storage.persistence import tasks_from_wire
from ..tracker.models import Task
from ..tracker.roster import Roster
from ..tracker.task_store import TaskStore

logger = logging.getLogger(__name__)

EXPORT_VERSION = 1

CONFIRM_OVERWRITE_PROMPT = (
    "This will overwrite your current tasks and team roster. Are you sure you want to continue?"
)
PARSE_ERROR_MESSAGE = "Failed to parse the file. Please ensure it is a valid JSON file."
SHAPE_ERROR_MESSAGE = "Invalid file format: Missing 'tasks' or 'roster' arrays."


class ImportFormatError(ValueError):
    """Import document could not be parsed or has the wrong shape. str(err) is user-facing."""


@dataclass(frozen=True, slots=True)
class ImportedData:
    tasks: list[Task]
    roster: list[str]


def build_export_document(
    store: TaskStore,
    roster: Roster,
    *,
    now: datetime | None = None,
) -> dict[str, Any]:
    now = now or datetime.now(UTC)
    return {
        "tasks": [t.to_dict() for t in store.all()],
        "roster": roster.names,
        "exportedAt": now.isoformat().replace("+00:00", "Z"),
        "version": EXPORT_VERSION,
    }


def export_json(store: TaskStore, roster: Roster, *, now: datetime | None = None) -> str:
    return json.dumps(build_export_document(store, roster, now=now), ensure_ascii=False, indent=2)


def export_filename(today: date | None = None) -> str:
    today = today or date.today()
    return f"raci-backup-{today.isoformat()}.json"


def write_export_file(
    store: TaskStore,
    roster: Roster,
    directory: str | Path,
    *,
    today: date | None = None,
) -> Path:
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename(today)
    path.write_text(export_json(store, roster), "utf-8")
    logger.info("Exported %d tasks, %d roster names to %s", len(store), len(roster), path)
    return path


def parse_import_document(text: str) -> ImportedData:
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        logger.exception("Import error: document is not valid JSON.")
        raise ImportFormatError(PARSE_ERROR_MESSAGE) from e

    if (
        not isinstance(data, dict)
        or not isinstance(data.get("tasks"), list)
        or not isinstance(data.get("roster"), list)
    ):
        raise ImportFormatError(SHAPE_ERROR_MESSAGE)

    return ImportedData(
        tasks=tasks_from_wire(data["tasks"]),
        roster=[str(n) for n in data["roster"] if isinstance(n, str)],
    )


def apply_import(
    text: str,
    store: TaskStore,
    roster: Roster,
    *,
    confirm: Callable[[str], bool],
) -> bool:
    """
    Validate an import document and, after confirmation, overwrite state.

    Returns True if state was replaced, False if the user declined.
    Raises ImportFormatError (no state change) on a bad document.
    """
    imported = parse_import_document(text)
    if not confirm(CONFIRM_OVERWRITE_PROMPT):
        logger.info("Import declined by user.")
        return False

    store.replace_all(imported.tasks)
    roster.replace_all(imported.roster)
    logger.info("Imported %d tasks, %d roster names", len(imported.tasks), len(imported.roster))
    return True


def import_file(
    path: str | Path,
    store: TaskStore,
    roster: Roster,
    *,
    confirm: Callable[[str], bool],
) -> bool:
    try:
        text = Path(path).read_text("utf-8")
    except UnicodeDecodeError as e:
        raise ImportFormatError(PARSE_ERROR_MESSAGE) from e
    return apply_import(text, store, roster, confirm=confirm)
