# tests/test_transfer.py

from __future__ import annotations

import json
from datetime import UTC, date, datetime
from pathlib import Path

import pytest

from raci_tracker.tracker.models import RaciRoles, TaskStatus
from raci_tracker.tracker.roster import Roster
from raci_tracker.tracker.task_store import TaskStore
from raci_tracker.transfer.bridge import (
    SHAPE_ERROR_MESSAGE,
    ImportFormatError,
    apply_import,
    build_export_document,
    export_json,
    import_file,
    write_export_file,
)

from .conftest import make_task
from .fakes import Confirmer


@pytest.fixture()
def store() -> TaskStore:
    return TaskStore(
        [
            make_task(
                "a",
                "Plan launch",
                status=TaskStatus.IN_PROGRESS,
                due_date="2024-02-01",
                roles=RaciRoles(responsible=("Sarah", "Mike"), accountable="Jessica", informed=("Sales",)),
            ),
            make_task("b", "Old thing", status=TaskStatus.ARCHIVED, prior=TaskStatus.DONE),
        ]
    )


@pytest.fixture()
def roster() -> Roster:
    return Roster(["Sarah", "Mike", "Jessica"])


def test_export_document_shape(store: TaskStore, roster: Roster) -> None:
    doc = build_export_document(store, roster, now=datetime(2024, 1, 5, 12, 0, tzinfo=UTC))
    assert doc["version"] == 1
    assert doc["exportedAt"] == "2024-01-05T12:00:00Z"
    assert doc["roster"] == ["Jessica", "Mike", "Sarah"]
    assert [t["id"] for t in doc["tasks"]] == ["a", "b"]
    assert doc["tasks"][1]["previousStatus"] == "DONE"


def test_import_of_export_round_trips(store: TaskStore, roster: Roster) -> None:
    text = export_json(store, roster)

    target_store = TaskStore([make_task("zzz")])
    target_roster = Roster(["Nobody"])
    assert apply_import(text, target_store, target_roster, confirm=Confirmer(True)) is True

    assert target_store.all() == store.all()
    assert target_roster.names == roster.names


def test_declined_import_changes_nothing(store: TaskStore, roster: Roster) -> None:
    text = export_json(TaskStore(), Roster())
    confirm = Confirmer(False)

    assert apply_import(text, store, roster, confirm=confirm) is False
    assert len(store) == 2
    assert len(roster) == 3
    assert len(confirm.prompts) == 1
    assert "overwrite" in confirm.prompts[0]


@pytest.mark.parametrize(
    "text",
    [
        json.dumps({"tasks": []}),
        json.dumps({"roster": []}),
        json.dumps({"tasks": {}, "roster": []}),
        json.dumps([1, 2, 3]),
    ],
)
def test_import_rejects_wrong_shape(store: TaskStore, roster: Roster, text: str) -> None:
    confirm = Confirmer(True)
    with pytest.raises(ImportFormatError) as err:
        apply_import(text, store, roster, confirm=confirm)
    assert str(err.value) == SHAPE_ERROR_MESSAGE
    assert confirm.prompts == []
    assert len(store) == 2


def test_import_rejects_invalid_json(store: TaskStore, roster: Roster) -> None:
    with pytest.raises(ImportFormatError, match="Failed to parse"):
        apply_import("{not json", store, roster, confirm=Confirmer(True))
    assert [t.id for t in store] == ["a", "b"]


def test_write_export_file_and_import_file(tmp_path: Path, store: TaskStore, roster: Roster) -> None:
    path = write_export_file(store, roster, tmp_path, today=date(2024, 1, 5))
    assert path.name == "raci-backup-2024-01-05.json"

    fresh_store, fresh_roster = TaskStore(), Roster()
    assert import_file(path, fresh_store, fresh_roster, confirm=Confirmer(True)) is True
    assert fresh_store.all() == store.all()
    assert fresh_roster.names == roster.names


def test_import_gives_repeated_ids_fresh_ones(store: TaskStore, roster: Roster) -> None:
    text = json.dumps(
        {
            "tasks": [
                {"id": "x", "title": "One", "status": "TODO"},
                {"id": "x", "title": "Two", "status": "TODO"},
            ],
            "roster": [],
        }
    )
    assert apply_import(text, store, roster, confirm=Confirmer(True)) is True

    ids = [t.id for t in store]
    assert ids[0] == "x"
    assert len(set(ids)) == 2

    store.set_status(ids[1], TaskStatus.DONE)
    assert [t.status for t in store] == [TaskStatus.TODO, TaskStatus.DONE]
