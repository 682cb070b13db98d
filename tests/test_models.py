# tests/test_models.py

from __future__ import annotations

import pytest

from raci_tracker.tracker.models import (
    ACTIVE_STATUSES,
    Active,
    Archived,
    RaciRoles,
    Task,
    TaskStatus,
)

from .conftest import make_task


@pytest.mark.parametrize("status", ACTIVE_STATUSES)
def test_archive_then_restore_returns_prior_status(status: TaskStatus) -> None:
    task = make_task("t1", status=status)

    archived = task.with_status(TaskStatus.ARCHIVED)
    assert archived.status is TaskStatus.ARCHIVED
    assert archived.previous_status is status

    restored = archived.restored()
    assert restored.status is status
    assert restored.previous_status is None


@pytest.mark.parametrize("target", ACTIVE_STATUSES)
def test_non_archive_transition_clears_previous_status(target: TaskStatus) -> None:
    archived = make_task("t1", status=TaskStatus.ARCHIVED, prior=TaskStatus.DONE)
    moved = archived.with_status(target)
    assert moved.status is target
    assert moved.previous_status is None


def test_rearchiving_keeps_original_prior_status() -> None:
    task = make_task("t1", status=TaskStatus.IN_PROGRESS).with_status(TaskStatus.ARCHIVED)
    again = task.with_status(TaskStatus.ARCHIVED)
    assert again.previous_status is TaskStatus.IN_PROGRESS


def test_restore_without_prior_goes_to_todo() -> None:
    task = make_task("t1", status=TaskStatus.ARCHIVED, prior=None)
    assert task.restored().status is TaskStatus.TODO


def test_active_lifecycle_rejects_archived() -> None:
    with pytest.raises(ValueError):
        Active(TaskStatus.ARCHIVED)


def test_raci_roles_dedupes_preserving_order() -> None:
    roles = RaciRoles(responsible=("Mike", "Sarah", "Mike"), consulted=("Legal", "Legal"))
    assert roles.responsible == ("Mike", "Sarah")
    assert roles.consulted == ("Legal",)
    assert roles.accountable == ""


def test_to_dict_uses_wire_shape() -> None:
    task = Task(
        id="abc",
        title="Ship",
        description="Ship it",
        lifecycle=Archived(TaskStatus.DONE),
        roles=RaciRoles(responsible=("Sarah",), accountable="CEO"),
        due_date="2024-02-01",
    )
    assert task.to_dict() == {
        "id": "abc",
        "title": "Ship",
        "description": "Ship it",
        "status": "ARCHIVED",
        "previousStatus": "DONE",
        "dueDate": "2024-02-01",
        "roles": {
            "responsible": ["Sarah"],
            "accountable": "CEO",
            "consulted": [],
            "informed": [],
        },
    }


def test_to_dict_omits_absent_optionals() -> None:
    data = make_task("t1").to_dict()
    assert "previousStatus" not in data
    assert "dueDate" not in data


def test_from_dict_ignores_previous_status_on_active_task() -> None:
    task = Task.from_dict({"id": "x", "title": "T", "status": "DONE", "previousStatus": "TODO"})
    assert task.status is TaskStatus.DONE
    assert task.previous_status is None


def test_from_dict_drops_invalid_due_date() -> None:
    task = Task.from_dict({"id": "x", "title": "T", "status": "TODO", "dueDate": "next week"})
    assert task.due_date is None


def test_from_dict_tolerates_sloppy_roles() -> None:
    task = Task.from_dict(
        {
            "id": "x",
            "title": "T",
            "status": "bogus",
            "roles": {"responsible": "Team", "accountable": ["PM", "CTO"], "informed": None},
        }
    )
    assert task.status is TaskStatus.TODO
    assert task.roles.responsible == ("Team",)
    assert task.roles.accountable == "PM"
    assert task.roles.informed == ()


def test_new_task_gets_unique_ids() -> None:
    a = Task.new(title="a")
    b = Task.new(title="b")
    assert a.id != b.id
    assert a.status is TaskStatus.TODO
