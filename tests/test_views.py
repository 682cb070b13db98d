# tests/test_views.py

from __future__ import annotations

import pytest

from raci_tracker.tracker.models import TaskStatus
from raci_tracker.tracker.views import TaskFilter, visible_tasks

from .conftest import make_task


@pytest.fixture()
def tasks():
    return [
        make_task("1", status=TaskStatus.TODO),
        make_task("2", status=TaskStatus.ARCHIVED, prior=TaskStatus.DONE),
        make_task("3", status=TaskStatus.IN_PROGRESS, due_date="2024-03-01"),
        make_task("4", status=TaskStatus.DONE),
        make_task("5", status=TaskStatus.TODO, due_date="2024-01-15"),
        make_task("6", status=TaskStatus.ARCHIVED, prior=None, due_date="2023-12-31"),
        make_task("7", status=TaskStatus.TODO),
    ]


def test_all_and_archived_partition_the_store(tasks) -> None:
    active = visible_tasks(tasks, TaskFilter.ALL)
    archived = visible_tasks(tasks, TaskFilter.ARCHIVED)

    assert all(t.status is not TaskStatus.ARCHIVED for t in active)
    assert all(t.status is TaskStatus.ARCHIVED for t in archived)
    assert sorted(t.id for t in active + archived) == sorted(t.id for t in tasks)


def test_status_filter_is_exact(tasks) -> None:
    assert [t.id for t in visible_tasks(tasks, TaskFilter.TODO)] == ["5", "1", "7"]
    assert [t.id for t in visible_tasks(tasks, TaskFilter.DONE)] == ["4"]
    assert [t.id for t in visible_tasks(tasks, TaskFilter.IN_PROGRESS)] == ["3"]


def test_sorted_by_due_date_then_undated_in_store_order(tasks) -> None:
    assert [t.id for t in visible_tasks(tasks, TaskFilter.ALL)] == ["5", "3", "1", "4", "7"]


def test_undated_tasks_keep_relative_order() -> None:
    tasks = [make_task("z"), make_task("a", due_date="2024-01-01"), make_task("m")]
    assert [t.id for t in visible_tasks(tasks)] == ["a", "z", "m"]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, TaskFilter.ALL),
        ("all", TaskFilter.ALL),
        ("in-progress", TaskFilter.IN_PROGRESS),
        ("In Progress", TaskFilter.IN_PROGRESS),
        ("archived", TaskFilter.ARCHIVED),
    ],
)
def test_filter_parse(raw, expected) -> None:
    assert TaskFilter.parse(raw) is expected


def test_filter_parse_rejects_unknown() -> None:
    with pytest.raises(ValueError):
        TaskFilter.parse("someday")
