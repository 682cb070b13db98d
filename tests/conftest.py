# tests/conftest.py

from __future__ import annotations

from datetime import date
from pathlib import Path
from types import SimpleNamespace

import pytest

from raci_tracker.cli.bootstrap import create_initial_state
from raci_tracker.core.state import AppState
from raci_tracker.storage.local_storage import LocalStorage
from raci_tracker.tracker.models import Active, Archived, RaciRoles, Task, TaskStatus

from .fakes import FakeLLMClient


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and commands.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="RACI Test",
        data_dir=tmp_path,
        storage_path=tmp_path / "storage.sqlite3",
        export_dir=tmp_path / "exports",
        default_theme="light",
    )


@pytest.fixture()
def storage(settings: SimpleNamespace) -> LocalStorage:
    return LocalStorage(settings.storage_path)


@pytest.fixture()
def llm() -> FakeLLMClient:
    return FakeLLMClient()


@pytest.fixture()
def state(settings: SimpleNamespace, storage: LocalStorage, llm: FakeLLMClient) -> AppState:
    """
    AppState wired with a fake LLM.

    NOTE: storage is the real SQLite LocalStorage, because write-through
    persistence is part of what we want to test.
    """
    return create_initial_state(settings=settings, storage=storage, llm=llm)


@pytest.fixture()
def today() -> date:
    return date(2024, 1, 5)


def make_task(
    task_id: str,
    title: str = "",
    *,
    status: TaskStatus = TaskStatus.TODO,
    prior: TaskStatus | None = None,
    due_date: str | None = None,
    roles: RaciRoles | None = None,
) -> Task:
    lifecycle = Archived(prior) if status is TaskStatus.ARCHIVED else Active(status)
    return Task(
        id=task_id,
        title=title or f"task {task_id}",
        lifecycle=lifecycle,
        due_date=due_date,
        roles=roles or RaciRoles(),
    )
