# src/raci_tracker/core/state.py

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from ..storage.persistence import save_theme
from ..tracker.roster import Roster
from ..tracker.task_store import TaskStore
from ..tracker.views import TaskFilter
from .ports import KeyValueStorage, LLMClient


@dataclass
class AppState:
    """
    Explicitly owned application state, passed to every command handler.

    Nothing here is a module global: bootstrap builds one AppState and hands
    it to the console; tests build their own.
    """

    settings: Any
    storage: KeyValueStorage
    llm: LLMClient
    store: TaskStore
    roster: Roster
    theme: str = "light"

    # Current list filter (like the filter tabs of a board).
    task_filter: TaskFilter = TaskFilter.ALL

    # Set while a plan request is in flight; further /plan submissions are refused.
    generating: bool = False

    # Asked before destructive actions (import overwrite). Console wires input().
    confirm: Callable[[str], bool] = field(default=lambda _prompt: False)

    detach_persistence: Callable[[], None] | None = None

    def toggle_theme(self) -> str:
        self.theme = "dark" if self.theme == "light" else "light"
        save_theme(self.storage, self.theme)
        return self.theme
