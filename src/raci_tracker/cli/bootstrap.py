# src/raci_tracker/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (storage/LLM/store/roster),
- loads persisted state and attaches write-through persistence.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import KeyValueStorage, LLMClient
from ..core.state import AppState
from ..llm.client import OpenRouterLLMClient, friendly_llm_error_message
from ..llm.offline import OfflineLLMClient
from ..storage.local_storage import LocalStorage
from ..storage.persistence import attach_persistence, load_roster, load_tasks, load_theme
from ..tracker.roster import Roster
from ..tracker.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.storage_path.parent.mkdir(parents=True, exist_ok=True)


def build_llm_client(settings) -> LLMClient:
    try:
        return OpenRouterLLMClient(settings)
    except RuntimeError as e:
        reason = friendly_llm_error_message(e)
        logger.info("AI Assist disabled: %s", reason)
        return OfflineLLMClient(reason)


def create_initial_state(
    *,
    settings=None,
    storage: KeyValueStorage | None = None,
    llm: LLMClient | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings/storage/llm injectable makes the app easier to test and
    avoids hidden global config reads. If settings is None, falls back to
    get_settings().
    """
    if settings is None:
        settings = get_settings()

    if storage is None:
        _ensure_local_dirs(settings)
        storage = LocalStorage(settings.storage_path)

    if llm is None:
        llm = build_llm_client(settings)

    store = TaskStore(load_tasks(storage))
    roster = Roster(load_roster(storage))
    theme = load_theme(storage, default=getattr(settings, "default_theme", "light"))

    state = AppState(
        settings=settings,
        storage=storage,
        llm=llm,
        store=store,
        roster=roster,
        theme=theme,
    )
    state.detach_persistence = attach_persistence(storage, store, roster)

    logger.info("State loaded: tasks=%d roster=%d theme=%s", len(store), len(roster), theme)
    return state
