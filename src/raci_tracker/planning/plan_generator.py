# src/raci_tracker/planning/plan_generator.py

"""
AI Assist: turn a free-text project goal into suggested RACI tasks.

The LLM is an opaque collaborator behind the LLMClient port. Any failure
(missing credentials, network, malformed output) is logged and yields an
empty list; callers treat [] as "nothing was generated" and say so.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from ..core.ports import LLMClient
from ..tracker.models import PlanSuggestion, RaciRoles, Task
from ..tracker.task_store import TaskStore

logger = logging.getLogger(__name__)

PLAN_SYSTEM_PROMPT = """
You are a project management expert specializing in the RACI matrix
(Responsible, Accountable, Consulted, Informed).

Break the user's project goal into a list of specific, actionable tasks.
For each task, assign hypothetical RACI roles (using generic job titles or 'Team').
Produce at least 3 and at most 5 tasks.

Reply with a JSON array only, no prose, no code fences. Each element:
{
  "title": string,
  "description": string,
  "roles": {
    "responsible": [string, ...],
    "accountable": string,
    "consulted": [string, ...],
    "informed": [string, ...]
  }
}
""".strip()


def _extract_json_array(raw: str) -> str:
    raw = raw.strip()
    if raw.startswith("[") and raw.endswith("]"):
        return raw
    first = raw.find("[")
    last = raw.rfind("]")
    if first != -1 and last != -1 and last > first:
        return raw[first : last + 1]
    return raw


def _parse_suggestions(raw: str) -> list[PlanSuggestion]:
    try:
        data: Any = json.loads(_extract_json_array(raw))
    except json.JSONDecodeError:
        # Some models wrap the array: {"tasks": [...]}
        data = json.loads(raw.strip())

    if isinstance(data, dict):
        data = data.get("tasks")
    if not isinstance(data, list):
        raise ValueError(f"Plan response is not a JSON array (got {type(data).__name__})")

    out: list[PlanSuggestion] = []
    for item in data:
        if not isinstance(item, dict):
            continue
        out.append(
            PlanSuggestion(
                title=str(item.get("title") or "").strip(),
                description=str(item.get("description") or "").strip(),
                roles=RaciRoles.from_dict(item.get("roles")),
            )
        )
    return out


def generate_raci_plan(llm: LLMClient, goal: str) -> list[PlanSuggestion]:
    goal = (goal or "").strip()
    if not goal:
        return []

    user_message = f'Project Goal: "{goal}"'

    raw = ""
    try:
        for piece in llm.stream_chat([{"role": "user", "content": user_message}], PLAN_SYSTEM_PROMPT):
            raw += piece
    except Exception:
        logger.exception("Failed to generate RACI plan (LLM call).")
        return []

    if not raw.strip():
        logger.warning("RACI plan: empty response from LLM.")
        return []

    try:
        suggestions = _parse_suggestions(raw)
    except (ValueError, json.JSONDecodeError):
        logger.exception("Failed to parse RACI plan. Raw=%r", raw[:2000])
        return []

    logger.info("RACI plan generated: %d suggestions for goal=%r", len(suggestions), goal[:200])
    return suggestions


def add_generated_tasks(store: TaskStore, suggestions: list[PlanSuggestion]) -> list[Task]:
    """Append accepted suggestions as TODO tasks with fresh ids."""
    return store.create_many(s.to_task() for s in suggestions)
