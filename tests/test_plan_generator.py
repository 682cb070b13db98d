# tests/test_plan_generator.py

from __future__ import annotations

import json
from types import SimpleNamespace

import pytest

from raci_tracker.cli.bootstrap import build_llm_client
from raci_tracker.llm.offline import OfflineLLMClient
from raci_tracker.planning.plan_generator import add_generated_tasks, generate_raci_plan
from raci_tracker.tracker.models import TaskStatus
from raci_tracker.tracker.task_store import TaskStore

from .conftest import make_task
from .fakes import FailingLLMClient, FakeLLMClient

PLAN = [
    {
        "title": "Define scope",
        "description": "Agree on launch scope.",
        "roles": {
            "responsible": ["Product Manager"],
            "accountable": "Head of Product",
            "consulted": ["Engineering"],
            "informed": ["Sales"],
        },
    },
    {
        "title": "Build landing page",
        "description": "Design and ship the page.",
        "roles": {
            "responsible": ["Design Team", "Dev Team"],
            "accountable": "CTO",
            "consulted": ["Marketing"],
            "informed": ["All Staff"],
        },
    },
    {
        "title": "Announce",
        "description": "Send the announcement.",
        "roles": {"responsible": ["Marketing"], "accountable": "CMO", "consulted": [], "informed": ["Customers"]},
    },
]


def test_generates_suggestions_from_json_reply() -> None:
    llm = FakeLLMClient("Sure! Here is the plan:\n```json\n" + json.dumps(PLAN) + "\n```")

    suggestions = generate_raci_plan(llm, "  Launch the new website  ")

    assert [s.title for s in suggestions] == ["Define scope", "Build landing page", "Announce"]
    assert suggestions[1].roles.responsible == ("Design Team", "Dev Team")
    assert suggestions[1].roles.accountable == "CTO"

    (messages, system_prompt), = llm.calls
    assert "RACI" in system_prompt
    assert 'Project Goal: "Launch the new website"' in messages[0]["content"]


def test_accepts_tasks_wrapper_object() -> None:
    llm = FakeLLMClient(json.dumps({"tasks": PLAN[:1]}))
    assert [s.title for s in generate_raci_plan(llm, "goal")] == ["Define scope"]


def test_blank_goal_does_not_call_llm() -> None:
    llm = FakeLLMClient(json.dumps(PLAN))
    assert generate_raci_plan(llm, "   ") == []
    assert llm.calls == []


def test_collaborator_failure_yields_nothing_and_store_is_unchanged() -> None:
    store = TaskStore([make_task("a")])
    llm = FailingLLMClient()

    suggestions = generate_raci_plan(llm, "Launch")
    add_generated_tasks(store, suggestions)

    assert suggestions == []
    assert llm.calls == 1
    assert len(store) == 1


def test_malformed_reply_yields_nothing() -> None:
    assert generate_raci_plan(FakeLLMClient("I cannot help with that."), "Launch") == []
    assert generate_raci_plan(FakeLLMClient('{"title": "x"}'), "Launch") == []
    assert generate_raci_plan(FakeLLMClient(""), "Launch") == []


def test_missing_credentials_yield_nothing() -> None:
    assert generate_raci_plan(OfflineLLMClient(), "Launch") == []


def test_accepted_suggestions_become_todo_tasks_with_fresh_ids() -> None:
    store = TaskStore([make_task("a", status=TaskStatus.DONE)])
    suggestions = generate_raci_plan(FakeLLMClient(json.dumps(PLAN)), "Launch")

    created = add_generated_tasks(store, suggestions)

    assert len(store) == 4
    assert all(t.status is TaskStatus.TODO for t in created)
    assert len({t.id for t in store}) == 4
    assert created[0].roles.informed == ("Sales",)


def test_missing_api_key_falls_back_to_offline_with_readable_reason() -> None:
    settings = SimpleNamespace(openrouter_api_key="", openrouter_base_url="https://openrouter.ai/api/v1")

    llm = build_llm_client(settings)

    assert isinstance(llm, OfflineLLMClient)
    assert llm.reason.startswith("AI Assist is not configured (missing API key)")
    with pytest.raises(RuntimeError, match="missing API key"):
        llm.stream_chat([{"role": "user", "content": "hi"}], "system")
    assert generate_raci_plan(llm, "Launch") == []
