# tests/fakes.py

from __future__ import annotations

from collections.abc import Iterable

from raci_tracker.core.ports import ChatMessage


class FakeLLMClient:
    """
    Deterministic LLM client for unit tests.

    - Captures calls for assertions
    - Yields a predefined text split into a few chunks (like a stream)
    """

    def __init__(self, next_text: str = "[]") -> None:
        self.next_text = next_text
        self.calls: list[tuple[list[ChatMessage], str]] = []

    def stream_chat(self, messages: list[ChatMessage], system_prompt: str) -> Iterable[str]:
        self.calls.append((messages, system_prompt))
        step = max(1, len(self.next_text) // 3)
        for i in range(0, len(self.next_text), step):
            yield self.next_text[i : i + step]


class FailingLLMClient:
    """LLM client whose stream breaks midway, like a dropped connection."""

    def __init__(self, exc: Exception | None = None) -> None:
        self.exc = exc or ConnectionError("network down")
        self.calls = 0

    def stream_chat(self, messages: list[ChatMessage], system_prompt: str) -> Iterable[str]:
        self.calls += 1
        yield '[{"title": "half'
        raise self.exc


class Confirmer:
    """Records confirmation prompts and answers with a fixed value."""

    def __init__(self, answer: bool) -> None:
        self.answer = answer
        self.prompts: list[str] = []

    def __call__(self, prompt: str) -> bool:
        self.prompts.append(prompt)
        return self.answer
