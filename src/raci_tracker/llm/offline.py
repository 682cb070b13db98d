# src/raci_tracker/llm/offline.py

from __future__ import annotations

from collections.abc import Iterable

from ..core.ports import ChatMessage


class OfflineLLMClient:
    """
    Stand-in client used when no external API is configured.

    Every request fails with the configuration error, so AI Assist reports
    "not configured" instead of inventing tasks.
    """

    def __init__(self, reason: str = "LLM API key is not set. Set RACI_OPENROUTER_API_KEY in your .env.") -> None:
        self.reason = reason

    def stream_chat(self, messages: list[ChatMessage], system_prompt: str) -> Iterable[str]:
        raise RuntimeError(self.reason)
