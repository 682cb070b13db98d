# src/raci_tracker/llm/client.py

from __future__ import annotations

import logging
import time
from typing import Any, Iterable

import httpx
import openai
from openai import OpenAI

from ..config import Settings
from ..core.ports import ChatMessage

logger = logging.getLogger(__name__)

# model -> retry_at (monotonic)
_BAD_MODELS: dict[str, float] = {}

_BAD_MODEL_COOLDOWN_SECONDS = 3600.0


def _is_auth_error(exc: Exception) -> bool:
    return isinstance(exc, openai.AuthenticationError | openai.PermissionDeniedError)


def _is_rate_limit_error(exc: Exception) -> bool:
    return isinstance(exc, openai.RateLimitError)


def _is_connection_error(exc: Exception) -> bool:
    # APITimeoutError is a subclass of APIConnectionError.
    return isinstance(exc, openai.APIConnectionError | httpx.TimeoutException)


def _is_not_found_error(exc: Exception) -> bool:
    return isinstance(exc, openai.NotFoundError)


def friendly_llm_error_message(err: Exception) -> str:
    msg = str(err).strip() or "LLM error."
    if "LLM API key is not set" in msg:
        return "AI Assist is not configured (missing API key). Set RACI_OPENROUTER_API_KEY in .env."
    if "LLM model list is empty" in msg:
        return "AI Assist is not configured (no models). Set RACI_LLM_MODELS in .env."
    if "LLM base URL is not set" in msg:
        return "AI Assist is not configured (missing base URL). Set RACI_OPENROUTER_BASE_URL in .env."
    return msg


def _close_stream(stream: Any) -> None:
    close = getattr(stream, "close", None)
    if callable(close):
        try:
            close()
        except Exception:
            logger.debug("Stream close failed.", exc_info=True)


class OpenRouterLLMClient:
    """
    OpenAI-compatible streaming chat client (OpenRouter by default).

    Behavior:
    - Tries models in the order from settings (RACI_LLM_MODELS).
    - 404 (model not available) -> remember for an hour, try next.
    - Rate limit / network issues -> try next.
    - Auth issues -> fail fast (no retries across models).
    - SDK retries are disabled so fallback across models stays quick.
    """

    def __init__(self, settings: Settings) -> None:
        api_key = (settings.openrouter_api_key or "").strip()
        base_url = (settings.openrouter_base_url or "").strip()

        if not api_key:
            raise RuntimeError("LLM API key is not set. Set RACI_OPENROUTER_API_KEY in your .env.")
        if not base_url:
            raise RuntimeError("LLM base URL is not set. Set RACI_OPENROUTER_BASE_URL in your .env.")

        self._models = [m.strip() for m in settings.llm_models if m and m.strip()]
        self._headers = dict(settings.extra_headers or {})
        self._timeout = httpx.Timeout(
            connect=settings.llm_connect_timeout,
            read=settings.llm_read_timeout,
            write=10.0,
            pool=settings.llm_connect_timeout,
        )
        self._client = OpenAI(
            base_url=base_url,
            api_key=api_key,
            timeout=self._timeout,
            max_retries=0,
        )

    def stream_chat(self, messages: list[ChatMessage], system_prompt: str) -> Iterable[str]:
        if not self._models:
            raise RuntimeError("LLM model list is empty. Set RACI_LLM_MODELS in your .env.")

        last_error: Exception | None = None
        now = time.monotonic()

        for model in self._models:
            retry_at = _BAD_MODELS.get(model)
            if retry_at is not None and retry_at > now:
                continue

            logger.info("LLM: trying model=%s", model)
            t0 = time.monotonic()
            stream = None
            used_any = False

            try:
                stream = self._client.chat.completions.create(
                    model=model,
                    stream=True,
                    extra_headers=self._headers or None,
                    messages=[{"role": "system", "content": system_prompt}, *messages],
                )

                for chunk in stream:
                    if not chunk.choices:
                        continue
                    delta = chunk.choices[0].delta
                    content = getattr(delta, "content", None) if delta is not None else None
                    if content:
                        if not used_any:
                            logger.info("LLM: first token from model=%s (%.2fs)", model, time.monotonic() - t0)
                        used_any = True
                        yield content

                if used_any:
                    logger.debug("LLM: completed with model=%s", model)
                    return

                last_error = RuntimeError(f"Model returned no content: {model}")

            except Exception as e:
                last_error = e

                if _is_auth_error(e):
                    raise RuntimeError(
                        "LLM authentication failed. Check your API key (RACI_OPENROUTER_API_KEY)."
                    ) from e

                if _is_not_found_error(e):
                    _BAD_MODELS[model] = time.monotonic() + _BAD_MODEL_COOLDOWN_SECONDS
                    logger.info("LLM: model not available (404): %s", model)
                    continue

                if _is_rate_limit_error(e):
                    logger.info("LLM: rate-limited on model=%s, trying next", model)
                    continue

                if _is_connection_error(e):
                    logger.info("LLM: network/timeout error on model=%s, trying next", model)
                    continue

                logger.info("LLM: error on model=%s (%s), trying next", model, e.__class__.__name__)
                continue

            finally:
                if stream is not None:
                    _close_stream(stream)

        if last_error is not None:
            if _is_rate_limit_error(last_error):
                raise RuntimeError("LLM is rate-limited. Try again later.") from last_error
            if _is_connection_error(last_error):
                raise RuntimeError("LLM network/timeout error. Try again later or change models.") from last_error
            raise RuntimeError("All LLM models failed.") from last_error

        raise RuntimeError("All LLM models failed.")
