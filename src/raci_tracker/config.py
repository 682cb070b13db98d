# src/raci_tracker/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time (the LLM key is only needed for /plan).
- Modules receive settings by injection; get_settings() is for the entrypoint.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "RACI"

THEMES = ("light", "dark")

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    return [p.strip() for p in raw.replace(",", " ").split() if p.strip()]


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths ----
    data_dir: Path
    storage_path: Path
    export_dir: Path

    # ---- UI preferences ----
    default_theme: str

    # ---- LLM / OpenRouter ----
    openrouter_api_key: str | None
    openrouter_base_url: str
    llm_models: list[str]
    extra_headers: dict[str, str]
    llm_connect_timeout: float
    llm_read_timeout: float

    @staticmethod
    def from_env() -> Settings:
        app_name = _env(_k("APP_NAME"), "RACI Task Master") or "RACI Task Master"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/raci"))
        storage_path = _env_path(_k("STORAGE_PATH"), data_dir / "storage.sqlite3")
        export_dir = _env_path(_k("EXPORT_DIR"), Path("."))

        default_theme = _env(_k("THEME"), "light").strip().lower()
        if default_theme not in THEMES:
            default_theme = "light"

        openrouter_api_key = _first_env(_k("OPENROUTER_API_KEY"), "OPENROUTER_API_KEY", default=None)
        openrouter_base_url = _env(_k("OPENROUTER_BASE_URL"), "https://openrouter.ai/api/v1")

        extra_headers = {
            "HTTP-Referer": _env(_k("HTTP_REFERER"), "https://example.com"),
            "X-Title": _env(_k("APP_TITLE"), app_name),
        }

        llm_models = _env_list(
            _k("LLM_MODELS"),
            [
                "google/gemini-2.0-flash-001",
                "deepseek/deepseek-chat-v3-0324:free",
                "qwen/qwen-2.5-72b-instruct:free",
            ],
        )

        llm_connect_timeout = _env_float(_k("LLM_CONNECT_TIMEOUT_SECONDS"), 5.0)
        llm_read_timeout = _env_float(_k("LLM_READ_TIMEOUT_SECONDS"), 60.0)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            storage_path=storage_path,
            export_dir=export_dir,
            default_theme=default_theme,
            openrouter_api_key=openrouter_api_key,
            openrouter_base_url=openrouter_base_url,
            llm_models=llm_models,
            extra_headers=extra_headers,
            llm_connect_timeout=llm_connect_timeout,
            llm_read_timeout=llm_read_timeout,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
