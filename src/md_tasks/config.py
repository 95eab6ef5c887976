# src/md_tasks/config.py

"""Runtime settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object per process, injectable everywhere it is used.
- No secrets required at import time (the API key is checked by the LLM client).
- The persisted user configuration (global task file) lives in config_store.py,
  not here: these settings describe the environment, not user choices.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

ENV_PREFIX = "TASKS"

DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_MODEL = "google/gemini-2.0-flash-001"
DEFAULT_MAX_TOKENS = 100


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


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str) -> float | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return float(raw)
    except ValueError:
        return None


def _env_path(name: str) -> Path | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- LLM / OpenRouter ----
    openrouter_api_key: str | None
    openrouter_base_url: str
    llm_model: str
    llm_max_tokens: int
    llm_timeout: float | None
    extra_headers: dict[str, str]

    # ---- Local paths (None => platform defaults) ----
    config_dir: Path | None
    log_dir: Path | None

    @staticmethod
    def from_env() -> Settings:
        app_name = _env(_k("APP_NAME"), "tasks")
        log_level = _env(_k("LOG_LEVEL"), "WARNING")

        # The bare OPENROUTER_API_KEY is the documented name; the prefixed one wins if both exist.
        openrouter_api_key = _first_env(_k("OPENROUTER_API_KEY"), "OPENROUTER_API_KEY", default=None)
        openrouter_base_url = _env(_k("OPENROUTER_BASE_URL"), DEFAULT_BASE_URL)

        # OpenRouter metadata headers are optional; send only what is configured.
        extra_headers: dict[str, str] = {}
        http_referer = _env(_k("HTTP_REFERER")).strip()
        if http_referer:
            extra_headers["HTTP-Referer"] = http_referer
        title = _env(_k("APP_TITLE")).strip()
        if title:
            extra_headers["X-Title"] = title

        return Settings(
            app_name=app_name,
            log_level=log_level,
            openrouter_api_key=openrouter_api_key,
            openrouter_base_url=openrouter_base_url,
            llm_model=_env(_k("LLM_MODEL"), DEFAULT_MODEL),
            llm_max_tokens=_env_int(_k("LLM_MAX_TOKENS"), DEFAULT_MAX_TOKENS),
            llm_timeout=_env_float(_k("LLM_TIMEOUT_SECONDS")),
            extra_headers=extra_headers,
            config_dir=_env_path(_k("CONFIG_DIR")),
            log_dir=_env_path(_k("LOG_DIR")),
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    """Build settings on first use (loading .env without overriding real env vars)."""
    global _SETTINGS
    if _SETTINGS is None:
        load_dotenv(find_dotenv(usecwd=True), override=False)
        _SETTINGS = Settings.from_env()
    return _SETTINGS
