# tests/conftest.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from md_tasks.config import DEFAULT_MODEL, Settings
from md_tasks.logging_setup import _ConsoleNoiseFilter

from .fakes import FakeCompletionClient


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """
    Settings with every local path under tmp_path and a dummy API key.

    Built directly rather than via from_env() so the developer's environment
    (and any .env file) cannot leak into the tests.
    """
    return Settings(
        app_name="tasks",
        log_level="WARNING",
        openrouter_api_key="sk-test",
        openrouter_base_url="https://openrouter.test/api/v1",
        llm_model=DEFAULT_MODEL,
        llm_max_tokens=100,
        llm_timeout=None,
        extra_headers={},
        config_dir=tmp_path / "config",
        log_dir=tmp_path / "logs",
    )


@pytest.fixture()
def fake_client() -> FakeCompletionClient:
    return FakeCompletionClient()


@pytest.fixture()
def task_file(tmp_path: Path) -> Path:
    return tmp_path / "todo.md"


@pytest.fixture(autouse=True)
def _reset_logging():
    """main() reconfigures the root logger; drop its handlers after each test."""
    yield
    root = logging.getLogger()
    for h in list(root.handlers):
        if isinstance(h, logging.FileHandler) or any(isinstance(f, _ConsoleNoiseFilter) for f in h.filters):
            root.removeHandler(h)
            h.close()
    root.setLevel(logging.WARNING)
    logging.captureWarnings(False)
