# src/md_tasks/cli/commands.py

"""
Subcommand handlers.

Each handler takes its inputs explicitly (parsed args, loaded config, settings,
client factory) and returns nothing; fatal conditions raise TasksError.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from ..config_store import TasksConfig, save_config
from ..core.errors import NoTargetFileError
from ..core.formatter import format_task_line, select_content
from ..core.ports import CompletionClient
from ..tasks.task_file import append_task_line

logger = logging.getLogger(__name__)

ClientFactory = Callable[[object], CompletionClient]


def resolve_target(file_arg: Path | None, config: TasksConfig) -> Path:
    """Explicit --file wins over the stored global file."""
    if file_arg is not None:
        return file_arg
    if config.global_file is not None:
        return config.global_file
    raise NoTargetFileError()


def cmd_create(
    content: str,
    file_arg: Path | None,
    *,
    config: TasksConfig,
    settings: object,
    client_factory: ClientFactory,
    now: datetime | None = None,
) -> str:
    """Improve, format and append one task. Returns the line written."""
    path = resolve_target(file_arg, config)

    # Raises MissingAPIKeyError before anything touches the network or the file.
    client = client_factory(settings)

    print("🤖 Calling LLM to improve the task... please wait.")
    improvement = client.improve(content)
    if not improvement.improved:
        logger.info("Using fallback content (%s) %s", improvement.outcome, improvement.detail)

    improved_content = select_content(content, improvement)
    line = format_task_line(improved_content, now)
    append_task_line(path, line)

    print(f"\n✅ Successfully added improved task to {str(path)!r}")
    print(f"   > {improved_content}")
    return line


def cmd_delete() -> None:
    # Not implemented yet: no file is touched.
    print("Delete Task")


def cmd_config(global_file: Path, *, config: TasksConfig, config_path: Path) -> TasksConfig:
    config.global_file = global_file
    save_config(config_path, config)
    print(f"Global file path successfully set to: {str(global_file)!r}")
    return config
