# src/md_tasks/core/errors.py

"""
Fatal errors for a single CLI run.

Each one carries the message shown to the user before the process exits with
status 1. Recoverable conditions (corrupt config, LLM failures) never raise.
"""

from __future__ import annotations


class TasksError(RuntimeError):
    """Base class for errors that abort the current command."""


class ConfigDirError(TasksError):
    def __init__(self, reason: str = "") -> None:
        msg = "Could not determine a valid configuration path for the application."
        if reason:
            msg = f"{msg} ({reason})"
        super().__init__(msg)


class MissingAPIKeyError(TasksError):
    def __init__(self) -> None:
        super().__init__("OPENROUTER_API_KEY environment variable not set.")


class NoTargetFileError(TasksError):
    hint = (
        "Please specify a file with --file <PATH>, or set a global default with:\n"
        "tasks config --global-file <PATH>"
    )

    def __init__(self) -> None:
        super().__init__("No file path provided.")
