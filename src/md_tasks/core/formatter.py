# src/md_tasks/core/formatter.py

from __future__ import annotations

from datetime import datetime

from .ports import Improvement, Outcome

CHECKBOX = "- [ ] "
TASK_EMOJI = "📋"
CLOCK_EMOJI = "🕓"
TIMESTAMP_FORMAT = "%d/%m/%Y %H:%M"


def fallback_line(raw: str) -> str:
    """Line used when the completion service could not be reached at all."""
    return f"{CHECKBOX}{TASK_EMOJI}{raw}"


def status_fallback_line(raw: str) -> str:
    """Line used when the completion service answered with an error status."""
    return f"{CHECKBOX}{raw}"


def select_content(raw: str, improvement: Improvement) -> str:
    """Pick the task content for a completion outcome."""
    if improvement.outcome is Outcome.IMPROVED and improvement.text is not None:
        return improvement.text
    if improvement.outcome is Outcome.EMPTY:
        return raw
    if improvement.outcome is Outcome.API_ERROR:
        return status_fallback_line(raw)
    return fallback_line(raw)


def format_task_line(content: str, now: datetime | None = None) -> str:
    """`<content> - 🕓DD/MM/YYYY HH:MM` in local time."""
    if now is None:
        now = datetime.now()
    return f"{content} - {CLOCK_EMOJI}{now.strftime(TIMESTAMP_FORMAT)}"
