# src/md_tasks/core/ports.py

"""
Ports (interfaces) used by the CLI.

Commands depend on the CompletionClient protocol instead of the OpenRouter
client, so tests can swap in a deterministic fake.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol


class Outcome(StrEnum):
    """How a completion attempt ended."""

    IMPROVED = "improved"  # first choice returned, text holds it (trimmed)
    EMPTY = "empty"  # service answered with no choices
    API_ERROR = "api_error"  # service answered with a non-success status
    UNAVAILABLE = "unavailable"  # service unreachable or response undecodable


@dataclass(frozen=True, slots=True)
class Improvement:
    outcome: Outcome
    text: str | None = None
    detail: str = ""

    @property
    def improved(self) -> bool:
        return self.outcome is Outcome.IMPROVED


class CompletionClient(Protocol):
    """Rewrites a raw task into a single markdown task line."""
    def improve(self, raw: str) -> Improvement: ...
