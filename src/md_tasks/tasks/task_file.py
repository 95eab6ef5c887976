# src/md_tasks/tasks/task_file.py

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def append_task_line(path: str | Path, line: str) -> None:
    """
    Append one task line to the markdown file, creating it if absent.

    The file is opened in append mode (O_APPEND) and the line is written with a
    single write call, so concurrent runs never interleave inside a line and
    never truncate each other. The parent directory must already exist.
    """
    path = Path(path)
    with path.open("a", encoding="utf-8", errors="surrogateescape") as f:
        f.write(line + "\n")
    logger.info("Appended task to %s", path)
