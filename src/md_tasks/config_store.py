# src/md_tasks/config_store.py

"""
Persisted user configuration (config.json in the per-user config directory).

Loading is forgiving: a missing or corrupt file yields the defaults.
Saving replaces the whole file atomically (temp file + os.replace).
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from platformdirs import user_config_path

from .core.errors import ConfigDirError

logger = logging.getLogger(__name__)

APP_NAME = "TasksCLI"
APP_AUTHOR = "org"
CONFIG_FILENAME = "config.json"


@dataclass(slots=True)
class TasksConfig:
    global_file: Path | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"global_file": str(self.global_file) if self.global_file is not None else None}

    @classmethod
    def from_dict(cls, data: Any) -> TasksConfig:
        """Decode a parsed JSON value; raises ValueError if the shape is wrong."""
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        raw = data.get("global_file")
        if raw is None:
            return cls()
        if not isinstance(raw, str):
            raise ValueError(f"global_file must be a string or null, got {type(raw).__name__}")
        return cls(global_file=Path(raw))


def config_dir(settings=None) -> Path:
    override = getattr(settings, "config_dir", None)
    if override:
        return Path(override)
    try:
        return user_config_path(appname=APP_NAME, appauthor=APP_AUTHOR)
    except (OSError, RuntimeError) as e:
        # e.g. no resolvable home directory
        raise ConfigDirError(str(e)) from e


def resolve_config_path(settings=None) -> Path:
    """Return <config dir>/config.json, creating the directory if needed."""
    directory = config_dir(settings)
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigDirError(f"{directory}: {e.strerror or e}") from e
    return directory / CONFIG_FILENAME


def load_config(path: Path) -> TasksConfig:
    if not path.exists():
        return TasksConfig()

    raw = path.read_bytes()
    try:
        return TasksConfig.from_dict(json.loads(raw.decode("utf-8")))
    except (UnicodeDecodeError, ValueError) as e:
        # json.JSONDecodeError is a ValueError too.
        logger.warning("Could not parse config file %s, using default. Error: %s", path, e)
        return TasksConfig()


def save_config(path: Path, config: TasksConfig) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(".tmp")
    tmp.write_text(json.dumps(config.to_dict(), ensure_ascii=False, indent=2), "utf-8")
    os.replace(tmp, path)
    logger.debug("Saved config to %s", path)
