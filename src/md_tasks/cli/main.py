# src/md_tasks/cli/main.py

"""
CLI entrypoint.

Loads settings and the persisted config, initializes logging, then runs one
subcommand (create / delete / config) and returns the process exit code.
"""

from __future__ import annotations

import argparse
import contextlib
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from .. import __version__
from ..config import get_settings
from ..config_store import config_dir, load_config, resolve_config_path
from ..core.errors import ConfigDirError, NoTargetFileError, TasksError
from ..llm.client import OpenRouterCompletionClient
from ..logging_setup import setup_logging
from .commands import ClientFactory, cmd_config, cmd_create, cmd_delete

logger = logging.getLogger(__name__)

PROG = "tasks"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=PROG, description="CLI to manage Markdown Tasks")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", metavar="{create,delete,config}", required=True)

    # No -h and no abbreviations: content such as "-hurry" or "--fi" must not
    # match an option. Optional so that content starting with "-" can be
    # recovered from the leftovers.
    create_p = sub.add_parser("create", help="Create a new task.", add_help=False, allow_abbrev=False)
    create_p.add_argument("--help", action="help", help="show this help message and exit")
    create_p.add_argument("content", nargs="?", help="The content of the task to create.")
    create_p.add_argument(
        "--file",
        type=Path,
        metavar="PATH",
        help="Path of the file to use. Overrides the global config.",
    )

    sub.add_parser("delete", help="Delete a task (not yet implemented).")

    config_p = sub.add_parser("config", help="Manage application configuration.")
    config_p.add_argument(
        "--global-file",
        type=Path,
        metavar="PATH",
        required=True,
        help="Sets the global file path for all tasks.",
    )
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    args, extras = parser.parse_known_args(argv)

    if args.command == "create" and args.content is None and len(extras) == 1:
        # e.g. `tasks create -urgent-thing`: argparse sees an unknown option.
        args.content = extras.pop()

    if extras:
        parser.error(f"unrecognized arguments: {' '.join(extras)}")
    if args.command == "create" and args.content is None:
        parser.error("create: the following arguments are required: content")
    return args


def _init_logging(settings) -> None:
    level_name = str(getattr(settings, "log_level", "WARNING")).upper()
    console_level = getattr(logging, level_name, logging.WARNING)

    log_dir = getattr(settings, "log_dir", None)
    if log_dir is None:
        with contextlib.suppress(ConfigDirError):
            log_dir = config_dir(settings)

    try:
        setup_logging(log_dir=log_dir, console_level=console_level)
    except OSError as e:
        setup_logging(log_dir=None, console_level=console_level)
        logger.warning("File logging disabled (%s): %s", log_dir, e)


def _fail(err: Exception) -> int:
    logger.debug("Aborting: %s", err, exc_info=True)
    print(f"Error: {err}", file=sys.stderr)
    if isinstance(err, NoTargetFileError):
        print(err.hint, file=sys.stderr)
    return 1


def main(
    argv: Sequence[str] | None = None,
    *,
    settings=None,
    client_factory: ClientFactory | None = None,
) -> int:
    args = parse_args(argv)

    if settings is None:
        settings = get_settings()
    if client_factory is None:
        client_factory = OpenRouterCompletionClient

    _init_logging(settings)
    logger.debug("Starting %s %s command=%s", getattr(settings, "app_name", PROG), __version__, args.command)

    try:
        config_path = resolve_config_path(settings)
        config = load_config(config_path)

        if args.command == "create":
            cmd_create(
                args.content,
                args.file,
                config=config,
                settings=settings,
                client_factory=client_factory,
            )
        elif args.command == "delete":
            cmd_delete()
        elif args.command == "config":
            cmd_config(args.global_file, config=config, config_path=config_path)
    except (TasksError, OSError, UnicodeError) as e:
        return _fail(e)

    return 0


def run() -> None:
    """Console-script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
