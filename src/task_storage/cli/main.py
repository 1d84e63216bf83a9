# src/task_storage/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds the TaskStore from settings, then either runs a
single slash command given on the command line or an interactive console.
"""

from __future__ import annotations

import logging
import sys

from ..config import Settings, get_settings
from ..logging_setup import setup_logging
from ..tasks.task_errors import StorageConnectionError
from ..tasks.task_store import TaskStore
from .commands import registry as command_registry

logger = logging.getLogger(__name__)


def run_console_loop(store: TaskStore) -> None:
    logger.info("Console started.")
    print("Type /help for commands. Use /exit to quit.")

    while True:
        try:
            line = input("taskstore> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not line:
            continue

        if line.lower() in ("/exit", "/quit"):
            break

        reply = command_registry.handle(store, line)
        if reply is None:
            reply = "Commands start with '/'. Use /help to list them."
        print(reply)

    logger.info("Console finished.")


def main(argv: list[str] | None = None, *, settings: Settings | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    if settings is None:
        settings = get_settings()

    level_name = str(settings.log_level).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    # Also creates data_dir, where the default SQLite database lives.
    setup_logging(log_dir=settings.data_dir, console_level=console_level, sql_echo=settings.sql_echo)

    try:
        store = TaskStore.from_settings(settings)
    except StorageConnectionError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    with store:
        if argv:
            line = " ".join(argv)
            if not line.startswith("/"):
                line = "/" + line
            reply = command_registry.handle(store, line)
            print(reply)
            return 1 if reply and reply.startswith("Error:") else 0

        run_console_loop(store)
    return 0


if __name__ == "__main__":
    sys.exit(main())
