# src/task_storage/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from ..tasks.task_errors import StorageError
from ..tasks.task_models import Task
from ..tasks.task_store import TaskStore

CommandHandler = Callable[[TaskStore, list[str]], str]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the admin console (/help, /list, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, store: TaskStore, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            return handler(store, args)
        except StorageError as e:
            logger.warning("Command /%s failed: %s", name, e)
            return f"Error: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _ts_local(epoch: int) -> str:
    return datetime.fromtimestamp(epoch).astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _parse_id(raw: str) -> int | None:
    try:
        value = int(raw)
    except ValueError:
        return None
    return value if value >= 0 else None


def format_task(task: Task) -> str:
    assigned = "-" if task.assigned_id is None else str(task.assigned_id)
    state = f"closed {_ts_local(task.closed)}" if task.is_closed else "open"
    line = (
        f"#{task.id} [author={task.author_id} assigned={assigned}] {task.title} "
        f"(opened {_ts_local(task.opened)}, {state})"
    )
    if task.content:
        line += f"\n    {task.content}"
    return line


def _format_tasks(tasks: list[Task], empty: str) -> str:
    if not tasks:
        return empty
    return "\n".join(format_task(t) for t in tasks)


def cmd_help(store: TaskStore, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(store: TaskStore, args: list[str]) -> str:
    return _format_tasks(store.list_all(), "No tasks.")


def cmd_author(store: TaskStore, args: list[str]) -> str:
    author_id = _parse_id(args[0]) if args else None
    if author_id is None:
        return "Usage: /author <author_id>"
    return _format_tasks(store.list_by_author(author_id), f"No tasks by author {author_id}.")


def cmd_label(store: TaskStore, args: list[str]) -> str:
    label_id = _parse_id(args[0]) if args else None
    if label_id is None:
        return "Usage: /label <label_id>"
    return _format_tasks(store.list_by_label(label_id), f"No tasks with label {label_id}.")


def cmd_add(store: TaskStore, args: list[str]) -> str:
    """
    /add <author_id> <assigned_id|-> <title> | <content>
    """
    usage = "Usage: /add <author_id> <assigned_id|-> <title> | <content>"
    if len(args) < 3:
        return usage

    author_id = _parse_id(args[0])
    if author_id is None:
        return usage

    assigned_id: int | None = None
    if args[1] != "-":
        assigned_id = _parse_id(args[1])
        if assigned_id is None:
            return usage

    title, _, content = " ".join(args[2:]).partition("|")
    title = title.strip()
    if not title:
        return usage

    task_id = store.create(
        Task(author_id=author_id, assigned_id=assigned_id, title=title, content=content.strip())
    )
    return f"Created task #{task_id}."


def cmd_content(store: TaskStore, args: list[str]) -> str:
    task_id = _parse_id(args[0]) if args else None
    if task_id is None or len(args) < 2:
        return "Usage: /content <task_id> <text>"

    content = " ".join(args[1:])
    # author_id / title are not written by update_content().
    if store.update_content(Task(id=task_id, author_id=0, title="", content=content)):
        return f"Updated task #{task_id}."
    return f"No task #{task_id}."


def cmd_delete(store: TaskStore, args: list[str]) -> str:
    task_id = _parse_id(args[0]) if args else None
    if task_id is None:
        return "Usage: /delete <task_id>"
    if store.delete_by_id(task_id):
        return f"Deleted task #{task_id}."
    return f"No task #{task_id}."


def cmd_init(store: TaskStore, args: list[str]) -> str:
    store.ensure_schema()
    return "Schema ready."


def cmd_ping(store: TaskStore, args: list[str]) -> str:
    store.ping()
    return "Database is reachable."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="List all tasks.", aliases=["ls"])
registry.register("author", cmd_author, help_text="Tasks by author: /author <id>.")
registry.register("label", cmd_label, help_text="Tasks with a label: /label <id>.")
registry.register(
    "add", cmd_add, help_text="Create a task: /add <author> <assignee|-> <title> | <content>."
)
registry.register("content", cmd_content, help_text="Replace content: /content <id> <text>.")
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id>.", aliases=["rm"])
registry.register("init", cmd_init, help_text="Create missing tables.")
registry.register("ping", cmd_ping, help_text="Check database connectivity.")
