# src/roi_tracker/cli/commands.py

from __future__ import annotations

import logging
import shlex
import time
from collections.abc import Callable

from ..core.state import AppState
from ..tasks.task_models import DerivedTask, Metrics

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)

# Short console names for task fields in key=value arguments.
ARG_FIELDS = {
    "title": "title",
    "revenue": "revenue",
    "rev": "revenue",
    "hours": "time_taken",
    "time": "time_taken",
    "priority": "priority",
    "prio": "priority",
    "status": "status",
    "notes": "notes",
    "note": "notes",
}


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /list, ...)."""

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

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError:
            # Unbalanced quotes: fall back to plain whitespace splitting.
            parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return handler(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def parse_fields(args: list[str]) -> tuple[dict[str, str], list[str]]:
    """Split args into key=value fields (known keys only) and leftover words."""
    fields: dict[str, str] = {}
    rest: list[str] = []
    for arg in args:
        key, sep, value = arg.partition("=")
        field = ARG_FIELDS.get(key.lower()) if sep else None
        if field is None:
            rest.append(arg)
            continue
        fields[field] = value
    return fields, rest


def expire_undo_window(state: AppState, now: float | None = None) -> bool:
    """Forget the pending undo once the window has passed. Returns True if it expired."""
    if state.deleted_at is None:
        return False
    if state.store.last_deleted is None:
        state.deleted_at = None
        return False

    now = time.monotonic() if now is None else now
    window = float(getattr(state.settings, "undo_window_seconds", 4.0))
    if now - state.deleted_at < window:
        return False

    state.store.clear_history()
    state.deleted_at = None
    logger.debug("Undo window expired.")
    return True


def _fmt_num(value: float) -> str:
    return f"{value:,.2f}"


def _fmt_roi(task: DerivedTask) -> str:
    return "-" if task.roi is None else _fmt_num(task.roi)


def format_task_row(pos: int, task: DerivedTask) -> str:
    return (
        f"{pos:>3}. {task.title[:38]:<38} "
        f"rev={_fmt_num(task.revenue):>12} h={task.time_taken:>6g} roi={_fmt_roi(task):>10} "
        f"{task.priority.value:<6} {task.status.value:<11} [{task.id}]"
    )


def format_metrics(m: Metrics) -> str:
    return (
        "Metrics:\n"
        f"  Total revenue:    {_fmt_num(m.total_revenue)}\n"
        f"  Total time (h):   {m.total_time_taken:g}\n"
        f"  Time efficiency:  {m.time_efficiency_pct:.1f}%\n"
        f"  Revenue per hour: {_fmt_num(m.revenue_per_hour)}\n"
        f"  Average ROI:      {_fmt_num(m.average_roi)}\n"
        f"  Grade:            {m.performance_grade.value}"
    )


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    store = state.store
    pending = store.last_deleted
    return (
        "Status:\n"
        f"  Store: {store.phase.value}\n"
        f"  Tasks: {len(store.tasks)}\n"
        f"  Load error: {store.error or '-'}\n"
        f"  Undo: {pending.title if pending else '-'}"
    )


def cmd_list(state: AppState, args: list[str]) -> str:
    limit = 20
    if args:
        try:
            limit = max(1, int(args[0]))
        except ValueError:
            return "Usage: /list [count]"

    rows = state.store.derived_sorted
    if not rows:
        return "No tasks."
    lines = [format_task_row(i, t) for i, t in enumerate(rows[:limit], start=1)]
    if len(rows) > limit:
        lines.append(f"... {len(rows) - limit} more")
    return "\n".join(lines)


def cmd_metrics(state: AppState, args: list[str]) -> str:
    return format_metrics(state.store.metrics)


def cmd_add(state: AppState, args: list[str]) -> str:
    fields, rest = parse_fields(args)
    if "title" not in fields and rest:
        fields["title"] = " ".join(rest)
    try:
        task_id = state.store.add_task(fields)
    except ValueError as e:
        return f"Cannot add task: {e}. Usage: /add <title> [revenue=N] [hours=N] [priority=P] [status=S]"
    return f"Added {task_id}."


def cmd_update(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /update <id> key=value ..."
    task_id, fields_args = args[0], args[1:]
    fields, rest = parse_fields(fields_args)
    if rest:
        return f"Unrecognized argument(s): {' '.join(rest)}"
    if not fields:
        return "Nothing to update."
    if state.store.get_task(task_id) is None:
        return f"No task {task_id}."
    try:
        state.store.update_task(task_id, fields)
    except ValueError as e:
        return f"Cannot update task: {e}."
    return f"Updated {task_id}."


def cmd_done(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /done <id>"
    if state.store.get_task(args[0]) is None:
        return f"No task {args[0]}."
    state.store.update_task(args[0], {"status": "Done"})
    return f"Marked {args[0]} as done."


def cmd_delete(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /delete <id>"
    task = state.store.get_task(args[0])
    if task is None:
        return f"No task {args[0]}."
    state.store.delete_task(task.id)
    state.deleted_at = time.monotonic()
    window = float(getattr(state.settings, "undo_window_seconds", 4.0))
    return f"Deleted \"{task.title}\". /undo within {window:g}s to restore."


def cmd_undo(state: AppState, args: list[str]) -> str:
    pending = state.store.last_deleted
    if pending is None:
        return "Nothing to undo."
    state.store.undo_delete()
    state.deleted_at = None
    return f"Restored \"{pending.title}\"."


registry.register("help", cmd_help, "Show this help", aliases=["h", "?"])
registry.register("status", cmd_status, "Store phase, task count, load error, pending undo")
registry.register("list", cmd_list, "Tasks ranked by ROI: /list [count]", aliases=["ls"])
registry.register("metrics", cmd_metrics, "Totals, efficiency, average ROI and grade", aliases=["m"])
registry.register("add", cmd_add, "Add a task: /add <title> [revenue=N] [hours=N] [priority=P] [status=S]")
registry.register("update", cmd_update, "Edit a task: /update <id> key=value ...", aliases=["edit"])
registry.register("done", cmd_done, "Mark a task as done: /done <id>")
registry.register("delete", cmd_delete, "Delete a task: /delete <id>", aliases=["rm"])
registry.register("undo", cmd_undo, "Restore the last deleted task")
