# src/private_secretary/cli/commands.py

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from typing import cast

from ..core.state import AppState
from ..errors import SecretaryError, ValidationError
from ..tasks.task_models import Priority

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console panel (/help, /add, ...)."""

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

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        User-facing errors (validation, editor busy, ...) become the reply.
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
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)
            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except SecretaryError as e:
            logger.debug("/%s rejected: %s", name, e)
            return f"[!] {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _parse_time_span(raw: str) -> tuple[str, str | None]:
    """'09:00' -> ('09:00', None); '09:00-10:30' -> ('09:00', '10:30')."""
    start, sep, end = raw.partition("-")
    return start.strip(), (end.strip() or None) if sep else None


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    ctl = state.controller
    s = ctl.state
    editing = s.editing_task_id or "none"
    return (
        "Status:\n"
        f"  Selected date: {s.selected_date}\n"
        f"  Displayed month: {s.year}-{s.month:02d}\n"
        f"  Tasks stored: {state.task_store.count_tasks()}\n"
        f"  Editing: {editing}\n"
        f"  TickTick token: {ctl.token_display()}"
    )


def cmd_show(state: AppState, args: list[str]) -> str:
    state.controller.render()
    return ""


def cmd_prev(state: AppState, args: list[str]) -> str:
    state.controller.prev_month()
    return ""


def cmd_next(state: AppState, args: list[str]) -> str:
    state.controller.next_month()
    return ""


def cmd_today(state: AppState, args: list[str]) -> str:
    state.controller.go_today()
    return ""


def cmd_select(state: AppState, args: list[str]) -> str:
    """
    /select 2024-06-15  -> select a date
    /select 15          -> select a day of the displayed month
    """
    if not args:
        return "Usage: /select YYYY-MM-DD | /select <day>"
    ctl = state.controller
    raw = args[0]
    if raw.isdigit():
        raw = f"{ctl.state.year:04d}-{ctl.state.month:02d}-{int(raw):02d}"
    ctl.select_date(raw)
    return ""


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add [@YYYY-MM-DD] HH:MM[-HH:MM] <priority 1-4> <title...>
    """
    usage = "Usage: /add [@YYYY-MM-DD] HH:MM[-HH:MM] <priority 1-4> <title...>"
    date_str = None
    if args and args[0].startswith("@"):
        date_str = args[0][1:]
        args = args[1:]
    if len(args) < 3:
        return usage

    time, end_time = _parse_time_span(args[0])
    priority = Priority.parse(args[1])
    title = " ".join(args[2:])

    task = state.controller.add_task(title, time, end_time, priority, date_str=date_str)
    return f"Added: {task.title} ({task.date} {task.time})"


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <n|id>"
    ctl = state.controller
    ctl.toggle_complete(ctl.resolve_task_ref(args[0]))
    return ""


def cmd_delete(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /del <n|id>"
    ctl = state.controller
    task_id = ctl.resolve_task_ref(args[0])
    ctl.delete_task(task_id)
    return "Task deleted."


def cmd_edit(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /edit <n|id>"
    ctl = state.controller
    ctl.begin_edit(ctl.resolve_task_ref(args[0]))
    return "Editing. Use /set <field> <value>, then /save or /cancel."


_SET_FIELDS = {
    "title": "title",
    "date": "date",
    "time": "time",
    "start": "time",
    "end": "end_time",
    "until": "end_time",
    "priority": "priority",
    "prio": "priority",
}


def cmd_set(state: AppState, args: list[str]) -> str:
    """
    /set title <text...> | date YYYY-MM-DD | time HH:MM | end HH:MM|- | priority 1-4
    """
    if len(args) < 2 or args[0].lower() not in _SET_FIELDS:
        return "Usage: /set title|date|time|end|priority <value>  (end - clears the end time)"
    field_name = _SET_FIELDS[args[0].lower()]
    value = " ".join(args[1:]) if field_name == "title" else args[1]
    if field_name == "end_time" and value == "-":
        value = ""
    state.controller.update_draft(**{field_name: value})
    return ""


def cmd_save(state: AppState, args: list[str]) -> str:
    if state.controller.save_edit():
        return "Task updated."
    return "Task no longer exists; nothing saved."


def cmd_cancel(state: AppState, args: list[str]) -> str:
    state.controller.cancel_edit()
    return "Edit cancelled."


def cmd_token(state: AppState, args: list[str]) -> str:
    """
    /token            -> show (masked)
    /token show       -> reveal
    /token set <tok>  -> save
    /token clear      -> remove
    """
    ctl = state.controller
    if not args:
        return f"TickTick token: {ctl.token_display()}"
    sub = args[0].lower()
    if sub == "show":
        return f"TickTick token: {ctl.token_display(reveal=True)}"
    if sub == "set":
        if len(args) < 2:
            raise ValidationError("Usage: /token set <access token>")
        return ctl.save_token(args[1])
    if sub == "clear":
        return ctl.save_token("")
    return "Usage: /token [show | set <token> | clear]"


def cmd_sync(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if emit is not None:
        emit(f"Syncing {state.controller.state.selected_date} ...")
    report = asyncio.run(state.controller.sync_selected_day())
    lines = [report.text if report.ok else f"[!] {report.text}"]
    lines.extend(f"    {d}" for d in report.details)
    return "\n".join(lines)


def cmd_cleanup(state: AppState, args: list[str]) -> str:
    """/cleanup yes -> remove tasks older than the expiry window (irreversible)."""
    days = getattr(state.settings, "expiry_days", 7)
    if not args or args[0].lower() not in ("yes", "y"):
        return f"This permanently removes tasks older than {days} days. Confirm with /cleanup yes."
    removed = state.controller.cleanup_expired()
    if removed:
        return f"Removed {removed} expired task(s)."
    return "Nothing to clean up."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show selected date, task count and token state.")
registry.register("show", cmd_show, help_text="Redraw the calendar and task list.", aliases=["ls"])
registry.register("prev", cmd_prev, help_text="Previous month.")
registry.register("next", cmd_next, help_text="Next month.")
registry.register("today", cmd_today, help_text="Jump to today.")
registry.register("select", cmd_select, help_text="Select a date: /select YYYY-MM-DD | /select <day>.")
registry.register(
    "add", cmd_add, help_text="Add a task: /add [@date] HH:MM[-HH:MM] <1-4> <title>."
)
registry.register("done", cmd_done, help_text="Toggle completion: /done <n>.", aliases=["toggle"])
registry.register("del", cmd_delete, help_text="Delete a task: /del <n>.", aliases=["delete", "rm"])
registry.register("edit", cmd_edit, help_text="Open the editor for a task: /edit <n>.")
registry.register("set", cmd_set, help_text="Change a field in the open editor.")
registry.register("save", cmd_save, help_text="Save the open editor.")
registry.register("cancel", cmd_cancel, help_text="Close the editor without saving.")
registry.register("token", cmd_token, help_text="TickTick token: /token [show | set <t> | clear].")
registry.register("sync", cmd_sync, help_text="Push the selected day's open tasks to TickTick.")
registry.register("cleanup", cmd_cleanup, help_text="Remove expired tasks: /cleanup yes.")
