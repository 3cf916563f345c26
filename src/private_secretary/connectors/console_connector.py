# src/private_secretary/connectors/console_connector.py

from __future__ import annotations

import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..tasks.task_models import Priority
from ..ui.controller import PanelView
from ..views.calendar_view import CalendarCell, CalendarGrid
from ..views.task_list_view import EditForm, TaskListModel

logger = logging.getLogger(__name__)

# One marker per quadrant; a day shows one marker per distinct priority.
PRIORITY_MARKERS: dict[str, str] = {
    Priority.URGENT_IMPORTANT.value: "!",
    Priority.NOT_URGENT_IMPORTANT.value: "+",
    Priority.URGENT_NOT_IMPORTANT.value: "~",
    Priority.NOT_URGENT_NOT_IMPORTANT.value: ".",
}


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def _format_cell(cell: CalendarCell) -> str:
    if cell.is_empty:
        return " " * 8
    marks = "".join(PRIORITY_MARKERS.get(p, "?") for p in cell.priorities)
    left = "[" if cell.is_selected else ("(" if cell.is_today else " ")
    right = "]" if cell.is_selected else (")" if cell.is_today else " ")
    return f"{left}{cell.day:>2}{right}{marks[:4]:<4}"


def render_calendar_text(title: str, grid: CalendarGrid) -> str:
    lines = [title.center(8 * 7).rstrip()]
    lines.append("".join(f" {h:<7}" for h in grid.headers).rstrip())
    for week in grid.weeks():
        lines.append("".join(_format_cell(c) for c in week).rstrip())
    return "\n".join(lines)


def render_task_list_text(model: TaskListModel, edit_form: EditForm | None = None) -> str:
    lines = [model.heading]
    if model.is_empty:
        lines.append(f"  {model.empty_text}")
        return "\n".join(lines)

    for i, item in enumerate(model.items, start=1):
        if edit_form is not None and edit_form.task_id == item.task_id:
            lines.append(render_edit_form_text(edit_form, index=i))
            continue
        check = "x" if item.completed else " "
        synced = " (synced)" if item.synced else ""
        mark = PRIORITY_MARKERS.get(item.priority, "?")
        lines.append(
            f"  {i:>2}. [{check}] {item.time_display:<13} {mark} {item.title}{synced}"
            f"  <{item.priority_label}>"
        )
    return "\n".join(lines)


def render_edit_form_text(form: EditForm, *, index: int | None = None) -> str:
    head = f"  {index:>2}. " if index is not None else "  "
    options = ", ".join(
        f"{n}={'*' if opt.selected else ''}{opt.label}"
        for n, opt in enumerate(form.priority_options, start=1)
    )
    return (
        f"{head}EDITING\n"
        f"      title:    {form.title}\n"
        f"      date:     {form.date}\n"
        f"      time:     {form.time}\n"
        f"      end:      {form.end_time or '-'}\n"
        f"      priority: {options}"
    )


def render_panel(view: PanelView) -> str:
    parts = [render_calendar_text(view.month_title, view.calendar), ""]
    parts.append(render_task_list_text(view.task_list, view.edit_form))
    if view.edit_form is not None and all(
        item.task_id != view.edit_form.task_id for item in view.task_list.items
    ):
        # Editing a task that moved to another date in the draft.
        parts.append(render_edit_form_text(view.edit_form))
    parts.append(f"\n  New tasks go to: {view.add_form_date}")
    return "\n".join(parts)


class ConsolePanel:
    """Collects renders from the controller and prints the latest one once per command."""

    def __init__(self) -> None:
        self._pending: PanelView | None = None

    def on_render(self, view: PanelView) -> None:
        self._pending = view

    def flush(self) -> None:
        if self._pending is None:
            return
        print(render_panel(self._pending))
        self._pending = None


def run_console_loop(state: AppState, panel: ConsolePanel) -> None:
    logger.info("Console panel started.")
    _print_ts("Type /help for commands, /exit to quit.\n")

    def emit(text: str) -> None:
        # Immediate user-visible feedback for long operations (e.g. sync)
        print(f"[{_ts_local()}] {text}", flush=True)

    state.controller.render()
    panel.flush()

    while True:
        try:
            user_input = input("secretary> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not user_input.startswith("/"):
            _print_ts("Commands start with '/'. Use /help to list them.")
            continue

        try:
            reply = command_registry.handle(state, user_input, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        panel.flush()
        if reply:
            _print_ts(reply)
