# src/private_secretary/ui/controller.py

"""
Interaction controller.

Owns the transient view state (displayed month, selected date, the single
open editor, the sync-running flag), turns user actions into TaskStore /
TickTickSync calls and re-renders the panel after every change.

Rendering is delegated: render() builds a PanelView from pure view functions
and hands it to the on_render callback supplied by the connector.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date

from ..errors import (
    AuthError,
    EditInProgressError,
    SyncInProgressError,
    TaskNotFoundError,
)
from ..storage.settings_store import ExtensionSettings
from ..sync.ticktick import SyncResult, TickTickSync
from ..tasks.task_models import Priority, Task, validate_date
from ..tasks.task_store import TaskStore
from ..views.calendar_view import CalendarGrid, month_title, render_calendar
from ..views.task_list_view import (
    EditForm,
    TaskListModel,
    build_edit_form,
    priority_label,
    render_task_list,
    validate_task_input,
)

logger = logging.getLogger(__name__)

DRAFT_FIELDS = ("title", "date", "time", "end_time", "priority")


@dataclass(slots=True)
class ViewState:
    year: int
    month: int  # 1-12
    selected_date: str
    editing_task_id: str | None = None
    edit_draft: EditForm | None = None
    sync_in_progress: bool = False

    @classmethod
    def for_today(cls, today: date) -> ViewState:
        return cls(year=today.year, month=today.month, selected_date=today.isoformat())

    @property
    def is_editing(self) -> bool:
        return self.editing_task_id is not None


@dataclass(slots=True, frozen=True)
class PanelView:
    month_title: str
    calendar: CalendarGrid
    task_list: TaskListModel
    add_form_date: str
    edit_form: EditForm | None


@dataclass(slots=True, frozen=True)
class SyncReport:
    ok: bool
    text: str
    details: list[str] = field(default_factory=list)
    result: SyncResult | None = None


class InteractionController:
    def __init__(
        self,
        store: TaskStore,
        sync: TickTickSync,
        settings: ExtensionSettings,
        *,
        today: Callable[[], date] = date.today,
        locale: str = "en",
        expiry_days: int = 7,
        on_render: Callable[[PanelView], None] | None = None,
    ) -> None:
        self._store = store
        self._sync = sync
        self._settings = settings
        self._today = today
        self._locale = locale
        self._expiry_days = expiry_days
        self._on_render = on_render

        self.state = ViewState.for_today(today())
        self.view: PanelView | None = None

    # ---- rendering ----

    def build_view(self) -> PanelView:
        s = self.state
        return PanelView(
            month_title=month_title(s.year, s.month, self._locale),
            calendar=render_calendar(
                s.year,
                s.month,
                self._store.all_tasks(),
                today=self._today(),
                selected_date=s.selected_date,
                locale=self._locale,
            ),
            task_list=render_task_list(
                s.selected_date, self._store.tasks_by_date(s.selected_date), locale=self._locale
            ),
            add_form_date=s.selected_date,
            edit_form=s.edit_draft,
        )

    def render(self) -> PanelView:
        self.view = self.build_view()
        if self._on_render is not None:
            self._on_render(self.view)
        return self.view

    # ---- navigation ----

    def prev_month(self) -> None:
        s = self.state
        s.month -= 1
        if s.month < 1:
            s.month = 12
            s.year -= 1
        self.render()

    def next_month(self) -> None:
        s = self.state
        s.month += 1
        if s.month > 12:
            s.month = 1
            s.year += 1
        self.render()

    def select_date(self, date_str: str) -> None:
        """
        Select a day: the list and the add-form date follow it, the displayed
        month jumps to it. An open editor is discarded with its list row.
        """
        d = date.fromisoformat(validate_date(date_str))
        if self.state.is_editing:
            logger.debug("Selecting %s discards editor for task_id=%s", d, self.state.editing_task_id)
            self._close_editor()
        self.state.selected_date = d.isoformat()
        self.state.year = d.year
        self.state.month = d.month
        self.render()

    def go_today(self) -> None:
        self.select_date(self._today().isoformat())

    # ---- task actions ----

    def _require_no_editor(self) -> None:
        if self.state.is_editing:
            raise EditInProgressError("Finish editing the current task first")

    def add_task(
        self,
        title: str,
        time: str,
        end_time: str | None,
        priority: str | Priority,
        *,
        date_str: str | None = None,
    ) -> Task:
        target = date_str or self.state.selected_date
        title = validate_task_input(title, time, end_time)
        task = self._store.add_task(title, target, time, end_time or None, priority)
        logger.info("Added task id=%s on %s", task.id, task.date)
        self.render()
        return task

    def toggle_complete(self, task_id: str) -> None:
        self._require_no_editor()
        self._store.toggle_complete(task_id)
        self.render()

    def delete_task(self, task_id: str) -> None:
        self._require_no_editor()
        self._store.delete_task(task_id)
        self.render()

    # ---- editor ----

    def begin_edit(self, task_id: str) -> EditForm:
        self._require_no_editor()
        task = self._store.get_task(task_id)
        if task is None:
            self.render()
            raise TaskNotFoundError(task_id)
        form = build_edit_form(task, locale=self._locale)
        self.state.editing_task_id = task_id
        self.state.edit_draft = form
        self.render()
        return form

    def update_draft(self, **changes: str) -> EditForm:
        draft = self.state.edit_draft
        if draft is None:
            raise EditInProgressError("No task is being edited")
        unknown = set(changes) - set(DRAFT_FIELDS)
        if unknown:
            raise ValueError(f"Unknown edit field(s): {', '.join(sorted(unknown))}")
        if "priority" in changes:
            changes["priority"] = str(Priority.parse(changes["priority"]))
        draft = dataclasses.replace(draft, **changes)
        draft = dataclasses.replace(
            draft,
            priority_options=tuple(
                dataclasses.replace(
                    opt,
                    selected=opt.value == draft.priority,
                    label=priority_label(opt.value, self._locale),
                )
                for opt in draft.priority_options
            ),
        )
        self.state.edit_draft = draft
        self.render()
        return draft

    def save_edit(self) -> bool:
        """
        Validate and apply the draft. On a validation error the editor stays
        open with the draft intact.
        """
        draft = self.state.edit_draft
        task_id = self.state.editing_task_id
        if draft is None or task_id is None:
            raise EditInProgressError("No task is being edited")

        title = validate_task_input(draft.title, draft.time, draft.end_time or None)
        updates = {
            "title": title,
            "date": draft.date,
            "time": draft.time,
            "end_time": draft.end_time or None,
            "priority": draft.priority,
        }
        ok = self._store.edit_task(task_id, updates)
        if not ok:
            logger.warning("Edited task vanished id=%s", task_id)
        self._close_editor()
        self.render()
        return ok

    def cancel_edit(self) -> None:
        if not self.state.is_editing:
            return
        self._close_editor()
        self.render()

    def _close_editor(self) -> None:
        self.state.editing_task_id = None
        self.state.edit_draft = None

    # ---- token / sync / cleanup ----

    @property
    def has_token(self) -> bool:
        return bool(self._settings.ticktick_token)

    def save_token(self, token: str) -> str:
        self._settings.set_ticktick_token(token)
        return "Token saved" if token.strip() else "Token cleared"

    def token_display(self, *, reveal: bool = False) -> str:
        token = self._settings.ticktick_token
        if not token:
            return "(not set)"
        if reveal:
            return token
        return "*" * min(len(token), 12)

    async def sync_selected_day(self) -> SyncReport:
        if self.state.sync_in_progress:
            raise SyncInProgressError("A sync is already running")

        token = self._settings.ticktick_token
        if not token:
            return SyncReport(ok=False, text="Set a TickTick access token first")

        date_str = self.state.selected_date
        self.state.sync_in_progress = True
        try:
            result = await self._sync.sync_day(date_str, self._store.tasks_by_date(date_str), token)
        except AuthError as e:
            return SyncReport(ok=False, text=str(e))
        except Exception as e:
            logger.exception("Sync of %s failed", date_str)
            return SyncReport(ok=False, text=f"Sync failed: {e}")
        finally:
            self.state.sync_in_progress = False

        self.render()

        if result.nothing_to_sync:
            return SyncReport(ok=True, text=result.message, result=result)
        if result.failed_count == 0:
            return SyncReport(ok=True, text=f"Synced {result.success_count} task(s)", result=result)

        for msg in result.error_messages:
            logger.error("Sync error: %s", msg)
        return SyncReport(
            ok=False,
            text=f"Sync finished: {result.success_count} succeeded, {result.failed_count} failed",
            details=list(result.error_messages),
            result=result,
        )

    def cleanup_expired(self) -> int:
        removed = self._store.sweep_expired(self._today(), days=self._expiry_days)
        if removed > 0:
            self.render()
        return removed

    # ---- helpers for command layers ----

    def resolve_task_ref(self, ref: str) -> str:
        """
        Map a 1-based position in the shown task list, or a task id, to an id.
        """
        ref = (ref or "").strip()
        view = self.view or self.build_view()
        if ref.isdigit():
            idx = int(ref) - 1
            items = view.task_list.items
            if 0 <= idx < len(items):
                return items[idx].task_id
            raise TaskNotFoundError(ref)
        if ref and self._store.get_task(ref) is not None:
            return ref
        raise TaskNotFoundError(ref)
