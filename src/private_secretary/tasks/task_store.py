# src/private_secretary/tasks/task_store.py

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable
from datetime import date, timedelta
from typing import Any

from ..core.ports import SettingsBackend
from .task_models import (
    Priority,
    Task,
    new_task_id,
    validate_date,
    validate_time,
    validate_time_range,
    validate_title,
)

logger = logging.getLogger(__name__)

# Fields a caller may change through edit_task(); id/created_at are immutable
# and the sync flag is managed by the store itself.
EDITABLE_FIELDS = frozenset({"title", "date", "time", "end_time", "priority", "completed"})


class TaskStore:
    """
    Task collection kept in the extension settings section.

    The store is the only writer of the "tasks" list: every mutation rewrites
    the full list into the settings section and saves it.
    """

    def __init__(self, settings: SettingsBackend) -> None:
        self._settings = settings
        self._tasks: list[Task] = self._load()
        logger.info("TaskStore ready total=%s", len(self._tasks))

    def _load(self) -> list[Task]:
        raw_tasks = self._settings.section().get("tasks") or []
        out: list[Task] = []
        seen: set[str] = set()
        for raw in raw_tasks:
            if not isinstance(raw, dict):
                continue
            task = Task.from_dict(raw)
            if task.id in seen:
                logger.warning("Dropping duplicate task id=%s on load", task.id)
                continue
            seen.add(task.id)
            out.append(task)
        return out

    def save(self) -> None:
        """Persist the full collection."""
        self._settings.section()["tasks"] = [t.to_dict() for t in self._tasks]
        self._settings.save()

    # ---- queries ----

    def count_tasks(self) -> int:
        return len(self._tasks)

    def all_tasks(self) -> list[Task]:
        return list(self._tasks)

    def get_task(self, task_id: str) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def tasks_by_date(self, date_str: str) -> list[Task]:
        return [t for t in self._tasks if t.date == date_str]

    # ---- mutations ----

    def add_task(
        self,
        title: str,
        date: str,
        time: str,
        end_time: str | None,
        priority: str | Priority,
    ) -> Task:
        title = validate_title(title)
        date = validate_date(date)
        time = validate_time(time)
        end_time = validate_time(end_time) if end_time else None
        validate_time_range(time, end_time)
        prio = Priority.parse(str(priority))

        task = Task.create(title=title, date=date, time=time, end_time=end_time, priority=prio)
        while self.get_task(task.id) is not None:
            task.id = new_task_id()

        self._tasks.append(task)
        self.save()
        logger.debug("Task added id=%s date=%s time=%s priority=%s", task.id, date, time, prio)
        return task

    def delete_task(self, task_id: str) -> None:
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if t.id != task_id]
        self.save()
        if len(self._tasks) != before:
            logger.debug("Task deleted id=%s", task_id)

    def toggle_complete(self, task_id: str) -> None:
        task = self.get_task(task_id)
        if task is None:
            return
        task.completed = not task.completed
        self.save()
        logger.debug("Task toggled id=%s completed=%s", task_id, task.completed)

    def edit_task(self, task_id: str, updates: dict[str, Any]) -> bool:
        """
        Merge updates into the task and clear its sync flag.

        Returns False if the task does not exist. The merged record is
        validated before anything is changed.
        """
        task = self.get_task(task_id)
        if task is None:
            return False

        clean = {k: v for k, v in updates.items() if k in EDITABLE_FIELDS}
        if "end_time" in clean and not clean["end_time"]:
            clean["end_time"] = None

        candidate = dataclasses.replace(task, **clean)
        candidate.title = validate_title(candidate.title)
        candidate.date = validate_date(candidate.date)
        candidate.time = validate_time(candidate.time)
        if candidate.end_time:
            candidate.end_time = validate_time(candidate.end_time)
        validate_time_range(candidate.time, candidate.end_time)
        if "priority" in clean:
            candidate.priority = str(Priority.parse(str(clean["priority"])))

        for f in dataclasses.fields(Task):
            setattr(task, f.name, getattr(candidate, f.name))
        task.synced_to_ticktick = False  # remote copy is stale now

        self.save()
        logger.debug("Task edited id=%s fields=%s", task_id, sorted(clean))
        return True

    def mark_synced(self, task_ids: Iterable[str]) -> int:
        """Set the sync flag on the given tasks and persist once."""
        wanted = set(task_ids)
        n = 0
        for t in self._tasks:
            if t.id in wanted:
                t.synced_to_ticktick = True
                n += 1
        self.save()
        return n

    def sweep_expired(self, reference_date: date | None = None, *, days: int = 7) -> int:
        """
        Remove every task dated earlier than reference_date - days.

        Dates are ISO strings, so lexicographic comparison is chronological.
        """
        ref = reference_date or date.today()
        cutoff = (ref - timedelta(days=days)).isoformat()

        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if t.date >= cutoff]
        removed = before - len(self._tasks)

        if removed > 0:
            self.save()
            logger.info("Removed %d expired task(s) older than %s", removed, cutoff)
        return removed
