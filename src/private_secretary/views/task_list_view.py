# src/private_secretary/views/task_list_view.py

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from ..tasks.task_models import (
    Priority,
    Task,
    validate_time,
    validate_time_range,
    validate_title,
)

__all__ = [
    "EditForm",
    "PRIORITY_LABELS",
    "PriorityOption",
    "TaskListItem",
    "TaskListModel",
    "build_edit_form",
    "format_date_heading",
    "format_task_time",
    "priority_label",
    "render_task_list",
    "validate_task_input",
    "validate_time_range",
]

PRIORITY_LABELS: dict[str, dict[str, str]] = {
    "en": {
        Priority.URGENT_IMPORTANT.value: "Urgent & important",
        Priority.NOT_URGENT_IMPORTANT.value: "Important, not urgent",
        Priority.URGENT_NOT_IMPORTANT.value: "Urgent, not important",
        Priority.NOT_URGENT_NOT_IMPORTANT.value: "Neither urgent nor important",
    },
    "zh": {
        Priority.URGENT_IMPORTANT.value: "重要且紧急",
        Priority.NOT_URGENT_IMPORTANT.value: "重要不紧急",
        Priority.URGENT_NOT_IMPORTANT.value: "不重要但紧急",
        Priority.NOT_URGENT_NOT_IMPORTANT.value: "不重要不紧急",
    },
}

EMPTY_TEXT = {"en": "No tasks scheduled", "zh": "暂无任务安排"}

_ZH_WEEKDAYS = ("一", "二", "三", "四", "五", "六", "日")


def priority_label(priority: str, locale: str = "en") -> str:
    labels = PRIORITY_LABELS.get(locale, PRIORITY_LABELS["en"])
    return labels.get(priority, priority)


def format_task_time(task: Task) -> str:
    if task.end_time:
        return f"{task.time} - {task.end_time}"
    return task.time


def format_date_heading(date_str: str, locale: str = "en") -> str:
    d = date.fromisoformat(date_str)
    if locale == "zh":
        return f"{d.year}年{d.month}月{d.day}日 星期{_ZH_WEEKDAYS[d.weekday()]}"
    return f"{d:%A}, {d:%B} {d.day}, {d.year}"


@dataclass(slots=True, frozen=True)
class TaskListItem:
    task_id: str
    title: str
    time_display: str
    is_interval: bool
    completed: bool
    synced: bool
    priority: str
    priority_label: str


@dataclass(slots=True, frozen=True)
class TaskListModel:
    date: str
    heading: str
    items: tuple[TaskListItem, ...]
    empty_text: str

    @property
    def is_empty(self) -> bool:
        return not self.items


def render_task_list(date_str: str, tasks: Iterable[Task], *, locale: str = "en") -> TaskListModel:
    """Tasks for one date, ordered by start time (stable on ties)."""
    ordered = sorted(tasks, key=lambda t: t.time)
    items = tuple(
        TaskListItem(
            task_id=t.id,
            title=t.title,
            time_display=format_task_time(t),
            is_interval=t.is_interval,
            completed=t.completed,
            synced=t.synced_to_ticktick,
            priority=t.priority,
            priority_label=priority_label(t.priority, locale),
        )
        for t in ordered
    )
    return TaskListModel(
        date=date_str,
        heading=format_date_heading(date_str, locale),
        items=items,
        empty_text=EMPTY_TEXT.get(locale, EMPTY_TEXT["en"]),
    )


@dataclass(slots=True, frozen=True)
class PriorityOption:
    value: str
    label: str
    selected: bool


@dataclass(slots=True, frozen=True)
class EditForm:
    task_id: str
    title: str
    date: str
    time: str
    end_time: str
    priority: str
    priority_options: tuple[PriorityOption, ...]


def build_edit_form(task: Task, *, locale: str = "en") -> EditForm:
    return EditForm(
        task_id=task.id,
        title=task.title,
        date=task.date,
        time=task.time,
        end_time=task.end_time or "",
        priority=task.priority,
        priority_options=tuple(
            PriorityOption(value=p.value, label=priority_label(p, locale), selected=p == task.priority)
            for p in Priority
        ),
    )


def validate_task_input(title: str, time: str, end_time: str | None) -> str:
    """Checks shared by the add form and the edit form; returns the trimmed title."""
    clean = validate_title(title)
    start = validate_time(time)
    end = validate_time(end_time) if end_time else None
    validate_time_range(start, end)
    return clean
