# src/private_secretary/views/calendar_view.py

from __future__ import annotations

import calendar
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from ..tasks.task_models import Task

WEEKDAY_HEADERS: dict[str, tuple[str, ...]] = {
    "en": ("Su", "Mo", "Tu", "We", "Th", "Fr", "Sa"),
    "zh": ("日", "一", "二", "三", "四", "五", "六"),
}


@dataclass(slots=True, frozen=True)
class CalendarCell:
    """One grid slot. Leading placeholders have day=None."""

    day: int | None = None
    date: str | None = None
    is_today: bool = False
    is_selected: bool = False
    has_task: bool = False
    priorities: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return self.day is None


@dataclass(slots=True, frozen=True)
class CalendarGrid:
    year: int
    month: int  # 1-12
    headers: tuple[str, ...]
    cells: tuple[CalendarCell, ...]

    def weeks(self) -> list[tuple[CalendarCell, ...]]:
        """Cells chunked into Sunday-first rows; the last row is padded."""
        cells = list(self.cells)
        while len(cells) % 7:
            cells.append(CalendarCell())
        return [tuple(cells[i : i + 7]) for i in range(0, len(cells), 7)]


def month_title(year: int, month: int, locale: str = "en") -> str:
    if locale == "zh":
        return f"{year}年{month}月"
    return f"{calendar.month_name[month]} {year}"


def render_calendar(
    year: int,
    month: int,
    tasks: Iterable[Task],
    *,
    today: date,
    selected_date: str | None = None,
    locale: str = "en",
) -> CalendarGrid:
    """
    Build the month grid. Pure: "today" is passed in, tasks are only read.

    Each day carries the distinct priorities present that day, in the order
    they first appear in the task list.
    """
    by_date: dict[str, list[str]] = {}
    for t in tasks:
        prios = by_date.setdefault(t.date, [])
        if t.priority not in prios:
            prios.append(t.priority)

    first_weekday, total_days = calendar.monthrange(year, month)
    # monthrange() counts Monday as 0; the grid starts on Sunday.
    leading = (first_weekday + 1) % 7
    today_str = today.isoformat()

    cells: list[CalendarCell] = [CalendarCell() for _ in range(leading)]
    for day in range(1, total_days + 1):
        date_str = f"{year:04d}-{month:02d}-{day:02d}"
        prios = by_date.get(date_str, [])
        cells.append(
            CalendarCell(
                day=day,
                date=date_str,
                is_today=date_str == today_str,
                is_selected=date_str == selected_date,
                has_task=bool(prios),
                priorities=tuple(prios),
            )
        )

    return CalendarGrid(
        year=year,
        month=month,
        headers=WEEKDAY_HEADERS.get(locale, WEEKDAY_HEADERS["en"]),
        cells=tuple(cells),
    )
