# src/private_secretary/tasks/task_models.py

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import StrEnum
from typing import Any

from ..errors import ValidationError

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class Priority(StrEnum):
    """Eisenhower matrix quadrant."""

    URGENT_IMPORTANT = "urgent-important"
    NOT_URGENT_IMPORTANT = "not-urgent-important"
    URGENT_NOT_IMPORTANT = "urgent-not-important"
    NOT_URGENT_NOT_IMPORTANT = "not-urgent-not-important"

    @classmethod
    def parse(cls, raw: str | None) -> Priority:
        """
        Accept the full value, the member name, or the quadrant number 1-4
        (1 = urgent-important ... 4 = not-urgent-not-important).
        """
        s = (raw or "").strip().lower()
        if not s:
            raise ValidationError("Priority is required")
        if s.isdigit():
            members = list(cls)
            idx = int(s) - 1
            if 0 <= idx < len(members):
                return members[idx]
            raise ValidationError(f"Unknown priority: {raw}")
        try:
            return cls(s.replace("_", "-"))
        except ValueError:
            raise ValidationError(f"Unknown priority: {raw}") from None


def new_task_id() -> str:
    return uuid.uuid4().hex


def validate_title(title: str | None) -> str:
    t = (title or "").strip()
    if not t:
        raise ValidationError("Task title must not be empty")
    return t


def utc_timestamp(moment: datetime | None = None) -> str:
    """UTC ISO-8601 with milliseconds and a Z suffix; naive input is local time."""
    aware = (moment or datetime.now()).astimezone(timezone.utc)
    return aware.strftime("%Y-%m-%dT%H:%M:%S.") + f"{aware.microsecond // 1000:03d}Z"


def validate_date(raw: str | None) -> str:
    s = (raw or "").strip()
    try:
        return date.fromisoformat(s).isoformat()
    except ValueError:
        raise ValidationError(f"Invalid date (expected YYYY-MM-DD): {raw!r}") from None


def validate_time(raw: str | None) -> str:
    s = (raw or "").strip()
    if not _TIME_RE.match(s):
        raise ValidationError(f"Invalid time (expected HH:MM): {raw!r}")
    return s


def validate_time_range(time: str, end_time: str | None) -> None:
    """
    A missing end time means a point-in-time task and is always valid.
    Otherwise the end must be strictly later than the start; zero-padded
    HH:MM strings on the same day compare chronologically.
    """
    if not end_time:
        return
    if end_time <= time:
        raise ValidationError("End time must be later than start time")


@dataclass(slots=True)
class Task:
    id: str
    title: str
    date: str  # YYYY-MM-DD
    time: str  # HH:MM
    end_time: str | None
    priority: str  # Priority value; unknown values survive load
    completed: bool = False
    created_at: str = ""
    synced_to_ticktick: bool = False

    @property
    def is_interval(self) -> bool:
        return bool(self.end_time)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "date": self.date,
            "time": self.time,
            "endTime": self.end_time,
            "priority": str(self.priority),
            "completed": self.completed,
            "createdAt": self.created_at,
            "syncedToTickTick": self.synced_to_ticktick,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Task:
        return cls(
            id=str(raw.get("id") or new_task_id()),
            title=str(raw.get("title") or ""),
            date=str(raw.get("date") or ""),
            time=str(raw.get("time") or ""),
            end_time=raw.get("endTime") or None,
            priority=str(raw.get("priority") or ""),
            completed=bool(raw.get("completed", False)),
            created_at=str(raw.get("createdAt") or ""),
            synced_to_ticktick=bool(raw.get("syncedToTickTick", False)),
        )

    @classmethod
    def create(
        cls,
        *,
        title: str,
        date: str,
        time: str,
        end_time: str | None,
        priority: str | Priority,
        now: datetime | None = None,
    ) -> Task:
        created = utc_timestamp(now)
        return cls(
            id=new_task_id(),
            title=title,
            date=date,
            time=time,
            end_time=end_time or None,
            priority=str(priority),
            created_at=created,
        )
