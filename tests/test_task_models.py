# tests/test_task_models.py

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from private_secretary.errors import ValidationError
from private_secretary.tasks.task_models import Priority, Task, validate_time_range


def test_time_range_end_must_be_strictly_later() -> None:
    with pytest.raises(ValidationError):
        validate_time_range("09:00", "09:00")
    with pytest.raises(ValidationError):
        validate_time_range("09:00", "08:30")

    validate_time_range("09:00", "09:01")
    validate_time_range("09:00", "")
    validate_time_range("09:00", None)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("urgent-important", Priority.URGENT_IMPORTANT),
        ("NOT_URGENT_IMPORTANT", Priority.NOT_URGENT_IMPORTANT),
        ("3", Priority.URGENT_NOT_IMPORTANT),
        ("4", Priority.NOT_URGENT_NOT_IMPORTANT),
    ],
)
def test_priority_parse(raw: str, expected: Priority) -> None:
    assert Priority.parse(raw) is expected


@pytest.mark.parametrize("raw", ["", "0", "5", "high"])
def test_priority_parse_rejects_unknown(raw: str) -> None:
    with pytest.raises(ValidationError):
        Priority.parse(raw)


def test_task_from_dict_uses_persisted_camel_case_layout() -> None:
    raw = {
        "id": "abc",
        "title": "Call mom",
        "date": "2024-06-15",
        "time": "18:00",
        "endTime": "",
        "priority": "not-urgent-important",
        "completed": True,
        "createdAt": "2024-06-01T10:00:00.000+00:00",
    }
    task = Task.from_dict(raw)

    assert task.end_time is None
    assert task.is_interval is False
    assert task.completed is True
    assert task.synced_to_ticktick is False
    assert task.to_dict()["syncedToTickTick"] is False
    assert task.to_dict()["createdAt"] == raw["createdAt"]


def test_created_at_is_utc_with_z_suffix() -> None:
    moment = datetime(2024, 6, 15, 9, 30, 5, 123456, tzinfo=timezone(timedelta(hours=2)))
    task = Task.create(
        title="x",
        date="2024-06-15",
        time="09:00",
        end_time=None,
        priority=Priority.URGENT_IMPORTANT,
        now=moment,
    )

    assert task.created_at == "2024-06-15T07:30:05.123Z"
    assert Task.create(
        title="y", date="2024-06-15", time="09:00", end_time=None, priority="urgent-important"
    ).created_at.endswith("Z")
