# src/private_secretary/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage and the remote API swappable and makes testing easier.
"""

from typing import Any, Awaitable, Iterable, Protocol


class SettingsBackend(Protocol):
    """Host-style settings object: one mutable section plus a save hook."""

    def section(self) -> dict[str, Any]: ...
    def save(self) -> None: ...


class TaskRepo(Protocol):
    def tasks_by_date(self, date_str: str) -> list[Any]: ...
    def get_task(self, task_id: str) -> Any | None: ...
    def all_tasks(self) -> list[Any]: ...
    def count_tasks(self) -> int: ...

    def add_task(
            self,
            title: str,
            date: str,
            time: str,
            end_time: str | None,
            priority: Any,
    ) -> Any: ...
    def delete_task(self, task_id: str) -> None: ...
    def toggle_complete(self, task_id: str) -> None: ...
    def edit_task(self, task_id: str, updates: dict[str, Any]) -> bool: ...
    def mark_synced(self, task_ids: Iterable[str]) -> int: ...
    def sweep_expired(self, reference_date: Any = None, *, days: int = 7) -> int: ...


class RemoteTaskClient(Protocol):
    """Creates one task on the remote service; raises on failure."""

    def send_task(self, task: Any, token: str) -> Awaitable[dict[str, Any]]: ...
