# src/private_secretary/sync/ticktick.py

from __future__ import annotations

"""
One-way sync to TickTick.

- to_remote_shape() converts a local task to the Open API task body,
- TickTickClient.send_task() performs a single authenticated create call,
- TickTickSync.sync_day() pushes a day's unsynced, incomplete tasks one by one
  and aggregates the outcome (continue-on-error).

Calls are awaited sequentially on purpose: ordering stays predictable and the
remote API never sees a burst.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone, tzinfo
from typing import Any

import httpx

from ..config import DEFAULT_TICKTICK_API_URL
from ..core.ports import RemoteTaskClient, TaskRepo
from ..errors import AuthError, RemoteApiError, SecretaryError
from ..tasks.task_models import Priority, Task

logger = logging.getLogger(__name__)

# TickTick priority scale: 0 none, 1 low, 3 medium, 5 high.
TICKTICK_PRIORITY_MAP: dict[str, int] = {
    Priority.URGENT_IMPORTANT.value: 5,
    Priority.NOT_URGENT_IMPORTANT.value: 3,
    Priority.URGENT_NOT_IMPORTANT.value: 3,
    Priority.NOT_URGENT_NOT_IMPORTANT.value: 1,
}


@dataclass(slots=True, frozen=True)
class RemoteTask:
    title: str
    start_date: str
    priority: int
    is_all_day: bool = False
    due_date: str | None = None

    def to_payload(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "title": self.title,
            "startDate": self.start_date,
            "priority": self.priority,
            "isAllDay": self.is_all_day,
        }
        if self.due_date is not None:
            body["dueDate"] = self.due_date
        return body


def _utc_timestamp(date_str: str, time_str: str, tz: tzinfo | None) -> str:
    naive = datetime.fromisoformat(f"{date_str}T{time_str}:00")
    # A naive datetime's astimezone() treats it as local wall-clock time.
    aware = naive.replace(tzinfo=tz) if tz is not None else naive.astimezone()
    return aware.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.000Z")


def to_remote_shape(task: Task, tz: tzinfo | None = None) -> RemoteTask:
    """Map a local task to the TickTick task body (never all-day)."""
    due = _utc_timestamp(task.date, task.end_time, tz) if task.end_time else None
    return RemoteTask(
        title=task.title,
        start_date=_utc_timestamp(task.date, task.time, tz),
        priority=TICKTICK_PRIORITY_MAP.get(task.priority, 0),
        is_all_day=False,
        due_date=due,
    )


class TickTickClient:
    """Minimal TickTick Open API client: create task only."""

    def __init__(
        self,
        *,
        api_url: str = DEFAULT_TICKTICK_API_URL,
        timeout: httpx.Timeout | float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        tz: tzinfo | None = None,
    ) -> None:
        self._api_url = api_url
        self._timeout = timeout if timeout is not None else httpx.Timeout(20.0, connect=5.0)
        self._transport = transport
        self._tz = tz

    @classmethod
    def from_settings(cls, settings, **kwargs: Any) -> TickTickClient:
        timeout = httpx.Timeout(
            connect=settings.http_connect_timeout,
            read=settings.http_read_timeout,
            write=10.0,
            pool=settings.http_connect_timeout,
        )
        return cls(api_url=settings.ticktick_api_url, timeout=timeout, **kwargs)

    async def send_task(self, task: Task, token: str) -> dict[str, Any]:
        if not token or not token.strip():
            raise AuthError("Set a TickTick access token first")

        payload = to_remote_shape(task, tz=self._tz).to_payload()
        headers = {"Authorization": f"Bearer {token.strip()}"}

        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            resp = await client.post(self._api_url, json=payload, headers=headers)

        if not resp.is_success:
            raise RemoteApiError(resp.status_code, resp.text)

        logger.debug("TickTick accepted task id=%s status=%s", task.id, resp.status_code)
        return resp.json()


@dataclass(slots=True)
class SyncResult:
    success_count: int = 0
    failed_count: int = 0
    error_messages: list[str] = field(default_factory=list)
    nothing_to_sync: bool = False

    @property
    def message(self) -> str:
        if self.nothing_to_sync:
            return "Nothing to sync"
        if self.error_messages:
            return "\n".join(self.error_messages)
        return "All tasks synced"


def pending_for_sync(tasks: Iterable[Task]) -> list[Task]:
    return [t for t in tasks if not t.completed and not t.synced_to_ticktick]


class TickTickSync:
    def __init__(self, client: RemoteTaskClient, store: TaskRepo) -> None:
        self._client = client
        self._store = store

    async def sync_day(self, date_str: str, tasks: Iterable[Task], token: str) -> SyncResult:
        """
        Push the day's incomplete, unsynced tasks one at a time.

        A failing task is counted and described, the loop goes on. The store
        is persisted once at the end.
        """
        todo = pending_for_sync(tasks)
        if not todo:
            logger.info("Sync %s: nothing to sync", date_str)
            return SyncResult(nothing_to_sync=True)

        if not token or not token.strip():
            raise AuthError("Set a TickTick access token first")

        result = SyncResult()
        synced_ids: list[str] = []

        for task in todo:
            try:
                await self._client.send_task(task, token)
            except SecretaryError as e:
                result.failed_count += 1
                result.error_messages.append(f"{task.title}: {e}")
                logger.warning("Sync failed task_id=%s: %s", task.id, e)
                continue
            except Exception as e:
                result.failed_count += 1
                result.error_messages.append(f"{task.title}: {e}")
                logger.exception("Sync crashed task_id=%s", task.id)
                continue

            task.synced_to_ticktick = True
            synced_ids.append(task.id)
            result.success_count += 1

        self._store.mark_synced(synced_ids)
        logger.info(
            "Sync %s: %d succeeded, %d failed",
            date_str,
            result.success_count,
            result.failed_count,
        )
        return result
