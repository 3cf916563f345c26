# tests/test_ticktick_sync.py

from __future__ import annotations

import json
from datetime import timezone

import httpx
import pytest

from private_secretary.errors import AuthError, RemoteApiError
from private_secretary.sync.ticktick import TickTickClient, TickTickSync, to_remote_shape
from private_secretary.tasks.task_models import Priority, Task
from private_secretary.tasks.task_store import TaskStore

API_URL = "https://api.ticktick.test/open/v1/task"


def _task(title: str = "Task", **kw) -> Task:
    base = dict(
        id=f"id-{title}",
        title=title,
        date="2024-06-15",
        time="09:00",
        end_time=None,
        priority=Priority.URGENT_NOT_IMPORTANT.value,
    )
    base.update(kw)
    return Task(**base)


def test_remote_shape_point_task_has_no_due_date() -> None:
    remote = to_remote_shape(_task(), tz=timezone.utc)

    assert remote.priority == 3
    assert remote.due_date is None
    assert remote.is_all_day is False
    assert remote.start_date == "2024-06-15T09:00:00.000Z"
    assert "dueDate" not in remote.to_payload()


def test_remote_shape_interval_task_and_priority_table() -> None:
    remote = to_remote_shape(
        _task(end_time="10:15", priority=Priority.URGENT_IMPORTANT.value), tz=timezone.utc
    )
    assert remote.priority == 5
    assert remote.to_payload() == {
        "title": "Task",
        "startDate": "2024-06-15T09:00:00.000Z",
        "priority": 5,
        "isAllDay": False,
        "dueDate": "2024-06-15T10:15:00.000Z",
    }

    assert to_remote_shape(_task(priority="not-urgent-important")).priority == 3
    assert to_remote_shape(_task(priority="not-urgent-not-important")).priority == 1
    assert to_remote_shape(_task(priority="legacy-value")).priority == 0


@pytest.mark.asyncio
async def test_send_task_without_token_makes_no_request() -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={})

    client = TickTickClient(api_url=API_URL, transport=httpx.MockTransport(handler))

    with pytest.raises(AuthError):
        await client.send_task(_task(), "")
    with pytest.raises(AuthError):
        await client.send_task(_task(), "   ")
    assert calls == []


@pytest.mark.asyncio
async def test_send_task_posts_json_with_bearer_token() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"id": "remote-1"})

    client = TickTickClient(
        api_url=API_URL, transport=httpx.MockTransport(handler), tz=timezone.utc
    )
    out = await client.send_task(_task("Buy milk"), "tok123")

    assert out == {"id": "remote-1"}
    req = seen[0]
    assert req.method == "POST"
    assert str(req.url) == API_URL
    assert req.headers["Authorization"] == "Bearer tok123"
    body = json.loads(req.content)
    assert body["title"] == "Buy milk"
    assert body["isAllDay"] is False
    assert "dueDate" not in body


@pytest.mark.asyncio
async def test_send_task_non_success_raises_remote_api_error() -> None:
    client = TickTickClient(
        api_url=API_URL,
        transport=httpx.MockTransport(lambda request: httpx.Response(401, text="unauthorized")),
    )
    with pytest.raises(RemoteApiError) as excinfo:
        await client.send_task(_task(), "bad")

    assert excinfo.value.status == 401
    assert excinfo.value.body == "unauthorized"


def _seed(store: TaskStore, *titles: str) -> list[Task]:
    return [store.add_task(t, "2024-06-15", f"0{i + 7}:00", None, "urgent-important") for i, t in enumerate(titles)]


@pytest.mark.asyncio
async def test_sync_day_continues_after_a_failure(store: TaskStore, fake_settings) -> None:
    first, second, third = _seed(store, "one", "two", "three")
    posted: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        posted.append(json.loads(request.content)["title"])
        if len(posted) == 2:
            return httpx.Response(500, text="server exploded")
        return httpx.Response(200, json={"id": f"r{len(posted)}"})

    sync = TickTickSync(TickTickClient(api_url=API_URL, transport=httpx.MockTransport(handler)), store)
    saves_before = fake_settings.saves

    result = await sync.sync_day("2024-06-15", store.tasks_by_date("2024-06-15"), "tok")

    assert posted == ["one", "two", "three"]
    assert (result.success_count, result.failed_count) == (2, 1)
    assert len(result.error_messages) == 1
    assert result.error_messages[0].startswith("two: ")
    assert "500" in result.error_messages[0]
    assert store.get_task(first.id).synced_to_ticktick is True
    assert store.get_task(second.id).synced_to_ticktick is False
    assert store.get_task(third.id).synced_to_ticktick is True
    assert fake_settings.saves == saves_before + 1
    assert fake_settings.data["tasks"][0]["syncedToTickTick"] is True


@pytest.mark.asyncio
async def test_sync_day_counts_network_errors_as_failures(store: TaskStore) -> None:
    (only,) = _seed(store, "offline")

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    sync = TickTickSync(TickTickClient(api_url=API_URL, transport=httpx.MockTransport(handler)), store)
    result = await sync.sync_day("2024-06-15", store.tasks_by_date("2024-06-15"), "tok")

    assert (result.success_count, result.failed_count) == (0, 1)
    assert result.error_messages == ["offline: connection refused"]
    assert store.get_task(only.id).synced_to_ticktick is False


@pytest.mark.asyncio
async def test_sync_day_skips_completed_and_already_synced(store: TaskStore, remote) -> None:
    done, synced, open_ = _seed(store, "done", "synced", "open")
    store.toggle_complete(done.id)
    store.mark_synced([synced.id])

    sync = TickTickSync(remote, store)
    result = await sync.sync_day("2024-06-15", store.tasks_by_date("2024-06-15"), "tok")

    assert remote.sent == [("open", "tok")]
    assert result.success_count == 1
    assert store.get_task(open_.id).synced_to_ticktick is True


@pytest.mark.asyncio
async def test_sync_day_with_nothing_pending(store: TaskStore, remote) -> None:
    sync = TickTickSync(remote, store)

    result = await sync.sync_day("2024-06-15", [], "")

    assert result.nothing_to_sync is True
    assert (result.success_count, result.failed_count) == (0, 0)
    assert result.message == "Nothing to sync"
    assert remote.sent == []


@pytest.mark.asyncio
async def test_sync_day_without_token_raises_before_sending(store: TaskStore, remote) -> None:
    _seed(store, "a")
    sync = TickTickSync(remote, store)

    with pytest.raises(AuthError):
        await sync.sync_day("2024-06-15", store.tasks_by_date("2024-06-15"), "")
    assert remote.sent == []
