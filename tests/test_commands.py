# tests/test_commands.py

from __future__ import annotations

import json

from private_secretary.cli.commands import CommandRegistry, registry
from private_secretary.connectors.console_connector import render_panel


def test_command_registry_routes_2_and_3_params(state) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}

    def h2(state, args):
        called["h2"] += 1
        return "h2"

    def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b")

    assert reg.handle(state, "/a x") == "h2"
    assert reg.handle(state, "/b y", emit=lambda _: None) == "h3"
    assert called == {"h2": 1, "h3": 1}


def test_command_registry_unknown_and_non_command(state) -> None:
    assert registry.handle(state, "hello") is None
    assert "Unknown command" in (registry.handle(state, "/nope") or "")
    assert "/add" in (registry.handle(state, "/help") or "")


def test_add_edit_save_flow_persists_to_settings_file(state) -> None:
    reply = registry.handle(state, "/add 09:00-10:00 1 Plan the week")
    assert reply == "Added: Plan the week (2024-06-15 09:00)"

    assert "Editing" in (registry.handle(state, "/edit 1") or "")
    registry.handle(state, "/set title Plan the month")
    registry.handle(state, "/set end -")
    assert registry.handle(state, "/save") == "Task updated."

    data = json.loads(state.settings.settings_path.read_text("utf-8"))
    (saved,) = data["private-secretary"]["tasks"]
    assert saved["title"] == "Plan the month"
    assert saved["endTime"] is None
    assert saved["priority"] == "urgent-important"


def test_user_errors_become_notices(state) -> None:
    assert (registry.handle(state, "/add 09:00-09:00 1 Bad range") or "").startswith("[!]")
    assert (registry.handle(state, "/add 09:00 9 Bad priority") or "").startswith("[!]")
    assert (registry.handle(state, "/done 5") or "").startswith("[!]")

    registry.handle(state, "/add 09:00 1 First")
    registry.handle(state, "/add 10:00 1 Second")
    registry.handle(state, "/edit 1")
    reply = registry.handle(state, "/edit 2") or ""
    assert reply.startswith("[!]")
    assert state.controller.state.edit_draft.title == "First"


def test_select_by_day_and_dated_add(state) -> None:
    registry.handle(state, "/add @2024-06-20 08:30 3 Flight")
    registry.handle(state, "/select 20")

    view = state.controller.view
    assert view.task_list.date == "2024-06-20"
    assert [i.title for i in view.task_list.items] == ["Flight"]
    assert "Flight" in render_panel(view)


def test_token_masked_and_sync_reports(state) -> None:
    assert "(not set)" in (registry.handle(state, "/token") or "")
    assert "[!]" in (registry.handle(state, "/sync") or "")

    registry.handle(state, "/token set abc123")
    assert "abc123" not in (registry.handle(state, "/token") or "")
    assert "abc123" in (registry.handle(state, "/token show") or "")

    registry.handle(state, "/add 09:00 2 Push me")
    assert registry.handle(state, "/sync") == "Synced 1 task(s)"
    assert state.task_store.all_tasks()[0].synced_to_ticktick is True


def test_cleanup_requires_confirmation(state) -> None:
    registry.handle(state, "/add @2024-06-01 09:00 4 Ancient")
    assert "Confirm" in (registry.handle(state, "/cleanup") or "")
    assert state.task_store.count_tasks() == 1

    assert registry.handle(state, "/cleanup yes") == "Removed 1 expired task(s)."
    assert registry.handle(state, "/cleanup yes") == "Nothing to clean up."


def test_add_with_unpadded_time_reports_format_error(state) -> None:
    reply = registry.handle(state, "/add 9:00-10:00 1 Plan the week") or ""

    assert "Invalid time" in reply
    assert "later than start" not in reply
    assert state.task_store.count_tasks() == 0
