# tests/conftest.py

from __future__ import annotations

from datetime import date
from pathlib import Path
from types import SimpleNamespace

import pytest

from private_secretary.cli.bootstrap import create_initial_state
from private_secretary.core.state import AppState
from private_secretary.storage.settings_store import ExtensionSettings
from private_secretary.sync.ticktick import TickTickSync
from private_secretary.tasks.task_store import TaskStore
from private_secretary.ui.controller import InteractionController

from .fakes import FakeRemote, FakeSettings, RenderRecorder

TODAY = date(2024, 6, 15)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and core modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="private-secretary-test",
        log_level="DEBUG",
        locale="en",
        data_dir=tmp_path,
        settings_path=tmp_path / "settings.json",
        ticktick_api_url="https://api.ticktick.test/open/v1/task",
        ticktick_token=None,
        http_connect_timeout=1.0,
        http_read_timeout=1.0,
        expiry_days=7,
    )


@pytest.fixture()
def ext_settings(settings: SimpleNamespace) -> ExtensionSettings:
    return ExtensionSettings(settings.settings_path)


@pytest.fixture()
def fake_settings() -> FakeSettings:
    return FakeSettings()


@pytest.fixture()
def store(fake_settings: FakeSettings) -> TaskStore:
    return TaskStore(fake_settings)


@pytest.fixture()
def remote() -> FakeRemote:
    return FakeRemote()


@pytest.fixture()
def renders() -> RenderRecorder:
    return RenderRecorder()


@pytest.fixture()
def controller(
    store: TaskStore, fake_settings: FakeSettings, remote: FakeRemote, renders: RenderRecorder
) -> InteractionController:
    """
    Controller wired to an in-memory settings section and a fake TickTick client.

    "Today" is pinned so calendar and expiry behavior is deterministic.
    """
    return InteractionController(
        store,
        TickTickSync(remote, store),
        fake_settings,
        today=lambda: TODAY,
        on_render=renders,
    )


@pytest.fixture()
def state(settings: SimpleNamespace, remote: FakeRemote) -> AppState:
    """
    AppState from the real composition root.

    NOTE: We keep the real JSON settings file here because its layout is part
    of what we want to test.
    """
    return create_initial_state(settings=settings, remote=remote, today=lambda: TODAY)
