# src/private_secretary/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the settings file, task store, TickTick sync and the controller into AppState,
- runs the startup sweep of expired tasks.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date

from ..config import get_settings
from ..core.ports import RemoteTaskClient
from ..core.state import AppState
from ..storage.settings_store import ExtensionSettings
from ..sync.ticktick import TickTickClient, TickTickSync
from ..tasks.task_store import TaskStore
from ..ui.controller import InteractionController, PanelView

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.settings_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    *,
    settings=None,
    remote: RemoteTaskClient | None = None,
    on_render: Callable[[PanelView], None] | None = None,
    today: Callable[[], date] = date.today,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    ext = ExtensionSettings(settings.settings_path)

    seed_token = getattr(settings, "ticktick_token", None)
    if seed_token and not ext.ticktick_token:
        logger.info("Seeding TickTick token from environment")
        ext.set_ticktick_token(seed_token)

    store = TaskStore(ext)

    removed = store.sweep_expired(today(), days=settings.expiry_days)
    if removed:
        logger.info("Startup cleanup removed %d expired task(s)", removed)

    if remote is None:
        remote = TickTickClient.from_settings(settings)
    sync = TickTickSync(remote, store)

    controller = InteractionController(
        store,
        sync,
        ext,
        today=today,
        locale=getattr(settings, "locale", "en"),
        expiry_days=settings.expiry_days,
        on_render=on_render,
    )

    return AppState(
        settings=settings,
        ext_settings=ext,
        task_store=store,
        sync=sync,
        controller=controller,
    )
