# src/private_secretary/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..storage.settings_store import ExtensionSettings
from ..sync.ticktick import TickTickSync
from ..tasks.task_store import TaskStore
from ..ui.controller import InteractionController


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: object

    ext_settings: ExtensionSettings
    task_store: TaskStore
    sync: TickTickSync
    controller: InteractionController
