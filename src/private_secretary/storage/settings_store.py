# src/private_secretary/storage/settings_store.py

"""
Settings persistence.

The settings file mimics a host "extension settings" object: one JSON document
with a section per extension. This module owns the "private-secretary"
section and preserves any other sections on save.

Layout of our section:
    {"enabled": true, "tasks": [...], "ticktickToken": ""}
"""

from __future__ import annotations

import contextlib
import copy
import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any

from .. import MODULE_NAME

logger = logging.getLogger(__name__)

DEFAULT_SECTION: dict[str, Any] = {
    "enabled": True,
    "tasks": [],
    "ticktickToken": "",
}


class ExtensionSettings:
    """JSON-file settings object namespaced by extension identity."""

    def __init__(self, path: str | Path, *, namespace: str = MODULE_NAME) -> None:
        self._path = Path(path)
        self._namespace = namespace
        self._data: dict[str, Any] = self._load()
        self.section()  # normalize eagerly
        logger.info(
            "Settings ready path=%s tasks=%d", self._path, len(self.section()["tasks"])
        )

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text("utf-8"))
        except Exception:
            logger.exception("Failed to read settings from %s", self._path)
            data = None
        if isinstance(data, dict):
            return data
        self._set_aside_unreadable()
        return {}

    def _set_aside_unreadable(self) -> None:
        # The file is the only copy of the tasks; never let a save replace it.
        stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        backup = self._path.with_name(f"{self._path.name}.corrupt-{stamp}")
        os.replace(self._path, backup)
        logger.warning("Unreadable settings moved to %s; starting empty", backup)

    def section(self) -> dict[str, Any]:
        """
        Return the mutable section for this extension, creating defaults and
        normalizing a missing/garbled task list to [].
        """
        sec = self._data.get(self._namespace)
        if not isinstance(sec, dict):
            sec = copy.deepcopy(DEFAULT_SECTION)
            self._data[self._namespace] = sec
        if not isinstance(sec.get("tasks"), list):
            sec["tasks"] = []
        if not isinstance(sec.get("ticktickToken"), str):
            sec["ticktickToken"] = ""
        sec.setdefault("enabled", True)
        return sec

    @property
    def ticktick_token(self) -> str:
        return self.section()["ticktickToken"]

    def set_ticktick_token(self, token: str) -> None:
        clean = (token or "").strip()
        self.section()["ticktickToken"] = clean
        self.save()
        logger.info("TickTick token %s", "saved" if clean else "cleared")

    def save(self) -> None:
        """Write the whole settings document atomically."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(".tmp")
        tmp.write_text(json.dumps(self._data, ensure_ascii=False, indent=2), "utf-8")
        os.replace(tmp, self._path)
        with contextlib.suppress(Exception):
            # The file holds the API token; keep it private on disk.
            os.chmod(self._path, 0o600)
        logger.debug("Settings saved to %s", self._path)
