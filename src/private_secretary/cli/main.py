# src/private_secretary/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState (which sweeps expired tasks), then runs
the console panel in the main thread.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import ConsolePanel, run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    # choose console log level from settings.log_level
    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    log_dir = getattr(settings, "data_dir", ".local/secretary")
    setup_logging(log_dir=log_dir, console_level=console_level)

    logger.info("Starting %s...", getattr(settings, "app_name", "private-secretary"))

    panel = ConsolePanel()
    # IMPORTANT: reuse same settings object
    state = create_initial_state(settings=settings, on_render=panel.on_render)

    try:
        run_console_loop(state, panel)
    finally:
        # Every mutation is saved immediately; this is a final safety flush.
        try:
            state.task_store.save()
        except Exception:
            logger.exception("Failed to save tasks on shutdown.")
        logger.info("Bye.")


if __name__ == "__main__":
    main()
