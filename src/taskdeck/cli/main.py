# src/taskdeck/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs the console connector
in the main thread.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    log_file = setup_logging(
        log_dir=settings.data_dir, level=settings.log_level, app_name=settings.app_name
    )
    logger.info("Starting %s (tasks=%s, log=%s)", settings.app_name, settings.tasks_path, log_file)

    state = create_initial_state(settings=settings)

    try:
        run_console_loop(state)
    finally:
        if not state.store.last_save_ok:
            logger.warning("Exiting with unsaved changes (last save failed).")
        logger.info("Bye.")


if __name__ == "__main__":
    main()
