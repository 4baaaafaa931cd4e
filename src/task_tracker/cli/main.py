# src/task_tracker/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs the console REPL.
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

    console_level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(console_level, int):
        console_level = logging.WARNING
    log_file = setup_logging(log_dir=settings.log_dir, console_level=console_level)

    logger.info("Starting %s (storage=%s, log=%s)", settings.app_name, settings.storage_path, log_file)

    state = create_initial_state(settings=settings)
    try:
        run_console_loop(state)
    finally:
        logger.info("Bye.")


if __name__ == "__main__":
    main()
