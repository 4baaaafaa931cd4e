# src/task_tracker/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)

EXIT_COMMANDS = ("/exit", "/quit")


def handle_line(state: AppState, line: str) -> str | None:
    """
    Process one line of console input and return the reply to print.

    Plain text (no leading slash) is treated as a search term.
    """
    line = line.strip()
    if not line:
        return None

    try:
        reply = command_registry.handle(state, line)
        if reply is None:
            reply = command_registry.handle(state, f"/search {line}")
    except Exception:
        logger.exception("Command handler crashed.")
        reply = "Internal error while handling a command."
    return reply


def run_console_loop(
    state: AppState,
    *,
    read: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
) -> None:
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "task-tracker"))
    logger.info("Console started.")
    write(f"=== {app_name} ===\nType /help for commands, /exit to quit.\n")
    write(state.repository.get_info())

    while True:
        try:
            user_input = read(">>> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            write("")
            break

        if user_input.lower() in EXIT_COMMANDS:
            logger.info("Console exit command received.")
            break

        reply = handle_line(state, user_input)
        if reply is not None:
            write(reply + "\n")

    write("Goodbye!")
    logger.info("Console finished.")
