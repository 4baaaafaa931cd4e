# src/task_tracker/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

APP_LOGGER_PREFIX = "task_tracker."
LOG_FILENAME = "task_tracker.log"


class _ConsoleNoiseFilter(logging.Filter):
    """
    The console shares the terminal with the >>> prompt, so only our own
    records reach it freely; anything else (other libraries, captured
    py.warnings) has to be ERROR or worse.
    """

    def __init__(self, prefix: str = APP_LOGGER_PREFIX) -> None:
        super().__init__()
        self._prefix = prefix

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith(self._prefix):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/task_tracker",
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Install two root handlers: a filtered stderr handler (WARNING+ by default)
    and a file handler that keeps everything down to DEBUG.

    Safe to call again: existing root handlers are replaced. Returns the log file path.
    """
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)
    log_file = log_path / LOG_FILENAME

    root = logging.getLogger()
    root.setLevel(min(console_level, file_level))
    for handler in list(root.handlers):
        root.removeHandler(handler)

    formatter = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(formatter)
    console.addFilter(_ConsoleNoiseFilter())

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(formatter)

    root.addHandler(console)
    root.addHandler(file_handler)

    logging.captureWarnings(True)
    return log_file
