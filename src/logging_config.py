"""Logging setup for the command-line entry points."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

APP_LOGGERS = ("domain", "repositories")


def setup_logging(debug: bool = False, log_file: Path | None = None) -> None:
    # Keep dependency loggers (sqlalchemy) quiet unless they warn.
    logging.getLogger().setLevel(logging.WARNING)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    console_handler.setLevel(logging.DEBUG if debug else logging.WARNING)

    handlers: list[logging.Handler] = [console_handler]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        file_handler.setLevel(logging.DEBUG if debug else logging.INFO)
        handlers.append(file_handler)

    for name in APP_LOGGERS:
        app_logger = logging.getLogger(name)
        app_logger.setLevel(logging.DEBUG if debug else logging.INFO)
        app_logger.handlers.clear()
        for handler in handlers:
            app_logger.addHandler(handler)
        app_logger.propagate = False
