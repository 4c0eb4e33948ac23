"""
logging_setup.py
Console (rich) + optional file logging for the dashboard.
"""

from __future__ import annotations

import logging
from pathlib import Path

from rich.logging import RichHandler


def setup_logging(level: int | str = logging.INFO, log_file: str | Path | None = None) -> None:
    """
    Configure the root logger.

    Args:
        level: Logging level (int or name such as "DEBUG")
        log_file: Optional file path for logging output
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    # root stays at DEBUG so the file handler gets request traces; the console filters on `level`
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Streamlit re-runs the script; don't stack handlers
    root_logger.handlers.clear()

    console_handler = RichHandler(show_time=False, show_path=False, rich_tracebacks=True)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
        root_logger.addHandler(file_handler)

    for noisy in ("urllib3", "streamlit", "watchdog"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
