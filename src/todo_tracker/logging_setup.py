# src/todo_tracker/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep stderr readable for a one-shot CLI:
    - allow todo_tracker logs at the configured console level
    - Python warnings (captured as 'py.warnings') and third-party logs only at ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "todo_tracker" or record.name.startswith("todo_tracker."):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_path: str | Path = "app.log",
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> None:
    """
    Configure logging with:
    - Console handler (stderr): filtered, quiet by default so command output stays clean
    - File handler: appends every record to log_path

    Call this ONCE, before the first logger call.
    Raises OSError if the log file cannot be opened; root handlers are then left untouched.
    """
    log_path = Path(log_path)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    fh = logging.FileHandler(str(log_path), mode="a", encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)
    root.addHandler(fh)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)
