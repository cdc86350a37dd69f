# src/todo_tracker/cli/main.py

"""
CLI entrypoint.

One command per process: initializes logging, builds AppState, dispatches
argv through the command registry, prints the result and returns the exit
code. Storage failures end the invocation with a distinct code.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence

from ..cli.bootstrap import create_initial_state
from ..cli.commands import EXIT_CORRUPT, EXIT_IO, CommandResult, registry
from ..config import get_settings
from ..logging_setup import setup_logging
from ..tasks.task_store import CorruptStoreError, StorageIOError

logger = logging.getLogger(__name__)


def _console_level(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.CRITICAL


def _emit(result: CommandResult) -> None:
    if result.is_error:
        print(f"Error: {result.text}", file=sys.stderr)
    else:
        print(result.text)


def main(argv: Sequence[str] | None = None) -> int:
    settings = get_settings()
    try:
        setup_logging(log_path=settings.log_path, console_level=_console_level(settings.log_level))
    except OSError as e:
        print(f"Error: cannot open log file {settings.log_path}: {e.strerror or e}", file=sys.stderr)
        return EXIT_IO

    args = list(sys.argv[1:] if argv is None else argv)
    logger.debug("Starting %s args=%s", settings.app_name, args)

    state = create_initial_state(settings=settings)

    try:
        result = registry.handle(state, args)
    except CorruptStoreError as e:
        logger.error("Corrupt task file %s: %s", e.path, e.reason)
        print(f"Error: {e}. Fix or remove the file and try again.", file=sys.stderr)
        return EXIT_CORRUPT
    except StorageIOError as e:
        logger.error("Storage I/O failure on %s: %s", e.path, e.cause)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_IO

    _emit(result)
    return result.exit_code


if __name__ == "__main__":
    sys.exit(main())
