# src/nextup/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then either:
- runs the arguments as a single command (`nextup next`, `nextup add Buy milk --due 2d`), or
- starts the interactive console loop when no arguments are given.
"""

from __future__ import annotations

import logging
import sys

from ..cli.bootstrap import create_initial_state
from ..cli.commands import CommandError
from ..cli.commands import registry as command_registry
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _shutdown(state) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    # TaskStore uses short-lived sqlite connections per call; close() is a hook only.
    try:
        store = getattr(state, "task_store", None)
        if store is not None and hasattr(store, "close"):
            store.close()
    except Exception:
        logger.debug("Task store close failed.", exc_info=True)


def run_once(state, argv: list[str]) -> int:
    """Run one command given as CLI arguments; return the process exit code."""
    line = "/" + " ".join(argv).lstrip("/")
    try:
        reply = command_registry.dispatch(state, line)
    except CommandError as e:
        print(e)
        return 1
    if reply is None:
        return 2
    print(reply)
    return 0


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    log_dir = getattr(settings, "data_dir", ".local/nextup")
    # One-shot commands print their reply on stdout; keep the console quiet.
    setup_logging(log_dir=log_dir, console_level=console_level if not argv else logging.WARNING)

    logger.info("Starting %s...", getattr(settings, "app_name", "nextup"))

    state = create_initial_state(settings=settings)

    try:
        if argv:
            return run_once(state, argv)
        run_console_loop(state)
        return 0
    finally:
        _shutdown(state)
        logger.info("Bye.")


if __name__ == "__main__":
    sys.exit(main())
