# src/raci_tracker/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs the console REPL.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging
from .bootstrap import create_initial_state

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    level_name = str(settings.log_level).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    # INFO lines would interleave with the REPL; the file log keeps everything.
    setup_logging(log_dir=settings.data_dir, console_level=max(console_level, logging.WARNING))

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)
    try:
        run_console_loop(state)
    finally:
        if state.detach_persistence is not None:
            state.detach_persistence()
        logger.info("Bye.")


if __name__ == "__main__":
    main()
