# src/raci_tracker/connectors/console_connector.py

from __future__ import annotations

import logging
import shlex
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def ask_yes_no(prompt: str) -> bool:
    """Blocking confirmation prompt; EOF/Ctrl+C count as "no"."""
    try:
        answer = input(f"{prompt} [y/N]: ").strip().lower()
    except (EOFError, KeyboardInterrupt):
        print()
        return False
    return answer in ("y", "yes")


def run_console_loop(state: AppState) -> None:
    logger.info("Console started (tasks=%d, theme=%s).", len(state.store), state.theme)
    app_name = str(getattr(state.settings, "app_name", "RACI Task Master"))

    state.confirm = ask_yes_no

    _print_ts(f"{app_name}. Use /help for commands, /exit to quit.\n")
    print(command_registry.handle(state, "/list"))

    def emit(text: str) -> None:
        # Immediate user-visible feedback for long operations (plan generation).
        print(f"[{_ts_local()}] {text}", flush=True)

    while True:
        try:
            user_input = input("raci> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not user_input.startswith("/"):
            # Bare text is a shortcut for adding a task.
            user_input = "/add " + shlex.quote(user_input)

        try:
            reply = command_registry.handle(state, user_input, emit=emit)
        except Exception:
            logger.exception("Command handler crashed: %r", user_input)
            reply = "Internal error while handling a command."

        if reply is not None:
            print(reply)

    logger.info("Console finished.")
