# src/stock_demo/connectors/console_connector.py

from __future__ import annotations

import logging
from datetime import datetime

from ..core.state import AppState
from ..cli.commands import registry as command_registry

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


def make_change_printer(state_ref: list[AppState], *, print_ticks: bool):
    """
    Build the view's on_change listener. It runs on the UI thread.

    state_ref is filled after the state is built (the listener is needed to build it).
    """

    def on_change(what: str) -> None:
        if not state_ref:
            return
        view = state_ref[0].view
        if what == "realtime":
            if print_ticks:
                _print_ts(view.realtime_text)
        elif what == "result":
            _print_ts(f"[ASYNC] {view.result_text}")

    return on_change


def run_console_loop(state: AppState) -> None:
    logger.info("Console started.")
    _print_ts("[CONSOLE] Live prices are streaming. Use /help for commands. Use /exit to quit.\n")

    def emit(text: str) -> None:
        # Immediate user-visible feedback for long operations.
        _print_ts(text)

    while True:
        try:
            user_input = input().strip()
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
            _print_ts("Commands start with '/'. Use /help to list them.")
            continue

        try:
            response = command_registry.handle(state, user_input, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        if response is not None:
            _print_ts(response)

    logger.info("Console finished.")
