# src/stock_demo/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
from collections.abc import Callable
from typing import cast

from ..core.state import AppState
from ..errors import StockDemoError

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /fetch, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  /exit - Quit.")
        return "\n".join(lines)


registry = CommandRegistry()


def _box_name(args: list[str]) -> str:
    """Accept "/drop 2", "/drop box 2" and "/drop Box 2"."""
    raw = " ".join(args).strip()
    if raw.isdigit():
        return f"Box {raw}"
    if raw.lower().startswith("box "):
        return "Box " + raw[4:].strip()
    return raw


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    def snapshot() -> str:
        view = state.view
        sub = view.subscription
        feed = f"attached, {sub.delivered} samples delivered" if sub is not None else "detached"
        button = "enabled" if view.button_enabled else "disabled (task running)"
        return (
            "Status:\n"
            f"  Feed: {feed}\n"
            f"  {view.realtime_text}\n"
            f"  Async result: {view.result_text or '-'}\n"
            f"  Fetch button: {button}\n"
            f"  Background tasks running: {state.runner.outstanding}"
        )

    return state.ui.call(snapshot)


def cmd_price(state: AppState, args: list[str]) -> str:
    return state.ui.call(lambda: state.view.realtime_text)


def cmd_fetch(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    handle = state.ui.call(state.view.fetch_async_data)
    if handle is None:
        return state.ui.call(lambda: state.view.result_text) or "Fetch ignored."

    if emit:
        with contextlib.suppress(Exception):
            emit(f"[TASK] {handle.name} started; the result will be printed when ready.")
    return state.ui.call(lambda: state.view.result_text)


def cmd_result(state: AppState, args: list[str]) -> str:
    return state.ui.call(lambda: state.view.result_text) or "No result yet. Use /fetch."


def cmd_attach(state: AppState, args: list[str]) -> str:
    try:
        state.ui.call(state.view.attach)
    except StockDemoError as e:
        return f"Cannot attach: {e}"
    return "Live price feed attached."


def cmd_detach(state: AppState, args: list[str]) -> str:
    state.ui.call(state.view.detach)
    return "Live price feed detached."


def cmd_boxes(state: AppState, args: list[str]) -> str:
    def snapshot() -> str:
        board = state.view.board
        source = ", ".join(board.source) or "(empty)"
        zone = board.drop_zone or "(empty)"
        return f"Source: {source}\nDrop-Zone: {zone}"

    return state.ui.call(snapshot)


def cmd_drop(state: AppState, args: list[str]) -> str:
    """
    /drop <box>   -> drag a box into the drop zone (e.g. /drop 2)
    """
    if not args:
        return "Usage: /drop <box>, e.g. /drop 1"
    name = _box_name(args)

    def drag_and_drop() -> str:
        board = state.view.board
        board.drag_start(name)
        try:
            return board.drop(name)
        finally:
            board.drag_end(name)

    try:
        return state.ui.call(drag_and_drop)
    except KeyError:
        return f"Unknown box: {name!r}. Use /boxes to list them."
    except StockDemoError as e:
        return str(e)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show feed, task and button state.")
registry.register("price", cmd_price, help_text="Show the current stock price.")
registry.register("fetch", cmd_fetch, help_text="Fetch async data (runs a long background task).")
registry.register("result", cmd_result, help_text="Show the last async result.")
registry.register("attach", cmd_attach, help_text="Attach the view (start the live price feed).")
registry.register("detach", cmd_detach, help_text="Detach the view (cancel the live price feed).")
registry.register("boxes", cmd_boxes, help_text="Show the drag-and-drop board.")
registry.register("drop", cmd_drop, help_text="Drop a box into the drop zone: /drop 1")
