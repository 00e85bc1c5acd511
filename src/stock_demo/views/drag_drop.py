# src/stock_demo/views/drag_drop.py

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from ..errors import ViewStateError

logger = logging.getLogger(__name__)

Notifier = Callable[[str], None]

DEFAULT_BOXES: tuple[tuple[str, str], ...] = (
    ("Box 1", "box-blue"),
    ("Box 2", "box-red"),
    ("Box 3", "box-green"),
)


@dataclass(slots=True)
class Box:
    name: str
    color_class: str
    classes: set[str] = field(default_factory=set)

    def __post_init__(self) -> None:
        self.classes.update({"draggable-box", self.color_class})

    @property
    def dragging(self) -> bool:
        return "dragging" in self.classes


class DragDropBoard:
    """
    Source container + single-slot drop zone.

    Dropping a box moves it into the zone. The zone is cleared first, so a box that
    was sitting there leaves the board entirely.
    """

    def __init__(
        self,
        notifier: Notifier | None = None,
        boxes: tuple[tuple[str, str], ...] = DEFAULT_BOXES,
    ) -> None:
        self._notifier = notifier
        self._boxes = {name: Box(name, color) for name, color in boxes}
        self.source: list[str] = [name for name, _ in boxes]
        self.drop_zone: str | None = None

    def box(self, name: str) -> Box:
        return self._boxes[name]

    def on_board(self, name: str) -> bool:
        return name in self.source or name == self.drop_zone

    def drag_start(self, name: str) -> None:
        self._boxes[name].classes.add("dragging")

    def drag_end(self, name: str) -> None:
        self._boxes[name].classes.discard("dragging")

    def drop(self, name: str) -> str:
        box = self._boxes[name]
        if not self.on_board(name):
            raise ViewStateError(f"{name!r} is no longer on the board")

        if name in self.source:
            self.source.remove(name)
        previous = self.drop_zone
        if previous is not None and previous != name:
            logger.debug("Drop zone cleared: %s removed", previous)
        self.drop_zone = box.name

        message = f"'{box.name}' successfully dropped!"
        if self._notifier is not None:
            self._notifier(message)
        return message
