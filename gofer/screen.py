"""Screen contract, clickable regions, input messages and command helpers."""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum, auto
from typing import Any, Callable, Optional, Sequence

Cmd = Callable[[], Any]


@dataclass(frozen=True)
class Hitbox:
    """A clickable area in terminal cells, inclusive on both ends."""

    x1: int
    y1: int
    x2: int
    y2: int
    id: str

    def contains(self, x: int, y: int) -> bool:
        return self.x1 <= x <= self.x2 and self.y1 <= y <= self.y2


def hit_test(boxes: Sequence[Hitbox], x: int, y: int) -> str:
    """Return the id of the last-added box holding (x, y), or an empty string."""
    return next((box.id for box in reversed(boxes) if box.contains(x, y)), "")


class Screen(ABC):
    """One screen of the application; the main model delegates to it.

    set_size and set_origin are called before view; hitboxes returns the
    regions registered by the latest view in whole-terminal coordinates.
    """

    @abstractmethod
    def init(self) -> Optional[Cmd]:
        ...

    @abstractmethod
    def update(self, msg: Any) -> tuple[Screen, Optional[Cmd]]:
        ...

    @abstractmethod
    def view(self) -> str:
        ...

    @abstractmethod
    def hitboxes(self) -> list[Hitbox]:
        ...

    @abstractmethod
    def set_size(self, width: int, height: int) -> None:
        ...

    @abstractmethod
    def set_origin(self, x: int, y: int) -> None:
        ...


class MouseAction(Enum):
    PRESS = auto()
    RELEASE = auto()
    MOTION = auto()


class MouseButton(Enum):
    NONE = auto()
    LEFT = auto()
    MIDDLE = auto()
    RIGHT = auto()
    WHEEL_UP = auto()
    WHEEL_DOWN = auto()
    WHEEL_LEFT = auto()
    WHEEL_RIGHT = auto()


@dataclass(frozen=True)
class KeyMsg:
    """A key press, named like "enter", "tab", "ctrl+c" or a single character."""

    key: str

    def __str__(self) -> str:
        return self.key


@dataclass(frozen=True)
class MouseMsg:
    x: int
    y: int
    action: MouseAction = MouseAction.PRESS
    button: MouseButton = MouseButton.LEFT


@dataclass(frozen=True)
class WindowSizeMsg:
    width: int
    height: int


@dataclass(frozen=True)
class QuitMsg:
    """Asks the program to stop."""


@dataclass(frozen=True)
class BatchMsg:
    """Several commands to be run concurrently."""

    commands: tuple[Cmd, ...]


def batch(*args: Optional[Cmd]) -> Optional[Cmd]:
    """Combine commands, dropping None; a lone command is returned as is."""
    commands = tuple(cmd for cmd in args if cmd is not None)
    if not commands:
        return None
    if len(commands) == 1:
        return commands[0]

    def command() -> BatchMsg:
        return BatchMsg(commands)

    return command


def quit_cmd() -> QuitMsg:
    """Command that stops the program."""
    return QuitMsg()


def tick(seconds: float, factory: Callable[[datetime], Any]) -> Cmd:
    """Command that waits, then produces factory(current time)."""

    def command() -> Any:
        time.sleep(seconds)
        return factory(datetime.now())

    return command