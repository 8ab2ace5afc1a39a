"""Clipboard commands and the messages they report with."""

from __future__ import annotations

import base64
import sys
import time
from dataclasses import dataclass
from typing import Callable, Optional

CLEAR_DELAY = 2.0

Copier = Callable[[str], None]


@dataclass(frozen=True)
class CopiedMsg:
    """The value was copied for the given target."""

    target: str


@dataclass(frozen=True)
class CopyFailedMsg:
    """Copying for the given target failed."""

    target: str
    error: Optional[Exception] = None


@dataclass(frozen=True)
class ClearCopiedMsg:
    """Time to drop the copy feedback shown for the given target."""

    target: str


def _terminal_copy(value: str) -> None:
    stream = sys.__stdout__
    if stream is None or not stream.isatty():
        raise OSError("no terminal to copy to")
    payload = base64.b64encode(value.encode("utf-8")).decode("ascii")
    stream.write(f"\x1b]52;c;{payload}\x07")
    stream.flush()


def copy_cmd(target: str, value: str, copier: Optional[Copier] = None) -> Callable[[], object]:
    """Command that copies value and reports CopiedMsg or CopyFailedMsg."""
    do_copy = copier if copier is not None else _terminal_copy

    def command() -> object:
        try:
            do_copy(value)
        except Exception as exc:  # any failure is reported back to the UI
            return CopyFailedMsg(target, exc)
        return CopiedMsg(target)

    return command


def clear_after_timeout(target: str, delay: float = CLEAR_DELAY) -> Callable[[], ClearCopiedMsg]:
    """Command that waits delay seconds, then sends ClearCopiedMsg."""

    def command() -> ClearCopiedMsg:
        time.sleep(delay)
        return ClearCopiedMsg(target)

    return command