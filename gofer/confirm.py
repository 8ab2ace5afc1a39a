"""Modal confirmation and warning popups."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Optional

from .screen import Cmd, Hitbox, KeyMsg, MouseAction, MouseMsg, Screen, hit_test
from .style import (
    COLOR_ACCENT,
    ROUNDED_BORDER,
    STYLE_ACCENT,
    STYLE_ITEM_INACTIVE,
    STYLE_TITLE,
    Align,
    Style,
    join_vertical,
    place,
    text_height,
    visible_width,
)

POPUP_WIDTH = 50
_GAP = "   "


@dataclass(frozen=True)
class ResultMsg:
    """Sent by a popup when it closes."""

    action: str
    confirmed: bool


class _Focus(Enum):
    CONFIRM = auto()
    CANCEL = auto()


@dataclass(frozen=True)
class _Span:
    start_x: int = 0
    width: int = 0


def _half(n: int) -> int:
    return n // 2 if n >= 0 else -((-n) // 2)


class ConfirmModel(Screen):
    """A popup asking to confirm or cancel an action, or just to acknowledge it."""

    def __init__(
        self,
        action: str,
        title: str,
        message: str,
        confirm_label: str,
        danger: bool = False,
    ) -> None:
        self.action = action
        self.title = title
        self.message = message
        self.confirm_label = confirm_label
        self.danger = danger
        self.one_button = False
        self._focused = _Focus.CONFIRM
        self._parent_w = 0
        self._parent_h = 0
        self._origin_x = 0
        self._origin_y = 0
        self._hitboxes: list[Hitbox] = []

    def init(self) -> Optional[Cmd]:
        """Put the focus on the confirm button; no command is started."""
        self._focused = _Focus.CONFIRM
        self._hitboxes = []
        return None

    def set_size(self, width: int, height: int) -> None:
        self._parent_w, self._parent_h = width, height

    def set_origin(self, x: int, y: int) -> None:
        self._origin_x, self._origin_y = x, y

    def hitboxes(self) -> list[Hitbox]:
        return list(self._hitboxes)

    def update(self, msg: Any) -> tuple[Screen, Optional[Cmd]]:
        if isinstance(msg, KeyMsg):
            key = str(msg)
            if key == "esc":
                return self, self._result(False)
            if key == "enter":
                return self, self._result(self._focused is not _Focus.CANCEL)
            if key == "left":
                if not self.one_button:
                    self._focused = _Focus.CONFIRM
                return self, None
            if key == "right":
                if not self.one_button:
                    self._focused = _Focus.CANCEL
                return self, None
        elif isinstance(msg, MouseMsg):
            if msg.action is not MouseAction.PRESS:
                return self, None
            target = hit_test(self._hitboxes, msg.x, msg.y)
            if target == "popup_confirm":
                return self, self._result(True)
            if target == "popup_cancel":
                return self, self._result(False)
        return self, None

    def _result(self, confirmed: bool) -> Cmd:
        action = self.action

        def command() -> ResultMsg:
            return ResultMsg(action, confirmed)

        return command

    def view(self) -> str:
        self._hitboxes = []
        inner_width = POPUP_WIDTH - 2 - 4

        center = Style(width=inner_width, align=Align.CENTER)
        title = center.render(STYLE_TITLE.render(self.title))
        message = center.render(STYLE_ITEM_INACTIVE.render(self.message))
        message_h = text_height(message)

        buttons_row, confirm_span, cancel_span = self._build_buttons(inner_width)

        inner = join_vertical(Align.LEFT, title, "", message, "", buttons_row)
        box = Style(
            border=ROUNDED_BORDER,
            border_foreground=COLOR_ACCENT,
            padding=(1, 2, 1, 2),
            width=POPUP_WIDTH,
        ).render(inner)

        placed = place(self._parent_w, self._parent_h, Align.CENTER, Align.CENTER, box)

        popup_x = self._origin_x + _half(self._parent_w - visible_width(box))
        popup_y = self._origin_y + _half(self._parent_h - text_height(box))
        button_y = popup_y + 1 + 1 + 1 + 1 + message_h + 1
        text_x = popup_x + 1 + 2

        self._add_button("popup_confirm", text_x + confirm_span.start_x, button_y, confirm_span.width)
        if not self.one_button:
            self._add_button("popup_cancel", text_x + cancel_span.start_x, button_y, cancel_span.width)
        return placed

    def _build_buttons(self, inner_width: int) -> tuple[str, _Span, _Span]:
        confirm_text = f"[ {self.confirm_label} ]"
        cancel_text = "[ Cancel ]"
        row_style = Style(width=inner_width, align=Align.CENTER)

        if self.one_button:
            confirm = STYLE_ACCENT.render(confirm_text)
            confirm_w = visible_width(confirm)
            left_pad = _half(inner_width - confirm_w)
            return row_style.render(confirm), _Span(left_pad, confirm_w), _Span()

        if self._focused is _Focus.CONFIRM:
            confirm = STYLE_ACCENT.render(confirm_text)
            cancel = STYLE_ITEM_INACTIVE.render(cancel_text)
        else:
            confirm = STYLE_ITEM_INACTIVE.render(confirm_text)
            cancel = STYLE_ACCENT.render(cancel_text)

        confirm_w = visible_width(confirm)
        cancel_w = visible_width(cancel)
        gap_w = visible_width(_GAP)
        row_w = confirm_w + gap_w + cancel_w
        left_pad = max(_half(inner_width - row_w), 0)

        row = row_style.render(confirm + _GAP + cancel)
        return row, _Span(left_pad, confirm_w), _Span(left_pad + confirm_w + gap_w, cancel_w)

    def _add_button(self, button_id: str, x: int, y: int, width: int) -> None:
        self._hitboxes.append(Hitbox(x, y, x + width - 1, y, button_id))


def new_warning(action: str, title: str, message: str) -> ConfirmModel:
    """A popup with a single OK button."""
    model = ConfirmModel(action, title, message, "OK")
    model.one_button = True
    return model