"""Modal popup with a single text field and submit/cancel buttons."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Optional

from .screen import Cmd, Hitbox, KeyMsg, MouseAction, MouseMsg, Screen, hit_test
from .style import (
    COLOR_ACCENT,
    ROUNDED_BORDER,
    STYLE_ACCENT,
    STYLE_FAINT,
    STYLE_INPUT,
    STYLE_INPUT_FOCUSED,
    STYLE_ITEM_INACTIVE,
    STYLE_TITLE,
    Align,
    Style,
    join_vertical,
    place,
    text_height,
    visible_width,
)

FORM_WIDTH = 50
_GAP = "   "
_CURSOR_ON = "\x1b[7m"
_CURSOR_OFF = "\x1b[0m"


def _half(n: int) -> int:
    return n // 2 if n >= 0 else -((-n) // 2)


def _cursor(ch: str) -> str:
    return f"{_CURSOR_ON}{ch}{_CURSOR_OFF}"


@dataclass(frozen=True)
class FormResultMsg:
    """Sent by a form when it closes; value is empty when cancelled."""

    action: str
    confirmed: bool
    value: str = ""


class TextInput:
    """A single-line text field with a cursor and horizontal scrolling.

    width is the number of visible cells (0 means unlimited); char_limit
    caps the length of the value (0 means unlimited).
    """

    def __init__(
        self,
        placeholder: str = "",
        width: int = 0,
        char_limit: int = 0,
        prompt: str = "",
    ) -> None:
        self.placeholder = placeholder
        self.width = width
        self.char_limit = char_limit
        self.prompt = prompt
        self.focused = False
        self._chars: list[str] = []
        self._pos = 0
        self._offset = 0

    @property
    def value(self) -> str:
        return "".join(self._chars)

    @value.setter
    def value(self, text: str) -> None:
        chars = list(text)
        if self.char_limit > 0:
            chars = chars[: self.char_limit]
        self._chars = chars
        self._pos = len(chars)

    def focus(self) -> None:
        self.focused = True

    def blur(self) -> None:
        self.focused = False

    def update(self, msg: Any) -> tuple[TextInput, Optional[Cmd]]:
        """Apply a key press to the field; ignored while blurred."""
        if not self.focused or not isinstance(msg, KeyMsg):
            return self, None
        key = str(msg)
        if key == "backspace":
            if self._pos > 0:
                del self._chars[self._pos - 1]
                self._pos -= 1
        elif key == "delete":
            if self._pos < len(self._chars):
                del self._chars[self._pos]
        elif key == "left":
            self._pos = max(self._pos - 1, 0)
        elif key == "right":
            self._pos = min(self._pos + 1, len(self._chars))
        elif key in ("home", "ctrl+a"):
            self._pos = 0
        elif key in ("end", "ctrl+e"):
            self._pos = len(self._chars)
        elif key == "ctrl+u":
            del self._chars[: self._pos]
            self._pos = 0
        elif key == "ctrl+k":
            del self._chars[self._pos:]
        elif len(key) == 1 and key.isprintable():
            if self.char_limit <= 0 or len(self._chars) < self.char_limit:
                self._chars.insert(self._pos, key)
                self._pos += 1
        return self, None

    def _scroll(self) -> None:
        if self.width <= 0:
            self._offset = 0
        elif self._pos < self._offset:
            self._offset = self._pos
        elif self._pos - self._offset >= self.width:
            self._offset = self._pos - self.width + 1

    def _placeholder_view(self) -> str:
        text = self.placeholder[: self.width] if self.width > 0 else self.placeholder
        if not self.focused:
            return STYLE_FAINT.render(text)
        rest = STYLE_FAINT.render(text[1:]) if len(text) > 1 else ""
        return _cursor(text[0]) + rest

    def view(self) -> str:
        """The visible part of the field, with the cursor shown when focused."""
        if not self._chars and self.placeholder:
            return self.prompt + self._placeholder_view()
        self._scroll()
        if self.width > 0:
            visible = self._chars[self._offset: self._offset + self.width]
        else:
            visible = list(self._chars)
        if not self.focused:
            return self.prompt + "".join(visible)
        rel = self._pos - self._offset
        if rel < len(visible):
            visible[rel] = _cursor(visible[rel])
        else:
            visible.append(_cursor(" "))
        return self.prompt + "".join(visible)


class _Focus(Enum):
    INPUT = auto()
    SUBMIT = auto()
    CANCEL = auto()


_ORDER = (_Focus.INPUT, _Focus.SUBMIT, _Focus.CANCEL)


class FormModel(Screen):
    """A popup asking for one line of text."""

    def __init__(
        self,
        action: str,
        title: str,
        label: str,
        placeholder: str,
        submit_label: str,
        char_limit: int = 0,
    ) -> None:
        self.action = action
        self.title = title
        self.label = label
        self.placeholder = placeholder
        self.submit_label = submit_label
        self.input = TextInput(
            placeholder=placeholder,
            width=FORM_WIDTH - 2 - 4 - 2,
            char_limit=max(char_limit, 0),
        )
        self.input.focus()
        self._focused = _Focus.INPUT
        self._parent_w = 0
        self._parent_h = 0
        self._origin_x = 0
        self._origin_y = 0
        self._hitboxes: list[Hitbox] = []

    def init(self) -> Optional[Cmd]:
        """Put the focus on the text field; no command is started."""
        self._focused = _Focus.INPUT
        self._apply_focus()
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
                return self, self._cancel()
            if key == "enter":
                if self._focused is _Focus.CANCEL:
                    return self, self._cancel()
                return self, self._submit()
            if key in ("tab", "shift+tab"):
                step = 1 if key == "tab" else -1
                self._focused = _ORDER[(_ORDER.index(self._focused) + step) % len(_ORDER)]
                self._apply_focus()
                return self, None
            if key in ("left", "right"):
                if self._focused is _Focus.INPUT:
                    self.input, cmd = self.input.update(msg)
                    return self, cmd
                if key == "left" and self._focused is _Focus.CANCEL:
                    self._focused = _Focus.SUBMIT
                    self._apply_focus()
                elif key == "right" and self._focused is _Focus.SUBMIT:
                    self._focused = _Focus.CANCEL
                    self._apply_focus()
                return self, None
        elif isinstance(msg, MouseMsg):
            if msg.action is not MouseAction.PRESS:
                return self, None
            target = hit_test(self._hitboxes, msg.x, msg.y)
            if target == "form_submit":
                return self, self._submit()
            if target == "form_cancel":
                return self, self._cancel()
            if target == "form_input":
                self._focused = _Focus.INPUT
                self._apply_focus()
                return self, None

        if self._focused is _Focus.INPUT:
            self.input, cmd = self.input.update(msg)
            return self, cmd
        return self, None

    def _apply_focus(self) -> None:
        if self._focused is _Focus.INPUT:
            self.input.focus()
        else:
            self.input.blur()

    def _submit(self) -> Cmd:
        action, value = self.action, self.input.value

        def command() -> FormResultMsg:
            return FormResultMsg(action, True, value)

        return command

    def _cancel(self) -> Cmd:
        action = self.action

        def command() -> FormResultMsg:
            return FormResultMsg(action, False)

        return command

    def view(self) -> str:
        self._hitboxes = []
        inner_width = FORM_WIDTH - 2 - 4

        center = Style(width=inner_width, align=Align.CENTER)
        title = center.render(STYLE_TITLE.render(self.title))
        label = STYLE_FAINT.render(self.label)

        input_style = STYLE_INPUT_FOCUSED if self._focused is _Focus.INPUT else STYLE_INPUT
        fixed_input = Style(width=self.input.width).render(self.input.view())
        input_box = input_style.render(fixed_input)

        submit_text = f"[ {self.submit_label} ]"
        cancel_text = "[ Cancel ]"
        if self._focused is _Focus.SUBMIT:
            submit = STYLE_ACCENT.render(submit_text)
            cancel = STYLE_ITEM_INACTIVE.render(cancel_text)
        elif self._focused is _Focus.CANCEL:
            submit = STYLE_ITEM_INACTIVE.render(submit_text)
            cancel = STYLE_ACCENT.render(cancel_text)
        else:
            submit = STYLE_ITEM_INACTIVE.render(submit_text)
            cancel = STYLE_ITEM_INACTIVE.render(cancel_text)

        gap_w = visible_width(_GAP)
        submit_w = visible_width(submit)
        cancel_w = visible_width(cancel)
        row_w = submit_w + gap_w + cancel_w
        left_pad = max(_half(inner_width - row_w), 0)
        buttons_row = Style(width=inner_width, align=Align.CENTER).render(submit + _GAP + cancel)

        inner = join_vertical(Align.LEFT, title, "", label, input_box, "", buttons_row)
        box = Style(
            border=ROUNDED_BORDER,
            border_foreground=COLOR_ACCENT,
            padding=(1, 2, 1, 2),
            width=FORM_WIDTH,
        ).render(inner)

        placed = place(self._parent_w, self._parent_h, Align.CENTER, Align.CENTER, box)

        popup_x = self._origin_x + _half(self._parent_w - visible_width(box))
        popup_y = self._origin_y + _half(self._parent_h - text_height(box))
        inner_x = popup_x + 1 + 2
        inner_y = popup_y + 1 + 1

        input_y = inner_y + text_height(title) + 1 + text_height(label)
        input_click_y = input_y + 1
        self._hitboxes.append(
            Hitbox(inner_x, input_click_y, inner_x + visible_width(input_box) - 1, input_click_y, "form_input")
        )

        button_y = input_y + text_height(input_box) + 1
        submit_x1 = inner_x + left_pad
        submit_x2 = submit_x1 + submit_w - 1
        cancel_x1 = submit_x2 + 1 + gap_w
        cancel_x2 = cancel_x1 + cancel_w - 1
        self._hitboxes.append(Hitbox(submit_x1, button_y, submit_x2, button_y, "form_submit"))
        self._hitboxes.append(Hitbox(cancel_x1, button_y, cancel_x2, button_y, "form_cancel"))
        return placed