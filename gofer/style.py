"""Terminal text styling, block layout helpers and the application palette."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from wcwidth import wcwidth

_ANSI_RE = re.compile(r"(\x1b\[[0-9;?]*[A-Za-z]|\x1b\][^\x07\x1b]*(?:\x07|\x1b\\))")
_RESET = "\x1b[0m"


class Align(Enum):
    """Position of a block inside a wider or taller area."""

    LEFT = 0.0
    CENTER = 0.5
    RIGHT = 1.0
    TOP = 0.0
    BOTTOM = 1.0


@dataclass(frozen=True)
class Border:
    """Characters used to draw a box around a block."""

    top: str
    bottom: str
    left: str
    right: str
    top_left: str
    top_right: str
    bottom_left: str
    bottom_right: str


NORMAL_BORDER = Border("─", "─", "│", "│", "┌", "┐", "└", "┘")
ROUNDED_BORDER = Border("─", "─", "│", "│", "╭", "╮", "╰", "╯")
DOUBLE_BORDER = Border("═", "═", "║", "║", "╔", "╗", "╚", "╝")


def _char_width(ch: str) -> int:
    return max(wcwidth(ch), 0)


def _line_width(line: str) -> int:
    return sum(_char_width(ch) for ch in _ANSI_RE.sub("", line))


def visible_width(text: str) -> int:
    """Width in terminal cells of the widest line, escape sequences ignored."""
    return max(_line_width(line) for line in text.split("\n"))


def text_height(text: str) -> int:
    """Number of lines in text."""
    return text.count("\n") + 1


def _pad_line(line: str, target: int, align: Align) -> str:
    short = target - _line_width(line)
    if short <= 0:
        return line
    if align is Align.RIGHT:
        return " " * short + line
    if align is Align.CENTER:
        left = short // 2
        return " " * left + line + " " * (short - left)
    return line + " " * short


@dataclass
class _Cell:
    prefix: str
    char: str
    width: int


def _cells(line: str) -> tuple[list[_Cell], str]:
    cells: list[_Cell] = []
    pending = ""
    for index, part in enumerate(_ANSI_RE.split(line)):
        if index % 2:
            pending += part
            continue
        for ch in part:
            cells.append(_Cell(pending, ch, _char_width(ch)))
            pending = ""
    return cells, pending


def _wrap_line(line: str, limit: int) -> list[str]:
    """Word-wrap one line to limit cells, keeping colours across breaks."""
    if limit <= 0 or _line_width(line) <= limit:
        return [line]
    cells, tail = _cells(line)
    rows: list[list[_Cell]] = []
    row: list[_Cell] = []
    width = 0
    space = -1
    for cell in cells:
        if cell.char == " " and width + cell.width > limit:
            rows.append(row)
            row, width, space = [_Cell(cell.prefix, "", 0)], 0, -1
            continue
        if width + cell.width > limit and width > 0:
            if space >= 0:
                dropped, rest = row[space], row[space + 1:]
                rows.append(row[:space])
                row = [_Cell(dropped.prefix, "", 0), *rest]
                width = sum(c.width for c in rest)
            else:
                rows.append(row)
                row, width = [], 0
            space = -1
            if width + cell.width > limit and width > 0:
                rows.append(row)
                row, width = [], 0
        if cell.char == " ":
            space = len(row)
        row.append(cell)
        width += cell.width
    rows.append(row)

    out: list[str] = []
    active = ""
    last = len(rows) - 1
    for index, cells_in_row in enumerate(rows):
        body = "".join(c.prefix + c.char for c in cells_in_row)
        if index == last:
            body += tail
        text = active + body
        for esc in _ANSI_RE.findall(body):
            if esc.startswith("\x1b[") and esc.endswith("m"):
                active = "" if esc in (_RESET, "\x1b[m") else active + esc
        if active and index < last:
            text += _RESET
        out.append(text)
    return out


def _color_code(color: str) -> str:
    hexpart = color.lstrip("#")
    red, green, blue = (int(hexpart[i:i + 2], 16) for i in (0, 2, 4))
    return f"38;2;{red};{green};{blue}"


@dataclass(frozen=True)
class Style:
    """How to draw a block of text: colour, padding, size, alignment and border.

    width and height include padding but not the border; both are minimums,
    and text is word-wrapped to fit the width. border_sides is
    (top, right, bottom, left); None draws every side.
    """

    foreground: Optional[str] = None
    bold: bool = False
    border: Optional[Border] = None
    border_sides: Optional[tuple[bool, bool, bool, bool]] = None
    border_foreground: Optional[str] = None
    padding: tuple[int, int, int, int] = (0, 0, 0, 0)
    width: int = 0
    height: int = 0
    align: Align = Align.LEFT

    def _text_codes(self) -> str:
        codes = []
        if self.bold:
            codes.append("1")
        if self.foreground:
            codes.append(_color_code(self.foreground))
        return ";".join(codes)

    def _paint_border(self, text: str) -> str:
        if not self.border_foreground or not text:
            return text
        return f"\x1b[{_color_code(self.border_foreground)}m{text}{_RESET}"

    def render(self, text: str) -> str:
        """Draw text with this style."""
        pad_top, pad_right, pad_bottom, pad_left = self.padding
        lines = text.replace("\r\n", "\n").replace("\t", "    ").split("\n")

        if self.width > 0:
            limit = self.width - pad_left - pad_right
            lines = [row for line in lines for row in _wrap_line(line, limit)]

        codes = self._text_codes()
        if codes:
            lines = [f"\x1b[{codes}m{line}{_RESET}" if line else line for line in lines]

        if pad_left or pad_right:
            lines = [" " * pad_left + line + " " * pad_right for line in lines]
        lines = [""] * pad_top + lines + [""] * pad_bottom

        if self.height > len(lines):
            lines += [""] * (self.height - len(lines))

        if len(lines) > 1 or self.width > 0:
            target = max(max(_line_width(line) for line in lines), self.width)
            lines = [_pad_line(line, target, self.align) for line in lines]

        if self.border is not None:
            lines = self._apply_border(lines)
        return "\n".join(lines)

    def _apply_border(self, lines: list[str]) -> list[str]:
        border = self.border
        top, right, bottom, left = self.border_sides or (True, True, True, True)
        width = max(_line_width(line) for line in lines)
        paint = self._paint_border
        out: list[str] = []
        if top:
            edge = (border.top_left if left else "") + border.top * width + (border.top_right if right else "")
            out.append(paint(edge))
        for line in lines:
            out.append((paint(border.left) if left else "") + line + (paint(border.right) if right else ""))
        if bottom:
            edge = (
                (border.bottom_left if left else "")
                + border.bottom * width
                + (border.bottom_right if right else "")
            )
            out.append(paint(edge))
        return out


def join_vertical(align: Align, *args: str) -> str:
    """Stack blocks top to bottom, lining them up horizontally by align."""
    if not args:
        return ""
    lines = [line for block in args for line in block.split("\n")]
    target = max(_line_width(line) for line in lines)
    out = []
    for line in lines:
        short = target - _line_width(line)
        if align is Align.RIGHT:
            out.append(" " * short + line)
        elif align is Align.CENTER:
            left = (short + 1) // 2
            out.append(" " * left + line + " " * (short - left))
        else:
            out.append(line + " " * short)
    return "\n".join(out)


def join_horizontal(align: Align, *args: str) -> str:
    """Place blocks side by side, lining them up vertically by align."""
    if not args:
        return ""
    blocks = [block.split("\n") for block in args]
    height = max(len(lines) for lines in blocks)
    columns = []
    for lines in blocks:
        width = max(_line_width(line) for line in lines)
        padded = [line + " " * (width - _line_width(line)) for line in lines]
        gap = height - len(padded)
        blank = " " * width
        if align is Align.BOTTOM:
            top = gap
        elif align is Align.CENTER:
            top = gap // 2
        else:
            top = 0
        columns.append([blank] * top + padded + [blank] * (gap - top))
    return "\n".join("".join(column[row] for column in columns) for row in range(height))


def place(width: int, height: int, halign: Align, valign: Align, block: str) -> str:
    """Position block inside an area of width x height cells."""
    lines = block.split("\n")
    content_width = max(_line_width(line) for line in lines)
    if width > content_width:
        lines = [_pad_line(line, width, halign) for line in lines]

    gap = height - len(lines)
    if gap > 0:
        blank = " " * max(_line_width(line) for line in lines)
        if valign is Align.BOTTOM:
            top = gap
        elif valign is Align.CENTER:
            top = gap // 2
        else:
            top = 0
        lines = [blank] * top + lines + [blank] * (gap - top)
    return "\n".join(lines)


def space_between(left: str, right: str, width: int) -> str:
    """Join left and right with spaces so the result spans width cells; at least one space."""
    gap = max(width - visible_width(left) - visible_width(right), 1)
    return left + " " * gap + right


# === Palette (Kanagawa Wave) ===

SIDEBAR_WIDTH = 22

COLOR_BACKGROUND = "#1F1F28"
COLOR_TEXT = "#DCD7BA"
COLOR_PRIMARY = "#C0A36E"
COLOR_SECONDARY = "#7FB4CA"
COLOR_ACCENT = "#D27E99"
COLOR_DANGER = "#E82424"
COLOR_SUCCESS = "#98BB6C"
COLOR_MUTED = "#727169"

# === Text ===

STYLE_TITLE = Style(foreground=COLOR_PRIMARY, bold=True)
STYLE_ACCENT = Style(foreground=COLOR_SECONDARY)
STYLE_FAINT = Style(foreground=COLOR_MUTED)
STYLE_DANGER = Style(foreground=COLOR_DANGER)
STYLE_OK = Style(foreground=COLOR_SUCCESS)
STYLE_USERNAME = Style(foreground=COLOR_ACCENT, bold=True)

# === Application frame ===

STYLE_APP_FRAME = Style(border=DOUBLE_BORDER, border_foreground=COLOR_PRIMARY)
STYLE_HEADER = Style(
    border=DOUBLE_BORDER,
    border_sides=(False, False, True, False),
    border_foreground=COLOR_PRIMARY,
    padding=(0, 1, 0, 1),
)
STYLE_FOOTER = Style(
    border=DOUBLE_BORDER,
    border_sides=(True, False, False, False),
    border_foreground=COLOR_PRIMARY,
    padding=(0, 1, 0, 1),
)
STYLE_BODY = Style(padding=(1, 2, 1, 2))

# === Buttons ===

STYLE_BUTTON = Style(
    border=ROUNDED_BORDER, border_foreground=COLOR_MUTED, foreground=COLOR_TEXT, padding=(0, 2, 0, 2)
)
STYLE_BUTTON_FOCUSED = Style(
    border=ROUNDED_BORDER,
    border_foreground=COLOR_PRIMARY,
    foreground=COLOR_PRIMARY,
    bold=True,
    padding=(0, 2, 0, 2),
)
STYLE_BUTTON_CLOSE = Style(foreground=COLOR_DANGER, bold=True)
STYLE_BUTTON_SEND = Style(foreground=COLOR_SECONDARY, bold=True)
STYLE_BUTTON_NET_ON = Style(foreground=COLOR_SECONDARY, bold=True)
STYLE_BUTTON_NET_OFF = Style(foreground=COLOR_DANGER, bold=True)

# === Inputs ===

STYLE_INPUT = Style(border=ROUNDED_BORDER, border_foreground=COLOR_MUTED, padding=(0, 1, 0, 1))
STYLE_INPUT_FOCUSED = Style(
    border=ROUNDED_BORDER, border_foreground=COLOR_SECONDARY, padding=(0, 1, 0, 1)
)

# === Sidebar ===

STYLE_SIDEBAR = Style(
    border=NORMAL_BORDER, border_sides=(False, True, False, False), border_foreground=COLOR_MUTED
)
STYLE_SECTION_HEADER = Style(foreground=COLOR_PRIMARY, bold=True)
STYLE_ITEM_ACTIVE = Style(foreground=COLOR_SECONDARY, bold=True)
STYLE_ITEM_INACTIVE = Style(foreground=COLOR_MUTED)

# === Tabs ===

STYLE_TAB_ACTIVE = Style(foreground=COLOR_SECONDARY, bold=True)
STYLE_TAB_INACTIVE = Style(foreground=COLOR_MUTED)

# === Chat ===

STYLE_CHAT = Style(padding=(0, 0, 0, 1))
STYLE_TIMESTAMP = Style(foreground=COLOR_MUTED)
STYLE_MESSAGE_SENDER = Style(foreground=COLOR_ACCENT, bold=True)
STYLE_MESSAGE_TEXT = Style(foreground=COLOR_TEXT)

# === Presence ===

STYLE_ONLINE = Style(foreground=COLOR_SECONDARY)
STYLE_OFFLINE = Style(foreground=COLOR_MUTED)

# === Popups ===

STYLE_POPUP = Style(border=ROUNDED_BORDER, border_foreground=COLOR_PRIMARY, padding=(1, 2, 1, 2))
STYLE_HELP_POPUP = Style(border=ROUNDED_BORDER, border_foreground=COLOR_PRIMARY, padding=(1, 2, 1, 2))
STYLE_HELP_TITLE = Style(foreground=COLOR_PRIMARY, bold=True)
STYLE_HELP_SECTION = Style(foreground=COLOR_PRIMARY)
STYLE_HELP_KEY = Style(foreground=COLOR_SECONDARY)
STYLE_HELP_DESC = Style(foreground=COLOR_MUTED)

# === Divider ===

STYLE_DIVIDER = Style(foreground=COLOR_MUTED)