import re

from gofer.style import (
    DOUBLE_BORDER,
    ROUNDED_BORDER,
    STYLE_ACCENT,
    STYLE_TITLE,
    Align,
    Style,
    join_horizontal,
    join_vertical,
    place,
    space_between,
    text_height,
    visible_width,
)

ANSI = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")


def strip(text):
    return ANSI.sub("", text)


def test_visible_width_ignores_escape_sequences():
    rendered = STYLE_TITLE.render("GOFER")
    assert "\x1b[" in rendered
    assert visible_width(rendered) == 5
    assert strip(rendered) == "GOFER"


def test_visible_width_takes_widest_line():
    assert visible_width("ab\nabcd\na") == 4


def test_text_height_counts_lines():
    assert text_height("a\nb\nc") == 3
    assert text_height("") == 1


def test_space_between_fills_width():
    result = space_between("left", "right", 20)
    assert visible_width(result) == 20
    assert result.startswith("left")
    assert result.endswith("right")


def test_space_between_keeps_one_space_minimum():
    assert space_between("abc", "def", 2) == "abc def"


def test_width_pads_to_minimum():
    rendered = Style(width=10).render("hi")
    assert visible_width(rendered) == 10
    assert rendered.startswith("hi")


def test_center_alignment_balances_spaces():
    rendered = Style(width=10, align=Align.CENTER).render("ab")
    assert rendered.strip() == "ab"
    assert rendered.index("ab") == 4
    assert visible_width(rendered) == 10


def test_double_border_box():
    assert Style(border=DOUBLE_BORDER).render("x") == "╔═╗\n║x║\n╚═╝"


def test_bottom_border_only():
    rendered = Style(border=DOUBLE_BORDER, border_sides=(False, False, True, False)).render("ab")
    lines = rendered.split("\n")
    assert lines[0] == "ab"
    assert lines[1] == DOUBLE_BORDER.bottom * 2


def test_rounded_border_dimensions_with_padding():
    rendered = Style(border=ROUNDED_BORDER, padding=(1, 2, 1, 2)).render("x")
    assert text_height(rendered) == 5
    assert visible_width(rendered) == 7
    assert rendered.startswith(ROUNDED_BORDER.top_left)


def test_width_word_wraps():
    rendered = Style(width=5).render("hello world")
    assert rendered.split("\n") == ["hello", "world"]


def test_coloured_text_wraps_within_limit():
    rendered = Style(width=8).render(STYLE_ACCENT.render("alpha beta gamma"))
    lines = rendered.split("\n")
    assert len(lines) > 1
    assert all(visible_width(line) <= 8 for line in lines)
    assert " ".join(strip(line).strip() for line in lines) == "alpha beta gamma"
    assert all(strip(line).strip() == "" or "\x1b[" in line for line in lines)


def test_height_is_minimum():
    assert text_height(Style(height=4).render("a")) == 4
    assert text_height(Style(height=1).render("a\nb")) == 2


def test_join_vertical_equalises_widths():
    joined = join_vertical(Align.CENTER, "a", "abcde", "")
    lines = joined.split("\n")
    assert len(lines) == 3
    assert {visible_width(line) for line in lines} == {5}
    assert lines[1] == "abcde"


def test_join_vertical_left_keeps_text_at_start():
    lines = join_vertical(Align.LEFT, "ab", "abcd").split("\n")
    assert lines[0].startswith("ab")
    assert visible_width(lines[0]) == 4


def test_join_horizontal_dimensions():
    joined = join_horizontal(Align.TOP, "ab\ncd\nef", "xyz")
    lines = joined.split("\n")
    assert len(lines) == 3
    assert lines[0] == "abxyz"
    assert all(visible_width(line) == 5 for line in lines)


def test_place_centres_block():
    placed = place(11, 5, Align.CENTER, Align.CENTER, "abc")
    lines = placed.split("\n")
    assert len(lines) == 5
    assert all(visible_width(line) == 11 for line in lines)
    row = next(i for i, line in enumerate(lines) if "abc" in line)
    assert row == 2
    assert lines[row].index("abc") == 4


def test_place_leaves_larger_block_alone():
    assert place(2, 1, Align.CENTER, Align.CENTER, "abcdef") == "abcdef"