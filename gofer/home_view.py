"""State and rendering of the home screen: sidebar lists, chat area and cards."""

from __future__ import annotations

from dataclasses import replace
from enum import Enum, auto
from typing import Optional

from .api import Channel, Client, DirectChat
from .screen import Hitbox, Screen
from .session import AuthState
from .style import (
    SIDEBAR_WIDTH,
    STYLE_ACCENT,
    STYLE_DANGER,
    STYLE_DIVIDER,
    STYLE_FAINT,
    STYLE_ITEM_ACTIVE,
    STYLE_ITEM_INACTIVE,
    STYLE_OFFLINE,
    STYLE_OK,
    STYLE_SIDEBAR,
    STYLE_TAB_ACTIVE,
    STYLE_TAB_INACTIVE,
    STYLE_TITLE,
    Align,
    Style,
    join_horizontal,
    join_vertical,
    place,
    text_height,
    visible_width,
)

CHAT_AREA_LIST_RESERVE = 13
CHAT_AREA_LIST_OFFSET = 3
_ROW_LABEL_WIDTH = 40
_CHAT_HINT = "(chat coming in 8.3 with WebSocket)"


class Tab(Enum):
    """Which list the sidebar shows; DIRECT comes first."""

    DIRECT = auto()
    CHANNELS = auto()


class ListViewport:
    """A fixed-size window onto lines of text, scrolled vertically."""

    def __init__(self, width: int = 0, height: int = 0) -> None:
        self.width = width
        self.height = height
        self.y_offset = 0
        self._lines: list[str] = [""]

    def _max_offset(self) -> int:
        return max(len(self._lines) - self.height, 0)

    def set_content(self, content: str) -> None:
        """Replace the text; an offset past the end jumps to the bottom."""
        self._lines = content.split("\n")
        if self.y_offset > len(self._lines) - 1:
            self.y_offset = self._max_offset()

    def scroll_up(self, lines: int = 1) -> None:
        self.y_offset = max(self.y_offset - lines, 0)

    def scroll_down(self, lines: int = 1) -> None:
        self.y_offset = min(self.y_offset + lines, self._max_offset())

    def view(self) -> str:
        """The visible lines, padded to the viewport's size."""
        if self.height <= 0:
            return ""
        visible = self._lines[self.y_offset:self.y_offset + self.height]
        rendered = Style(width=max(self.width, 0), height=self.height).render("\n".join(visible))
        return "\n".join(rendered.split("\n")[: self.height])


def _feedback(copied_target: str, target: str) -> str:
    if copied_target == target:
        return "  " + STYLE_OK.render("✓ copied")
    if copied_target == "fail:" + target:
        return "  " + STYLE_DANGER.render("⚠ unavailable")
    return "  " + STYLE_FAINT.render("(copy)")


class HomeView:
    """Everything the home screen holds, and how it is drawn."""

    def __init__(self, client: Client, state: AuthState) -> None:
        self.client = client
        self.state = state
        self.tab = Tab.DIRECT

        self.channels: list[Channel] = []
        self.load_err: Optional[Exception] = None
        self.loading = False
        self.selected_id = ""

        self.dms: list[DirectChat] = []
        self.dms_load_err: Optional[Exception] = None
        self.dms_loading = False
        self.selected_dm_id = ""

        self.cursor = 0
        self.add_mode = False
        self.popup: Optional[Screen] = None
        self.add_list_vp = ListViewport()
        self.action_err: Optional[Exception] = None
        self.copied_target = ""

        self.width = 0
        self.height = 0
        self.origin_x = 0
        self.origin_y = 0
        self._hitboxes: list[Hitbox] = []

    # === Screen geometry ===

    def set_size(self, width: int, height: int) -> None:
        self.width, self.height = width, height

    def set_origin(self, x: int, y: int) -> None:
        self.origin_x, self.origin_y = x, y

    def hitboxes(self) -> list[Hitbox]:
        if self.popup is not None:
            return self._hitboxes + self.popup.hitboxes()
        return list(self._hitboxes)

    # === Lookups and cursor helpers ===

    def _channel_name(self, channel_id: str) -> str:
        return next((ch.name for ch in self.channels if ch.id == channel_id), "")

    def _find_dm(self, dm_id: str) -> Optional[DirectChat]:
        if not dm_id:
            return None
        return next((dm for dm in self.dms if dm.id == dm_id), None)

    def _channel_exists(self, channel_id: str) -> bool:
        return bool(channel_id) and self._channel_name(channel_id) != ""

    def _toggle_tab(self) -> None:
        self.tab = Tab.DIRECT if self.tab is Tab.CHANNELS else Tab.CHANNELS
        self.cursor = 0

    def _list_len(self) -> int:
        return len(self.channels) if self.tab is Tab.CHANNELS else len(self.dms)

    def _activate_cursor(self) -> None:
        if self.tab is Tab.CHANNELS:
            if 0 <= self.cursor < len(self.channels):
                self.selected_id = self.channels[self.cursor].id
            return
        if 0 <= self.cursor < len(self.dms):
            self.selected_dm_id = self.dms[self.cursor].id

    def _sync_selection_from_cursor(self) -> None:
        if self.add_mode:
            self._activate_cursor()

    def _ensure_cursor_visible(self) -> None:
        if not self.add_mode:
            return
        vp = self.add_list_vp
        if vp.height <= 0:
            return
        if self.cursor < vp.y_offset:
            vp.y_offset = self.cursor
        elif self.cursor > vp.y_offset + vp.height - 1:
            vp.y_offset = self.cursor - vp.height + 1

    def _add_row_hitbox(self, index: int, sb_width: int, box_id: str) -> None:
        line_y = self.origin_y + 2 + index
        self._hitboxes.append(
            Hitbox(self.origin_x, line_y, self.origin_x + sb_width - 2, line_y, box_id)
        )

    # === View ===

    def view(self) -> str:
        self._hitboxes = []
        sidebar = self._render_sidebar()
        chat = self._render_chat_area()
        home = join_horizontal(Align.TOP, sidebar, chat)

        if self.popup is not None:
            self.popup.set_size(self.width, self.height)
            self.popup.set_origin(self.origin_x, self.origin_y)
            return self.popup.view()
        return home

    def _render_sidebar(self) -> str:
        sb_width = SIDEBAR_WIDTH
        tabs = self._render_tabs()
        divider = STYLE_DIVIDER.render("─" * (sb_width - 1))
        body = self._render_list(sb_width)
        add_button = self._render_add_button(sb_width)

        available = max(self.height - text_height(tabs) - 1 - text_height(add_button), 1)
        stretched = Style(height=available).render(body)
        inner = join_vertical(Align.LEFT, tabs, divider, stretched, add_button)
        return replace(STYLE_SIDEBAR, width=sb_width - 1, height=self.height).render(inner)

    def _render_tabs(self) -> str:
        if self.tab is Tab.DIRECT:
            dm_tab = STYLE_TAB_ACTIVE.render("[DIRECT]")
            ch_tab = STYLE_TAB_INACTIVE.render(" CHANNELS ")
        else:
            dm_tab = STYLE_TAB_INACTIVE.render(" DIRECT ")
            ch_tab = STYLE_TAB_ACTIVE.render("[CHANNELS]")
        sep = STYLE_DIVIDER.render("│")

        dm_start = self.origin_x + 1
        dm_end = dm_start + visible_width(dm_tab) - 1
        ch_start = dm_end + 1 + visible_width(sep)
        ch_end = ch_start + visible_width(ch_tab) - 1
        y = self.origin_y
        self._hitboxes.append(Hitbox(dm_start, y, dm_end, y, "tab_direct"))
        self._hitboxes.append(Hitbox(ch_start, y, ch_end, y, "tab_channels"))
        return " " + dm_tab + sep + ch_tab

    def _render_list(self, sb_width: int) -> str:
        if self.add_mode:
            return self._render_add_actions(sb_width)
        if self.tab is Tab.CHANNELS:
            return self._render_channels_list(sb_width)
        return self._render_dms_list(sb_width)

    def _render_add_actions(self, sb_width: int) -> str:
        if self.tab is Tab.CHANNELS:
            actions = [
                ("[+] create", "add_channel_create"),
                ("[→] join", "add_channel_join"),
                ("[🗑] delete", "add_channel_delete"),
            ]
        else:
            actions = [("[+] start DM", "add_dm_start")]

        lines = []
        for index, (label, action_id) in enumerate(actions):
            lines.append("  " + STYLE_ITEM_INACTIVE.render(label))
            self._add_row_hitbox(index, sb_width, action_id)
        return join_vertical(Align.LEFT, *lines)

    def _cursor_prefix(self, index: int) -> str:
        return STYLE_ACCENT.render("▸ ") if index == self.cursor else "  "

    def _render_channels_list(self, sb_width: int) -> str:
        if self.loading:
            return STYLE_FAINT.render("  loading...")
        if self.load_err is not None:
            return STYLE_DANGER.render("  ⚠ Failed to load")
        if not self.channels:
            return STYLE_FAINT.render("  (no channels yet)")

        lines = []
        for index, ch in enumerate(self.channels):
            label = "# " + ch.name
            style = STYLE_ITEM_ACTIVE if ch.id == self.selected_id else STYLE_ITEM_INACTIVE
            lines.append(self._cursor_prefix(index) + style.render(label))
            self._add_row_hitbox(index, sb_width, "channel_" + ch.id)
        return join_vertical(Align.LEFT, *lines)

    def _render_dms_list(self, sb_width: int) -> str:
        if self.dms_loading:
            return STYLE_FAINT.render("  loading...")
        if self.dms_load_err is not None:
            return STYLE_DANGER.render("  ⚠ Failed to load")
        if not self.dms:
            return STYLE_FAINT.render("  (no direct chats)")

        lines = []
        for index, dm in enumerate(self.dms):
            icon = STYLE_OFFLINE.render("○ ")
            style = STYLE_ITEM_ACTIVE if dm.id == self.selected_dm_id else STYLE_ITEM_INACTIVE
            lines.append(self._cursor_prefix(index) + icon + style.render(dm.other_username))
            self._add_row_hitbox(index, sb_width, "dm_" + dm.id)
        return join_vertical(Align.LEFT, *lines)

    def _render_add_button(self, sb_width: int) -> str:
        if self.add_mode:
            label, box_id = STYLE_ACCENT.render("[✕] BACK"), "sidebar_back"
        else:
            label, box_id = STYLE_ACCENT.render("[+] ADD"), "sidebar_add"
        label_w = visible_width(label)

        y = self.origin_y + self.height - 1
        x2 = self.origin_x + sb_width - 2
        x1 = x2 - label_w + 1
        self._hitboxes.append(Hitbox(x1, y, x2, y, box_id))

        pad = max(sb_width - 2 - label_w, 0)
        return " " * pad + label

    def _render_chat_area(self) -> str:
        chat_w = self.width - SIDEBAR_WIDTH
        chat_h = self.height

        if self.add_mode:
            return self._render_add_chat_area(chat_w, chat_h)

        if self.tab is Tab.CHANNELS and self.selected_id:
            content = self._render_channel_chat_header()
        elif self.tab is Tab.DIRECT and self.selected_dm_id:
            content = self._render_dm_chat_header()
        else:
            content = STYLE_FAINT.render("Select a channel or chat")
        return place(chat_w, chat_h, Align.CENTER, Align.CENTER, content)

    def _render_add_chat_area(self, chat_w: int, chat_h: int) -> str:
        chat_x = self.origin_x + SIDEBAR_WIDTH
        chat_y = self.origin_y

        list_h = max(chat_h - CHAT_AREA_LIST_RESERVE, 1)
        self.add_list_vp.width = chat_w - 4
        self.add_list_vp.height = list_h

        list_y = chat_y + CHAT_AREA_LIST_OFFSET
        if self.tab is Tab.CHANNELS:
            header = STYLE_TITLE.render("Your channels:")
            listing = self._render_add_channels_list(chat_x, list_y)
            uuid_card = self._render_channel_uuid_card()
            uuid_box_id = "channel_uuid"
            uuid_value = self.selected_id
        else:
            header = STYLE_TITLE.render("Your chats:")
            listing = self._render_add_dms_list(chat_x, list_y)
            uuid_card = self._render_dm_uuid_card()
            uuid_box_id = "dm_user_uuid"
            dm = self._find_dm(self.selected_dm_id)
            uuid_value = dm.other_user_id if dm is not None else ""

        divider = STYLE_DIVIDER.render("─" * (chat_w - 4))
        my_uuid_card = self._render_my_uuid_card()
        self.add_list_vp.set_content(listing)

        inner = join_vertical(
            Align.LEFT,
            header,
            "",
            self.add_list_vp.view(),
            "",
            divider,
            uuid_card,
            "",
            divider,
            my_uuid_card,
        )
        rendered = Style(width=chat_w, height=chat_h, padding=(1, 2, 1, 2)).render(inner)

        text_x = chat_x + 2
        # padding top, header, blank, list, blank, divider
        card_top = chat_y + 1 + text_height(header) + 1 + list_h + 1 + 1
        if uuid_value:
            uuid_y = card_top + 1
            self._hitboxes.append(
                Hitbox(text_x, uuid_y, text_x + visible_width(uuid_value) - 1, uuid_y, uuid_box_id)
            )

        my_uuid_y = card_top + text_height(uuid_card) + 1 + 1 + 1
        self._hitboxes.append(
            Hitbox(
                text_x,
                my_uuid_y,
                text_x + visible_width(self.state.user_id) - 1,
                my_uuid_y,
                "my_uuid",
            )
        )
        return rendered

    def _add_list_row_hitboxes(
        self,
        origin_x: int,
        phys_y: int,
        label_w: int,
        pad_w: int,
        action_w: int,
        row_id: str,
        action_id: str,
    ) -> None:
        self._hitboxes.append(Hitbox(origin_x, phys_y, origin_x + label_w - 1, phys_y, row_id))
        action_x1 = origin_x + label_w + pad_w
        self._hitboxes.append(
            Hitbox(action_x1, phys_y, action_x1 + action_w - 1, phys_y, action_id)
        )

    def _visible_row_y(self, origin_y: int, index: int) -> Optional[int]:
        phys_y = origin_y + index - self.add_list_vp.y_offset
        bottom = origin_y + self.add_list_vp.height - 1
        if phys_y < origin_y or phys_y > bottom:
            return None
        return phys_y

    def _render_add_channels_list(self, origin_x: int, origin_y: int) -> str:
        if not self.channels:
            return STYLE_FAINT.render("(no channels yet)")

        lines = []
        for index, ch in enumerate(self.channels):
            style = STYLE_ITEM_ACTIVE if ch.id == self.selected_id else STYLE_ITEM_INACTIVE
            name = style.render("# " + ch.name)
            action = STYLE_ACCENT.render("[←] exit")
            name_w = visible_width(name)
            pad_w = max(_ROW_LABEL_WIDTH - name_w, 1)
            lines.append(name + " " * pad_w + action)

            phys_y = self._visible_row_y(origin_y, index)
            if phys_y is None:
                continue
            self._add_list_row_hitboxes(
                origin_x,
                phys_y,
                name_w,
                pad_w,
                visible_width(action),
                "channel_" + ch.id,
                "channel_leave_" + ch.id,
            )
        return join_vertical(Align.LEFT, *lines)

    def _render_add_dms_list(self, origin_x: int, origin_y: int) -> str:
        if not self.dms:
            return STYLE_FAINT.render("(no direct chats)")

        lines = []
        for index, dm in enumerate(self.dms):
            icon = STYLE_OFFLINE.render("○ ")
            style = STYLE_ITEM_ACTIVE if dm.id == self.selected_dm_id else STYLE_ITEM_INACTIVE
            label = icon + style.render(dm.other_username)
            action = STYLE_ACCENT.render("[✕] del")
            label_w = visible_width(label)
            pad_w = max(_ROW_LABEL_WIDTH - label_w, 1)
            lines.append(label + " " * pad_w + action)

            phys_y = self._visible_row_y(origin_y, index)
            if phys_y is None:
                continue
            self._add_list_row_hitboxes(
                origin_x,
                phys_y,
                label_w,
                pad_w,
                visible_width(action),
                "dm_" + dm.id,
                "dm_delete_" + dm.id,
            )
        return join_vertical(Align.LEFT, *lines)

    def _render_channel_uuid_card(self) -> str:
        if not self.selected_id:
            return STYLE_FAINT.render("Click channel to see its ID")
        name = self._channel_name(self.selected_id)
        header = STYLE_FAINT.render("# " + name + " ID:")
        value = STYLE_ITEM_ACTIVE.render(self.selected_id)
        return join_vertical(
            Align.LEFT, header, value + _feedback(self.copied_target, "channel_uuid")
        )

    def _render_my_uuid_card(self) -> str:
        header = STYLE_FAINT.render("Your ID:")
        value = STYLE_ITEM_ACTIVE.render(self.state.user_id)
        return join_vertical(Align.LEFT, header, value + _feedback(self.copied_target, "my_uuid"))

    def _render_dm_uuid_card(self) -> str:
        dm = self._find_dm(self.selected_dm_id)
        if dm is None:
            return STYLE_FAINT.render("Click chat to see user ID")
        header = STYLE_FAINT.render(dm.other_username + " ID:")
        value = STYLE_ITEM_ACTIVE.render(dm.other_user_id)
        return join_vertical(
            Align.LEFT, header, value + _feedback(self.copied_target, "dm_user_uuid")
        )

    def _render_channel_chat_header(self) -> str:
        name = self._channel_name(self.selected_id) or "unknown"
        title = STYLE_TITLE.render(f"# {name}")
        hint = STYLE_FAINT.render(_CHAT_HINT)
        return join_vertical(Align.CENTER, title, "", hint)

    def _render_dm_chat_header(self) -> str:
        dm = self._find_dm(self.selected_dm_id)
        username = (dm.other_username if dm is not None else "") or "unknown"
        title = STYLE_TITLE.render(f"@ {username}")
        hint = STYLE_FAINT.render(_CHAT_HINT)
        return join_vertical(Align.CENTER, title, "", hint)