"""The home screen: sidebar with direct chats and channels, plus management actions."""

from __future__ import annotations

from typing import Any, Optional

from .clipboard import ClearCopiedMsg, CopiedMsg, CopyFailedMsg, clear_after_timeout, copy_cmd
from .confirm import ConfirmModel, ResultMsg, new_warning
from .form import FormModel, FormResultMsg
from .home_messages import (
    ChannelsLoadedMsg,
    ChannelsLoadErrorMsg,
    CreateChannelDoneMsg,
    CreateChannelErrorMsg,
    DeleteDMDoneMsg,
    DeleteDMErrorMsg,
    DeleteDoneMsg,
    DeleteErrorMsg,
    DMsLoadedMsg,
    DMsLoadErrorMsg,
    JoinChannelDoneMsg,
    JoinChannelErrorMsg,
    LeaveDoneMsg,
    LeaveErrorMsg,
    StartDMDoneMsg,
    StartDMErrorMsg,
    create_channel_cmd,
    delete_channel_cmd,
    delete_dm_cmd,
    humanize_channel_error,
    humanize_dm_error,
    join_channel_cmd,
    leave_channel_cmd,
    load_channels_cmd,
    load_dms_cmd,
    start_dm_cmd,
)
from .home_view import HomeView, Tab
from .screen import Cmd, KeyMsg, MouseAction, MouseButton, MouseMsg, Screen, batch, hit_test

WHEEL_DELTA = 3


class HomeModel(HomeView, Screen):
    """Home screen behaviour: loading lists, keyboard and mouse input, popups."""

    def init(self) -> Optional[Cmd]:
        self.loading = True
        self.dms_loading = True
        return batch(load_channels_cmd(self.client), load_dms_cmd(self.client))

    def update(self, msg: Any) -> tuple[Screen, Optional[Cmd]]:
        if self.popup is not None:
            if isinstance(msg, ResultMsg):
                self.popup = None
                return self, self._handle_popup_result(msg)
            if isinstance(msg, FormResultMsg):
                self.popup = None
                return self, self._handle_form_result(msg)
            self.popup, cmd = self.popup.update(msg)
            return self, cmd

        if isinstance(msg, KeyMsg):
            return self, self._on_key(str(msg))
        if isinstance(msg, MouseMsg):
            return self, self._on_mouse(msg)
        return self, self._on_message(msg)

    # === Background results ===

    def _reload_channels(self) -> Cmd:
        self.action_err = None
        self.loading = True
        return load_channels_cmd(self.client)

    def _on_message(self, msg: Any) -> Optional[Cmd]:
        if isinstance(msg, ChannelsLoadedMsg):
            self.loading = False
            self.channels = list(msg.channels or [])
            self.load_err = None
            self.action_err = None
            if self.cursor >= len(self.channels):
                self.cursor = 0
            if not self._channel_exists(self.selected_id):
                self.selected_id = ""
            return None
        if isinstance(msg, ChannelsLoadErrorMsg):
            self.loading = False
            self.load_err = msg.err
            return None
        if isinstance(msg, DMsLoadedMsg):
            self.dms_loading = False
            self.dms = list(msg.dms or [])
            self.dms_load_err = None
            if self.tab is Tab.DIRECT and self.cursor >= len(self.dms):
                self.cursor = 0
            return None
        if isinstance(msg, DMsLoadErrorMsg):
            self.dms_loading = False
            self.dms_load_err = msg.err
            return None

        if isinstance(msg, (CreateChannelDoneMsg, JoinChannelDoneMsg, LeaveDoneMsg, DeleteDoneMsg)):
            return self._reload_channels()
        if isinstance(msg, CreateChannelErrorMsg):
            self.action_err = msg.err
            self.popup = new_warning(
                "create_failed:-", "Cannot create channel", humanize_channel_error(msg.err)
            )
            return None
        if isinstance(msg, JoinChannelErrorMsg):
            self.action_err = msg.err
            self.popup = new_warning(
                "join_failed:-", "Cannot join channel", humanize_channel_error(msg.err)
            )
            return None
        if isinstance(msg, (LeaveErrorMsg, DeleteErrorMsg, DeleteDMErrorMsg)):
            self.action_err = msg.err
            return None

        if isinstance(msg, StartDMDoneMsg):
            self.action_err = None
            self.dms_loading = True
            return load_dms_cmd(self.client)
        if isinstance(msg, StartDMErrorMsg):
            self.action_err = msg.err
            self.popup = new_warning(
                "start_dm_failed:-", "Cannot start direct chat", humanize_dm_error(msg.err)
            )
            return None
        if isinstance(msg, DeleteDMDoneMsg):
            self.action_err = None
            self.dms_loading = True
            if msg.dm_id == self.selected_dm_id:
                self.selected_dm_id = ""
            return load_dms_cmd(self.client)

        if isinstance(msg, CopiedMsg):
            self.copied_target = msg.target
            return clear_after_timeout(msg.target)
        if isinstance(msg, CopyFailedMsg):
            self.copied_target = "fail:" + msg.target
            return clear_after_timeout(msg.target)
        if isinstance(msg, ClearCopiedMsg):
            if self.copied_target in (msg.target, "fail:" + msg.target):
                self.copied_target = ""
            return None
        return None

    # === Keyboard ===

    def _on_key(self, key: str) -> Optional[Cmd]:
        if key == "a":
            self.add_mode = True
        elif key == "l":
            if self.add_mode and self.tab is Tab.CHANNELS and self.selected_id:
                self._open_leave_channel_confirm(self.selected_id)
        elif key == "d":
            if self.add_mode:
                if self.tab is Tab.CHANNELS and self.selected_id:
                    self._open_delete_channel_confirm(self.selected_id)
                if self.tab is Tab.DIRECT and self.selected_dm_id:
                    self._open_delete_dm_confirm(self.selected_dm_id)
        elif key == "esc":
            self.add_mode = False
        elif key == "tab":
            self._toggle_tab()
        elif key == "up":
            if self.cursor > 0:
                self.cursor -= 1
                self._sync_selection_from_cursor()
                self._ensure_cursor_visible()
        elif key == "down":
            if self.cursor < self._list_len() - 1:
                self.cursor += 1
                self._sync_selection_from_cursor()
                self._ensure_cursor_visible()
        elif key == "enter":
            self._activate_cursor()
        return None

    # === Mouse ===

    def _on_mouse(self, msg: MouseMsg) -> Optional[Cmd]:
        if self.add_mode and msg.button in (MouseButton.WHEEL_UP, MouseButton.WHEEL_DOWN):
            if msg.button is MouseButton.WHEEL_UP:
                self.add_list_vp.scroll_up(WHEEL_DELTA)
            else:
                self.add_list_vp.scroll_down(WHEEL_DELTA)
            return None
        if msg.action is not MouseAction.PRESS:
            return None

        target = hit_test(self._hitboxes, msg.x, msg.y)
        if target == "tab_direct":
            self.tab = Tab.DIRECT
            self.cursor = 0
        elif target == "tab_channels":
            self.tab = Tab.CHANNELS
            self.cursor = 0
        elif target == "sidebar_add":
            self.add_mode = True
        elif target == "sidebar_back":
            self.add_mode = False
        elif target == "add_channel_create":
            return self._open_form(
                FormModel("create_channel:-", "Create channel", "Channel name:", "e.g. general", "Create", 32)
            )
        elif target == "add_channel_join":
            return self._open_form(
                FormModel(
                    "join_channel:-",
                    "Join channel",
                    "Channel ID:",
                    "e.g. 6679e14e-e7a5-42eb-9198-3dd7a34f3013",
                    "Join",
                    40,
                )
            )
        elif target == "add_channel_delete":
            if not self.selected_id:
                self.popup = new_warning(
                    "no_channel_selected:-",
                    "No channel selected",
                    "Select a channel first, then click delete.",
                )
            else:
                self._open_delete_channel_confirm(self.selected_id)
        elif target == "add_dm_start":
            return self._open_form(
                FormModel(
                    "start_dm:-",
                    "Start direct chat",
                    "User ID:",
                    "e.g. f8d82de2-242b-4df1-a440-63db4d62f661",
                    "Start",
                    40,
                )
            )
        elif target == "my_uuid":
            return copy_cmd("my_uuid", self.state.user_id)
        elif target == "channel_uuid":
            if self.selected_id:
                return copy_cmd("channel_uuid", self.selected_id)
        elif target == "dm_user_uuid":
            dm = self._find_dm(self.selected_dm_id)
            if dm is not None:
                return copy_cmd("dm_user_uuid", dm.other_user_id)
        elif target.startswith("channel_leave_"):
            self._open_leave_channel_confirm(target[len("channel_leave_"):])
        elif target.startswith("dm_delete_"):
            self._open_delete_dm_confirm(target[len("dm_delete_"):])
        elif target.startswith("channel_"):
            channel_id = target[len("channel_"):]
            self.selected_id = channel_id
            index = next((i for i, ch in enumerate(self.channels) if ch.id == channel_id), None)
            if index is not None:
                self.cursor = index
        elif target.startswith("dm_"):
            dm_id = target[len("dm_"):]
            self.selected_dm_id = dm_id
            index = next((i for i, dm in enumerate(self.dms) if dm.id == dm_id), None)
            if index is not None:
                self.cursor = index
        return None

    def _open_form(self, form: FormModel) -> Optional[Cmd]:
        self.popup = form
        return form.init()

    # === Popup results ===

    def _handle_popup_result(self, res: ResultMsg) -> Optional[Cmd]:
        kind, sep, target_id = res.action.partition(":")
        if not sep or not res.confirmed:
            return None
        if kind == "leave_channel":
            return leave_channel_cmd(self.client, target_id)
        if kind == "delete_channel":
            return delete_channel_cmd(self.client, target_id)
        if kind == "delete_dm":
            return delete_dm_cmd(self.client, target_id)
        return None

    def _handle_form_result(self, res: FormResultMsg) -> Optional[Cmd]:
        if not res.confirmed:
            return None
        kind, sep, _ = res.action.partition(":")
        if not sep:
            return None
        value = res.value.strip()
        if kind == "create_channel":
            if not value:
                self.popup = new_warning("name_empty:-", "Cannot create channel", "Name cannot be empty.")
                return None
            return create_channel_cmd(self.client, value)
        if kind == "join_channel":
            if not value:
                self.popup = new_warning("id_empty:-", "Cannot join channel", "Channel ID cannot be empty.")
                return None
            return join_channel_cmd(self.client, value)
        if kind == "start_dm":
            if not value:
                self.popup = new_warning("id_empty:-", "Cannot start direct chat", "User ID cannot be empty.")
                return None
            return start_dm_cmd(self.client, value)
        return None

    # === Confirmation popups ===

    def _open_leave_channel_confirm(self, channel_id: str) -> None:
        name = self._channel_name(channel_id)
        if not name:
            return
        self.popup = ConfirmModel(
            "leave_channel:" + channel_id, "Leave channel", f"Leave channel #{name}?", "Leave", False
        )

    def _open_delete_channel_confirm(self, channel_id: str) -> None:
        channel = next((ch for ch in self.channels if ch.id == channel_id), None)
        if channel is None:
            return
        if channel.created_by != self.state.user_id:
            self.popup = new_warning(
                "not_creator:" + channel_id, "Cannot delete", "You are not the channel creator."
            )
            return
        self.popup = ConfirmModel(
            "delete_channel:" + channel_id,
            "Delete channel",
            f"Delete channel #{channel.name}? This cannot be undone.",
            "Delete",
            True,
        )

    def _open_delete_dm_confirm(self, dm_id: str) -> None:
        username = next((dm.other_username for dm in self.dms if dm.id == dm_id), "")
        if not username:
            return
        self.popup = ConfirmModel(
            "delete_dm:" + dm_id,
            "Delete DM",
            f"Delete DM with {username}? This cannot be undone.",
            "Delete",
            True,
        )