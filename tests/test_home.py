from datetime import datetime, timezone

import responses

from gofer.api import Channel, Client, DirectChat, NotFoundError
from gofer.clipboard import ClearCopiedMsg, CopiedMsg, CopyFailedMsg
from gofer.confirm import ConfirmModel, ResultMsg
from gofer.form import FormModel, FormResultMsg
from gofer.home import HomeModel
from gofer.home_messages import (
    ChannelsLoadedMsg,
    CreateChannelErrorMsg,
    DeleteDMDoneMsg,
    DMsLoadedMsg,
    JoinChannelDoneMsg,
    LeaveDoneMsg,
    StartDMErrorMsg,
)
from gofer.home_view import Tab
from gofer.screen import KeyMsg, MouseAction, MouseButton, MouseMsg
from gofer.session import AuthState

BASE = "http://localhost:8080"
WHEN = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_model():
    client = Client(BASE, timeout=5.0)
    return HomeModel(client, AuthState(user_id="u-1", username="alice"))


def channel(cid, name, creator="u-1"):
    return Channel(id=cid, name=name, created_by=creator, created_at=WHEN)


def dm(did, other_id, other_name):
    return DirectChat(id=did, other_user_id=other_id, other_username=other_name, created_at=WHEN)


def with_channels(model, *channels):
    model.update(ChannelsLoadedMsg(list(channels)))
    return model


def click(model, box_id):
    box = next(b for b in model.hitboxes() if b.id == box_id)
    return model.update(MouseMsg(box.x1, box.y1))


def test_init_marks_both_lists_loading():
    model = make_model()
    cmd = model.init()
    assert callable(cmd)
    assert model.loading is True
    assert model.dms_loading is True


def test_channels_loaded_clears_missing_selection():
    model = make_model()
    model.selected_id = "gone"
    model.cursor = 5
    with_channels(model, channel("c1", "general"))
    assert model.loading is False
    assert model.selected_id == ""
    assert model.cursor == 0
    assert [ch.id for ch in model.channels] == ["c1"]


def test_tab_key_toggles_and_resets_cursor():
    model = make_model()
    model.cursor = 2
    model.update(KeyMsg("tab"))
    assert model.tab is Tab.CHANNELS
    assert model.cursor == 0
    model.update(KeyMsg("tab"))
    assert model.tab is Tab.DIRECT


def test_add_mode_on_and_off():
    model = make_model()
    model.update(KeyMsg("a"))
    assert model.add_mode is True
    model.update(KeyMsg("esc"))
    assert model.add_mode is False


def test_down_moves_cursor_within_bounds_without_selecting():
    model = with_channels(make_model(), channel("c1", "a"), channel("c2", "b"))
    model.tab = Tab.CHANNELS
    model.update(KeyMsg("down"))
    model.update(KeyMsg("down"))
    assert model.cursor == 1
    assert model.selected_id == ""
    model.update(KeyMsg("up"))
    assert model.cursor == 0


def test_down_in_add_mode_selects():
    model = with_channels(make_model(), channel("c1", "a"), channel("c2", "b"))
    model.tab = Tab.CHANNELS
    model.add_mode = True
    model.update(KeyMsg("down"))
    assert model.selected_id == "c2"


def test_enter_selects_dm_under_cursor():
    model = make_model()
    model.update(DMsLoadedMsg([dm("d1", "u-2", "bob")]))
    model.update(KeyMsg("enter"))
    assert model.selected_dm_id == "d1"


def test_delete_key_opens_confirm_for_creator():
    model = with_channels(make_model(), channel("c1", "general"))
    model.tab = Tab.CHANNELS
    model.selected_id = "c1"
    model.add_mode = True
    model.update(KeyMsg("d"))
    assert isinstance(model.popup, ConfirmModel)
    assert model.popup.action == "delete_channel:c1"
    assert model.popup.message == "Delete channel #general? This cannot be undone."


def test_delete_key_warns_non_creator():
    model = with_channels(make_model(), channel("c1", "general", creator="u-9"))
    model.tab = Tab.CHANNELS
    model.selected_id = "c1"
    model.add_mode = True
    model.update(KeyMsg("d"))
    assert model.popup.action == "not_creator:c1"
    assert model.popup.one_button is True
    assert model.popup.message == "You are not the channel creator."


def test_leave_key_opens_confirm():
    model = with_channels(make_model(), channel("c1", "general"))
    model.tab = Tab.CHANNELS
    model.selected_id = "c1"
    model.add_mode = True
    model.update(KeyMsg("l"))
    assert model.popup.action == "leave_channel:c1"
    assert model.popup.message == "Leave channel #general?"


def test_confirmed_leave_runs_request():
    model = with_channels(make_model(), channel("c1", "general"))
    model.tab = Tab.CHANNELS
    model.selected_id = "c1"
    model.add_mode = True
    model.update(KeyMsg("l"))
    _, cmd = model.update(ResultMsg("leave_channel:c1", True))
    assert model.popup is None
    with responses.RequestsMock() as rsps:
        rsps.add(responses.POST, BASE + "/api/v1/channels/c1/leave", json={}, status=200)
        result = cmd()
    assert result == LeaveDoneMsg("c1")


def test_cancelled_popup_does_nothing():
    model = with_channels(make_model(), channel("c1", "general"))
    model.popup = ConfirmModel("leave_channel:c1", "t", "m", "Leave", False)
    _, cmd = model.update(ResultMsg("leave_channel:c1", False))
    assert cmd is None
    assert model.popup is None


def test_empty_channel_name_warns():
    model = make_model()
    model.popup = FormModel("create_channel:-", "t", "l", "p", "Create", 32)
    _, cmd = model.update(FormResultMsg("create_channel:-", True, "   "))
    assert cmd is None
    assert model.popup.action == "name_empty:-"
    assert model.popup.message == "Name cannot be empty."


def test_join_form_trims_value():
    model = make_model()
    model.popup = FormModel("join_channel:-", "t", "l", "p", "Join", 40)
    _, cmd = model.update(FormResultMsg("join_channel:-", True, " c9 "))
    with responses.RequestsMock() as rsps:
        rsps.add(responses.POST, BASE + "/api/v1/channels/c9/join", json={}, status=200)
        result = cmd()
    assert result == JoinChannelDoneMsg("c9")


def test_create_failure_shows_humanized_warning():
    model = make_model()
    _, cmd = model.update(FormResultMsg("create_channel:-", True, "general")) if model.popup else (None, None)
    model.popup = FormModel("create_channel:-", "t", "l", "p", "Create", 32)
    _, cmd = model.update(FormResultMsg("create_channel:-", True, "general"))
    with responses.RequestsMock() as rsps:
        rsps.add(responses.POST, BASE + "/api/v1/channels", json={"error": "missing"}, status=404)
        result = cmd()
    assert isinstance(result, CreateChannelErrorMsg)
    assert isinstance(result.err, NotFoundError)
    model.update(result)
    assert model.popup.action == "create_failed:-"
    assert model.popup.message == "Channel not found."


def test_start_dm_error_uses_plain_message():
    model = make_model()
    model.update(StartDMErrorMsg(RuntimeError("boom")))
    assert model.popup.action == "start_dm_failed:-"
    assert model.popup.message == "boom"


def test_delete_dm_done_clears_selection():
    model = make_model()
    model.selected_dm_id = "d1"
    _, cmd = model.update(DeleteDMDoneMsg("d1"))
    assert model.selected_dm_id == ""
    assert model.dms_loading is True
    assert callable(cmd)


def test_clipboard_feedback_cycle():
    model = make_model()
    _, cmd = model.update(CopiedMsg("my_uuid"))
    assert model.copied_target == "my_uuid"
    assert callable(cmd)
    model.update(ClearCopiedMsg("my_uuid"))
    assert model.copied_target == ""
    model.update(CopyFailedMsg("my_uuid"))
    assert model.copied_target == "fail:my_uuid"
    model.update(ClearCopiedMsg("other"))
    assert model.copied_target == "fail:my_uuid"
    model.update(ClearCopiedMsg("my_uuid"))
    assert model.copied_target == ""


def test_click_tab_switches():
    model = make_model()
    model.set_size(80, 20)
    model.set_origin(1, 3)
    model.view()
    click(model, "tab_channels")
    assert model.tab is Tab.CHANNELS


def test_release_is_ignored():
    model = make_model()
    model.set_size(80, 20)
    model.set_origin(1, 3)
    model.view()
    box = next(b for b in model.hitboxes() if b.id == "tab_channels")
    model.update(MouseMsg(box.x1, box.y1, action=MouseAction.RELEASE))
    assert model.tab is Tab.DIRECT


def test_click_channel_row_selects_it():
    model = with_channels(make_model(), channel("c1", "a"), channel("c2", "b"))
    model.tab = Tab.CHANNELS
    model.set_size(80, 20)
    model.set_origin(1, 3)
    model.view()
    click(model, "channel_c2")
    assert model.selected_id == "c2"
    assert model.cursor == 1


def test_click_add_then_create_opens_form():
    model = make_model()
    model.tab = Tab.CHANNELS
    model.set_size(80, 20)
    model.set_origin(1, 3)
    model.view()
    click(model, "sidebar_add")
    assert model.add_mode is True
    model.view()
    click(model, "add_channel_create")
    assert isinstance(model.popup, FormModel)
    assert model.popup.action == "create_channel:-"


def test_delete_without_selection_warns():
    model = make_model()
    model.tab = Tab.CHANNELS
    model.add_mode = True
    model.set_size(80, 20)
    model.set_origin(1, 3)
    model.view()
    click(model, "add_channel_delete")
    assert model.popup.action == "no_channel_selected:-"


def test_wheel_scrolls_add_list():
    channels = [channel(f"c{i}", f"name{i}") for i in range(30)]
    model = with_channels(make_model(), *channels)
    model.tab = Tab.CHANNELS
    model.add_mode = True
    model.set_size(80, 20)
    model.set_origin(1, 3)
    model.view()
    model.update(MouseMsg(0, 0, action=MouseAction.PRESS, button=MouseButton.WHEEL_DOWN))
    assert model.add_list_vp.y_offset == 3
    model.update(MouseMsg(0, 0, action=MouseAction.PRESS, button=MouseButton.WHEEL_UP))
    assert model.add_list_vp.y_offset == 0


def test_popup_swallows_keys():
    model = make_model()
    model.popup = ConfirmModel("leave_channel:c1", "t", "m", "Leave", False)
    _, cmd = model.update(KeyMsg("tab"))
    assert model.tab is Tab.DIRECT
    assert cmd is None
    _, cmd = model.update(KeyMsg("esc"))
    assert cmd() == ResultMsg("leave_channel:c1", False)