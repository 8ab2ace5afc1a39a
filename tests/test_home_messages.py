import json

import pytest
import responses

from gofer.api import (
    ApiError,
    BadRequestError,
    Client,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ServerError,
    UnreachableError,
)
from gofer.home_messages import (
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

BASE = "http://gofer.test"


@pytest.fixture
def mock():
    with responses.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def client():
    return Client(BASE)


def test_load_channels_success(mock, client):
    mock.add(
        responses.GET,
        BASE + "/api/v1/channels",
        json=[{"id": "c1", "name": "general", "created_by": "u1"}],
    )
    msg = load_channels_cmd(client)()
    assert isinstance(msg, ChannelsLoadedMsg)
    assert [(c.id, c.name, c.created_by) for c in msg.channels] == [("c1", "general", "u1")]


def test_load_channels_server_error(mock, client):
    mock.add(responses.GET, BASE + "/api/v1/channels", json={"error": "boom"}, status=500)
    msg = load_channels_cmd(client)()
    assert isinstance(msg, ChannelsLoadErrorMsg)
    assert isinstance(msg.err, ServerError)
    assert "status=500" in str(msg.err)
    assert '"boom"' in str(msg.err)
    assert humanize_channel_error(msg.err) == "Server error, try again later."


def test_load_dms_success_and_null(mock, client):
    mock.add(
        responses.GET,
        BASE + "/api/v1/direct",
        json=[{"id": "d1", "other_user_id": "u2", "other_username": "bob"}],
    )
    mock.add(responses.GET, BASE + "/api/v1/direct", body="null")
    first = load_dms_cmd(client)()
    assert isinstance(first, DMsLoadedMsg)
    assert first.dms[0].other_username == "bob"
    assert load_dms_cmd(client)() == DMsLoadedMsg([])


def test_load_dms_unreachable(mock, client):
    msg = load_dms_cmd(client)()
    assert isinstance(msg, DMsLoadErrorMsg)
    assert isinstance(msg.err, UnreachableError)
    assert "server unreachable" in str(msg.err)
    assert humanize_dm_error(msg.err) == "Server unreachable."


def test_leave_channel(mock, client):
    mock.add(responses.POST, BASE + "/api/v1/channels/c1/leave", status=204)
    mock.add(responses.POST, BASE + "/api/v1/channels/c2/leave", json={"error": "no"}, status=404)
    assert leave_channel_cmd(client, "c1")() == LeaveDoneMsg("c1")
    failed = leave_channel_cmd(client, "c2")()
    assert isinstance(failed, LeaveErrorMsg)
    assert isinstance(failed.err, NotFoundError)


def test_create_channel_sends_name(mock, client):
    mock.add(responses.POST, BASE + "/api/v1/channels", json={"id": "c9", "name": "news", "created_by": "u1"})
    msg = create_channel_cmd(client, "news")()
    assert isinstance(msg, CreateChannelDoneMsg)
    assert msg.channel.id == "c9"
    assert json.loads(mock.calls[0].request.body) == {"name": "news"}


def test_create_channel_conflict(mock, client):
    mock.add(responses.POST, BASE + "/api/v1/channels", json={"error": "taken"}, status=409)
    msg = create_channel_cmd(client, "news")()
    assert isinstance(msg, CreateChannelErrorMsg)
    assert isinstance(msg.err, ConflictError)
    assert str(msg.err) == "conflict: taken"
    assert humanize_channel_error(msg.err) == "conflict: taken"


def test_join_channel(mock, client):
    mock.add(responses.POST, BASE + "/api/v1/channels/c3/join", status=200)
    mock.add(responses.POST, BASE + "/api/v1/channels/c4/join", status=403)
    assert join_channel_cmd(client, "c3")() == JoinChannelDoneMsg("c3")
    failed = join_channel_cmd(client, "c4")()
    assert isinstance(failed, JoinChannelErrorMsg)
    assert isinstance(failed.err, ForbiddenError)


def test_delete_channel(mock, client):
    mock.add(responses.DELETE, BASE + "/api/v1/channels/c5", status=204)
    mock.add(responses.DELETE, BASE + "/api/v1/channels/c6", status=403)
    assert delete_channel_cmd(client, "c5")() == DeleteDoneMsg("c5")
    assert isinstance(delete_channel_cmd(client, "c6")(), DeleteErrorMsg)


def test_delete_dm(mock, client):
    mock.add(responses.DELETE, BASE + "/api/v1/direct/d1", status=204)
    mock.add(responses.DELETE, BASE + "/api/v1/direct/d2", status=500)
    assert delete_dm_cmd(client, "d1")() == DeleteDMDoneMsg("d1")
    failed = delete_dm_cmd(client, "d2")()
    assert isinstance(failed, DeleteDMErrorMsg)
    assert isinstance(failed.err, ServerError)


def test_start_dm(mock, client):
    mock.add(
        responses.POST,
        BASE + "/api/v1/direct/u7",
        json={"id": "d7", "other_user_id": "u7", "other_username": "eve"},
    )
    mock.add(responses.POST, BASE + "/api/v1/direct/u8", json={"error": "dup"}, status=409)
    done = start_dm_cmd(client, "u7")()
    assert isinstance(done, StartDMDoneMsg)
    assert (done.dm.id, done.dm.other_user_id) == ("d7", "u7")
    failed = start_dm_cmd(client, "u8")()
    assert isinstance(failed, StartDMErrorMsg)
    assert humanize_dm_error(failed.err) == "You already have a direct chat with this user."


@pytest.mark.parametrize(
    "err, expected",
    [
        (NotFoundError("not found: x"), "Channel not found."),
        (ForbiddenError("forbidden: x"), "You don't have permission for this action."),
        (UnreachableError("down"), "Server unreachable."),
        (ServerError("server error"), "Server error, try again later."),
        (BadRequestError("bad request: name too long"), "bad request: name too long"),
        (ApiError("something odd"), "something odd"),
    ],
)
def test_humanize_channel_error(err, expected):
    assert humanize_channel_error(err) == expected


@pytest.mark.parametrize(
    "err, expected",
    [
        (NotFoundError("not found: x"), "User not found."),
        (ConflictError("conflict: x"), "You already have a direct chat with this user."),
        (UnreachableError("down"), "Server unreachable."),
        (ServerError("server error"), "Server error, try again later."),
        (BadRequestError("bad request: invalid id"), "bad request: invalid id"),
        (ForbiddenError("forbidden: nope"), "forbidden: nope"),
    ],
)
def test_humanize_dm_error(err, expected):
    assert humanize_dm_error(err) == expected