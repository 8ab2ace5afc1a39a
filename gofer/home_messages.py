"""Messages and background commands of the home screen."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from .api import (
    ApiError,
    BadRequestError,
    Channel,
    Client,
    ConflictError,
    DirectChat,
    ForbiddenError,
    NotFoundError,
    ServerError,
    UnreachableError,
)


@dataclass(frozen=True)
class ChannelsLoadedMsg:
    channels: list[Channel] = field(default_factory=list)


@dataclass(frozen=True)
class ChannelsLoadErrorMsg:
    err: Exception


@dataclass(frozen=True)
class DMsLoadedMsg:
    dms: list[DirectChat] = field(default_factory=list)


@dataclass(frozen=True)
class DMsLoadErrorMsg:
    err: Exception


@dataclass(frozen=True)
class LeaveDoneMsg:
    channel_id: str


@dataclass(frozen=True)
class LeaveErrorMsg:
    err: Exception


@dataclass(frozen=True)
class CreateChannelDoneMsg:
    channel: Channel


@dataclass(frozen=True)
class CreateChannelErrorMsg:
    err: Exception


@dataclass(frozen=True)
class JoinChannelDoneMsg:
    channel_id: str


@dataclass(frozen=True)
class JoinChannelErrorMsg:
    err: Exception


@dataclass(frozen=True)
class StartDMDoneMsg:
    dm: DirectChat


@dataclass(frozen=True)
class StartDMErrorMsg:
    err: Exception


@dataclass(frozen=True)
class DeleteDoneMsg:
    channel_id: str


@dataclass(frozen=True)
class DeleteErrorMsg:
    err: Exception


@dataclass(frozen=True)
class DeleteDMDoneMsg:
    dm_id: str


@dataclass(frozen=True)
class DeleteDMErrorMsg:
    err: Exception


def load_channels_cmd(client: Client) -> Callable[[], object]:
    def command() -> object:
        try:
            return ChannelsLoadedMsg(client.list_channels())
        except ApiError as exc:
            return ChannelsLoadErrorMsg(exc)

    return command


def load_dms_cmd(client: Client) -> Callable[[], object]:
    def command() -> object:
        try:
            return DMsLoadedMsg(client.list_dms())
        except ApiError as exc:
            return DMsLoadErrorMsg(exc)

    return command


def leave_channel_cmd(client: Client, channel_id: str) -> Callable[[], object]:
    def command() -> object:
        try:
            client.leave_channel(channel_id)
        except ApiError as exc:
            return LeaveErrorMsg(exc)
        return LeaveDoneMsg(channel_id)

    return command


def create_channel_cmd(client: Client, name: str) -> Callable[[], object]:
    def command() -> object:
        try:
            return CreateChannelDoneMsg(client.create_channel(name))
        except ApiError as exc:
            return CreateChannelErrorMsg(exc)

    return command


def join_channel_cmd(client: Client, channel_id: str) -> Callable[[], object]:
    def command() -> object:
        try:
            client.join_channel(channel_id)
        except ApiError as exc:
            return JoinChannelErrorMsg(exc)
        return JoinChannelDoneMsg(channel_id)

    return command


def delete_channel_cmd(client: Client, channel_id: str) -> Callable[[], object]:
    def command() -> object:
        try:
            client.delete_channel(channel_id)
        except ApiError as exc:
            return DeleteErrorMsg(exc)
        return DeleteDoneMsg(channel_id)

    return command


def delete_dm_cmd(client: Client, dm_id: str) -> Callable[[], object]:
    def command() -> object:
        try:
            client.delete_dm(dm_id)
        except ApiError as exc:
            return DeleteDMErrorMsg(exc)
        return DeleteDMDoneMsg(dm_id)

    return command


def start_dm_cmd(client: Client, user_id: str) -> Callable[[], object]:
    def command() -> object:
        try:
            return StartDMDoneMsg(client.start_dm(user_id))
        except ApiError as exc:
            return StartDMErrorMsg(exc)

    return command


def humanize_channel_error(err: Exception) -> str:
    """A short user-facing explanation of a failed channel action."""
    if isinstance(err, NotFoundError):
        return "Channel not found."
    if isinstance(err, ForbiddenError):
        return "You don't have permission for this action."
    if isinstance(err, BadRequestError):
        return str(err)
    if isinstance(err, UnreachableError):
        return "Server unreachable."
    if isinstance(err, ServerError):
        return "Server error, try again later."
    return str(err)


def humanize_dm_error(err: Exception) -> str:
    """A short user-facing explanation of a failed direct-chat action."""
    if isinstance(err, NotFoundError):
        return "User not found."
    if isinstance(err, ConflictError):
        return "You already have a direct chat with this user."
    if isinstance(err, BadRequestError):
        return str(err)
    if isinstance(err, UnreachableError):
        return "Server unreachable."
    if isinstance(err, ServerError):
        return "Server error, try again later."
    return str(err)