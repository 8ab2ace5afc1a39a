"""HTTP client for the gofer chat server."""

from __future__ import annotations

import json
import re
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, TypeVar

import requests

DEFAULT_TIMEOUT = 5.0

T = TypeVar("T")


class ApiError(Exception):
    """Base class of every error raised by the API client."""

    reason = "api error"


class UnreachableError(ApiError):
    """The server could not be reached."""

    reason = "server unreachable"


class InvalidCredentialsError(ApiError):
    """The server answered 401."""

    reason = "invalid credentials"


class NotFoundError(ApiError):
    """The server answered 404."""

    reason = "not found"


class ConflictError(ApiError):
    """The server answered 409."""

    reason = "conflict"


class ForbiddenError(ApiError):
    """The server answered 403."""

    reason = "forbidden"


class ServerError(ApiError):
    """The server answered with a 5xx status."""

    reason = "server error"


class UnexpectedResponseError(ApiError):
    """The server answered with a status the client does not expect."""

    reason = "unexpected response"


class BadRequestError(ApiError):
    """The server answered 400."""

    reason = "bad request"


_STATUS_ERRORS: dict[int, type[ApiError]] = {
    400: BadRequestError,
    401: InvalidCredentialsError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
}

_TIME_RE = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<frac>\d+))?"
    r"(?P<zone>Z|[+-]\d{2}:\d{2})$"
)


def _parse_time(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise TypeError(f"expected a timestamp string, got {type(value).__name__}")
    match = _TIME_RE.match(value)
    if match is None:
        raise ValueError(f"invalid timestamp {value!r}")
    base = datetime.fromisoformat(match["base"])
    micros = int((match["frac"] or "0")[:6].ljust(6, "0"))
    zone = match["zone"]
    if zone == "Z":
        tz = timezone.utc
    else:
        sign = 1 if zone[0] == "+" else -1
        hours, minutes = int(zone[1:3]), int(zone[4:6])
        tz = timezone(sign * timedelta(hours=hours, minutes=minutes))
    return base.replace(microsecond=micros, tzinfo=tz)


def _object(data: Any) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise TypeError(f"expected a JSON object, got {type(data).__name__}")
    return data


def _text(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"field {key!r} must be a string")
    return value


def _list_of(factory: Callable[[Any], T]) -> Callable[[Any], list[T]]:
    def decode(data: Any) -> list[T]:
        if data is None:
            return []
        if not isinstance(data, list):
            raise TypeError(f"expected a JSON array, got {type(data).__name__}")
        return [factory(item) for item in data]

    return decode


@dataclass(frozen=True)
class TokenPair:
    access_token: str = ""
    refresh_token: str = ""

    @classmethod
    def from_json(cls, data: Any) -> TokenPair:
        obj = _object(data)
        return cls(_text(obj, "access_token"), _text(obj, "refresh_token"))


@dataclass(frozen=True)
class User:
    id: str = ""
    username: str = ""
    created_at: datetime | None = None

    @classmethod
    def from_json(cls, data: Any) -> User:
        obj = _object(data)
        return cls(_text(obj, "id"), _text(obj, "username"), _parse_time(obj.get("created_at")))


@dataclass(frozen=True)
class LoginResponse:
    user: User = field(default_factory=User)
    tokens: TokenPair = field(default_factory=TokenPair)

    @classmethod
    def from_json(cls, data: Any) -> LoginResponse:
        obj = _object(data)
        user = User.from_json(obj["user"]) if obj.get("user") is not None else User()
        tokens = TokenPair.from_json(obj["tokens"]) if obj.get("tokens") is not None else TokenPair()
        return cls(user, tokens)


@dataclass(frozen=True)
class Channel:
    id: str = ""
    name: str = ""
    created_by: str = ""
    created_at: datetime | None = None

    @classmethod
    def from_json(cls, data: Any) -> Channel:
        obj = _object(data)
        return cls(
            _text(obj, "id"),
            _text(obj, "name"),
            _text(obj, "created_by"),
            _parse_time(obj.get("created_at")),
        )


@dataclass(frozen=True)
class DirectChat:
    id: str = ""
    other_user_id: str = ""
    other_username: str = ""
    created_at: datetime | None = None

    @classmethod
    def from_json(cls, data: Any) -> DirectChat:
        obj = _object(data)
        return cls(
            _text(obj, "id"),
            _text(obj, "other_user_id"),
            _text(obj, "other_username"),
            _parse_time(obj.get("created_at")),
        )


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def _translate_error(resp: requests.Response) -> ApiError:
    message = ""
    try:
        payload = resp.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and isinstance(payload.get("error"), str):
        message = payload["error"]

    status = resp.status_code
    error_cls = _STATUS_ERRORS.get(status)
    if error_cls is not None:
        return error_cls(f"{error_cls.reason}: {message}")
    if status >= 500:
        return ServerError(f"{ServerError.reason}: status={status} msg={_quote(message)}")
    return UnexpectedResponseError(
        f"{UnexpectedResponseError.reason}: status={status} msg={_quote(message)}"
    )


class Client:
    """Typed access to the server's REST endpoints.

    The access token is kept under a lock so that it may be replaced while
    requests run on other threads.
    """

    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self._session = requests.Session()
        self._lock = threading.Lock()
        self._access_token = ""

    def set_auth(self, access_token: str) -> None:
        """Send this token as a bearer token from now on; an empty string clears it."""
        with self._lock:
            self._access_token = access_token

    def _token(self) -> str:
        with self._lock:
            return self._access_token

    def _do(
        self,
        method: str,
        path: str,
        body: Any = None,
        decode: Callable[[Any], T] | None = None,
    ) -> T | None:
        data = b"" if body is None else json.dumps(body).encode("utf-8")
        headers = {"Content-Type": "application/json"}
        token = self._token()
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            resp = self._session.request(
                method,
                self.base_url + path,
                data=data,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise UnreachableError(f"api.do: {UnreachableError.reason}: {exc}") from exc

        with resp:
            if resp.status_code >= 400:
                raise _translate_error(resp)
            if decode is None:
                return None
            try:
                return decode(resp.json())
            except (ValueError, TypeError, KeyError) as exc:
                raise ApiError(f"api.do: decode response: {exc}") from exc

    def login(self, username: str, password: str) -> LoginResponse:
        """POST /api/v1/auth/login."""
        body = {"username": username, "password": password}
        return self._do("POST", "/api/v1/auth/login", body, LoginResponse.from_json)

    def register(self, username: str, password: str) -> User:
        """POST /api/v1/auth/register."""
        body = {"username": username, "password": password}
        return self._do("POST", "/api/v1/auth/register", body, User.from_json)

    def health(self) -> None:
        """GET /api/v1/health; raises when the server is not healthy."""
        self._do("GET", "/api/v1/health")

    def list_channels(self) -> list[Channel]:
        return self._do("GET", "/api/v1/channels", decode=_list_of(Channel.from_json))

    def leave_channel(self, channel_id: str) -> None:
        self._do("POST", f"/api/v1/channels/{channel_id}/leave")

    def delete_channel(self, channel_id: str) -> None:
        self._do("DELETE", f"/api/v1/channels/{channel_id}")

    def create_channel(self, name: str) -> Channel:
        return self._do("POST", "/api/v1/channels", {"name": name}, Channel.from_json)

    def join_channel(self, channel_id: str) -> None:
        self._do("POST", f"/api/v1/channels/{channel_id}/join")

    def list_dms(self) -> list[DirectChat]:
        return self._do("GET", "/api/v1/direct", decode=_list_of(DirectChat.from_json))

    def delete_dm(self, chat_id: str) -> None:
        self._do("DELETE", f"/api/v1/direct/{chat_id}")

    def start_dm(self, user_id: str) -> DirectChat:
        return self._do("POST", f"/api/v1/direct/{user_id}", decode=DirectChat.from_json)