"""State of the signed-in user and the message that announces it."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class AuthState:
    """What the client remembers about the current user."""

    user_id: str = ""
    username: str = ""
    access_token: str = ""
    refresh_token: str = ""

    def is_authenticated(self) -> bool:
        """True once a user has signed in."""
        return self.user_id != ""


@dataclass(frozen=True)
class AuthenticatedMsg:
    """Sent when the server has confirmed a login."""

    state: AuthState = field(default_factory=AuthState)