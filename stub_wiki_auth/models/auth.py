"""
Authentication-related domain models.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Self


class LoginResult(StrEnum):
    """Values of ``login.result`` returned by the remote wiki API."""

    SUCCESS = "Success"
    NOT_EXISTS = "NotExists"
    NEED_TOKEN = "NeedToken"
    WRONG_TOKEN = "WrongToken"
    EMPTY_PASS = "EmptyPass"
    WRONG_PASS = "WrongPass"
    WRONG_PLUGIN_PASS = "WrongPluginPass"
    THROTTLED = "Throttled"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, value: Any) -> "LoginResult":
        """Map a raw API value to a result, UNKNOWN for anything unexpected."""
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


class HandshakeState(StrEnum):
    """States of the remote login handshake."""

    START = "start"
    AWAITING_RESPONSE = "awaiting_response"
    NEED_TOKEN = "need_token"
    TERMINAL = "terminal"


class UnknownReason(StrEnum):
    """Why a handshake ended as UNKNOWN. Logged only, never shown to users."""

    TRANSPORT = "transport"
    HTTP_STATUS = "http_status"
    INVALID_JSON = "invalid_json"
    API_ERROR = "api_error"
    NO_LOGIN_OBJECT = "no_login_object"
    TOO_MANY_ATTEMPTS = "too_many_attempts"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True, kw_only=True)
class LoginOutcome:
    """
    Result of one login round trip, or of a whole handshake.

    Attributes:
        result: Remote login result.
        token: Login token, only set for NEED_TOKEN.
        wait_seconds: Throttle duration, only set for THROTTLED.
        reason: Diagnostic for UNKNOWN outcomes.
    """

    result: LoginResult
    token: str | None = field(default=None, repr=False)
    wait_seconds: int | None = None
    reason: UnknownReason | None = None

    @property
    def is_success(self) -> bool:
        return self.result == LoginResult.SUCCESS

    @property
    def is_terminal(self) -> bool:
        return self.result != LoginResult.NEED_TOKEN

    @classmethod
    def unknown(cls, reason: UnknownReason) -> Self:
        return cls(result=LoginResult.UNKNOWN, reason=reason)


@dataclass(frozen=True, kw_only=True)
class RemoteCredentials:
    """Username/password pair for a single login call. Never persisted."""

    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class Message:
    """
    A localizable user-facing message.

    Attributes:
        key: Message key understood by the host's i18n layer.
        params: Positional parameters substituted into the message.
    """

    key: str
    params: tuple[str, ...] = ()

    def __str__(self) -> str:
        if self.params:
            return f"{self.key}: {', '.join(self.params)}"
        return self.key
