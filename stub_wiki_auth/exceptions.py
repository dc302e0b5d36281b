"""
Stub wiki auth exception hierarchy.

All exceptions inherit from StubWikiAuthError for easy catching.
"""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from stub_wiki_auth.models.auth import LoginOutcome, Message


class StubWikiAuthError(Exception):
    """Base exception for all stub_wiki_auth errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx})"
        return self.message


class ConfigurationError(StubWikiAuthError):
    """Provider configuration is missing or invalid."""


class NetworkError(StubWikiAuthError):
    """Network-level error (connection failed, timeout)."""


class HTTPStatusError(NetworkError):
    """Remote answered with a status other than 200."""

    def __init__(self, message: str, *, code: int, url: str | None = None) -> None:
        super().__init__(message, code=code, url=url)
        self.code = code
        self.url = url


class APIError(StubWikiAuthError):
    """Remote API returned something we cannot use."""

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message, code=code)
        self.code = code


class ProtocolRejection(StubWikiAuthError):
    """Remote wiki rejected the login or reported a negative state."""

    def __init__(self, outcome: "LoginOutcome", message: "Message") -> None:
        super().__init__(f"Remote login rejected: {outcome.result}", key=message.key)
        self.outcome = outcome
        self.login_message = message


class EnrichmentError(StubWikiAuthError):
    """Profile or preference import failed. Never fatal to provisioning."""
