"""
Domain models for stub wiki auth.

These are mostly immutable (frozen) dataclasses representing the core domain concepts.
"""

from stub_wiki_auth.models.account import (
    AccountCreationType,
    AuthenticationResponse,
    AuthStatus,
    LocalAccount,
    PasswordResetRequest,
)
from stub_wiki_auth.models.auth import (
    HandshakeState,
    LoginOutcome,
    LoginResult,
    Message,
    RemoteCredentials,
    UnknownReason,
)
from stub_wiki_auth.models.profile import RemoteProfile

__all__ = [
    # Auth
    "HandshakeState",
    "LoginOutcome",
    "LoginResult",
    "Message",
    "RemoteCredentials",
    "UnknownReason",
    # Profile
    "RemoteProfile",
    # Account
    "AccountCreationType",
    "AuthenticationResponse",
    "AuthStatus",
    "LocalAccount",
    "PasswordResetRequest",
]
