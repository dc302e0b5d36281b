"""
Local account records and provider responses.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any, Self

from stub_wiki_auth.models.auth import Message


@dataclass(kw_only=True)
class LocalAccount:
    """
    Local user row as seen through the user store.

    Mutable: the provisioner fills it in before handing it back to
    ``UserStore.save_account``.

    Attributes:
        user_id: Local user ID.
        name: Canonical user name.
        password_hash: Encoded password hash. Empty for stub users.
        real_name: Real name.
        email: Email address.
        email_authenticated_at: When the email was confirmed.
        options: User preferences.
        token: Session token; rotating it invalidates existing sessions.
    """

    user_id: int
    name: str
    password_hash: str = field(default="", repr=False)
    real_name: str = ""
    email: str = ""
    email_authenticated_at: datetime | None = None
    options: dict[str, Any] = field(default_factory=dict)
    token: str | None = field(default=None, repr=False)

    @property
    def is_stub(self) -> bool:
        """Check if the account has no local password yet."""
        return self.password_hash == ""


class AuthStatus(StrEnum):
    """Decision of an authentication provider."""

    PASS = "pass"
    FAIL = "fail"
    ABSTAIN = "abstain"


class AccountCreationType(StrEnum):
    """What a provider does when a new account is created."""

    CREATE = "create"
    LINK = "link"
    NONE = "none"


@dataclass(frozen=True, kw_only=True)
class AuthenticationResponse:
    """
    Three-way answer to the outer login pipeline.

    Attributes:
        status: Pass, fail, or abstain (defer to other providers).
        message: User-facing reason for a failure.
        username: Authenticated user name for a pass.
    """

    status: AuthStatus
    message: Message | None = None
    username: str | None = None

    @classmethod
    def abstain(cls) -> Self:
        return cls(status=AuthStatus.ABSTAIN)

    @classmethod
    def fail(cls, message: Message) -> Self:
        return cls(status=AuthStatus.FAIL, message=message)

    @classmethod
    def pass_(cls, username: str) -> Self:
        return cls(status=AuthStatus.PASS, username=username)


@dataclass(frozen=True, kw_only=True)
class PasswordResetRequest:
    """Session flag asking the login flow to prompt for a new password."""

    message: Message
    hard: bool = False
