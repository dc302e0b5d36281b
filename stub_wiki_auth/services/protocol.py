"""
Collaborator protocol definitions.

The host application owns user storage, per-session data and password
hashing. These interfaces let the provisioner work with any of them without
knowing how they are implemented.
"""

from typing import Any, Protocol, runtime_checkable

from stub_wiki_auth.models.account import LocalAccount


@runtime_checkable
class UserStore(Protocol):
    """Access to local user rows."""

    def canonical_name(self, username: str) -> str | None:
        """
        Canonicalize a user name.

        Returns:
            The canonical name, or None if the name is not usable.
        """
        ...

    async def get_account(self, name: str) -> LocalAccount | None:
        """Look up an account by canonical name."""
        ...

    async def set_password_hash(self, account: LocalAccount, password_hash: str) -> None:
        """
        Write the password hash of an account and commit it right away.

        Must not wait for ``save_account``.
        """
        ...

    async def reset_token(self, account: LocalAccount) -> None:
        """Rotate the account's session token."""
        ...

    async def save_account(self, account: LocalAccount) -> None:
        """Persist profile fields and options of an account."""
        ...

    async def send_confirmation_mail(self, account: LocalAccount) -> None:
        """Start the email confirmation workflow for the account's email."""
        ...


@runtime_checkable
class SessionFlags(Protocol):
    """Transient key/value data of the current login session."""

    def set(self, key: str, value: Any) -> None: ...

    def get(self, key: str) -> Any: ...


@runtime_checkable
class PasswordHasher(Protocol):
    """Turns plaintext passwords into stored hashes."""

    def hash(self, password: str) -> str:
        """Hash a plaintext password into its encoded form."""
        ...

    def verify(self, password: str, encoded: str) -> bool:
        """Check a plaintext password against an encoded hash."""
        ...
