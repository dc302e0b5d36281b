"""
Profile data imported from the remote wiki.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True, kw_only=True)
class RemoteProfile:
    """
    Profile of the authenticated remote user.

    Every field is optional: older remote wikis expose fewer of them and the
    fetch is best-effort.

    Attributes:
        real_name: Real name from the API or the preferences page.
        email: Email address from the API or the preferences page.
        email_authenticated_at: When the remote wiki confirmed the email.
        preferences: Remote user options, only when requested and available.
    """

    real_name: str | None = None
    email: str | None = None
    email_authenticated_at: datetime | None = None
    preferences: dict[str, Any] | None = field(default=None)

    @property
    def is_empty(self) -> bool:
        """Check if nothing at all was gathered."""
        return (
            not self.real_name
            and not self.email
            and self.email_authenticated_at is None
            and not self.preferences
        )
