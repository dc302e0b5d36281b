"""
Stub wiki auth provider configuration.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Self

from stub_wiki_auth.exceptions import ConfigurationError

# Older remote wikis sniff the user agent; keep the one they were tested against.
DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; MSIE 9.0; Windows NT 6.1; Trident/5.0)"

MAX_LOGIN_ATTEMPTS = 4


@dataclass(frozen=True, kw_only=True)
class StubWikiAuthConfig:
    """
    Attributes:
        api_url: URL of the remote wiki api.php endpoint. Required.
        prefs_url: URL of the remote Special:Preferences page, scraped for the
            email address when the API does not expose it.
        timeout: Timeout for each remote request in seconds.
        fetch_user_options: Whether to import remote preferences. Either a bool
            or a set of preference names that must never be imported.
        prompt_password_change: Ask the user to pick a new password after the
            first successful login.
        throttle_seconds: Wait duration reported to the user when the remote
            throttles a login without telling us how long.
        user_agent: User-Agent header sent to the remote wiki.
        max_login_attempts: Hard cap on login round trips per handshake.
    """

    api_url: str
    prefs_url: str | None = None
    timeout: float = 10.0
    fetch_user_options: bool | frozenset[str] = False
    prompt_password_change: bool = True
    throttle_seconds: int = 300
    user_agent: str = DEFAULT_USER_AGENT
    max_login_attempts: int = MAX_LOGIN_ATTEMPTS

    def __post_init__(self) -> None:
        if not self.api_url:
            msg = "api_url must be provided"
            raise ConfigurationError(msg)
        if self.timeout <= 0:
            msg = "timeout must be positive"
            raise ConfigurationError(msg, timeout=self.timeout)
        if self.throttle_seconds < 0:
            msg = "throttle_seconds must be non-negative"
            raise ConfigurationError(msg, throttle_seconds=self.throttle_seconds)
        if not 1 <= self.max_login_attempts <= MAX_LOGIN_ATTEMPTS:
            msg = f"max_login_attempts must be between 1 and {MAX_LOGIN_ATTEMPTS}"
            raise ConfigurationError(msg, max_login_attempts=self.max_login_attempts)
        if not isinstance(self.fetch_user_options, bool):
            # Frozen dataclass: normalize through object.__setattr__
            object.__setattr__(self, "fetch_user_options", frozenset(self.fetch_user_options))

    @property
    def wants_user_options(self) -> bool:
        """Check if remote preferences should be imported at all."""
        if isinstance(self.fetch_user_options, bool):
            return self.fetch_user_options
        return True

    @property
    def excluded_user_options(self) -> frozenset[str]:
        """Preference names that must never be imported."""
        if isinstance(self.fetch_user_options, bool):
            return frozenset()
        return self.fetch_user_options

    @classmethod
    def from_mapping(cls, params: Mapping[str, Any]) -> Self:
        """
        Build a config from host settings.

        Accepts the camelCase keys used by wiki site configuration
        (``apiUrl``, ``prefsUrl``, ``timeout``, ``fetchUserOptions``,
        ``promptPasswordChange``).

        Raises:
            ConfigurationError: If ``apiUrl`` is missing or a value is invalid.
        """
        api_url = params.get("apiUrl")
        if not api_url:
            msg = "apiUrl param must be provided"
            raise ConfigurationError(msg)

        kwargs: dict[str, Any] = {"api_url": api_url, "prefs_url": params.get("prefsUrl") or None}
        if params.get("timeout") is not None:
            kwargs["timeout"] = float(params["timeout"])
        if "fetchUserOptions" in params:
            kwargs["fetch_user_options"] = _parse_fetch_user_options(params["fetchUserOptions"])
        if "promptPasswordChange" in params:
            kwargs["prompt_password_change"] = bool(params["promptPasswordChange"])
        return cls(**kwargs)


def _parse_fetch_user_options(value: Any) -> bool | frozenset[str]:
    if isinstance(value, bool) or value is None:
        return bool(value)
    if isinstance(value, str):
        return frozenset({value})
    if isinstance(value, Iterable):
        # An empty list in site settings means "disabled", not "import everything".
        return frozenset(str(v) for v in value) or False
    msg = "fetchUserOptions must be a bool or a list of preference names"
    raise ConfigurationError(msg, fetch_user_options=value)
