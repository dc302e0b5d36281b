"""
Profile fetching for freshly authenticated remote users.

Everything here is best-effort: failures are logged and whatever was gathered
so far is returned.
"""

from collections.abc import Callable
from datetime import datetime
from typing import Any

import structlog
from bs4 import BeautifulSoup

from stub_wiki_auth.api.endpoints.user import get_preferences_page, get_userinfo
from stub_wiki_auth.api.http_client import AsyncHttpClient
from stub_wiki_auth.config import StubWikiAuthConfig
from stub_wiki_auth.exceptions import StubWikiAuthError
from stub_wiki_auth.models.profile import RemoteProfile

logger = structlog.get_logger(__name__)

_BS_PARSER = "html.parser"

# Field names used by the remote preferences form. Old wikis (1.15 and
# earlier) use the first spelling, newer ones the second.
REAL_NAME_FIELDS = ("wpRealName", "wprealname")
EMAIL_FIELDS = ("wpUserEmail", "wpemailaddress")


def parse_api_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 API timestamp such as ``2010-05-04T12:00:00Z``."""
    if not value or not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug("Unparseable timestamp from remote API", value=value)
        return None


def strip_backslashes(value: str) -> str:
    """Drop backslash escapes (``\\'`` -> ``'``, ``\\\\`` -> ``\\``)."""
    out = []
    chars = iter(value)
    for ch in chars:
        if ch == "\\":
            ch = next(chars, "")
        out.append(ch)
    return "".join(out)


def _name_matcher(name: str) -> Callable[[str | None], bool]:
    wanted = name.lower()
    return lambda value: value is not None and value.lower() == wanted


def extract_input_value(page: str, names: tuple[str, ...]) -> str | None:
    """
    Find the value of the first ``<input>`` named (or with id) one of ``names``.

    Names match case-insensitively, so ``wpRealname`` is found for ``wpRealName``.

    Args:
        page: HTML of the preferences page.
        names: Candidate field names, in order of preference.

    Returns:
        Decoded value, or None if no candidate field has a non-empty value.
        HTML entities are decoded by the parser; backslash escapes are
        stripped here.
    """
    soup = BeautifulSoup(page, _BS_PARSER)
    for name in names:
        field = soup.find("input", attrs={"name": _name_matcher(name)}) or soup.find(
            "input", id=name
        )
        if field is None:
            continue
        value = field.get("value")
        if isinstance(value, list):
            value = " ".join(value)
        if value:
            return strip_backslashes(value)
    return None


class ProfileFetcher:
    """Collects the authenticated user's profile from the remote wiki."""

    def __init__(self, http_client: AsyncHttpClient, config: StubWikiAuthConfig) -> None:
        """
        Args:
            http_client: HTTP client holding the logged-in session's cookies.
            config: Provider configuration.
        """
        self._http = http_client
        self._config = config

    async def fetch(self, *, fetch_options: bool = False) -> RemoteProfile:
        """
        Fetch email, real name and optionally preferences.

        Falls back to scraping the preferences page when the API does not
        expose the email address.

        Args:
            fetch_options: Also import the user's preferences.

        Returns:
            Whatever could be gathered, possibly an empty profile.
        """
        real_name: str | None = None
        email: str | None = None
        email_authenticated_at: datetime | None = None
        preferences: dict[str, Any] | None = None

        try:
            userinfo = await get_userinfo(self._http, with_options=fetch_options)
        except StubWikiAuthError as e:
            logger.warning(
                "Failed request to get user preferences",
                error_type=type(e).__name__,
                error=str(e),
            )
            userinfo = {}

        # Older wikis might not expose email (1.15+) or realname (1.18+)
        if userinfo.get("email"):
            email = str(userinfo["email"])
            email_authenticated_at = parse_api_timestamp(userinfo.get("emailauthenticated"))
        if userinfo.get("realname"):
            real_name = str(userinfo["realname"])

        if fetch_options and isinstance(userinfo.get("options"), dict):
            preferences = dict(userinfo["options"])

        if not email:
            scraped_name, scraped_email = await self._scrape_preferences_page()
            real_name = real_name or scraped_name
            email = scraped_email

        return RemoteProfile(
            real_name=real_name,
            email=email,
            email_authenticated_at=email_authenticated_at,
            preferences=preferences,
        )

    async def _scrape_preferences_page(self) -> tuple[str | None, str | None]:
        """Read real name and email from the preferences form."""
        if not self._config.prefs_url:
            logger.debug("No preferences page configured, skipping screen scraping")
            return None, None

        try:
            page = await get_preferences_page(self._http, self._config.prefs_url)
            return (
                extract_input_value(page, REAL_NAME_FIELDS),
                extract_input_value(page, EMAIL_FIELDS),
            )
        except Exception as e:
            logger.warning(
                "Failed request for screenscraping email",
                error_type=type(e).__name__,
                error=str(e),
            )
            return None, None
