"""
Session cookie store for the remote wiki.

The remote wiki ties the login token to its session cookie, so every round
trip of a handshake must carry the cookies set by the previous one. They are
sent as an explicit ``Cookie`` header built from this store; httpx's own jar
is never relied on.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from urllib.parse import urlsplit

import httpx
import structlog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class SessionCookie:
    """
    A cookie scoped to a domain and path.

    Attributes:
        name: Cookie name.
        value: Cookie value.
        domain: Domain the cookie was set for, without a leading dot.
        path: Path prefix the cookie applies to.
        host_only: True when the server did not send a Domain attribute, in
            which case only the exact host matches.
    """

    name: str
    value: str
    domain: str
    path: str = "/"
    host_only: bool = True

    def matches(self, host: str, path: str) -> bool:
        """Check if the cookie should be sent to ``host`` for ``path``."""
        return _domain_match(self, host.lower()) and _path_match(self.path, path or "/")


def _domain_match(cookie: SessionCookie, host: str) -> bool:
    if host == cookie.domain:
        return True
    if cookie.host_only:
        return False
    return host.endswith("." + cookie.domain)


def _path_match(cookie_path: str, request_path: str) -> bool:
    if request_path == cookie_path:
        return True
    if not request_path.startswith(cookie_path):
        return False
    return cookie_path.endswith("/") or request_path[len(cookie_path)] == "/"


class CookieStore:
    """
    Cookies of one remote session.

    Each response that goes through ``replace_from_response`` fully replaces
    the previous state. Not shared between logins.
    """

    def __init__(self) -> None:
        self._cookies: list[SessionCookie] = []

    def __len__(self) -> int:
        return len(self._cookies)

    def __iter__(self) -> Iterator[SessionCookie]:
        return iter(self._cookies)

    def __repr__(self) -> str:
        names = ", ".join(c.name for c in self._cookies)
        return f"CookieStore([{names}])"

    def replace_from_response(self, response: httpx.Response) -> None:
        """
        Replace the stored cookies with the ones set by ``response``.

        The default domain is the request host and expired cookies are
        dropped. A cookie without a Path attribute applies to the whole site.
        A response without any Set-Cookie header leaves the store untouched.

        Args:
            response: Response to a request made through httpx. Must carry
                its originating request.
        """
        if "set-cookie" not in response.headers:
            return

        jar = httpx.Cookies()
        jar.extract_cookies(response)

        self._cookies = [
            SessionCookie(
                name=c.name,
                value=c.value or "",
                domain=c.domain.lstrip(".").lower(),
                path=c.path if c.path_specified and c.path else "/",
                host_only=not c.domain_specified,
            )
            for c in jar.jar
        ]
        logger.debug("Session cookies replaced", names=[c.name for c in self._cookies])

    def clear(self) -> None:
        self._cookies = []

    def header_for(self, host: str, path: str) -> str | None:
        """
        Serialize matching cookies into a ``Cookie`` header value.

        Args:
            host: Target host name.
            path: Target URL path.

        Returns:
            ``name=value`` pairs joined by ``"; "``, or None if no cookie applies.
        """
        # Longer paths first, like browsers do
        matching = sorted(
            (c for c in self._cookies if c.matches(host, path)),
            key=lambda c: len(c.path),
            reverse=True,
        )
        if not matching:
            return None
        return "; ".join(f"{c.name}={c.value}" for c in matching)

    def header_for_url(self, url: str | httpx.URL) -> str | None:
        """Serialize cookies that apply to ``url``."""
        parts = urlsplit(str(url))
        return self.header_for(parts.hostname or "", parts.path or "/")
