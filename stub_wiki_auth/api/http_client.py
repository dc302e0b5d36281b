"""
Async HTTP client for the remote wiki.

Provides a clean interface for making API requests with explicit cookie
handling, timeouts and error mapping.
"""

import asyncio
from typing import Any

import httpx
import structlog

from stub_wiki_auth.api.cookies import CookieStore
from stub_wiki_auth.config import StubWikiAuthConfig
from stub_wiki_auth.exceptions import APIError, HTTPStatusError, NetworkError

logger = structlog.get_logger(__name__)

SENSITIVE_KEYS = frozenset(
    {
        "lgpassword",
        "lgtoken",
        "token",
        "password",
    }
)

# Enough of a body to diagnose a misconfigured api_url without flooding logs.
_LOG_CONTENT_LIMIT = 500


def sanitize_for_log(data: dict[str, Any]) -> dict[str, Any]:
    """
    Remove sensitive fields from a dict before logging.

    Recursively sanitizes nested dictionaries and lists.

    Args:
        data: Dictionary that may contain sensitive values.

    Returns:
        Copy with sensitive values replaced by "***".
    """
    result = {}
    for key, value in data.items():
        if key in SENSITIVE_KEYS:
            result[key] = "***"
        elif isinstance(value, dict):
            result[key] = sanitize_for_log(value)
        elif isinstance(value, list):
            result[key] = [
                sanitize_for_log(item) if isinstance(item, dict) else item for item in value
            ]
        else:
            result[key] = value
    return result


def _truncate(text: str) -> str:
    if len(text) <= _LOG_CONTENT_LIMIT:
        return text
    return text[:_LOG_CONTENT_LIMIT] + "..."


class AsyncHttpClient:
    """
    Async HTTP client for one remote wiki session.

    Cookies live in the attached CookieStore. httpx's own jar is emptied
    before every request so it never adds or keeps anything on its own.
    """

    def __init__(
        self,
        config: StubWikiAuthConfig,
        *,
        cookies: CookieStore | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            config: Provider configuration.
            cookies: Cookie store for this session. A fresh one by default.
            transport: Optional transport for testing (mock transport).
        """
        self._config = config
        self._transport = transport
        self._cookies = cookies if cookies is not None else CookieStore()

        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    async def __aenter__(self) -> "AsyncHttpClient":
        await self._ensure_client()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self._close()

    @property
    def cookies(self) -> CookieStore:
        """Cookie store of the current session."""
        return self._cookies

    async def _ensure_client(self) -> httpx.AsyncClient:
        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    timeout=self._config.timeout,
                    transport=self._transport,
                    headers={"User-Agent": self._config.user_agent},
                )
        return self._client

    async def _close(self) -> None:
        async with self._client_lock:
            if self._client is None:
                logger.debug("Client not open.")
                return
            await self._client.aclose()
            self._client = None

    async def request(
        self,
        method: str,
        url: str | httpx.URL,
        *,
        data: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """
        Make a request carrying the session cookies.

        Cookies set by the response replace the stored ones.

        Args:
            method: HTTP method (GET, POST).
            url: Absolute URL, query string included.
            data: Form-encoded body for POST requests.

        Returns:
            The response, always with status 200.

        Raises:
            NetworkError: On connection failures and timeouts.
            HTTPStatusError: If the remote answers with another status.
        """
        if self._client is None:
            msg = "HTTP client not initialized. Use 'async with' first."
            raise RuntimeError(msg)

        headers = {}
        cookie_header = self._cookies.header_for_url(url)
        if cookie_header:
            headers["Cookie"] = cookie_header

        self._client.cookies.clear()
        try:
            response = await self._client.request(
                method=method,
                url=url,
                data=data,
                headers=headers,
            )
        except httpx.HTTPError as e:
            logger.warning(
                "Remote request failed",
                url=url,
                payload=sanitize_for_log(data or {}),
                error_type=type(e).__name__,
                error=str(e),
            )
            msg = f"Request to remote wiki failed: {type(e).__name__}"
            raise NetworkError(msg, url=url) from e
        finally:
            self._client.cookies.clear()

        if response.status_code != httpx.codes.OK:
            logger.warning(
                "Remote request returned unexpected status",
                url=url,
                status=response.status_code,
                content=_truncate(response.text),
            )
            msg = f"Remote wiki answered with status {response.status_code}"
            raise HTTPStatusError(msg, code=response.status_code, url=url)

        self._cookies.replace_from_response(response)
        return response

    async def api_request(self, data: dict[str, Any]) -> dict[str, Any]:
        """
        POST to the remote api.php and decode the JSON reply.

        Args:
            data: API parameters. ``format=json`` is added.

        Returns:
            Decoded JSON object.

        Raises:
            NetworkError: On transport failures or non-200 statuses.
            APIError: If the body is not a JSON object or carries an API error.
        """
        payload = {**data, "format": "json"}
        logger.debug("API request", payload=sanitize_for_log(payload))

        response = await self.request("POST", self._config.api_url, data=payload)

        try:
            result = response.json()
        except ValueError as e:
            logger.warning(
                "Invalid JSON response from remote API",
                content=_truncate(response.text),
            )
            msg = "Invalid JSON response from remote API"
            raise APIError(msg) from e

        if not isinstance(result, dict):
            msg = "Unexpected JSON response from remote API"
            raise APIError(msg)

        error = result.get("error")
        if isinstance(error, dict):
            msg = error.get("info", "Unknown API error")
            raise APIError(msg, code=error.get("code"))

        return result

    async def get_page(self, url: str | httpx.URL) -> str:
        """
        GET an HTML page with the session cookies.

        Raises:
            NetworkError: On transport failures or non-200 statuses.
        """
        response = await self.request("GET", url)
        return response.text
