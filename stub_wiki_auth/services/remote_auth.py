"""
Remote wiki authentication client.

Drives the login handshake against the remote api.php: login, resubmit with
the token when asked for one, and keep the session cookies for later calls.
"""

import asyncio
from typing import Any

import httpx
import structlog

from stub_wiki_auth.api.cookies import CookieStore
from stub_wiki_auth.api.endpoints import auth as auth_endpoints
from stub_wiki_auth.api.http_client import AsyncHttpClient
from stub_wiki_auth.config import StubWikiAuthConfig
from stub_wiki_auth.exceptions import APIError, HTTPStatusError, NetworkError, ProtocolRejection
from stub_wiki_auth.messages import outcome_message
from stub_wiki_auth.models.auth import (
    HandshakeState,
    LoginOutcome,
    LoginResult,
    RemoteCredentials,
    UnknownReason,
)

logger = structlog.get_logger(__name__)


class RemoteAuthClient:
    """
    Logs in to a remote wiki.

    One instance is one remote session: it owns its cookie store and HTTP
    client and must not be shared between concurrent logins.

    Example:
        ```python
        async with RemoteAuthClient(config) as client:
            outcome = await client.login("Alice", "secret")
            if outcome.is_success:
                ...
            await client.logout()
        ```
    """

    def __init__(
        self,
        config: StubWikiAuthConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            config: Provider configuration.
            transport: Optional httpx transport for testing.
        """
        self._config = config
        self._http = AsyncHttpClient(config, cookies=CookieStore(), transport=transport)

        self._state = HandshakeState.START
        self._last_outcome: LoginOutcome | None = None
        self._username: str | None = None
        self._lock = asyncio.Lock()

    async def __aenter__(self) -> "RemoteAuthClient":
        await self._http.__aenter__()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self._http.__aexit__(*args)

    @property
    def http(self) -> AsyncHttpClient:
        """HTTP client carrying this session's cookies."""
        return self._http

    @property
    def cookies(self) -> CookieStore:
        return self._http.cookies

    @property
    def state(self) -> HandshakeState:
        return self._state

    @property
    def last_outcome(self) -> LoginOutcome | None:
        return self._last_outcome

    @property
    def username(self) -> str | None:
        """Remote user name once logged in."""
        return self._username

    @property
    def is_authenticated(self) -> bool:
        return self._username is not None

    async def login(self, username: str, password: str) -> LoginOutcome:
        """
        Run the login handshake.

        Args:
            username: Remote user name.
            password: Remote password. Sent, never logged or kept.

        Returns:
            Terminal outcome. Transport failures, bad replies and too many
            round trips all end as UNKNOWN with a logged reason.
        """
        async with self._lock:
            self._http.cookies.clear()
            self._username = None
            self._state = HandshakeState.START

            token: str | None = None
            attempts = 0
            while True:
                if attempts >= self._config.max_login_attempts:
                    logger.warning(
                        "Too many requests logging in",
                        username=username,
                        attempts=attempts,
                    )
                    return self._finish(LoginOutcome.unknown(UnknownReason.TOO_MANY_ATTEMPTS))

                self._state = HandshakeState.AWAITING_RESPONSE
                attempts += 1
                outcome = await self._attempt(username, password, token)

                if outcome.is_terminal:
                    break

                self._state = HandshakeState.NEED_TOKEN
                token = outcome.token
                logger.debug("Remote asked for a login token", username=username, attempt=attempts)

            if outcome.is_success:
                logger.info("Remote login successful", username=username, attempts=attempts)
                self._username = username
            elif outcome.result != LoginResult.UNKNOWN:
                logger.info("Remote login rejected", username=username, result=str(outcome.result))

            return self._finish(outcome)

    async def login_or_raise(self, credentials: RemoteCredentials) -> LoginOutcome:
        """
        Run the login handshake, raising on anything but success.

        Raises:
            ProtocolRejection: Carrying the outcome and its user-facing message.
        """
        outcome = await self.login(credentials.username, credentials.password)
        if not outcome.is_success:
            message = outcome_message(outcome, username=credentials.username)
            raise ProtocolRejection(outcome, message)
        return outcome

    async def logout(self) -> None:
        """Best-effort remote logout. Never raises."""
        if self._username is None:
            return

        logger.info("Logging out of remote wiki", username=self._username)
        try:
            await auth_endpoints.logout(self._http)
        except Exception as e:
            logger.warning("Logout request failed", error_type=type(e).__name__, exc_info=e)

        self._username = None
        self._http.cookies.clear()

    async def _attempt(self, username: str, password: str, token: str | None) -> LoginOutcome:
        """Send one login round trip and interpret the reply."""
        try:
            response = await auth_endpoints.login(self._http, username, password, token)
        except HTTPStatusError as e:
            logger.warning("Failed login request", username=username, status=e.code)
            return LoginOutcome.unknown(UnknownReason.HTTP_STATUS)
        except NetworkError as e:
            logger.warning("Failed login request", username=username, error=e.message)
            return LoginOutcome.unknown(UnknownReason.TRANSPORT)
        except APIError as e:
            logger.warning("Failed login request", username=username, error=e.message, code=e.code)
            reason = UnknownReason.INVALID_JSON if e.code is None else UnknownReason.API_ERROR
            return LoginOutcome.unknown(reason)

        return self._parse_login(username, response)

    def _parse_login(self, username: str, response: dict[str, Any]) -> LoginOutcome:
        login = response.get("login")
        if not isinstance(login, dict):
            logger.warning(
                "No login object found. Is the remote wiki api URL correct?",
                username=username,
                keys=sorted(response),
            )
            return LoginOutcome.unknown(UnknownReason.NO_LOGIN_OBJECT)

        result = LoginResult.parse(login.get("result"))
        match result:
            case LoginResult.NEED_TOKEN:
                token = login.get("token")
                if not token:
                    logger.warning("NeedToken answer without a token", username=username)
                    return LoginOutcome.unknown(UnknownReason.UNRECOGNIZED)
                return LoginOutcome(result=result, token=str(token))
            case LoginResult.THROTTLED:
                return LoginOutcome(result=result, wait_seconds=self._wait_seconds(login))
            case LoginResult.UNKNOWN:
                logger.warning(
                    "Unrecognized login result",
                    username=username,
                    result=login.get("result"),
                )
                return LoginOutcome.unknown(UnknownReason.UNRECOGNIZED)
            case _:
                return LoginOutcome(result=result)

    def _wait_seconds(self, login: dict[str, Any]) -> int:
        wait = login.get("wait")
        try:
            return int(wait) if wait is not None else self._config.throttle_seconds
        except (TypeError, ValueError):
            return self._config.throttle_seconds

    def _finish(self, outcome: LoginOutcome) -> LoginOutcome:
        self._state = HandshakeState.TERMINAL
        self._last_outcome = outcome
        if outcome.result == LoginResult.UNKNOWN:
            logger.warning("Remote login failed", reason=str(outcome.reason))
        return outcome
