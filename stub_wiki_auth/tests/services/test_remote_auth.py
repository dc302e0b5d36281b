"""Tests for the remote login handshake."""

import httpx
import pytest
from structlog.testing import capture_logs

from stub_wiki_auth.config import StubWikiAuthConfig
from stub_wiki_auth.exceptions import ProtocolRejection
from stub_wiki_auth.models.auth import (
    HandshakeState,
    LoginResult,
    RemoteCredentials,
    UnknownReason,
)
from stub_wiki_auth.services.remote_auth import RemoteAuthClient
from stub_wiki_auth.tests.utils.mock_transport import MockTransport

SESSION_COOKIE = "wikidb_session=s3ss10n; Path=/; HttpOnly"


@pytest.mark.asyncio
async def test_need_token_then_success_resends_with_token(
    config: StubWikiAuthConfig,
    mock_transport: MockTransport,
) -> None:
    mock_transport.add_login("NeedToken", token="tok1", cookies=[SESSION_COOKIE])
    mock_transport.add_login("Success", lguserid=7, lgusername="Alice")

    async with RemoteAuthClient(config, transport=mock_transport) as client:
        outcome = await client.login("Alice", "secret")

    assert outcome.result == LoginResult.SUCCESS
    assert client.state == HandshakeState.TERMINAL
    assert client.username == "Alice"

    first, second = mock_transport.sent_forms()
    assert first == {
        "action": "login",
        "lgname": "Alice",
        "lgpassword": "secret",
        "format": "json",
    }
    assert second["lgtoken"] == "tok1"
    assert mock_transport.requests[1].headers["cookie"] == "wikidb_session=s3ss10n"


@pytest.mark.asyncio
async def test_endless_need_token_stops_after_four_attempts(
    config: StubWikiAuthConfig,
    mock_transport: MockTransport,
) -> None:
    for i in range(10):
        mock_transport.add_login("NeedToken", token=f"tok{i}")

    async with RemoteAuthClient(config, transport=mock_transport) as client:
        outcome = await client.login("Alice", "secret")

    assert outcome.result == LoginResult.UNKNOWN
    assert outcome.reason == UnknownReason.TOO_MANY_ATTEMPTS
    assert len(mock_transport.requests) == 4
    assert not client.is_authenticated


@pytest.mark.asyncio
async def test_first_attempt_success(
    config: StubWikiAuthConfig,
    mock_transport: MockTransport,
) -> None:
    mock_transport.add_login("Success", cookies=[SESSION_COOKIE])

    async with RemoteAuthClient(config, transport=mock_transport) as client:
        outcome = await client.login("Alice", "secret")

    assert outcome.is_success
    assert "lgtoken" not in mock_transport.sent_forms()[0]
    assert client.cookies.header_for_url(config.api_url) == "wikidb_session=s3ss10n"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "result",
    [
        LoginResult.NOT_EXISTS,
        LoginResult.WRONG_TOKEN,
        LoginResult.EMPTY_PASS,
        LoginResult.WRONG_PASS,
        LoginResult.WRONG_PLUGIN_PASS,
    ],
)
async def test_rejections_are_terminal(
    config: StubWikiAuthConfig,
    mock_transport: MockTransport,
    result: LoginResult,
) -> None:
    mock_transport.add_login(str(result))

    async with RemoteAuthClient(config, transport=mock_transport) as client:
        outcome = await client.login("Alice", "secret")

    assert outcome.result == result
    assert len(mock_transport.requests) == 1
    assert not client.is_authenticated


@pytest.mark.asyncio
async def test_throttled_uses_remote_wait(
    config: StubWikiAuthConfig,
    mock_transport: MockTransport,
) -> None:
    mock_transport.add_login("Throttled", wait=90)

    async with RemoteAuthClient(config, transport=mock_transport) as client:
        outcome = await client.login("Alice", "secret")

    assert outcome.result == LoginResult.THROTTLED
    assert outcome.wait_seconds == 90


@pytest.mark.asyncio
async def test_throttled_without_wait_uses_configured_value(
    mock_transport: MockTransport,
) -> None:
    config = StubWikiAuthConfig(api_url="https://wiki.example/w/api.php", throttle_seconds=600)
    mock_transport.add_login("Throttled")

    async with RemoteAuthClient(config, transport=mock_transport) as client:
        outcome = await client.login("Alice", "secret")

    assert outcome.wait_seconds == 600


@pytest.mark.asyncio
async def test_transport_error_is_terminal_unknown(
    config: StubWikiAuthConfig,
    mock_transport: MockTransport,
) -> None:
    mock_transport.add_error(httpx.ReadTimeout("timed out"))
    mock_transport.add_login("Success")

    async with RemoteAuthClient(config, transport=mock_transport) as client:
        outcome = await client.login("Alice", "secret")

    assert outcome.result == LoginResult.UNKNOWN
    assert outcome.reason == UnknownReason.TRANSPORT
    assert len(mock_transport.requests) == 1


@pytest.mark.asyncio
async def test_non_200_is_terminal_unknown(
    config: StubWikiAuthConfig,
    mock_transport: MockTransport,
) -> None:
    mock_transport.add_response(status_code=httpx.codes.BAD_GATEWAY, content=b"bad gateway")

    async with RemoteAuthClient(config, transport=mock_transport) as client:
        outcome = await client.login("Alice", "secret")

    assert outcome.reason == UnknownReason.HTTP_STATUS


@pytest.mark.asyncio
async def test_reply_without_login_object_is_unknown(
    config: StubWikiAuthConfig,
    mock_transport: MockTransport,
) -> None:
    mock_transport.add_response(json_data={"query": {}})

    async with RemoteAuthClient(config, transport=mock_transport) as client:
        outcome = await client.login("Alice", "secret")

    assert outcome.reason == UnknownReason.NO_LOGIN_OBJECT


@pytest.mark.asyncio
async def test_html_reply_is_unknown(
    config: StubWikiAuthConfig,
    mock_transport: MockTransport,
) -> None:
    mock_transport.add_response(content=b"<!DOCTYPE html><html></html>")

    async with RemoteAuthClient(config, transport=mock_transport) as client:
        outcome = await client.login("Alice", "secret")

    assert outcome.reason == UnknownReason.INVALID_JSON


@pytest.mark.asyncio
async def test_unrecognized_result_is_unknown(
    config: StubWikiAuthConfig,
    mock_transport: MockTransport,
) -> None:
    mock_transport.add_login("Aborted")

    async with RemoteAuthClient(config, transport=mock_transport) as client:
        outcome = await client.login("Alice", "secret")

    assert outcome.reason == UnknownReason.UNRECOGNIZED


@pytest.mark.asyncio
async def test_need_token_without_token_is_unknown(
    config: StubWikiAuthConfig,
    mock_transport: MockTransport,
) -> None:
    mock_transport.add_login("NeedToken")

    async with RemoteAuthClient(config, transport=mock_transport) as client:
        outcome = await client.login("Alice", "secret")

    assert outcome.result == LoginResult.UNKNOWN
    assert len(mock_transport.requests) == 1


@pytest.mark.asyncio
async def test_login_or_raise_raises_protocol_rejection(
    config: StubWikiAuthConfig,
    mock_transport: MockTransport,
) -> None:
    mock_transport.add_login("WrongPass")

    async with RemoteAuthClient(config, transport=mock_transport) as client:
        with pytest.raises(ProtocolRejection) as exc_info:
            await client.login_or_raise(RemoteCredentials(username="Alice", password="wrong"))

    assert exc_info.value.outcome.result == LoginResult.WRONG_PASS
    assert exc_info.value.login_message.key == "wrongpassword"


@pytest.mark.asyncio
async def test_logout_posts_with_session_cookies(
    config: StubWikiAuthConfig,
    mock_transport: MockTransport,
) -> None:
    mock_transport.add_login("Success", cookies=[SESSION_COOKIE])
    mock_transport.add_response(json_data={})

    async with RemoteAuthClient(config, transport=mock_transport) as client:
        await client.login("Alice", "secret")
        await client.logout()

        assert not client.is_authenticated
        assert len(client.cookies) == 0

    logout_request = mock_transport.requests[1]
    assert mock_transport.sent_forms()[1] == {"action": "logout", "format": "json"}
    assert logout_request.headers["cookie"] == "wikidb_session=s3ss10n"


@pytest.mark.asyncio
async def test_logout_failure_is_swallowed(
    config: StubWikiAuthConfig,
    mock_transport: MockTransport,
) -> None:
    mock_transport.add_login("Success")
    mock_transport.add_error(httpx.ConnectError("refused"))

    async with RemoteAuthClient(config, transport=mock_transport) as client:
        await client.login("Alice", "secret")
        with capture_logs() as logs:
            await client.logout()

    assert not client.is_authenticated
    failures = [entry for entry in logs if entry["event"] == "Logout request failed"]
    assert len(failures) == 1
    assert failures[0]["error_type"] == "NetworkError"


@pytest.mark.asyncio
async def test_logout_without_login_sends_nothing(
    config: StubWikiAuthConfig,
    mock_transport: MockTransport,
) -> None:
    async with RemoteAuthClient(config, transport=mock_transport) as client:
        await client.logout()

    assert mock_transport.requests == []


@pytest.mark.asyncio
async def test_password_is_not_logged(
    config: StubWikiAuthConfig,
    mock_transport: MockTransport,
) -> None:
    mock_transport.add_error(httpx.ConnectError("refused"))

    with capture_logs() as logs:
        async with RemoteAuthClient(config, transport=mock_transport) as client:
            await client.login("Alice", "hunter2-secret")

    assert logs
    assert all("hunter2-secret" not in repr(entry) for entry in logs)
