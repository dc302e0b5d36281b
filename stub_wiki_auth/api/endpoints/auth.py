"""Authentication-related API endpoints."""

from typing import Any

from stub_wiki_auth.api.http_client import AsyncHttpClient


async def login(
    http: AsyncHttpClient,
    username: str,
    password: str,
    token: str | None = None,
) -> dict[str, Any]:
    """
    Submit one login round trip.

    Args:
        http: Configured async HTTP client.
        username: Remote user name.
        password: Remote password.
        token: Login token returned by a previous NeedToken answer.

    Returns:
        Full API reply, expected to hold a ``login`` object.
    """
    data = {
        "action": "login",
        "lgname": username,
        "lgpassword": password,
    }
    if token is not None:
        data["lgtoken"] = token
    return await http.api_request(data)


async def logout(http: AsyncHttpClient) -> None:
    """Logout and invalidate the remote session."""
    await http.api_request({"action": "logout"})
