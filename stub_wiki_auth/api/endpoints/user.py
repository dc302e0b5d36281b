"""User info endpoints and pages."""

from typing import Any

import httpx

from stub_wiki_auth.api.http_client import AsyncHttpClient


async def get_userinfo(http: AsyncHttpClient, *, with_options: bool = False) -> dict[str, Any]:
    """
    Get the logged-in user's info.

    Args:
        http: Authenticated async HTTP client.
        with_options: Also request the user's preferences.

    Returns:
        The ``query.userinfo`` object, empty if the reply has none.
    """
    props = ["email", "realname"]
    if with_options:
        props.append("options")

    response = await http.api_request(
        {
            "action": "query",
            "meta": "userinfo",
            "uiprop": "|".join(props),
        }
    )
    query = response.get("query")
    if not isinstance(query, dict):
        return {}
    userinfo = query.get("userinfo")
    return userinfo if isinstance(userinfo, dict) else {}


async def get_preferences_page(http: AsyncHttpClient, prefs_url: str) -> str:
    """
    Get the remote Special:Preferences page HTML.

    Messages are requested in the ``qqx`` pseudo-language so the markup does
    not depend on the remote user's interface language. The parameter is
    appended, so ``index.php?title=Special:Preferences`` style URLs keep their
    title.
    """
    url = httpx.URL(prefs_url).copy_add_param("uselang", "qqx")
    return await http.get_page(url)
