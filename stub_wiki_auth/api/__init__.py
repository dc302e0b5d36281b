"""
Remote wiki API client layer.

Provides async HTTP communication with the remote wiki.
"""

from stub_wiki_auth.api.cookies import CookieStore, SessionCookie
from stub_wiki_auth.api.http_client import AsyncHttpClient, sanitize_for_log

__all__ = ["AsyncHttpClient", "CookieStore", "SessionCookie", "sanitize_for_log"]
