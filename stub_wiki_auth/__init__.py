"""
Stub user wiki authentication.

Authenticates local stub users (accounts without a password) against a remote
wiki and provisions them with the password and profile on success.

Example:
    ```python
    from stub_wiki_auth import StubUserProvisioner, StubWikiAuthConfig

    config = StubWikiAuthConfig(
        api_url="https://old.example.org/w/api.php",
        prefs_url="https://old.example.org/wiki/Special:Preferences",
    )
    provisioner = StubUserProvisioner(config, user_store, session_flags)

    response = await provisioner.begin_primary_authentication("Alice", "secret")
    # ABSTAIN: continue with the local password provider
    # FAIL: show response.message
    ```
"""

from stub_wiki_auth.api.cookies import CookieStore
from stub_wiki_auth.config import StubWikiAuthConfig
from stub_wiki_auth.exceptions import (
    APIError,
    ConfigurationError,
    EnrichmentError,
    HTTPStatusError,
    NetworkError,
    ProtocolRejection,
    StubWikiAuthError,
)
from stub_wiki_auth.models import (
    AuthenticationResponse,
    AuthStatus,
    LocalAccount,
    LoginOutcome,
    LoginResult,
    Message,
    RemoteProfile,
)
from stub_wiki_auth.services import (
    ProfileFetcher,
    RemoteAuthClient,
    SessionFlags,
    StubUserProvisioner,
    UserStore,
)

__version__ = "0.1.0"

__all__ = [
    # Main entry points
    "StubUserProvisioner",
    "StubWikiAuthConfig",
    "RemoteAuthClient",
    "ProfileFetcher",
    "CookieStore",
    # Collaborators
    "UserStore",
    "SessionFlags",
    # Models
    "AuthenticationResponse",
    "AuthStatus",
    "LocalAccount",
    "LoginOutcome",
    "LoginResult",
    "Message",
    "RemoteProfile",
    # Exceptions
    "StubWikiAuthError",
    "ConfigurationError",
    "NetworkError",
    "HTTPStatusError",
    "APIError",
    "ProtocolRejection",
    "EnrichmentError",
]
