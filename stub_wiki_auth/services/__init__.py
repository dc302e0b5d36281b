"""
Business logic services for stub wiki auth.
"""

from stub_wiki_auth.services.passwords import BcryptPasswordHasher
from stub_wiki_auth.services.profile_fetcher import ProfileFetcher
from stub_wiki_auth.services.protocol import PasswordHasher, SessionFlags, UserStore
from stub_wiki_auth.services.provisioning import StubUserProvisioner
from stub_wiki_auth.services.remote_auth import RemoteAuthClient

__all__ = [
    "BcryptPasswordHasher",
    "PasswordHasher",
    "ProfileFetcher",
    "RemoteAuthClient",
    "SessionFlags",
    "StubUserProvisioner",
    "UserStore",
]
