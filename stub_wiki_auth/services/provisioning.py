"""
Stub user provisioning.

Primary authentication provider for local stub users, i.e. accounts with no
password. Authenticates them against the remote wiki and, on success, fills
in the local password and profile so the standard password check can take
over.
"""

from typing import Any

import httpx
import structlog

from stub_wiki_auth.config import StubWikiAuthConfig
from stub_wiki_auth.exceptions import EnrichmentError, ProtocolRejection
from stub_wiki_auth.messages import RESET_PASSWORD_MESSAGE
from stub_wiki_auth.models.account import (
    AccountCreationType,
    AuthenticationResponse,
    LocalAccount,
    PasswordResetRequest,
)
from stub_wiki_auth.models.auth import LoginResult, RemoteCredentials
from stub_wiki_auth.models.profile import RemoteProfile
from stub_wiki_auth.services.passwords import BcryptPasswordHasher
from stub_wiki_auth.services.profile_fetcher import ProfileFetcher
from stub_wiki_auth.services.protocol import PasswordHasher, SessionFlags, UserStore
from stub_wiki_auth.services.remote_auth import RemoteAuthClient

logger = structlog.get_logger(__name__)

RESET_PASS_FLAG = "reset-pass"


class StubUserProvisioner:
    """
    Provisions stub users from a remote wiki.

    The provider never authorizes a session itself. On the success path it
    abstains after writing the password, so the regular local password
    provider completes the login.

    Example:
        ```python
        provisioner = StubUserProvisioner(config, user_store, session_flags)
        response = await provisioner.begin_primary_authentication("Alice", "secret")
        ```
    """

    def __init__(
        self,
        config: StubWikiAuthConfig,
        user_store: UserStore,
        session_flags: SessionFlags,
        *,
        password_hasher: PasswordHasher | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            config: Provider configuration.
            user_store: Local user storage.
            session_flags: Data store of the current login session.
            password_hasher: Hasher for the imported password. bcrypt by default.
            transport: Optional httpx transport for testing.
        """
        self._config = config
        self._store = user_store
        self._session_flags = session_flags
        self._hasher = password_hasher or BcryptPasswordHasher()
        self._transport = transport

    async def begin_primary_authentication(
        self, username: str | None, password: str | None
    ) -> AuthenticationResponse:
        """
        Try to provision a stub user from the submitted credentials.

        Args:
            username: User name as typed at the login prompt.
            password: Plaintext password as typed.

        Returns:
            FAIL with a message if the remote wiki rejected the credentials,
            ABSTAIN otherwise (including after a successful provisioning).
        """
        # Let another provider or the built-in error messages handle it
        if not username or not password:
            return AuthenticationResponse.abstain()

        name = self._store.canonical_name(username)
        if name is None:
            return AuthenticationResponse.abstain()

        account = await self._store.get_account(name)
        if account is None or not account.is_stub:
            return AuthenticationResponse.abstain()

        logger.info("Authenticating stub user against remote wiki", username=name)

        async with RemoteAuthClient(self._config, transport=self._transport) as client:
            try:
                await client.login_or_raise(RemoteCredentials(username=name, password=password))
            except ProtocolRejection as e:
                if e.outcome.result == LoginResult.NOT_EXISTS:
                    logger.info("User does not exist on remote wiki", username=name)
                    return AuthenticationResponse.abstain()
                return AuthenticationResponse.fail(e.login_message)

            await self._store_password(account, password)

            try:
                await self._import_profile(client, account)
            except EnrichmentError as e:
                logger.warning(
                    "Profile import failed, keeping provisioned password",
                    username=name,
                    error=str(e),
                    exc_info=e,
                )

            await client.logout()

        if self._config.prompt_password_change:
            self._session_flags.set(
                RESET_PASS_FLAG,
                PasswordResetRequest(message=RESET_PASSWORD_MESSAGE, hard=False),
            )

        logger.info("Stub user provisioned", username=name)
        return AuthenticationResponse.abstain()

    async def can_authenticate(self, username: str) -> bool:
        """Check if the user is a stub this provider could authenticate."""
        name = self._store.canonical_name(username)
        if name is None:
            return False
        account = await self._store.get_account(name)
        return account is not None and account.is_stub

    async def user_exists(self, username: str) -> bool:
        name = self._store.canonical_name(username)
        if name is None:
            return False
        return await self._store.get_account(name) is not None

    def allows_authentication_data_change(self, *args: Any, **kwargs: Any) -> bool:
        # Password changes are handled by the local password provider
        return True

    def change_authentication_data(self, *args: Any, **kwargs: Any) -> None:
        return None

    @property
    def account_creation_type(self) -> AccountCreationType:
        return AccountCreationType.CREATE

    async def begin_primary_account_creation(
        self, *args: Any, **kwargs: Any
    ) -> AuthenticationResponse:
        return AuthenticationResponse.abstain()

    async def _store_password(self, account: LocalAccount, password: str) -> None:
        """Hash and commit the password before any enrichment happens."""
        password_hash = self._hasher.hash(password)
        await self._store.set_password_hash(account, password_hash)
        account.password_hash = password_hash
        logger.debug("Local password set", username=account.name)

    async def _import_profile(self, client: RemoteAuthClient, account: LocalAccount) -> None:
        """
        Copy remote profile data into the local account.

        Raises:
            EnrichmentError: If any step fails. The password is already stored.
        """
        fetcher = ProfileFetcher(client.http, self._config)
        try:
            await self._store.reset_token(account)
            profile = await fetcher.fetch(fetch_options=self._config.wants_user_options)
            if profile.is_empty:
                logger.info("No profile data found on remote wiki", username=account.name)
            needs_confirmation = self._merge_profile(account, profile)
            await self._store.save_account(account)
            if needs_confirmation:
                logger.debug("Send confirmation mail", username=account.name)
                await self._store.send_confirmation_mail(account)
        except Exception as e:
            msg = "Failed to import remote profile"
            raise EnrichmentError(msg, username=account.name) from e

    def _merge_profile(self, account: LocalAccount, profile: RemoteProfile) -> bool:
        """
        Merge non-empty profile fields into ``account``.

        Returns:
            True if the imported email still needs confirming.
        """
        needs_confirmation = False

        if profile.real_name:
            account.real_name = profile.real_name
        if profile.email:
            account.email = profile.email
            account.email_authenticated_at = profile.email_authenticated_at
            needs_confirmation = profile.email_authenticated_at is None

        if self._config.wants_user_options and profile.preferences:
            excluded = self._config.excluded_user_options
            for key, value in profile.preferences.items():
                if key not in excluded:
                    account.options[key] = value

        return needs_confirmation
