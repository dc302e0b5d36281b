from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock, Mock

import pytest

from stub_wiki_auth.models.account import LocalAccount
from stub_wiki_auth.services.protocol import SessionFlags, UserStore
from stub_wiki_auth.tests.utils.session_flags import InMemorySessionFlags

STUB_USER_ID = 42
STUB_USERNAME = "Alice"


@pytest.fixture
def make_account() -> Callable[..., LocalAccount]:
    def _make(password_hash: str = "", **kwargs: Any) -> LocalAccount:
        return LocalAccount(
            user_id=STUB_USER_ID,
            name=STUB_USERNAME,
            password_hash=password_hash,
            **kwargs,
        )

    return _make


@pytest.fixture
def stub_account(make_account: Callable[..., LocalAccount]) -> LocalAccount:
    return make_account()


@pytest.fixture
def mock_store(stub_account: LocalAccount) -> Mock:
    store = Mock(spec=UserStore)
    store.canonical_name = Mock(side_effect=lambda name: name[:1].upper() + name[1:])
    store.get_account = AsyncMock(return_value=stub_account)
    store.set_password_hash = AsyncMock()
    store.reset_token = AsyncMock()
    store.save_account = AsyncMock()
    store.send_confirmation_mail = AsyncMock()
    return store


@pytest.fixture
def session_flags() -> InMemorySessionFlags:
    flags = InMemorySessionFlags()
    assert isinstance(flags, SessionFlags)
    return flags
