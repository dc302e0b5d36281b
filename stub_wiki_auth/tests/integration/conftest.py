import os

import pytest

from stub_wiki_auth.config import StubWikiAuthConfig

_REQUIRED_ENV = ("STUB_WIKI_TEST_API_URL", "STUB_WIKI_TEST_USERNAME", "STUB_WIKI_TEST_PASSWORD")


def pytest_collection_modifyitems(config: pytest.Config, items: list) -> None:
    missing = not all(os.getenv(name) for name in _REQUIRED_ENV)
    if not missing:
        return
    mark_expr = getattr(config.option, "markexpr", "")
    if "integration" in mark_expr:
        return
    skip = pytest.mark.skip(reason=f"{', '.join(_REQUIRED_ENV)} not set")
    for item in items:
        if item.get_closest_marker("integration"):
            item.add_marker(skip)


@pytest.fixture(scope="session")
def remote_credentials() -> tuple[str, str]:
    username = os.getenv("STUB_WIKI_TEST_USERNAME")
    password = os.getenv("STUB_WIKI_TEST_PASSWORD")
    if not username or not password:
        pytest.fail(
            "STUB_WIKI_TEST_USERNAME and STUB_WIKI_TEST_PASSWORD must be set "
            "to run integration tests."
        )
    return username, password


@pytest.fixture(scope="session")
def remote_config() -> StubWikiAuthConfig:
    api_url = os.getenv("STUB_WIKI_TEST_API_URL")
    if not api_url:
        pytest.fail("STUB_WIKI_TEST_API_URL must be set to run integration tests.")
    return StubWikiAuthConfig(api_url=api_url, prefs_url=os.getenv("STUB_WIKI_TEST_PREFS_URL"))
