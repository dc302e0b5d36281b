import pytest

from stub_wiki_auth.config import StubWikiAuthConfig
from stub_wiki_auth.tests.utils.mock_transport import MockTransport

API_URL = "https://wiki.example/w/api.php"
PREFS_URL = "https://wiki.example/wiki/Special:Preferences"


@pytest.fixture
def config() -> StubWikiAuthConfig:
    return StubWikiAuthConfig(api_url=API_URL, prefs_url=PREFS_URL)


@pytest.fixture
def mock_transport() -> MockTransport:
    return MockTransport()
