from stub_wiki_auth.exceptions import (
    HTTPStatusError,
    NetworkError,
    ProtocolRejection,
    StubWikiAuthError,
)
from stub_wiki_auth.models.auth import LoginOutcome, LoginResult, Message


def test_stub_wiki_auth_error_str_without_context() -> None:
    error = StubWikiAuthError("Something failed")

    assert str(error) == "Something failed"


def test_stub_wiki_auth_error_str_with_context() -> None:
    error = StubWikiAuthError("Failed", username="Alice", attempt=3)

    assert "Failed" in str(error)
    assert "username='Alice'" in str(error)
    assert "attempt=3" in str(error)


def test_http_status_error_is_network_error() -> None:
    error = HTTPStatusError("Bad gateway", code=502)

    assert isinstance(error, NetworkError)
    assert error.code == 502


def test_protocol_rejection_carries_outcome_and_message() -> None:
    outcome = LoginOutcome(result=LoginResult.WRONG_PASS)
    error = ProtocolRejection(outcome, Message("wrongpassword"))

    assert error.outcome is outcome
    assert error.login_message.key == "wrongpassword"
    assert "WrongPass" in str(error)
