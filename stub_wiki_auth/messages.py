"""
User-facing messages for login outcomes.
"""

from stub_wiki_auth.models.auth import LoginOutcome, LoginResult, Message

RESET_PASSWORD_MESSAGE = Message("stubuserwikiauth-resetpass")

_DURATION_UNITS = (
    ("day", 86400),
    ("hour", 3600),
    ("minute", 60),
    ("second", 1),
)


def format_duration(seconds: int) -> str:
    """
    Format a duration for humans.

    Example:
        ```python
        format_duration(300)   # "5 minutes"
        format_duration(3660)  # "1 hour 1 minute"
        ```
    """
    if seconds <= 0:
        return "0 seconds"

    parts = []
    remaining = seconds
    for name, size in _DURATION_UNITS:
        count, remaining = divmod(remaining, size)
        if count:
            parts.append(f"{count} {name}" if count == 1 else f"{count} {name}s")
    return " ".join(parts)


def outcome_message(outcome: LoginOutcome, *, username: str) -> Message:
    """
    Map a non-successful login outcome to the message shown to the user.

    Args:
        outcome: Terminal outcome of a handshake.
        username: User name that was tried.

    Returns:
        The message for the outcome. Unknown failures share a generic message
        whatever their internal reason.
    """
    match outcome.result:
        case LoginResult.NOT_EXISTS:
            return Message("nosuchuser", (username,))
        case LoginResult.WRONG_TOKEN:
            return Message("internalerror")
        case LoginResult.EMPTY_PASS:
            return Message("wrongpasswordempty")
        case LoginResult.WRONG_PASS | LoginResult.WRONG_PLUGIN_PASS:
            return Message("wrongpassword")
        case LoginResult.THROTTLED:
            return Message("login-throttled", (format_duration(outcome.wait_seconds or 0),))
        case _:
            return Message("unknown-error")
