"""Exception types raised while retrieving stories."""


class HackerNewsError(Exception):
    """Base class for failures talking to the Hacker News API."""

    pass


class NetworkError(HackerNewsError):
    """The request could not be completed (DNS, connect, timeout, TLS, HTTP status)."""

    pass


class DecodeError(HackerNewsError):
    """The response body is present but does not have the expected shape."""

    pass


class NotFound(HackerNewsError):
    """The item is null, deleted or dead."""

    def __init__(self, story_id: int, reason: str = "null response"):
        super().__init__(f"Item {story_id} not found: {reason}")
        self.story_id = story_id
        self.reason = reason


class ValidationError(ValueError):
    """Raised for invalid user input, before any network activity."""

    pass
