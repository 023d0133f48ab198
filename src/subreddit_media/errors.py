"""Exceptions raised by the token manager and the listing fetcher.

Every error carries the HTTP status (when there was one) so callers can
branch on ``status_code`` or the exception type instead of message text.
"""


class RedditMediaError(RuntimeError):
    """Base class for failures that abort a fetch."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class CredentialsMissing(RedditMediaError):
    """Raised when the client id or secret is not configured."""


class AuthRejected(RedditMediaError):
    """Raised when Reddit refuses the credentials or the bearer token."""


class InvalidSource(RedditMediaError):
    """Raised when a URL does not name a subreddit."""

    def __init__(self, message: str, value: str):
        super().__init__(message)
        self.value = value


class SourceNotFound(RedditMediaError):
    """Raised when the subreddit does not exist or is private (404)."""


class AccessDenied(RedditMediaError):
    """Raised on 403 responses."""


class RateLimited(RedditMediaError):
    """Raised on 429 responses. Never retried automatically."""

    def __init__(
        self,
        message: str,
        status_code: int | None = 429,
        retry_after: int | None = None,
    ):
        super().__init__(message, status_code)
        self.retry_after = retry_after


class UpstreamError(RedditMediaError):
    """Raised for unexpected statuses or malformed response bodies."""


class NetworkError(RedditMediaError):
    """Raised when a request fails at the transport level or times out."""
