"""Application-only OAuth for the Reddit API.

Reddit's "client credentials" grant authenticates the app itself (no user)
with the id/secret pair of a script app. Tokens usually live for an hour;
we treat them as expired five minutes early so a request never races the
real expiry.
"""

import base64
import logging
import threading
import time
from typing import Callable

import httpx

from .config import DEFAULT_USER_AGENT
from .errors import AuthRejected, CredentialsMissing, NetworkError, UpstreamError
from .models import AccessToken

logger = logging.getLogger(__name__)

TOKEN_URL = "https://www.reddit.com/api/v1/access_token"

# Seconds shaved off expires_in before a cached token is considered stale
EXPIRY_MARGIN = 300


class TokenCache:
    """Single-slot, thread-safe holder for the current access token."""

    def __init__(self) -> None:
        self._token: AccessToken | None = None
        self._lock = threading.Lock()

    def get(self, now: float) -> AccessToken | None:
        """Return the cached token if it is still valid at ``now``."""
        with self._lock:
            token = self._token
        if token is not None and token.is_valid(now):
            return token
        return None

    def store(self, token: AccessToken) -> None:
        with self._lock:
            self._token = token

    def invalidate(self) -> None:
        with self._lock:
            self._token = None


class TokenManager:
    """Obtains bearer tokens via the client-credentials grant and caches them."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        http_client: httpx.Client,
        cache: TokenCache | None = None,
        clock: Callable[[], float] = time.time,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        self._client_id = client_id
        self._client_secret = client_secret
        self._http = http_client
        self._cache = cache if cache is not None else TokenCache()
        self._clock = clock
        self._user_agent = user_agent

    def get_access_token(self) -> AccessToken:
        """Return a valid token, requesting a new one only when needed."""
        cached = self._cache.get(self._clock())
        if cached is not None:
            return cached

        if not self._client_id or not self._client_secret:
            raise CredentialsMissing(
                "Reddit API credentials are missing. "
                "Set REDDIT_CLIENT_ID and REDDIT_CLIENT_SECRET."
            )

        try:
            token = self._request_token()
        except Exception:
            self._cache.invalidate()
            raise

        self._cache.store(token)
        return token

    def invalidate(self) -> None:
        """Drop the cached token so the next call performs a fresh grant."""
        self._cache.invalidate()

    def _request_token(self) -> AccessToken:
        logger.debug("Requesting new Reddit access token")
        basic = base64.b64encode(
            f"{self._client_id}:{self._client_secret}".encode()
        ).decode("ascii")

        try:
            response = self._http.post(
                TOKEN_URL,
                headers={
                    "Authorization": f"Basic {basic}",
                    "Content-Type": "application/x-www-form-urlencoded",
                    "User-Agent": self._user_agent,
                    "Cache-Control": "no-store",
                },
                content=b"grant_type=client_credentials",
            )
        except httpx.TimeoutException as e:
            raise NetworkError(f"Timed out requesting Reddit access token: {e}") from e
        except httpx.TransportError as e:
            raise NetworkError(
                f"Could not connect to Reddit API to get access token: {e}"
            ) from e

        if response.status_code == 401:
            raise AuthRejected(
                "Failed to authenticate with Reddit API (401 Unauthorized). "
                "Verify REDDIT_CLIENT_ID and REDDIT_CLIENT_SECRET.",
                status_code=401,
            )

        if not response.is_success:
            logger.warning(
                "Access token request failed with status %d", response.status_code
            )
            raise AuthRejected(
                f"Failed to authenticate with Reddit API. "
                f"Status: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError(
                "Access token response is not valid JSON.",
                status_code=response.status_code,
            ) from e

        if not isinstance(data, dict):
            raise UpstreamError("Access token response is not a JSON object.")

        access_token = data.get("access_token")
        if data.get("token_type") != "bearer" or not access_token:
            raise UpstreamError(
                "Failed to get a valid bearer token from Reddit "
                f"(token_type={data.get('token_type')!r})."
            )

        raw_expires_in = data.get("expires_in")
        try:
            expires_in = float(raw_expires_in)
        except (TypeError, ValueError) as e:
            raise UpstreamError(
                f"Invalid expires_in in token response: {raw_expires_in!r}"
            ) from e
        # A lifetime inside the margin would be stale as soon as it is cached
        if not expires_in > EXPIRY_MARGIN:
            raise UpstreamError(
                f"Token lifetime too short in token response: {raw_expires_in!r}"
            )

        expires_at = self._clock() + expires_in - EXPIRY_MARGIN
        logger.info("Obtained Reddit access token (expires in %ds)", int(expires_in))
        return AccessToken(value=access_token, expires_at=expires_at)
