"""Reddit OAuth API client for fetching media from a subreddit's hot listing.

Requests go to oauth.reddit.com with an application-only bearer token (see
auth.py). A single listing page is fetched per call; Reddit caps ``limit``
at 100. Every status Reddit is known to return for a listing maps onto a
typed error in errors.py, and nothing is retried here.
"""

import logging
from urllib.parse import urlsplit

import httpx

from .auth import TokenCache, TokenManager
from .classifier import classify
from .config import (
    DEFAULT_LIMIT,
    DEFAULT_TIMEOUT,
    DEFAULT_USER_AGENT,
    MAX_LIMIT,
    Credentials,
)
from .errors import (
    AccessDenied,
    AuthRejected,
    InvalidSource,
    NetworkError,
    RateLimited,
    SourceNotFound,
    UpstreamError,
)
from .models import MediaPost
from .parser import parse_listing

logger = logging.getLogger(__name__)

API_BASE_URL = "https://oauth.reddit.com"
REDDIT_BASE_URL = "https://www.reddit.com"

POST_KIND = "t3"


def extract_subreddit_name(url: str) -> str | None:
    """Return "pics" for https://www.reddit.com/r/pics/, else None."""
    try:
        path = urlsplit(url).path
    except ValueError:
        return None
    parts = [part for part in path.split("/") if part]
    if len(parts) >= 2 and parts[0].lower() == "r":
        return parts[1]
    return None


class RedditClient:
    """Fetches a subreddit's hot listing and classifies its media."""

    def __init__(
        self,
        credentials: Credentials | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        token_cache: TokenCache | None = None,
        token_manager: TokenManager | None = None,
    ):
        self._client = httpx.Client(
            headers={
                "User-Agent": user_agent,
                "Cache-Control": "no-store",
            },
            timeout=timeout,
        )
        if token_manager is None:
            credentials = credentials or Credentials("", "")
            token_manager = TokenManager(
                credentials.client_id,
                credentials.client_secret,
                self._client,
                cache=token_cache,
                user_agent=user_agent,
            )
        self._tokens = token_manager

    def fetch_hot_media(
        self, subreddit_url: str, limit: int = DEFAULT_LIMIT
    ) -> list[MediaPost]:
        """Fetch hot posts and return de-duplicated classified media.

        Stickied posts and galleries are skipped. The result holds every
        media type; image-only filtering happens in the sanitizer.
        """
        name = extract_subreddit_name(subreddit_url)
        if not name:
            raise InvalidSource(
                "Invalid subreddit URL format. Use the format "
                "https://www.reddit.com/r/subredditname/",
                value=subreddit_url,
            )
        if limit < 1:
            raise ValueError(f"limit must be at least 1, got {limit}")

        logger.info("Fetching hot media from r/%s (limit: %d)", name, limit)
        token = self._tokens.get_access_token()

        try:
            response = self._client.get(
                f"{API_BASE_URL}/r/{name}/hot",
                params={"limit": min(limit, MAX_LIMIT), "raw_json": 1},
                headers={"Authorization": f"Bearer {token.value}"},
            )
        except httpx.TimeoutException as e:
            raise NetworkError(f"Timed out fetching r/{name}: {e}") from e
        except httpx.TransportError as e:
            raise NetworkError(f"Could not connect to Reddit API: {e}") from e

        logger.debug("Reddit API response for r/%s: %d", name, response.status_code)
        self._raise_for_status(response, name)

        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamError(
                f"Reddit API returned a non-JSON body for r/{name}.",
                status_code=response.status_code,
            ) from e

        listing = parse_listing(payload)

        media: list[MediaPost] = []
        seen_urls: set[str] = set()
        skipped = 0

        for index, entry in enumerate(listing.entries):
            if entry.kind != POST_KIND:
                logger.debug("Skipping item %d: not a post (kind=%r)", index, entry.kind)
                skipped += 1
                continue
            if entry.stickied or entry.is_gallery:
                skipped += 1
                continue

            found = classify(entry)
            if found is None:
                logger.debug("No media in post %r (url=%s)", entry.title, entry.url)
                skipped += 1
                continue
            if found.media_url in seen_urls:
                logger.debug(
                    "Skipping duplicate media URL in %s: %s", entry.name, found.media_url
                )
                skipped += 1
                continue

            seen_urls.add(found.media_url)
            media.append(
                MediaPost(
                    media_url=found.media_url,
                    media_type=found.media_type,
                    title=entry.title or "Untitled Post",
                    source_url=f"{REDDIT_BASE_URL}{entry.permalink}",
                )
            )

        logger.info(
            "Processed %d posts from r/%s: %d media items, %d skipped",
            len(listing.entries),
            name,
            len(media),
            skipped,
        )
        return media

    def _raise_for_status(self, response: httpx.Response, name: str) -> None:
        status = response.status_code
        if response.is_success:
            return

        if status == 401:
            # Token may have expired between the cache check and this call
            self._tokens.invalidate()
            raise AuthRejected(
                "Reddit API authentication failed (401 Unauthorized). "
                "The access token may be expired or invalid.",
                status_code=401,
            )

        if status == 403:
            raise AccessDenied(
                f"Access denied (403 Forbidden) when fetching r/{name}. "
                "Possible causes: API key permissions, blocked User-Agent, "
                "IP restrictions, or subreddit access rules.",
                status_code=403,
            )

        if status == 404:
            raise SourceNotFound(
                f"Subreddit 'r/{name}' not found or is private (404).",
                status_code=404,
            )

        if status == 429:
            retry_after = _retry_after(response)
            wait_msg = f" Retry in {retry_after}s." if retry_after else ""
            raise RateLimited(
                f"Rate limited by Reddit (429 Too Many Requests).{wait_msg}",
                retry_after=retry_after,
            )

        raise UpstreamError(
            f"Failed to fetch r/{name} from Reddit API. Status: {status}. "
            f"Details: {response.text[:100]}",
            status_code=status,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


def _retry_after(response: httpx.Response) -> int | None:
    """Seconds until the rate-limit window resets, from Reddit's headers."""
    reset = response.headers.get("x-ratelimit-reset") or response.headers.get(
        "retry-after"
    )
    if not reset:
        return None
    try:
        seconds = int(float(reset))
    except ValueError:
        return None
    return seconds if seconds > 0 else None
