"""Compose the fetch and sanitize steps into one call for the CLI."""

import logging

from .auth import TokenCache
from .client import RedditClient, extract_subreddit_name
from .config import AppConfig, Credentials, load_credentials
from .models import ScrapeResult
from .sanitizer import build_allowed_hostnames, filter_images

logger = logging.getLogger(__name__)


class Scraper:
    """Long-lived pipeline owner; the access token outlives single fetches."""

    def __init__(
        self,
        config: AppConfig,
        credentials: Credentials | None = None,
        token_cache: TokenCache | None = None,
    ):
        self.config = config
        self._credentials = credentials
        self.token_cache = token_cache if token_cache is not None else TokenCache()

    def scrape(self, subreddit_url: str, limit: int | None = None) -> ScrapeResult:
        return scrape_subreddit(
            subreddit_url,
            limit if limit is not None else self.config.limit,
            self.config,
            credentials=self._credentials,
            token_cache=self.token_cache,
        )


def scrape_subreddit(
    subreddit_url: str,
    limit: int,
    config: AppConfig,
    credentials: Credentials | None = None,
    client: RedditClient | None = None,
    token_cache: TokenCache | None = None,
) -> ScrapeResult:
    """Fetch hot media from a subreddit and keep displayable images.

    Errors from the fetch propagate unchanged; an empty ``media`` list is a
    successful result with an explanatory message. Pass ``token_cache`` (or
    use ``Scraper``) to reuse the access token across calls.
    """
    if client is None:
        with RedditClient(
            credentials=credentials or load_credentials(),
            timeout=config.timeout,
            user_agent=config.user_agent,
            token_cache=token_cache,
        ) as owned:
            fetched = owned.fetch_hot_media(subreddit_url, limit)
    else:
        fetched = client.fetch_hot_media(subreddit_url, limit)

    allowed = build_allowed_hostnames(config.remote_hostnames)
    images = filter_images(fetched, allowed)

    return ScrapeResult(
        media=images,
        fetched_count=len(fetched),
        message=_summary(subreddit_url, len(fetched), len(images), allowed),
    )


def _summary(
    subreddit_url: str, fetched: int, kept: int, allowed: frozenset[str]
) -> str:
    if kept:
        return f"Fetched {kept} images."
    name = extract_subreddit_name(subreddit_url) or "the subreddit"
    if not fetched:
        return f"Found 0 suitable images in r/{name}."
    return (
        f"Reddit API returned {fetched} media posts from r/{name}, but none "
        "were direct image links on an allowed host "
        f"({', '.join(sorted(allowed))})."
    )
