"""Final filter applied before media is shown: images from allowed hosts only.

Invalid or disallowed URLs are dropped, never rewritten or replaced.
"""

import logging
import re
from typing import Iterable
from urllib.parse import urlsplit

from .models import MediaPost, MediaType

logger = logging.getLogger(__name__)

DEFAULT_ALLOWED_HOSTNAMES = (
    "i.redd.it",
    "preview.redd.it",
    "imgur.com",
    "files.catbox.moe",
    "picsum.photos",
)

ALLOWED_SCHEMES = frozenset({"http", "https"})

# Browsers read a backslash as "/" and strip tabs/newlines, so URLs holding
# these can resolve to a different host than urlsplit reports
UNSAFE_URL_RE = re.compile(r"[\\\x00-\x20\x7f]")


def build_allowed_hostnames(extra: Iterable[str] = ()) -> frozenset[str]:
    """Combine the built-in hosts with configured image hostnames."""
    allowed = set(DEFAULT_ALLOWED_HOSTNAMES)
    allowed.update(h.strip().lower() for h in extra if h and h.strip())
    return frozenset(allowed)


def is_allowed_url(url: str | None, allowed: frozenset[str]) -> bool:
    """True for an http(s) URL on an allowed host, without userinfo."""
    if not url or UNSAFE_URL_RE.search(url):
        return False
    try:
        parts = urlsplit(url)
        hostname = parts.hostname
        has_userinfo = parts.username is not None or parts.password is not None
    except ValueError:
        return False
    if has_userinfo:
        return False
    return parts.scheme in ALLOWED_SCHEMES and hostname in allowed


def filter_images(
    posts: list[MediaPost], allowed: frozenset[str]
) -> list[MediaPost]:
    """Keep image posts whose URL is http(s) on an allowed host, in order."""
    kept: list[MediaPost] = []
    non_image = 0
    disallowed = 0

    for post in posts:
        if post.media_type != MediaType.IMAGE:
            non_image += 1
            continue
        if not is_allowed_url(post.media_url, allowed):
            disallowed += 1
            logger.warning(
                "Dropping image %r with invalid or disallowed URL: %s",
                post.title,
                post.media_url,
            )
            continue
        kept.append(post)

    if non_image or disallowed:
        logger.info(
            "Filtered out %d non-image posts and %d disallowed images",
            non_image,
            disallowed,
        )
    return kept
