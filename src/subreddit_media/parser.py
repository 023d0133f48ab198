"""Parse Reddit listing JSON into RawListingEntry objects.

A listing looks like:
    {"kind": "Listing", "data": {"after": ..., "children": [
        {"kind": "t3", "data": {...post fields...}}, ...]}}

Post fields are loosely typed: nested objects such as ``media`` or
``preview`` may be missing, null, or of an unexpected type. The parser
normalizes all of that so the classifier only ever sees explicit optionals.
"""

import logging
from typing import Any

from .errors import UpstreamError
from .models import Listing, MediaEmbed, OEmbed, RawListingEntry, RedditVideo

logger = logging.getLogger(__name__)

LISTING_KIND = "Listing"


def parse_listing(payload: Any) -> Listing:
    """Validate the top-level listing shape and parse every child."""
    if not isinstance(payload, dict) or payload.get("kind") != LISTING_KIND:
        kind = payload.get("kind") if isinstance(payload, dict) else type(payload).__name__
        raise UpstreamError(
            f"Received invalid data structure from Reddit API (kind={kind!r})."
        )

    data = payload.get("data")
    if not isinstance(data, dict) or not isinstance(data.get("children"), list):
        raise UpstreamError(
            "Received invalid data structure from Reddit API (missing children)."
        )

    entries = [parse_entry(child) for child in data["children"]]
    return Listing(entries=entries)


def parse_entry(child: Any) -> RawListingEntry:
    """Parse one listing child.

    Children without a ``data`` object come back with an empty ``kind`` so
    the fetcher skips them like any other non-post item.
    """
    if not isinstance(child, dict) or not isinstance(child.get("data"), dict):
        logger.debug("Listing child without data object: %r", child)
        return RawListingEntry(kind="")

    post = child["data"]
    media = _dict(post.get("media"))
    preview = _dict(post.get("preview"))

    return RawListingEntry(
        kind=_str(child.get("kind")),
        title=_str(post.get("title")),
        name=_str(post.get("name")),
        permalink=_str(post.get("permalink")),
        url=_str(post.get("url")),
        domain=_str(post.get("domain")),
        post_hint=_str_or_none(post.get("post_hint")),
        is_video=post.get("is_video") is True,
        is_gallery=post.get("is_gallery") is True,
        stickied=post.get("stickied") is True,
        reddit_video=_video(media.get("reddit_video")),
        preview_video=_video(preview.get("reddit_video_preview")),
        oembed=_oembed(media.get("oembed")),
        media_embed=_media_embed(post.get("secure_media_embed")),
    )


def _video(value: Any) -> RedditVideo | None:
    if not isinstance(value, dict):
        return None
    return RedditVideo(fallback_url=_str_or_none(value.get("fallback_url")))


def _oembed(value: Any) -> OEmbed | None:
    if not isinstance(value, dict):
        return None
    return OEmbed(provider_name=_str_or_none(value.get("provider_name")))


def _media_embed(value: Any) -> MediaEmbed | None:
    # Reddit sends {} rather than null when there is no embed
    if not isinstance(value, dict) or not value:
        return None
    return MediaEmbed(media_domain_url=_str_or_none(value.get("media_domain_url")))


def _dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _str_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None
