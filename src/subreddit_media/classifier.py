"""Decide whether a listing entry carries linkable media, and of which kind.

Reddit exposes media location inconsistently: the post URL itself, a nested
``media.reddit_video`` object, an oEmbed/secure embed object, or a preview
video. ``classify`` walks an ordered rule table; the first rule that returns
a Classification wins, so higher-confidence signals sit earlier.
"""

import re
from dataclasses import dataclass
from typing import Callable

from .models import Classification, MediaType, RawListingEntry

Rule = Callable[[RawListingEntry], Classification | None]

IMAGE_EXTENSION_RE = re.compile(r"\.(jpg|jpeg|png|gif)$", re.IGNORECASE)

# Link-style hints that may still wrap a playable preview
LINKED_VIDEO_HINTS = frozenset({"rich:video", "link"})


@dataclass(frozen=True)
class EmbedHost:
    domain: str
    provider_name: str  # oEmbed provider_name Reddit reports for the host
    marker: str  # substring identifying the host inside preview URLs


EMBED_HOSTS: tuple[EmbedHost, ...] = (
    EmbedHost(domain="redgifs.com", provider_name="Redgifs", marker="redgifs"),
)


def _direct_image(entry: RawListingEntry) -> Classification | None:
    url = entry.url
    if not url or "gallery" in url:
        return None
    if entry.post_hint == "image" or IMAGE_EXTENSION_RE.search(url):
        return Classification(url, MediaType.IMAGE)
    return None


def _hosted_video(entry: RawListingEntry) -> Classification | None:
    if entry.is_video and entry.reddit_video and entry.reddit_video.fallback_url:
        return Classification(entry.reddit_video.fallback_url, MediaType.VIDEO)
    return None


def _match_embed_host(entry: RawListingEntry) -> EmbedHost | None:
    provider = entry.oembed.provider_name if entry.oembed else None
    for host in EMBED_HOSTS:
        if entry.domain == host.domain or provider == host.provider_name:
            return host
    return None


def _known_embed(entry: RawListingEntry) -> Classification | None:
    host = _match_embed_host(entry)
    if host is None:
        return None

    embed_url = entry.media_embed.media_domain_url if entry.media_embed else None
    preview_url = _preview_fallback(entry)

    if embed_url and host.domain in embed_url:
        url = embed_url
    elif preview_url and host.marker in preview_url:
        url = preview_url
    else:
        url = entry.url

    if not url:
        return None
    return Classification(url, MediaType.EMBED)


def _linked_video(entry: RawListingEntry) -> Classification | None:
    if entry.post_hint not in LINKED_VIDEO_HINTS:
        return None
    preview_url = _preview_fallback(entry)
    if not preview_url:
        return None
    if entry.domain == "gfycat.com":
        return Classification(preview_url, MediaType.VIDEO)
    if entry.domain == "imgur.com" and entry.url.endswith(".gifv"):
        return Classification(preview_url, MediaType.VIDEO)
    return None


def _preview_fallback(entry: RawListingEntry) -> str | None:
    return entry.preview_video.fallback_url if entry.preview_video else None


RULES: tuple[tuple[str, Rule], ...] = (
    ("direct_image", _direct_image),
    ("hosted_video", _hosted_video),
    ("known_embed", _known_embed),
    ("linked_video", _linked_video),
)


def classify(entry: RawListingEntry) -> Classification | None:
    """Return the media URL and type for ``entry``, or None if it has none."""
    for _name, rule in RULES:
        result = rule(entry)
        if result is not None:
            return result
    return None
