"""Data models for listing entries and the media extracted from them."""

from dataclasses import dataclass, field
from enum import Enum


class MediaType(str, Enum):
    IMAGE = "image"
    VIDEO = "video"
    EMBED = "embed"  # third-party GIF/video host, e.g. Redgifs


@dataclass
class MediaPost:
    media_url: str  # absolute URL of the media resource
    media_type: MediaType
    title: str
    source_url: str  # https://www.reddit.com{permalink}


@dataclass(frozen=True)
class AccessToken:
    value: str
    expires_at: float  # epoch seconds, already reduced by the safety margin

    def is_valid(self, now: float) -> bool:
        return now < self.expires_at


@dataclass(frozen=True)
class Classification:
    media_url: str
    media_type: MediaType


@dataclass
class RedditVideo:
    fallback_url: str | None = None  # progressive MP4


@dataclass
class OEmbed:
    provider_name: str | None = None


@dataclass
class MediaEmbed:
    media_domain_url: str | None = None


@dataclass
class RawListingEntry:
    """One post from a subreddit listing.

    Only the fields the classifier and fetcher look at are modelled; every
    nested object is optional because Reddit omits or nulls them freely.
    """

    kind: str  # "t3" for link posts
    title: str = ""
    name: str = ""  # fullname, e.g. t3_abcde
    permalink: str = ""
    url: str = ""
    domain: str = ""
    post_hint: str | None = None  # "image", "hosted:video", "link", "rich:video", "self"
    is_video: bool = False
    is_gallery: bool = False
    stickied: bool = False
    reddit_video: RedditVideo | None = None  # media.reddit_video
    preview_video: RedditVideo | None = None  # preview.reddit_video_preview
    oembed: OEmbed | None = None  # media.oembed
    media_embed: MediaEmbed | None = None  # secure_media_embed


@dataclass
class Listing:
    entries: list[RawListingEntry] = field(default_factory=list)


@dataclass
class ScrapeResult:
    media: list[MediaPost]
    fetched_count: int  # classified posts before sanitizing
    message: str
