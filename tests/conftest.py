"""Shared test fixtures."""

import json
from pathlib import Path

import pytest

from subreddit_media.models import MediaPost, MediaType, RawListingEntry

FIXTURES_DIR = Path(__file__).parent / "fixtures"


class FakeClock:
    """Manually advanced replacement for time.time."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def hot_listing() -> dict:
    """Load the sample hot listing response."""
    with open(FIXTURES_DIR / "hot_listing.json") as f:
        return json.load(f)


@pytest.fixture
def token_response() -> dict:
    return {
        "access_token": "fake-access-token",
        "token_type": "bearer",
        "expires_in": 3600,
        "scope": "*",
    }


@pytest.fixture
def make_entry():
    """Build a RawListingEntry for a t3 post with overridable fields."""

    def _make(**fields) -> RawListingEntry:
        fields.setdefault("kind", "t3")
        fields.setdefault("title", "A post")
        fields.setdefault("permalink", "/r/pics/comments/abc/a_post/")
        return RawListingEntry(**fields)

    return _make


@pytest.fixture
def sample_posts() -> list[MediaPost]:
    """A mixed batch as the fetcher would return it."""
    return [
        MediaPost(
            media_url="https://i.redd.it/abc.jpg",
            media_type=MediaType.IMAGE,
            title="Sunset over the bay",
            source_url="https://www.reddit.com/r/pics/comments/post1/sunset_over_the_bay/",
        ),
        MediaPost(
            media_url="https://v.redd.it/vid4/DASH_720.mp4?source=fallback",
            media_type=MediaType.VIDEO,
            title="Cat knocks over a glass",
            source_url="https://www.reddit.com/r/pics/comments/post4/cat_knocks_over_a_glass/",
        ),
        MediaPost(
            media_url="https://thumbs.redgifs.com/LoopingClip.mp4",
            media_type=MediaType.EMBED,
            title="Looping clip",
            source_url="https://www.reddit.com/r/pics/comments/post5/looping_clip/",
        ),
        MediaPost(
            media_url="https://i.imgur.com/xyz.PNG",
            media_type=MediaType.IMAGE,
            title="Mountain lake",
            source_url="https://www.reddit.com/r/pics/comments/post9/mountain_lake/",
        ),
        MediaPost(
            media_url="ftp://i.redd.it/old.png",
            media_type=MediaType.IMAGE,
            title="Wrong scheme",
            source_url="https://www.reddit.com/r/pics/comments/post11/wrong_scheme/",
        ),
        MediaPost(
            media_url="https://preview.redd.it/q1.png?width=640",
            media_type=MediaType.IMAGE,
            title="Preview image",
            source_url="https://www.reddit.com/r/pics/comments/post12/preview_image/",
        ),
    ]
