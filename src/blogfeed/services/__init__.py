"""Service layer entry points for Blog Feed."""

from __future__ import annotations

from .fetcher import FeedFetcher, build_feed_url  # noqa: F401
from .normalizer import clean_item, clean_payload, load_feed, normalize_feed  # noqa: F401
from .presentation import PostCard, build_post_cards, load_reader_feed  # noqa: F401
from .refresher import FeedRefresher, LatestFeedCell  # noqa: F401

__all__ = [
    "FeedFetcher",
    "FeedRefresher",
    "LatestFeedCell",
    "PostCard",
    "build_feed_url",
    "build_post_cards",
    "clean_item",
    "clean_payload",
    "load_feed",
    "load_reader_feed",
    "normalize_feed",
]
