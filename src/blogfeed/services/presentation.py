"""Presentation helpers used when rendering posts for readers.

None of this is part of the canonical :class:`~blogfeed.models.FeedResult`;
every value here can be re-derived from a post at render time.
"""

from __future__ import annotations

import re
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel

from blogfeed.models import BlogPost, FeedResult
from blogfeed.services.fetcher import FeedFetcher
from blogfeed.services.normalizer import normalize_feed

__all__ = [
    "EXCERPT_LENGTH",
    "INVALID_DATE",
    "PostCard",
    "build_post_card",
    "build_post_cards",
    "create_excerpt",
    "extract_image_from_content",
    "format_date",
    "load_reader_feed",
    "prepare_direct_items",
    "strip_tags",
]

EXCERPT_LENGTH = 150
INVALID_DATE = "Invalid Date"

_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")
_IMG_SRC_RE = re.compile(r'<img[^>]+src="([^">]+)"', re.IGNORECASE)


class PostCard(BaseModel):
    """A post ready for display: plain-text excerpt, resolved image, formatted date."""

    guid: str
    title: str
    link: str
    excerpt: str
    date_label: str
    image_url: Optional[str] = None


def strip_tags(text: str) -> str:
    """Remove anything that looks like a markup tag. Not a sanitiser."""

    return _TAG_RE.sub("", text)


def create_excerpt(description: str | None = "", content: str | None = "") -> str:
    """Return a plain-text excerpt of at most ``EXCERPT_LENGTH`` characters plus ``...``."""

    text = description or content or ""
    text = strip_tags(text)
    text = _WHITESPACE_RE.sub(" ", text).strip()
    if len(text) > EXCERPT_LENGTH:
        return text[:EXCERPT_LENGTH] + "..."
    return text


def extract_image_from_content(content: str | None) -> str | None:
    """Return the ``src`` of the first ``<img>`` tag in ``content``, if any."""

    match = _IMG_SRC_RE.search(content or "")
    return match.group(1) if match else None


def _parse_date(value: str) -> datetime | None:
    text = value.strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    try:
        return parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        return None


def format_date(value: str | None) -> str:
    """Render a date-like string as e.g. ``January 5, 2025``.

    Unparseable input renders as ``Invalid Date``.
    """

    parsed = _parse_date(value or "")
    if parsed is None:
        return INVALID_DATE
    return f"{parsed:%B} {parsed.day}, {parsed.year}"


def build_post_card(post: BlogPost) -> PostCard:
    image_url = post.thumbnail or extract_image_from_content(post.content)
    return PostCard(
        guid=post.guid,
        title=post.title,
        link=post.link,
        excerpt=create_excerpt(post.description, post.content),
        date_label=format_date(post.published_at),
        image_url=image_url or None,
    )


def build_post_cards(feed: FeedResult) -> List[PostCard]:
    """Return one card per post, preserving feed order."""

    return [build_post_card(post) for post in feed.items]


def prepare_direct_items(raw: Mapping[str, Any]) -> Dict[str, Any]:
    """Shape a raw aggregator response for rendering without the proxy.

    Thumbnails fall back to the enclosure link and descriptions are reduced to
    text. No schema validation happens here.
    """

    items = []
    for item in raw.get("items") or []:
        if not isinstance(item, Mapping):
            continue
        enclosure = item.get("enclosure")
        if not isinstance(enclosure, Mapping):
            enclosure = {}
        description = item.get("description")
        items.append(
            {
                **item,
                "thumbnail": item.get("thumbnail") or enclosure.get("link") or "",
                "description": strip_tags(description).strip() if description else "",
            }
        )
    return {**raw, "items": items}



def load_reader_feed(fetcher: FeedFetcher) -> FeedResult:
    """Fetch once for the reader page and validate after the display fallbacks."""

    raw = fetcher.fetch()
    if isinstance(raw, Mapping):
        raw = prepare_direct_items(raw)
    return normalize_feed(raw)
