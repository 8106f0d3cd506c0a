"""Normalisation and validation of aggregator responses."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping

from pydantic import ValidationError

from blogfeed.errors import FieldViolation, SchemaValidationError, UpstreamReportedFailure
from blogfeed.models import OK_STATUS, FeedResult
from blogfeed.services.fetcher import FeedFetcher

__all__ = ["clean_item", "clean_payload", "load_feed", "normalize_feed", "violations_from"]

logger = logging.getLogger(__name__)

_TEXT_FIELDS = ("title", "link", "pubDate", "description", "content")


def _clean_thumbnail(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    if not trimmed or not value.startswith("http"):
        return None
    return trimmed


def clean_item(raw: Any) -> Dict[str, Any]:
    """Return a cleaned copy of a single aggregator item.

    Missing or falsy text fields become ``""``. ``guid`` falls back to the
    link. ``thumbnail`` is only present when it looks like an absolute HTTP URL.
    """

    source: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}

    cleaned: Dict[str, Any] = {name: source.get(name) or "" for name in _TEXT_FIELDS}
    cleaned["guid"] = source.get("guid") or source.get("link") or ""

    thumbnail = _clean_thumbnail(source.get("thumbnail"))
    if thumbnail is not None:
        cleaned["thumbnail"] = thumbnail

    return cleaned


def clean_payload(raw: Any) -> Any:
    """Apply :func:`clean_item` to every item without mutating ``raw``.

    Anything that is not an object with an ``items`` list is passed through so
    schema validation reports it.
    """

    if not isinstance(raw, Mapping):
        return raw

    payload = dict(raw)
    items = payload.get("items")
    if items and isinstance(items, list):
        payload["items"] = [clean_item(item) for item in items]
    return payload


def violations_from(exc: ValidationError) -> List[FieldViolation]:
    """Flatten a pydantic error into ``path: reason`` records."""

    return [
        FieldViolation(path=".".join(str(part) for part in error["loc"]), reason=error["msg"])
        for error in exc.errors()
    ]


def normalize_feed(raw: Any) -> FeedResult:
    """Turn a decoded aggregator response into a validated :class:`FeedResult`."""

    payload = clean_payload(raw)

    try:
        result = FeedResult.model_validate(payload)
    except ValidationError as exc:
        violations = violations_from(exc)
        logger.warning("Validation failed with errors: %s", [str(v) for v in violations])
        raise SchemaValidationError(violations) from exc

    if result.status != OK_STATUS:
        raise UpstreamReportedFailure(result.status)

    return result


def load_feed(fetcher: FeedFetcher) -> FeedResult:
    """Fetch the aggregator response once and normalise it."""

    return normalize_feed(fetcher.fetch())
