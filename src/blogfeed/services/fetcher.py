"""Single-shot HTTP fetcher for the RSS-to-JSON aggregator."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import requests

from blogfeed.config import FeedSettings
from blogfeed.errors import UpstreamUnavailable

__all__ = ["DEFAULT_HEADERS", "FeedFetcher", "build_feed_url"]

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "User-Agent": "blogfeed/0.1",
    "Accept": "application/json",
}


def build_feed_url(feed_url: str, aggregator_url: str) -> str:
    """Return the aggregator endpoint converting ``feed_url`` to JSON."""

    separator = "&" if "?" in aggregator_url else "?"
    return f"{aggregator_url}{separator}rss_url={quote(feed_url, safe='')}"


class FeedFetcher:
    """Issue exactly one GET against the aggregator per :meth:`fetch` call.

    No retries and no response caching happen here; callers decide whether a
    failed fetch is worth repeating.
    """

    def __init__(
        self,
        settings: FeedSettings | None = None,
        *,
        session: requests.Session | None = None,
    ) -> None:
        self.settings = settings or FeedSettings()
        self._session = session or requests.Session()
        self._session.headers.update(DEFAULT_HEADERS)

    @property
    def endpoint(self) -> str:
        return build_feed_url(str(self.settings.feed_url), str(self.settings.aggregator_url))

    def fetch(self) -> Any:
        """Return the decoded JSON body of the aggregator response.

        Raises :class:`UpstreamUnavailable` for network errors, non-2xx
        statuses, and bodies that are not JSON.
        """

        url = self.endpoint
        try:
            response = self._session.get(url, timeout=self.settings.request_timeout)
        except requests.RequestException as exc:
            logger.warning("Aggregator request to %s failed: %s", url, exc)
            raise UpstreamUnavailable(f"Request failed: {exc}") from exc

        if not 200 <= response.status_code < 300:
            raise UpstreamUnavailable(
                f"HTTP error! status: {response.status_code}", status=response.status_code
            )

        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamUnavailable(
                f"Aggregator returned a non-JSON body: {exc}", status=response.status_code
            ) from exc
