"""Tests for the HTTP surface in :mod:`blogfeed.api`."""

from __future__ import annotations

from unittest.mock import patch

from fastapi.testclient import TestClient

from blogfeed.api.app import create_app
from blogfeed.config import FeedSettings
from blogfeed.errors import UpstreamUnavailable

from conftest import make_item, make_payload


class StubFetcher:
    """Fetcher returning canned payloads and counting calls."""

    def __init__(self, *outcomes) -> None:
        self.outcomes = list(outcomes)
        self.calls = 0

    def fetch(self):
        self.calls += 1
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def _client(fetcher: StubFetcher) -> TestClient:
    app = create_app(FeedSettings(refresh_interval=0), fetcher=fetcher)
    return TestClient(app)


def test_get_rss_returns_validated_feed() -> None:
    fetcher = StubFetcher(make_payload())
    client = _client(fetcher)

    response = client.get("/api/rss")

    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ok"
    assert payload["feed"] == {
        "title": "Stories by Kingsillu on Medium",
        "description": "Stories by Kingsillu on Medium",
        "link": "https://medium.com/@kingsillu",
    }
    item = payload["items"][0]
    assert item["pubDate"] == "2025-01-05 10:30:00"
    assert item["guid"] == "https://medium.com/p/abc123"
    assert "author" not in item
    assert fetcher.calls == 1


def test_get_rss_omits_missing_thumbnail() -> None:
    client = _client(StubFetcher(make_payload(items=[make_item(thumbnail="relative.png")])))

    item = client.get("/api/rss").json()["items"][0]

    assert "thumbnail" not in item
    assert item["description"] == "<p>The last bus never stops.</p>"


def test_get_rss_fetches_on_every_request() -> None:
    fetcher = StubFetcher(make_payload())
    client = _client(fetcher)

    client.get("/api/rss")
    client.get("/api/rss")

    assert fetcher.calls == 2


def test_get_rss_reports_upstream_http_error() -> None:
    client = _client(StubFetcher(UpstreamUnavailable("HTTP error! status: 502", status=502)))

    response = client.get("/api/rss")

    assert response.status_code == 500
    body = response.json()
    assert body["message"] == "Failed to fetch RSS feed"
    assert body["error"] == "HTTP error! status: 502"


def test_get_rss_reports_schema_failure() -> None:
    raw = make_payload()
    del raw["feed"]["title"]
    client = _client(StubFetcher(raw))

    response = client.get("/api/rss")

    assert response.status_code == 500
    assert "feed.title" in response.json()["error"]


def test_get_rss_reports_upstream_status_failure() -> None:
    client = _client(StubFetcher(make_payload(status="error")))

    response = client.get("/api/rss")

    assert response.status_code == 500
    assert response.json()["error"] == "Failed to parse RSS feed"


def test_list_posts_returns_cards() -> None:
    fetcher = StubFetcher(make_payload(items=[make_item(thumbnail="", enclosure={"link": "https://cdn.example.com/e.jpg"})]))
    client = _client(fetcher)

    response = client.get("/api/posts")

    assert response.status_code == 200
    payload = response.json()
    assert payload["feed"]["title"] == "Stories by Kingsillu on Medium"
    card = payload["posts"][0]
    assert card["excerpt"] == "The last bus never stops."
    assert card["date_label"] == "January 5, 2025"
    assert card["image_url"] == "https://cdn.example.com/e.jpg"
    assert payload["stale"] is False

    client.get("/api/posts")
    assert fetcher.calls == 1


def test_list_posts_reports_error_when_nothing_cached() -> None:
    client = _client(StubFetcher(UpstreamUnavailable("down")))

    response = client.get("/api/posts")

    assert response.status_code == 200
    payload = response.json()
    assert payload["posts"] == []
    assert payload["error"] == "down"


def test_refresh_keeps_previous_feed_on_failure() -> None:
    fetcher = StubFetcher(make_payload(), UpstreamUnavailable("HTTP error! status: 500", status=500))
    client = _client(fetcher)

    assert client.post("/api/rss/refresh").status_code == 200

    failed = client.post("/api/rss/refresh")
    assert failed.status_code == 500
    assert failed.json()["message"] == "Failed to fetch RSS feed"

    payload = client.get("/api/posts").json()
    assert len(payload["posts"]) == 1
    assert payload["stale"] is True
    assert fetcher.calls == 2


def test_refresh_reports_conflict_when_busy() -> None:
    client = _client(StubFetcher(make_payload()))

    with patch("blogfeed.api.routes.run_in_threadpool", return_value=None):
        response = client.post("/api/rss/refresh")

    assert response.status_code == 409


def test_index_page_is_served() -> None:
    client = _client(StubFetcher(make_payload()))

    response = client.get("/")

    assert response.status_code == 200
    body = response.text
    assert "KingsFeeds" in body
    assert "/api/posts" in body
    assert "Try Again" in body
    assert "const REFRESH_INTERVAL_MS = 0;" in body
