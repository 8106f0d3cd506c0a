from __future__ import annotations

from typing import Any, Dict

import pytest


def make_item(**overrides: Any) -> Dict[str, Any]:
    item = {
        "title": "Haunted Bus Route 13",
        "pubDate": "2025-01-05 10:30:00",
        "link": "https://medium.com/@kingsillu/haunted-bus-route-13-abc123",
        "guid": "https://medium.com/p/abc123",
        "author": "Kingsillu",
        "thumbnail": "https://cdn-images-1.medium.com/max/1024/bus.png",
        "description": "<p>The last bus never stops.</p>",
        "content": '<p>The last bus never stops.</p><img src="https://cdn.example.com/inline.png" />',
        "enclosure": {},
        "categories": ["horror", "fiction"],
    }
    item.update(overrides)
    return item


def make_payload(**overrides: Any) -> Dict[str, Any]:
    payload = {
        "status": "ok",
        "feed": {
            "url": "https://medium.com/feed/@kingsillu",
            "title": "Stories by Kingsillu on Medium",
            "link": "https://medium.com/@kingsillu",
            "author": "",
            "description": "Stories by Kingsillu on Medium",
            "image": "https://cdn-images-1.medium.com/fit/c/150/150/avatar.png",
        },
        "items": [make_item()],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def payload() -> Dict[str, Any]:
    return make_payload()
