from pathlib import Path

import pytest

pytest.importorskip("pydantic")

from blogfeed.config import DEFAULT_AGGREGATOR_URL, DEFAULT_FEED_URL, FeedSettings


def test_defaults() -> None:
    settings = FeedSettings()

    assert str(settings.feed_url) == DEFAULT_FEED_URL
    assert str(settings.aggregator_url) == DEFAULT_AGGREGATOR_URL
    assert settings.refresh_interval == 300
    assert settings.port == 5000
    assert settings.is_production is False


def test_from_env_reads_variables() -> None:
    settings = FeedSettings.from_env(
        {
            "BLOGFEED_FEED_URL": "https://example.com/rss.xml",
            "BLOGFEED_REFRESH_INTERVAL": "60",
            "BLOGFEED_REQUEST_TIMEOUT": "none",
            "PORT": "8080",
            "APP_ENV": "production",
        }
    )

    assert str(settings.feed_url) == "https://example.com/rss.xml"
    assert settings.refresh_interval == 60
    assert settings.request_timeout is None
    assert settings.port == 8080
    assert settings.is_production is True


def test_from_env_names_invalid_variable() -> None:
    with pytest.raises(ValueError) as excinfo:
        FeedSettings.from_env({"PORT": "not-a-port"})

    assert "PORT" in str(excinfo.value)


def test_round_trip(tmp_path: Path) -> None:
    config_path = tmp_path / "settings.json"
    FeedSettings(refresh_interval=0, port=9000).dump(config_path)

    loaded = FeedSettings.from_file(config_path)

    assert loaded.refresh_interval == 0
    assert loaded.port == 9000


def test_from_file_reports_invalid_json(tmp_path: Path) -> None:
    config_path = tmp_path / "settings.json"
    config_path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ValueError):
        FeedSettings.from_file(config_path)
