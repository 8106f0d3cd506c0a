"""Convenience script for serving the Blog Feed locally."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import uvicorn

# Ensure the src directory is on the Python path so the blogfeed package can be imported
SRC_PATH = Path(__file__).resolve().parent / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from blogfeed.api.app import create_app  # noqa: E402  (import after path setup)
from blogfeed.config import FeedSettings  # noqa: E402


def main() -> None:
    """Load settings from the environment and serve the app."""

    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(name)s] %(levelname)s: %(message)s")

    try:
        settings = FeedSettings.from_env()
    except ValueError as exc:
        logging.error("Could not load settings: %s", exc)
        sys.exit(1)

    logging.getLogger().setLevel(settings.log_level.upper())
    logging.info("Serving on port %d (%s)", settings.port, settings.environment)

    uvicorn.run(
        create_app(settings),
        host="0.0.0.0",
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
        access_log=not settings.is_production,
    )


if __name__ == "__main__":
    main()
