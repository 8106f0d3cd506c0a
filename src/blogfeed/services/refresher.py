"""Latest-result cache cell and the periodic refresh job for the reader page."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler

from blogfeed.errors import FeedError
from blogfeed.models import FeedResult

__all__ = ["FeedRefresher", "FeedSnapshot", "LatestFeedCell", "REFRESH_JOB_ID"]

logger = logging.getLogger(__name__)

REFRESH_JOB_ID = "refresh_feed"


@dataclass(frozen=True)
class FeedSnapshot:
    """Point-in-time view of the cell."""

    feed: Optional[FeedResult]
    fetched_at: Optional[datetime]
    last_error: Optional[str]

    @property
    def stale(self) -> bool:
        """``True`` when the newest attempt failed but an older feed is still served."""

        return self.feed is not None and self.last_error is not None


class LatestFeedCell:
    """Holds the most recent successfully fetched feed.

    A failed fetch only records its error; the previous feed stays in place.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._feed: FeedResult | None = None
        self._fetched_at: datetime | None = None
        self._last_error: str | None = None

    def get(self) -> FeedResult | None:
        with self._lock:
            return self._feed

    def set(self, feed: FeedResult) -> None:
        with self._lock:
            self._feed = feed
            self._fetched_at = datetime.now(UTC)
            self._last_error = None

    def record_failure(self, error: str) -> None:
        with self._lock:
            self._last_error = error

    def snapshot(self) -> FeedSnapshot:
        with self._lock:
            return FeedSnapshot(feed=self._feed, fetched_at=self._fetched_at, last_error=self._last_error)


class FeedRefresher:
    """Runs the feed loader into a :class:`LatestFeedCell`.

    Only one refresh runs at a time. A refresh requested while another is in
    flight (timer tick or manual retry) is skipped instead of issuing a second
    outbound request.
    """

    def __init__(
        self,
        loader: Callable[[], FeedResult],
        *,
        cell: LatestFeedCell | None = None,
        interval: int = 300,
        scheduler: BackgroundScheduler | None = None,
    ) -> None:
        self.loader = loader
        self.cell = cell or LatestFeedCell()
        self.interval = interval
        self._scheduler = scheduler
        self._in_progress = threading.Lock()

    @property
    def in_progress(self) -> bool:
        return self._in_progress.locked()

    def refresh(self) -> FeedResult | None:
        """Load the feed once and store it.

        Returns the new feed, or ``None`` when another refresh was already
        running. :class:`FeedError` propagates after being recorded on the cell.
        """

        if not self._in_progress.acquire(blocking=False):
            logger.info("Feed refresh already in progress; skipping")
            return None

        try:
            feed = self.loader()
            self.cell.set(feed)
        except FeedError as exc:
            self.cell.record_failure(str(exc))
            logger.warning("Feed refresh failed, keeping previous result: %s", exc)
            raise
        finally:
            self._in_progress.release()

        logger.info("Feed refreshed with %d posts", len(feed.items))
        return feed

    def _scheduled_refresh(self) -> None:
        try:
            self.refresh()
        except FeedError:
            # Already recorded on the cell; the next tick tries again.
            pass

    def start(self) -> None:
        """Start the periodic refresh job. A zero interval disables it."""

        if self.interval <= 0:
            return
        if self._scheduler is None:
            self._scheduler = BackgroundScheduler(timezone="UTC")
        self._scheduler.add_job(
            self._scheduled_refresh,
            "interval",
            seconds=self.interval,
            id=REFRESH_JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        if not self._scheduler.running:
            self._scheduler.start()
        logger.info("Scheduled feed refresh every %d seconds", self.interval)

    def shutdown(self) -> None:
        if self._scheduler is not None and self._scheduler.running:
            self._scheduler.shutdown(wait=False)
