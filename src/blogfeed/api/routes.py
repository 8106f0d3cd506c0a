"""API routes exposing the feed proxy and the reader page data."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from blogfeed.errors import FeedError
from blogfeed.models import FeedResult
from blogfeed.services.fetcher import FeedFetcher
from blogfeed.services.normalizer import load_feed
from blogfeed.services.presentation import PostCard, build_post_cards
from blogfeed.services.refresher import FeedRefresher

logger = logging.getLogger(__name__)

router = APIRouter()

FAILURE_MESSAGE = "Failed to fetch RSS feed"


class FeedFailure(BaseModel):
    message: str
    error: str


class FeedPage(BaseModel):
    """Cards for the reader page together with the state of the cached feed."""

    feed: Optional[Dict[str, str]] = None
    posts: List[PostCard] = Field(default_factory=list)
    stale: bool = False
    loading: bool = False
    error: Optional[str] = None


def get_fetcher(request: Request) -> FeedFetcher:
    return request.app.state.fetcher


def get_refresher(request: Request) -> FeedRefresher:
    return request.app.state.refresher


def _failure_response(exc: FeedError) -> JSONResponse:
    body = FeedFailure(message=FAILURE_MESSAGE, error=str(exc))
    return JSONResponse(status_code=500, content=body.model_dump())


@router.get(
    "/rss",
    response_model=FeedResult,
    response_model_exclude_none=True,
    responses={500: {"model": FeedFailure}},
)
async def get_rss_feed(fetcher: FeedFetcher = Depends(get_fetcher)):
    """Fetch the feed from the aggregator, validate it and return it as JSON."""

    try:
        return await run_in_threadpool(load_feed, fetcher)
    except FeedError as exc:
        logger.exception("RSS fetch error")
        return _failure_response(exc)


@router.post(
    "/rss/refresh",
    response_model=FeedResult,
    response_model_exclude_none=True,
    responses={409: {"model": FeedFailure}, 500: {"model": FeedFailure}},
)
async def refresh_rss_feed(refresher: FeedRefresher = Depends(get_refresher)):
    """Manually retry the reader page feed, replacing the cached result on success."""

    try:
        feed = await run_in_threadpool(refresher.refresh)
    except FeedError as exc:
        logger.exception("Manual feed refresh failed")
        return _failure_response(exc)

    if feed is None:
        body = FeedFailure(message="Feed refresh already in progress", error="busy")
        return JSONResponse(status_code=409, content=body.model_dump())
    return feed


@router.get("/posts", response_model=FeedPage)
async def list_posts(refresher: FeedRefresher = Depends(get_refresher)) -> FeedPage:
    """Return display-ready cards for the latest successfully fetched feed."""

    snapshot = refresher.cell.snapshot()
    if snapshot.feed is None:
        try:
            await run_in_threadpool(refresher.refresh)
        except FeedError as exc:
            return FeedPage(error=str(exc))
        snapshot = refresher.cell.snapshot()

    if snapshot.feed is None:
        return FeedPage(loading=refresher.in_progress, error=snapshot.last_error)

    return FeedPage(
        feed=snapshot.feed.feed.model_dump(),
        posts=build_post_cards(snapshot.feed),
        stale=snapshot.stale,
        error=snapshot.last_error,
    )
