"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse

from blogfeed.api.routes import router
from blogfeed.config import FeedSettings
from blogfeed.services.fetcher import FeedFetcher
from blogfeed.services.presentation import load_reader_feed
from blogfeed.services.refresher import FeedRefresher

logger = logging.getLogger(__name__)

ACCESS_LOG_LIMIT = 80

INDEX_HTML = """
<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>KingsFeeds</title>
    <style>
      :root {
        color-scheme: light;
        font-family: system-ui, -apple-system, BlinkMacSystemFont, "Segoe UI", sans-serif;
        --color-background: #ffffff;
        --color-card: #fafafa;
        --color-border: #e6e6e6;
        --color-text-primary: #242424;
        --color-text-secondary: #6b6b6b;
        --color-green: #1a8917;
        background: var(--color-background);
        color: var(--color-text-primary);
      }

      body {
        margin: 0;
        min-height: 100vh;
      }

      header {
        border-bottom: 1px solid var(--color-border);
        padding: 32px 24px;
        text-align: center;
      }

      header h1 {
        margin: 0 0 8px;
        font-family: Georgia, "Times New Roman", serif;
        font-size: 2.5rem;
      }

      header p {
        margin: 0 auto;
        max-width: 640px;
        color: var(--color-text-secondary);
        line-height: 1.6;
      }

      .layout {
        display: grid;
        grid-template-columns: 1fr 300px;
        gap: 40px;
        max-width: 1100px;
        margin: 0 auto;
        padding: 40px 24px;
      }

      .post {
        display: flex;
        gap: 24px;
        padding: 24px;
        margin-bottom: 24px;
        background: var(--color-card);
        border: 1px solid var(--color-border);
        border-radius: 12px;
      }

      .post h2 {
        margin: 0 0 8px;
        font-family: Georgia, "Times New Roman", serif;
        font-size: 1.5rem;
      }

      .post h2 a {
        color: inherit;
        text-decoration: none;
      }

      .post h2 a:hover {
        color: var(--color-green);
      }

      .post p {
        margin: 0 0 16px;
        color: var(--color-text-secondary);
        line-height: 1.6;
      }

      .post-body {
        flex: 1;
      }

      .post-meta {
        display: flex;
        align-items: center;
        justify-content: space-between;
        font-size: 0.875rem;
        color: var(--color-text-secondary);
      }

      .post img {
        width: 128px;
        height: 128px;
        object-fit: cover;
        border-radius: 8px;
        flex-shrink: 0;
      }

      .read-more,
      button {
        appearance: none;
        border: none;
        border-radius: 999px;
        padding: 8px 20px;
        font-size: 0.875rem;
        font-weight: 600;
        cursor: pointer;
        background: var(--color-green);
        color: white;
        text-decoration: none;
      }

      button:disabled {
        opacity: 0.6;
        cursor: wait;
      }

      .state {
        text-align: center;
        padding: 48px 24px;
        color: var(--color-text-secondary);
      }

      .state h3 {
        margin: 0 0 8px;
        color: var(--color-text-primary);
      }

      .skeleton {
        height: 160px;
        margin-bottom: 24px;
        border-radius: 12px;
        background: linear-gradient(90deg, #f0f0f0, #e6e6e6, #f0f0f0);
      }

      aside section {
        padding: 24px;
        margin-bottom: 24px;
        background: var(--color-card);
        border: 1px solid var(--color-border);
        border-radius: 12px;
      }

      aside h3 {
        margin-top: 0;
      }

      aside ul {
        margin: 0;
        padding: 0;
        list-style: none;
        display: grid;
        gap: 12px;
      }

      aside a {
        color: inherit;
      }

      [hidden] {
        display: none !important;
      }
    </style>
  </head>
  <body>
    <header>
      <h1>KingsFeeds</h1>
      <p>
        Thoughtful stories, insights, and perspectives that spark curiosity and meaningful
        conversations
      </p>
    </header>
    <div class="layout">
      <main>
        <div id="loading">
          <div class="skeleton"></div>
          <div class="skeleton"></div>
          <div class="skeleton"></div>
        </div>
        <div id="error-state" class="state" hidden>
          <h3>Unable to Load Posts</h3>
          <p>We're having trouble connecting to our blog feed. Please try again later.</p>
          <button id="retry-button" type="button">Try Again</button>
        </div>
        <div id="empty-state" class="state" hidden>
          <h3>No Posts Yet</h3>
          <p>Check back soon for fresh content and insights.</p>
        </div>
        <div id="posts"></div>
      </main>
      <aside>
        <section>
          <h3>Stay Curious</h3>
          <p>Follow us on Medium for more thought-provoking content.</p>
        </section>
        <section>
          <h3>Recent Posts</h3>
          <ul id="recent-posts"></ul>
        </section>
      </aside>
    </div>
    <script>
      window.addEventListener("DOMContentLoaded", () => {
        const REFRESH_INTERVAL_MS = __REFRESH_INTERVAL_MS__;
        const loadingEl = document.getElementById("loading");
        const errorEl = document.getElementById("error-state");
        const emptyEl = document.getElementById("empty-state");
        const postsEl = document.getElementById("posts");
        const recentEl = document.getElementById("recent-posts");
        const retryButton = document.getElementById("retry-button");
        let inFlight = false;

        const link = (href, text, className) => {
          const anchor = document.createElement("a");
          anchor.href = href;
          anchor.target = "_blank";
          anchor.rel = "noopener noreferrer";
          anchor.textContent = text;
          if (className) {
            anchor.className = className;
          }
          return anchor;
        };

        const renderCard = (post) => {
          const card = document.createElement("article");
          card.className = "post";
          card.dataset.guid = post.guid;

          const body = document.createElement("div");
          body.className = "post-body";
          const title = document.createElement("h2");
          title.appendChild(link(post.link, post.title));
          const excerpt = document.createElement("p");
          excerpt.textContent = post.excerpt;
          const meta = document.createElement("div");
          meta.className = "post-meta";
          const time = document.createElement("time");
          time.textContent = post.date_label;
          meta.append(time, link(post.link, "Read More", "read-more"));
          body.append(title, excerpt, meta);
          card.appendChild(body);

          if (post.image_url) {
            const image = document.createElement("img");
            image.src = post.image_url;
            image.alt = post.title;
            image.loading = "lazy";
            card.appendChild(image);
          }
          return card;
        };

        const render = (page) => {
          loadingEl.hidden = page.loading !== true;
          const failed = page.posts.length === 0 && Boolean(page.error);
          errorEl.hidden = !failed;
          emptyEl.hidden = failed || page.loading || page.posts.length > 0;
          postsEl.replaceChildren(...page.posts.map(renderCard));
          recentEl.replaceChildren(
            ...page.posts.slice(0, 3).map((post) => {
              const item = document.createElement("li");
              item.appendChild(link(post.link, post.title));
              return item;
            })
          );
        };

        const load = async (path, options) => {
          if (inFlight) {
            return;
          }
          inFlight = true;
          retryButton.disabled = true;
          retryButton.textContent = "Retrying...";
          try {
            if (path) {
              await fetch(path, options);
            }
            const response = await fetch("/api/posts");
            if (!response.ok) {
              throw new Error(`Request failed with status ${response.status}`);
            }
            render(await response.json());
          } catch (error) {
            console.error(error);
            render({ posts: [], error: String(error) });
          } finally {
            inFlight = false;
            retryButton.disabled = false;
            retryButton.textContent = "Try Again";
          }
        };

        retryButton.addEventListener("click", () => load("/api/rss/refresh", { method: "POST" }));
        window.addEventListener("focus", () => load());
        if (REFRESH_INTERVAL_MS > 0) {
          window.setInterval(() => load(), REFRESH_INTERVAL_MS);
        }
        load();
      });
    </script>
  </body>
</html>
"""


def render_index(settings: FeedSettings) -> str:
    return INDEX_HTML.replace("__REFRESH_INTERVAL_MS__", str(settings.refresh_interval * 1000))


def create_app(
    settings: FeedSettings | None = None,
    *,
    fetcher: FeedFetcher | None = None,
) -> FastAPI:
    settings = settings or FeedSettings.from_env()
    fetcher = fetcher or FeedFetcher(settings)
    refresher = FeedRefresher(lambda: load_reader_feed(fetcher), interval=settings.refresh_interval)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        refresher.start()
        try:
            yield
        finally:
            refresher.shutdown()

    app = FastAPI(title="Blog Feed", description="Blog post feed proxy and reader", lifespan=lifespan)
    app.state.settings = settings
    app.state.fetcher = fetcher
    app.state.refresher = refresher
    app.include_router(router, prefix="/api")

    @app.middleware("http")
    async def log_api_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        if request.url.path.startswith("/api"):
            duration = int((time.perf_counter() - start) * 1000)
            line = f"{request.method} {request.url.path} {response.status_code} in {duration}ms"
            if len(line) > ACCESS_LOG_LIMIT:
                line = line[: ACCESS_LOG_LIMIT - 1] + "…"
            logger.info(line)
        return response

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error while serving %s", request.url.path)
        return JSONResponse(status_code=500, content={"message": str(exc) or "Internal Server Error"})

    index_html = render_index(settings)

    @app.get("/", response_class=HTMLResponse)
    async def index() -> str:
        return index_html

    return app


app = create_app()
