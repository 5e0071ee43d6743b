"""
Pytest configuration and shared fixtures.
"""

from typing import Callable

import pytest

from feedback_crawler.scraper import CrawlerConfig, CrawlError, PageSnapshot

BASE_URL = "https://reviews.test"


@pytest.fixture(autouse=True)
def mock_env(monkeypatch):
    """Set test environment variables."""
    monkeypatch.setenv("SUPABASE_URL", "https://test.supabase.co")
    monkeypatch.setenv("SUPABASE_SERVICE_KEY", "test-service-key")
    monkeypatch.setenv("CRAWLER_BASE_URL", BASE_URL)


@pytest.fixture
def crawler_config() -> CrawlerConfig:
    """Crawler config pointing at a fake site."""
    return CrawlerConfig(base_url=BASE_URL)


@pytest.fixture
def make_container() -> Callable[..., str]:
    """Build one feedback container."""

    def _container(element_id: str, text: str, content_class: str = "cmt-content") -> str:
        return (
            f'<div id="{element_id}" class="feedback">'
            f'<span class="author">someone</span>'
            f'<div class="{content_class}">{text}</div>'
            f"</div>"
        )

    return _container


@pytest.fixture
def make_page() -> Callable[..., str]:
    """Build a listing page from containers and pagination labels."""

    def _page(*containers: str, pages: list[str] | None = None, title: str = "Acme reviews") -> str:
        links = "".join(f'<li><a class="page-link" href="#">{label}</a></li>' for label in pages or [])
        pagination = f'<ul class="pagination">{links}</ul>' if pages else ""
        return (
            f"<html><head><title>{title}</title></head>"
            f"<body>{''.join(containers)}{pagination}</body></html>"
        )

    return _page


class FakeSession:
    """Stands in for BrowserSession: serves canned snapshots by URL."""

    def __init__(self, pages: dict[str, PageSnapshot], fail_on: set[str] | None = None):
        self.pages = pages
        self.fail_on = fail_on or set()
        self.visited: list[str] = []
        self.entered = 0
        self.closed = 0

    async def __aenter__(self) -> "FakeSession":
        self.entered += 1
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.closed += 1

    async def navigate(self, url: str) -> PageSnapshot:
        self.visited.append(url)
        if url in self.fail_on:
            raise CrawlError("Navigation failed: net::ERR_CONNECTION_RESET", url)
        return self.pages.get(
            url, PageSnapshot(url=url, status_code=404, html="", title="404 Not Found")
        )


@pytest.fixture
def fake_session() -> Callable[..., FakeSession]:
    """Factory for a FakeSession serving ``{url: html}`` pages with status 200."""

    def _session(pages: dict[str, str | PageSnapshot], fail_on: set[str] | None = None) -> FakeSession:
        snapshots = {}
        for url, page in pages.items():
            if isinstance(page, PageSnapshot):
                snapshots[url] = page
            else:
                snapshots[url] = PageSnapshot(url=url, status_code=200, html=page, title="Acme reviews")
        return FakeSession(snapshots, fail_on=fail_on)

    return _session


class FakeSupabaseClient:
    """In-memory store with the same upsert semantics as upsert_feedback_item."""

    def __init__(self, fail_on: str | None = None):
        self.rows: dict[str, dict] = {}
        self.calls: list[str] = []
        self.fail_on = fail_on

    async def upsert_feedback_item(self, record: dict) -> None:
        self.calls.append(record["id"])
        if record["id"] == self.fail_on:
            raise RuntimeError("connection reset by peer")

        existing = self.rows.get(record["id"])
        if existing is None:
            self.rows[record["id"]] = dict(record)
        else:
            existing.update(
                text=record["text"], type=record["type"], source_id=record["source_id"]
            )


@pytest.fixture
def fake_store() -> Callable[..., FakeSupabaseClient]:
    return FakeSupabaseClient
