"""Tests for the single-page scraper."""

import pytest

from feedback_crawler.scraper import CrawlError, PageSnapshot, scrape_page
from feedback_crawler.scraper.validity import EMPTY_DOCUMENT

PAGE_2 = "https://reviews.test/companies/acme?page=2"


class TestScrapePage:
    """Navigate, validate, extract."""

    @pytest.mark.asyncio
    async def test_extracts_items_from_valid_page(
        self, crawler_config, fake_session, make_page, make_container
    ):
        session = fake_session(
            {PAGE_2: make_page(make_container("review-1", "Nice"), make_container("comment-replies-2", "Yes"))}
        )

        items = await scrape_page(session, 2, "acme", crawler_config)

        assert [item.id for item in items] == ["review-1", "comment-replies-2"]
        assert session.visited == [PAGE_2]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "snapshot",
        [
            PageSnapshot(url=PAGE_2, status_code=None, html="<html></html>", title="Acme"),
            PageSnapshot(url=PAGE_2, status_code=503, html="<p>busy</p>", title="Acme"),
            PageSnapshot(url=PAGE_2, status_code=200, html=EMPTY_DOCUMENT, title=""),
            PageSnapshot(url=PAGE_2, status_code=200, html="<p>x</p>", title="404 | Acme"),
            PageSnapshot(url=PAGE_2, status_code=200, html="<p>x</p>", title="Page not found"),
        ],
    )
    async def test_invalid_page_yields_empty_list(self, snapshot, crawler_config, fake_session):
        session = fake_session({PAGE_2: snapshot})

        assert await scrape_page(session, 2, "acme", crawler_config) == []

    @pytest.mark.asyncio
    async def test_navigation_fault_propagates(self, crawler_config, fake_session):
        session = fake_session({}, fail_on={PAGE_2})

        with pytest.raises(CrawlError):
            await scrape_page(session, 2, "acme", crawler_config)

    @pytest.mark.asyncio
    async def test_rejected_page_ignores_its_containers(
        self, crawler_config, fake_session, make_page, make_container
    ):
        html = make_page(make_container("review-1", "Hidden"), title="404 Not Found")
        session = fake_session(
            {PAGE_2: PageSnapshot(url=PAGE_2, status_code=200, html=html, title="404 Not Found")}
        )

        assert await scrape_page(session, 2, "acme", crawler_config) == []
