"""
Tests for FastAPI endpoints.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from app.main import app, app_state
from feedback_crawler.scraper import (
    CrawlCapacityError,
    CrawlError,
    CrawlSessionPool,
    CrawlSummary,
    FeedbackItem,
    FeedbackType,
)


@pytest.fixture
async def client():
    """Create test client for FastAPI app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def mock_crawler(monkeypatch):
    """Install a mock crawler and pool in the app state."""
    crawler = MagicMock()
    crawler.crawl_company = AsyncMock()
    monkeypatch.setattr(app_state, "crawler", crawler)
    monkeypatch.setattr(app_state, "pool", CrawlSessionPool(max_sessions=2, max_waiting=1))
    return crawler


def summary_with(*items: FeedbackItem) -> CrawlSummary:
    return CrawlSummary(company="acme", total=len(items), items=list(items), total_pages=1)


class TestHealthEndpoints:
    """Test health and status endpoints."""

    @pytest.mark.asyncio
    async def test_health_endpoint(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_liveness(self, client):
        response = await client.get("/api/v1/health/liveness")

        assert response.status_code == 200
        assert response.json()["status"] == "alive"

    @pytest.mark.asyncio
    async def test_readiness_without_database(self, client, mock_crawler, monkeypatch):
        monkeypatch.setattr(app_state, "db_client", None)

        response = await client.get("/api/v1/health/readiness")

        assert response.status_code == 503
        assert response.json()["status"] == "not_ready"

    @pytest.mark.asyncio
    async def test_readiness_with_database(self, client, mock_crawler, monkeypatch):
        db_client = MagicMock()
        db_client.count_feedback_items = AsyncMock(return_value=12)
        monkeypatch.setattr(app_state, "db_client", db_client)

        response = await client.get("/api/v1/health/readiness")

        assert response.status_code == 200
        assert response.json()["status"] == "ready"

    @pytest.mark.asyncio
    async def test_detailed_reports_pool(self, client, mock_crawler, monkeypatch):
        db_client = MagicMock()
        db_client.count_feedback_items = AsyncMock(side_effect=RuntimeError("timeout"))
        monkeypatch.setattr(app_state, "db_client", db_client)

        response = await client.get("/api/v1/health/detailed")

        data = response.json()
        assert response.status_code == 200
        assert data["status"] == "degraded"
        assert data["crawl_pool"]["max_sessions"] == 2
        assert {c["name"] for c in data["components"]} == {"database", "crawler"}


class TestCrawlEndpoints:
    """Crawl endpoint request/response contract."""

    @pytest.mark.asyncio
    async def test_crawl_success(self, client, mock_crawler):
        mock_crawler.crawl_company.return_value = summary_with(
            FeedbackItem.build(FeedbackType.REVIEW, "2", "Second", "review-"),
            FeedbackItem.build(FeedbackType.COMMENT, "1", "First", "comment-replies-"),
        )

        response = await client.get("/api/v1/crawl/acme")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Crawled and saved 2 comments"
        assert data["data"][0] == {
            "id": "review-2",
            "sourceId": "2",
            "type": "review",
            "text": "Second",
        }
        assert data["data"][1]["id"] == "comment-replies-1"
        mock_crawler.crawl_company.assert_awaited_once_with("acme")

    @pytest.mark.asyncio
    async def test_legacy_path(self, client, mock_crawler):
        mock_crawler.crawl_company.return_value = summary_with()

        response = await client.get("/crawl-comments/acme")

        assert response.status_code == 200
        assert response.json()["data"] == []
        assert response.json()["message"] == "Crawled and saved 0 comments"

    @pytest.mark.asyncio
    async def test_crawl_failure(self, client, mock_crawler):
        mock_crawler.crawl_company.side_effect = CrawlError(
            "Navigation failed: net::ERR_NAME_NOT_RESOLVED", "https://reviews.test/companies/acme"
        )

        response = await client.get("/api/v1/crawl/acme")

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "message": "Crawling failed",
            "error": "Navigation failed: net::ERR_NAME_NOT_RESOLVED",
        }

    @pytest.mark.asyncio
    async def test_crawl_capacity(self, client, mock_crawler):
        mock_crawler.crawl_company.side_effect = CrawlCapacityError(active=2, waiting=1)

        response = await client.get("/api/v1/crawl/acme")

        assert response.status_code == 503
        assert response.json()["success"] is False

    @pytest.mark.asyncio
    async def test_crawler_not_initialized(self, client, monkeypatch):
        monkeypatch.setattr(app_state, "crawler", None)

        response = await client.get("/api/v1/crawl/acme")

        assert response.status_code == 503

    @pytest.mark.asyncio
    async def test_response_time_header(self, client, mock_crawler):
        mock_crawler.crawl_company.return_value = summary_with()

        response = await client.get("/api/v1/crawl/acme")

        assert "X-Response-Time" in response.headers


class TestStaticAssets:
    """Static files and SPA fallback."""

    @pytest.mark.asyncio
    async def test_index(self, client):
        response = await client.get("/")

        assert response.status_code == 200
        assert "Company Feedback Crawler" in response.text

    @pytest.mark.asyncio
    async def test_unknown_path_falls_back_to_index(self, client):
        response = await client.get("/companies/acme/dashboard")

        assert response.status_code == 200
        assert "<form" in response.text

    @pytest.mark.asyncio
    async def test_docs_available(self, client):
        response = await client.get("/docs")
        assert response.status_code == 200
