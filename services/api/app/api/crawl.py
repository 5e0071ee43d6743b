"""Crawl API endpoints."""

import logging
from typing import List

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from feedback_crawler.scraper import CrawlCapacityError, FeedbackItem

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/crawl", tags=["crawl"])

# Original path, kept for existing front ends
legacy_router = APIRouter(tags=["crawl"])


class CrawlResponse(BaseModel):
    """Successful crawl response."""

    success: bool = True
    message: str
    data: List[FeedbackItem] = Field(default_factory=list)


def _get_app_state():
    """Lazy import to avoid circular dependency with app.main."""
    from app.main import app_state

    return app_state


def _failure(status_code: int, message: str, error: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, "error": error},
    )


async def run_crawl(company_slug: str):
    """Run one crawl and translate its outcome into a response."""
    crawler = _get_app_state().crawler
    if crawler is None:
        return _failure(
            status.HTTP_503_SERVICE_UNAVAILABLE, "Crawler not initialized", "Service starting"
        )

    try:
        summary = await crawler.crawl_company(company_slug)
    except CrawlCapacityError as e:
        return _failure(status.HTTP_503_SERVICE_UNAVAILABLE, "Crawler busy, retry later", str(e))
    except Exception as e:
        logger.error(f"❌ Error during crawling {company_slug}: {e}")
        return _failure(status.HTTP_500_INTERNAL_SERVER_ERROR, "Crawling failed", str(e))

    response = CrawlResponse(
        message=f"Crawled and saved {summary.total} comments",
        data=summary.items if summary.total > 0 else [],
    )
    return JSONResponse(content=response.model_dump(mode="json", by_alias=True))


@router.get("/{company_slug}", response_model=CrawlResponse)
async def crawl_company(company_slug: str):
    """
    Crawl every listing page of a company and upsert its comments and reviews.

    Returns the crawled items, the last one extracted first.
    Returns 503 when the crawl pool is full and 500 on any crawl fault.
    """
    return await run_crawl(company_slug)


@legacy_router.get("/crawl-comments/{company_slug}", response_model=CrawlResponse)
async def crawl_comments_legacy(company_slug: str):
    """Legacy crawl endpoint."""
    return await run_crawl(company_slug)
