"""
FastAPI application entry point for the feedback crawler API.

This module initializes the FastAPI application with:
- CORS middleware for the browser front end
- Request logging middleware
- API routers for crawl and health endpoints
- Static assets with a single-page-app fallback
- Lifespan management for the storage client and crawl pool

Configuration is loaded from centralized settings in feedback_crawler.config.
See feedback_crawler/config/__init__.py for available environment variables.
"""

import logging
import os
import sys
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Optional

# Add project root to path for package imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "..", ".."))

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse

from app.api import crawl, health
from app.middleware import RequestLoggingMiddleware
from feedback_crawler.__version__ import __version__
from feedback_crawler.config import settings
from feedback_crawler.persistence import FeedbackPersistence
from feedback_crawler.scraper import CrawlerConfig, CrawlSessionPool, FeedbackCrawler
from feedback_crawler.utils.supabase_client import SupabaseRestClient

logger = logging.getLogger(__name__)


# =============================================================================
# Application State
# =============================================================================


@dataclass
class AppState:
    """Application-level resources, created once at startup.

    - db_client: Supabase client, owned here and closed on shutdown
    - pool: bounds how many browser crawls run at once
    - crawler: stateless orchestrator; each crawl opens its own browser
    """

    db_client: Optional[SupabaseRestClient] = None
    pool: Optional[CrawlSessionPool] = None
    crawler: Optional[FeedbackCrawler] = None


# Global app state instance
app_state = AppState()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the storage client, crawl pool and crawler; close the client on shutdown."""
    global app_state

    # === STARTUP ===
    logger.info("🚀 Initializing crawler resources...")

    try:
        app_state.db_client = SupabaseRestClient()
        await app_state.db_client.initialize()
        logger.info("✅ Supabase client initialized")

        app_state.pool = CrawlSessionPool.from_config(settings.pool)
        app_state.crawler = FeedbackCrawler(
            CrawlerConfig.from_settings(settings.crawler),
            persistence=FeedbackPersistence(app_state.db_client),
            pool=app_state.pool,
        )
        logger.info(
            f"✅ Crawler ready for {settings.crawler.base_url} "
            f"(max {settings.pool.max_sessions} concurrent crawls)"
        )

    except Exception as e:
        logger.error(f"❌ Failed to initialize crawler resources: {e}", exc_info=True)
        raise

    yield  # Application runs here

    # === SHUTDOWN ===
    logger.info("🧹 Cleaning up crawler resources...")

    if app_state.db_client:
        await app_state.db_client.close()
        logger.info("✅ Supabase client closed")


# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

app = FastAPI(
    title="Company Feedback Crawler API",
    description="""
## Crawl company comments and reviews

- **Crawl**: Crawl every listing page of a company and upsert its feedback
- **Health**: Liveness, readiness and detailed status
""",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {"name": "crawl", "description": "Feedback crawling"},
        {"name": "health", "description": "Health checks and monitoring"},
    ],
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.api.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Response-Time"],
)

app.add_middleware(
    RequestLoggingMiddleware,
    slow_request_threshold_ms=settings.api.slow_request_threshold_ms,
)

app.include_router(crawl.router, prefix="/api/v1")
app.include_router(health.router, prefix="/api/v1")
app.include_router(crawl.legacy_router)


@app.get("/health")
async def health_legacy():
    """Legacy global health check endpoint."""
    return {"status": "healthy"}


@app.get("/{full_path:path}", include_in_schema=False)
async def static_or_index(full_path: str):
    """Serve a static asset, or index.html for any other path."""
    static_dir = settings.api.static_dir.resolve()
    candidate = (static_dir / full_path).resolve()

    if full_path and candidate.is_file() and candidate.is_relative_to(static_dir):
        return FileResponse(candidate)

    index = static_dir / "index.html"
    if not index.is_file():
        raise HTTPException(status_code=404, detail="Not found")
    return FileResponse(index)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.api.host, port=settings.api.port)
