"""Browser session backed by Crawl4AI.

One session owns one Chromium instance and one page (a Crawl4AI
``session_id``) for the lifetime of a crawl. Navigations are sequential.
"""

import asyncio
import logging
import uuid

from bs4 import BeautifulSoup
from crawl4ai import AsyncWebCrawler, BrowserConfig, CacheMode, CrawlerRunConfig

from .config import CrawlerConfig
from .errors import CrawlError
from .models import PageSnapshot

logger = logging.getLogger(__name__)


class BrowserSession:
    """Async context manager around a single-page Crawl4AI crawler."""

    def __init__(self, config: CrawlerConfig):
        self.config = config
        self.session_id = f"feedback-{uuid.uuid4().hex[:12]}"
        self._crawler: AsyncWebCrawler | None = None
        self._lock = asyncio.Lock()

    def _browser_config(self) -> BrowserConfig:
        browser_kwargs = {
            "headless": self.config.headless,
            "extra_args": list(self.config.extra_args),
        }
        if self.config.user_agent:
            browser_kwargs["user_agent"] = self.config.user_agent
        return BrowserConfig(**browser_kwargs)

    def _run_config(self) -> CrawlerRunConfig:
        return CrawlerRunConfig(
            cache_mode=CacheMode.BYPASS,
            session_id=self.session_id,
            wait_until=self.config.wait_until,
            page_timeout=self.config.page_timeout_ms,
        )

    async def __aenter__(self) -> "BrowserSession":
        self._crawler = AsyncWebCrawler(config=self._browser_config())
        await self._crawler.start()
        logger.debug(f"Browser session {self.session_id} started")
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Release the page and the browser. Safe to call more than once."""
        crawler, self._crawler = self._crawler, None
        if crawler is None:
            return
        try:
            await crawler.crawler_strategy.kill_session(self.session_id)
        finally:
            await crawler.close()
            logger.debug(f"Browser session {self.session_id} closed")

    async def navigate(self, url: str) -> PageSnapshot:
        """Load ``url`` in the session page and wait for the network to settle.

        Raises:
            CrawlError: The page could not be loaded at all (no HTTP response).
        """
        if self._crawler is None:
            raise CrawlError("Browser session is not open", url)

        async with self._lock:
            result = await self._crawler.arun(url=url, config=self._run_config())

        status_code = getattr(result, "status_code", None)
        if not result.success and (status_code is None or status_code < 400):
            raise CrawlError(
                f"Navigation failed: {result.error_message}",
                url,
                status_code=status_code,
            )

        html = result.html or ""
        return PageSnapshot(
            url=url,
            status_code=status_code,
            html=html,
            title=self._extract_title(result, html),
        )

    def _extract_title(self, result, html: str) -> str:
        """Extract document title from crawl result."""
        metadata = getattr(result, "metadata", None)
        if isinstance(metadata, dict) and metadata.get("title"):
            return str(metadata["title"])
        # Fallback: parse the <title> element
        if html:
            soup = BeautifulSoup(html, "html.parser")
            if soup.title and soup.title.string:
                return soup.title.string.strip()
        return ""
