"""Crawl orchestration: discover pages, scrape each, persist the aggregate."""

import logging
from contextlib import nullcontext
from typing import TYPE_CHECKING, Callable

from .config import CrawlerConfig
from .models import CrawlSummary, FeedbackItem
from .page_scraper import scrape_page
from .pagination import discover_total_pages
from .pool import CrawlSessionPool
from .session import BrowserSession

if TYPE_CHECKING:
    from feedback_crawler.persistence import FeedbackPersistence

logger = logging.getLogger(__name__)


class FeedbackCrawler:
    """Crawls every listing page of a company and upserts what it finds.

    Each call to :meth:`crawl_company` opens its own browser session and
    releases it on every exit path. Pages that fail the validity check are
    skipped; any other fault aborts the crawl before anything is written.
    """

    def __init__(
        self,
        config: CrawlerConfig,
        persistence: "FeedbackPersistence | None" = None,
        pool: CrawlSessionPool | None = None,
        session_factory: Callable[[CrawlerConfig], BrowserSession] = BrowserSession,
    ):
        self.config = config
        self.persistence = persistence
        self.pool = pool
        self.session_factory = session_factory

    async def crawl_company(self, company_slug: str) -> CrawlSummary:
        """Crawl one company and return its items, last-extracted first.

        Raises:
            ValueError: ``company_slug`` is empty.
            CrawlCapacityError: The session pool rejected the crawl.
            CrawlError: Navigation or browser fault.
            PersistenceError: A write failed; remaining writes were aborted.
        """
        if not company_slug:
            raise ValueError("company_slug must not be empty")

        slot = self.pool.acquire(company_slug) if self.pool else nullcontext()
        async with slot:
            return await self._run(company_slug)

    async def _run(self, company_slug: str) -> CrawlSummary:
        summary = CrawlSummary(company=company_slug)
        collected: list[FeedbackItem] = []

        try:
            async with self.session_factory(self.config) as session:
                total_pages = await discover_total_pages(session, company_slug, self.config)
                summary.total_pages = total_pages

                for page_index in range(1, total_pages + 1):
                    items = await scrape_page(session, page_index, company_slug, self.config)
                    if not items:
                        summary.skipped_pages.append(page_index)
                        continue
                    collected.extend(items)

                ordered = list(reversed(collected))
                if self.persistence is not None:
                    logger.info(f"Persisting {len(ordered)} item(s) for {company_slug}")
                    await self.persistence.save_items(ordered, company_slug)
                else:
                    logger.info(f"Dry run: {len(ordered)} item(s) for {company_slug} not persisted")
        except Exception:
            logger.error(f"Crawl failed for {company_slug}", exc_info=True)
            raise

        summary.items = ordered
        summary.total = len(ordered)
        summary.finalize()

        logger.info(
            f"Crawled {summary.total} item(s) for {company_slug} from "
            f"{summary.total_pages} page(s) in {summary.duration_seconds:.1f}s"
        )
        return summary
