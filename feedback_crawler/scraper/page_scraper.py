"""Scrape the feedback items of one listing page."""

import logging

from .config import CrawlerConfig
from .extraction import extract_feedback_items
from .models import FeedbackItem
from .validity import check_snapshot

logger = logging.getLogger(__name__)


async def scrape_page(
    session, page_index: int, company_slug: str, config: CrawlerConfig
) -> list[FeedbackItem]:
    """Navigate to page ``page_index`` (1-based) and extract its items.

    An unusable page (bad status, empty document, 404-like title) yields an
    empty list. Navigation faults propagate.
    """
    url = config.page_url(company_slug, page_index)
    snapshot = await session.navigate(url)

    validity = check_snapshot(snapshot)
    if not validity.valid:
        logger.warning(
            f"Skipping {url}: {validity.reason.value} "
            f"(status={snapshot.status_code}, title={snapshot.title!r})"
        )
        return []

    items = extract_feedback_items(snapshot.html, config.selectors)
    logger.debug(f"Extracted {len(items)} item(s) from {url}")
    return items
