"""Infer how many listing pages a company has."""

import logging
import re

from bs4 import BeautifulSoup

from .config import CrawlerConfig, SelectorConfig

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"[+-]?[0-9]+")


def _parse_label(label: str) -> int | None:
    """Leading integer of a pagination label, or None for labels like "Next"."""
    match = _LEADING_INT.match(label.strip())
    return int(match.group()) if match else None


def parse_total_pages(html: str, selectors: SelectorConfig | None = None) -> int:
    """Largest numeric pagination label, never less than 1."""
    selectors = selectors or SelectorConfig()
    soup = BeautifulSoup(html, "html.parser")

    page_numbers = [
        number
        for number in (_parse_label(link.get_text()) for link in soup.select(selectors.pagination_link))
        if number is not None
    ]
    return max([*page_numbers, 1])


async def discover_total_pages(session, company_slug: str, config: CrawlerConfig) -> int:
    """Load the company's listing root and read its page count.

    Navigation faults are not caught here.
    """
    url = config.listing_url(company_slug)
    snapshot = await session.navigate(url)
    total_pages = parse_total_pages(snapshot.html, config.selectors)
    logger.info(f"Discovered {total_pages} page(s) for {company_slug}")
    return total_pages
