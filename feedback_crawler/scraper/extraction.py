"""Extraction rules: rendered listing markup to feedback items.

Pure functions over a parsed document, no browser involved.
"""

from bs4 import BeautifulSoup, Tag

from .config import SelectorConfig
from .models import FeedbackItem, FeedbackType


def _classify(container_id: str, selectors: SelectorConfig) -> tuple[str, FeedbackType] | None:
    for prefix, feedback_type in selectors.id_prefixes.items():
        if container_id.startswith(prefix):
            return prefix, feedback_type
    return None


def extract_from_soup(soup: BeautifulSoup | Tag, selectors: SelectorConfig) -> list[FeedbackItem]:
    """Extract feedback items in document order.

    Containers without a content element, or whose content is blank, are
    skipped. Duplicate identifiers are all emitted; the store's upsert
    collapses them.
    """
    items = []

    for container in soup.select(selectors.container):
        container_id = container.get("id", "")
        match = _classify(container_id, selectors)
        if match is None:
            continue
        prefix, feedback_type = match

        content = container.select_one(selectors.content)
        if content is None:
            continue

        text = content.get_text().strip()
        if not text:
            continue

        items.append(
            FeedbackItem.build(
                type=feedback_type,
                source_id=container_id[len(prefix):],
                text=text,
                prefix=prefix,
            )
        )

    return items


def extract_feedback_items(html: str, selectors: SelectorConfig | None = None) -> list[FeedbackItem]:
    """Parse raw markup and extract its feedback items."""
    soup = BeautifulSoup(html, "html.parser")
    return extract_from_soup(soup, selectors or SelectorConfig())
