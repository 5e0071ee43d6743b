"""
Feedback persistence module.

Upserts crawled feedback items into Supabase, one at a time and in the order
given.
"""

import logging
from typing import Sequence

from ..scraper.errors import PersistenceError
from ..scraper.models import FeedbackItem
from ..utils.supabase_client import SupabaseRestClient

logger = logging.getLogger(__name__)


class FeedbackPersistence:
    """
    Idempotent writer for feedback items.

    Handles:
    - Insert of unseen items with their company slug as partition key
    - In-place update of text, type and source id for known items
    - Sequential writes, aborting on the first failure
    """

    def __init__(self, client: SupabaseRestClient):
        """
        Initialize persistence handler.

        Args:
            client: Initialized SupabaseRestClient owned by the caller
        """
        self.client = client

    async def save_items(self, items: Sequence[FeedbackItem], company_slug: str) -> int:
        """
        Upsert every item under ``company_slug``.

        Args:
            items: Items in the order they must be written
            company_slug: Company partition key, used on insert only

        Returns:
            Number of items written

        Raises:
            PersistenceError: A write failed; later items were not written
        """
        written = 0
        for item in items:
            try:
                await self.client.upsert_feedback_item(item.to_record(company_slug))
            except Exception as e:
                logger.error(
                    f"Aborting save for {company_slug} after {written}/{len(items)} item(s)"
                )
                raise PersistenceError(
                    f"Failed to save feedback item {item.id}: {e}", item_id=item.id
                ) from e
            written += 1

        logger.info(f"Saved {written} feedback item(s) for {company_slug}")
        return written
