"""
Supabase REST API client for feedback storage.

Uses the Supabase Python SDK (HTTPS) in async mode. The client is an explicit
handle: whoever creates it initializes it, passes it to the persistence layer
and closes it.

Features:
    - Idempotent upsert of feedback items through a Postgres function
    - Row counts for health checks
"""

import logging
from typing import Any, Dict, Optional

from supabase import AsyncClient, acreate_client

from feedback_crawler.config import SupabaseConfig, settings

logger = logging.getLogger(__name__)


class SupabaseRestClient:
    """
    REST API client for Supabase using the official async Python SDK.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        key: Optional[str] = None,
        config: Optional[SupabaseConfig] = None,
    ):
        """Validate credentials; the SDK client is created by :meth:`initialize`."""
        self.config = config or settings.supabase
        self.url = url or self.config.url
        self.key = key or self.config.service_key

        if not self.url:
            raise ValueError("SUPABASE_URL environment variable not set")
        if not self.key:
            raise ValueError("SUPABASE_SERVICE_KEY environment variable not set")

        self.client: Optional[AsyncClient] = None

    async def initialize(self):
        """Create the async SDK client."""
        if self.client is None:
            self.client = await acreate_client(self.url, self.key)
        logger.info("Supabase REST client ready")

    async def close(self):
        """Drop the SDK client."""
        self.client = None
        logger.info("Supabase REST client closed")

    def _require_client(self) -> AsyncClient:
        if self.client is None:
            raise RuntimeError("SupabaseRestClient.initialize() has not been called")
        return self.client

    async def upsert_feedback_item(self, record: Dict[str, Any]) -> None:
        """
        Insert a feedback item, or update text/type/source_id if the id exists.

        The company column is written on insert only (see sql/schema.sql).

        Args:
            record: Row with id, text, type, source_id and company_id
        """
        await self.execute_rpc(
            self.config.upsert_function,
            {f"p_{column}": value for column, value in record.items()},
        )
        logger.debug(f"Upserted feedback item {record['id']}")

    async def count_feedback_items(self, company_slug: Optional[str] = None) -> int:
        """Count stored feedback items, optionally for one company."""
        try:
            query = self._require_client().table(self.config.table).select("id", count="exact")
            if company_slug is not None:
                query = query.eq("company_id", company_slug)
            response = await query.execute()
            return response.count or 0
        except Exception as e:
            logger.error(f"Error counting feedback items: {e}")
            raise

    async def execute_rpc(self, function_name: str, params: Dict[str, Any]) -> Optional[Any]:
        """Execute a Postgres function and return its data."""
        try:
            response = await self._require_client().rpc(function_name, params).execute()
            return response.data
        except Exception as e:
            logger.error(f"Error executing RPC {function_name}: {e}")
            raise
