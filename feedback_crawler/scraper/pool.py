"""Admission control for concurrent crawls.

Every crawl launches a browser, so the pool caps how many run at once and how
many may wait. Optionally, crawls of the same company run one at a time.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from feedback_crawler.config import PoolConfig

from .errors import CrawlCapacityError

logger = logging.getLogger(__name__)


class CrawlSessionPool:
    """Bounded slots for browser crawls, with a bounded waiting room."""

    def __init__(self, max_sessions: int = 2, max_waiting: int = 8, per_slug_lock: bool = False):
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        if max_waiting < 0:
            raise ValueError("max_waiting cannot be negative")

        self.max_sessions = max_sessions
        self.max_waiting = max_waiting
        self.per_slug_lock = per_slug_lock

        self._semaphore = asyncio.Semaphore(max_sessions)
        self._active = 0
        self._waiting = 0
        # slug -> (lock, number of holders and waiters)
        self._slug_locks: dict[str, tuple[asyncio.Lock, int]] = {}

    @classmethod
    def from_config(cls, config: PoolConfig) -> "CrawlSessionPool":
        return cls(
            max_sessions=config.max_sessions,
            max_waiting=config.max_waiting,
            per_slug_lock=config.per_slug_lock,
        )

    @property
    def active(self) -> int:
        return self._active

    @property
    def waiting(self) -> int:
        return self._waiting

    def stats(self) -> dict[str, int | bool]:
        return {
            "active": self._active,
            "waiting": self._waiting,
            "max_sessions": self.max_sessions,
            "max_waiting": self.max_waiting,
            "per_slug_lock": self.per_slug_lock,
        }

    def _must_wait(self, company_slug: str) -> bool:
        if self._semaphore.locked():
            return True
        return self.per_slug_lock and company_slug in self._slug_locks

    @asynccontextmanager
    async def acquire(self, company_slug: str) -> AsyncIterator[None]:
        """Hold a crawl slot for the duration of the block.

        With per-slug locking, a crawl queued behind another crawl of the same
        company counts as waiting and takes no slot until the lock is free.

        Raises:
            CrawlCapacityError: The crawl would have to wait and the waiting
                room is full.
        """
        if self._must_wait(company_slug) and self._waiting >= self.max_waiting:
            logger.warning(f"Rejecting crawl for {company_slug}: pool at capacity")
            raise CrawlCapacityError(self._active, self._waiting)

        self._waiting += 1
        waiting = True
        try:
            async with self._slug_guard(company_slug):
                await self._semaphore.acquire()
                self._waiting -= 1
                waiting = False

                self._active += 1
                try:
                    yield
                finally:
                    self._active -= 1
                    self._semaphore.release()
        finally:
            if waiting:
                self._waiting -= 1

    @asynccontextmanager
    async def _slug_guard(self, company_slug: str) -> AsyncIterator[None]:
        if not self.per_slug_lock:
            yield
            return

        lock, users = self._slug_locks.get(company_slug, (asyncio.Lock(), 0))
        self._slug_locks[company_slug] = (lock, users + 1)
        try:
            async with lock:
                yield
        finally:
            lock, users = self._slug_locks[company_slug]
            if users <= 1:
                del self._slug_locks[company_slug]
            else:
                self._slug_locks[company_slug] = (lock, users - 1)
