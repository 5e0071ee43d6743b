"""Custom exceptions for the scraper module."""


class ScraperError(Exception):
    """Base exception for all scraper errors."""

    def __init__(self, message: str, url: str | None = None):
        self.url = url
        super().__init__(message)


class CrawlError(ScraperError):
    """Navigation or browser fault that aborts the crawl."""

    def __init__(self, message: str, url: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message, url)


class ConfigError(ScraperError):
    """Error in configuration."""

    pass


class PersistenceError(ScraperError):
    """A feedback item could not be written to the store."""

    def __init__(self, message: str, item_id: str | None = None):
        self.item_id = item_id
        super().__init__(message)


class CrawlCapacityError(ScraperError):
    """Too many crawls running or queued."""

    def __init__(self, active: int, waiting: int):
        self.active = active
        self.waiting = waiting
        super().__init__(
            f"Crawl capacity exhausted ({active} running, {waiting} waiting)"
        )
