"""
Company Feedback Scraper Module

Crawls a company's paginated listing with Crawl4AI, extracts comments and
reviews from the rendered markup, and hands them to the persistence layer.
"""

from .config import CrawlerConfig, SelectorConfig, load_crawler_config
from .crawler import FeedbackCrawler
from .errors import (
    ConfigError,
    CrawlCapacityError,
    CrawlError,
    PersistenceError,
    ScraperError,
)
from .extraction import extract_feedback_items
from .models import (
    CrawlSummary,
    FeedbackItem,
    FeedbackType,
    PageRejection,
    PageSnapshot,
    PageValidity,
)
from .page_scraper import scrape_page
from .pagination import discover_total_pages, parse_total_pages
from .pool import CrawlSessionPool
from .session import BrowserSession
from .validity import check_page_validity

__all__ = [
    # Config
    "CrawlerConfig",
    "SelectorConfig",
    "load_crawler_config",
    # Models
    "FeedbackItem",
    "FeedbackType",
    "PageSnapshot",
    "PageRejection",
    "PageValidity",
    "CrawlSummary",
    # Pipeline
    "BrowserSession",
    "CrawlSessionPool",
    "FeedbackCrawler",
    "check_page_validity",
    "extract_feedback_items",
    "discover_total_pages",
    "parse_total_pages",
    "scrape_page",
    # Errors
    "ScraperError",
    "CrawlError",
    "ConfigError",
    "PersistenceError",
    "CrawlCapacityError",
]
