"""Centralized configuration management for the feedback crawler.

This module provides type-safe configuration with environment variable support
and sensible defaults.

Usage:
    from feedback_crawler.config import settings

    base_url = settings.crawler.base_url
    max_sessions = settings.pool.max_sessions
    origins = settings.api.cors_origins

Environment Variables:
    See .env.example for full documentation of available settings.
"""

# Load .env BEFORE any settings are read (must be first)
from dotenv import load_dotenv

load_dotenv()

import logging  # noqa: E402
import os  # noqa: E402
from dataclasses import dataclass, field  # noqa: E402
from functools import lru_cache  # noqa: E402
from pathlib import Path  # noqa: E402
from typing import List, Optional  # noqa: E402

logger = logging.getLogger(__name__)

# Project root is 2 levels up from feedback_crawler/config/__init__.py
PROJECT_ROOT = Path(__file__).parent.parent.parent.resolve()


def _get_clean_env(key: str, default: Optional[str] = None) -> Optional[str]:
    """Get environment variable with validation and comment stripping.

    Handles common .env file issues:
    - Strips whitespace
    - Treats comment-only values as None
    - Rejects values carrying an inline '#' comment

    Args:
        key: Environment variable name
        default: Default value if not found or invalid

    Returns:
        Cleaned value or default
    """
    value = os.getenv(key)

    if not value:
        return default

    value = value.strip()

    if not value or value.startswith("#"):
        return default

    if "#" in value:
        logger.warning(
            f"Environment variable {key} contains '#' - likely malformed comment. "
            f"Using default value. Check your .env file."
        )
        return default

    return value


def _get_bool_env(key: str, default: str) -> bool:
    return os.getenv(key, default).strip().lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class CrawlerSettings:
    """Browser crawl configuration.

    Environment Variables:
        CRAWLER_BASE_URL: Root of the listing site (default: "https://congtytui1.com")
        CRAWLER_HEADLESS: Run Chromium headless (default: true)
        CRAWLER_WAIT_UNTIL: Navigation-complete signal (default: "networkidle")
        CRAWLER_PAGE_TIMEOUT_MS: Navigation timeout in milliseconds (default: 60000)
        CRAWLER_USER_AGENT: Custom user agent (optional)
        CRAWLER_CONFIG_FILE: YAML file overriding selectors and browser options (optional)
    """

    base_url: str = field(
        default_factory=lambda: os.getenv("CRAWLER_BASE_URL", "https://congtytui1.com")
    )
    headless: bool = field(default_factory=lambda: _get_bool_env("CRAWLER_HEADLESS", "true"))
    wait_until: str = field(default_factory=lambda: os.getenv("CRAWLER_WAIT_UNTIL", "networkidle"))
    page_timeout_ms: int = field(
        default_factory=lambda: int(os.getenv("CRAWLER_PAGE_TIMEOUT_MS", "60000"))
    )
    user_agent: Optional[str] = field(default_factory=lambda: _get_clean_env("CRAWLER_USER_AGENT"))
    config_file: Optional[str] = field(
        default_factory=lambda: _get_clean_env("CRAWLER_CONFIG_FILE")
    )


@dataclass(frozen=True)
class PoolConfig:
    """Admission control for concurrent crawls.

    Each crawl launches its own Chromium instance, so the number running at
    once is bounded. Requests beyond the waiting room are rejected.

    Environment Variables:
        CRAWL_MAX_SESSIONS: Crawls allowed to run at once (default: 2)
        CRAWL_MAX_WAITING: Crawls allowed to queue for a slot (default: 8)
        CRAWL_PER_SLUG_LOCK: Serialize crawls of the same company (default: false)
    """

    max_sessions: int = field(default_factory=lambda: int(os.getenv("CRAWL_MAX_SESSIONS", "2")))
    max_waiting: int = field(default_factory=lambda: int(os.getenv("CRAWL_MAX_WAITING", "8")))
    per_slug_lock: bool = field(
        default_factory=lambda: _get_bool_env("CRAWL_PER_SLUG_LOCK", "false")
    )


@dataclass(frozen=True)
class SupabaseConfig:
    """Supabase storage configuration.

    Environment Variables:
        SUPABASE_URL: Project URL (required for persistence)
        SUPABASE_SERVICE_KEY: Service role key (required for persistence)
        FEEDBACK_TABLE: Table holding feedback items (default: "feedback_items")
        FEEDBACK_UPSERT_FUNCTION: Postgres function performing the upsert
            (default: "upsert_feedback_item")
    """

    url: Optional[str] = field(default_factory=lambda: _get_clean_env("SUPABASE_URL"))
    service_key: Optional[str] = field(
        default_factory=lambda: _get_clean_env("SUPABASE_SERVICE_KEY")
    )
    table: str = field(default_factory=lambda: os.getenv("FEEDBACK_TABLE", "feedback_items"))
    upsert_function: str = field(
        default_factory=lambda: os.getenv("FEEDBACK_UPSERT_FUNCTION", "upsert_feedback_item")
    )


@dataclass(frozen=True)
class APIConfig:
    """API server configuration.

    Environment Variables:
        API_HOST: Server host (default: "0.0.0.0")
        API_PORT: Server port (default: 9999)
        SLOW_REQUEST_THRESHOLD_MS: Slow request logging threshold (default: 30000)
        CORS_ORIGINS: Comma-separated allowed origins
        STATIC_DIR: Directory of static assets (default: services/api/public)
    """

    host: str = field(default_factory=lambda: os.getenv("API_HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("API_PORT", "9999")))
    # Crawls take tens of seconds; only flag the outliers
    slow_request_threshold_ms: float = field(
        default_factory=lambda: float(os.getenv("SLOW_REQUEST_THRESHOLD_MS", "30000"))
    )
    cors_origins: List[str] = field(
        default_factory=lambda: os.getenv(
            "CORS_ORIGINS",
            "http://localhost:3000,http://localhost:9999,http://127.0.0.1:9999",
        ).split(",")
    )
    static_dir: Path = field(
        default_factory=lambda: Path(
            os.getenv("STATIC_DIR", str(PROJECT_ROOT / "services" / "api" / "public"))
        )
    )


@dataclass(frozen=True)
class Settings:
    """Main application settings aggregating all domain configs.

    Usage:
        from feedback_crawler.config import settings

        crawler_config = CrawlerConfig.from_settings(settings.crawler)
        pool = CrawlSessionPool.from_config(settings.pool)
    """

    crawler: CrawlerSettings = field(default_factory=CrawlerSettings)
    pool: PoolConfig = field(default_factory=PoolConfig)
    supabase: SupabaseConfig = field(default_factory=SupabaseConfig)
    api: APIConfig = field(default_factory=APIConfig)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings singleton.

    Settings are loaded once and cached for the lifetime of the application.
    To reload settings, clear the cache: get_settings.cache_clear()
    """
    return Settings()


# Convenience export - import as: from feedback_crawler.config import settings
settings = get_settings()

__all__ = [
    "Settings",
    "CrawlerSettings",
    "PoolConfig",
    "SupabaseConfig",
    "APIConfig",
    "get_settings",
    "settings",
    "PROJECT_ROOT",
]
