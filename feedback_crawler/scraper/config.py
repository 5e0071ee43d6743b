"""Configuration models for the scraper module."""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from feedback_crawler.config import CrawlerSettings

from .errors import ConfigError
from .models import FeedbackType


class SelectorConfig(BaseModel):
    """CSS selectors describing the listing markup."""

    pagination_link: str = ".pagination .page-link"
    container_tag: str = "div"
    # Checked in order; first matching prefix decides the type
    id_prefixes: dict[str, FeedbackType] = Field(
        default_factory=lambda: {
            "comment-replies-": FeedbackType.COMMENT,
            "review-": FeedbackType.REVIEW,
        }
    )
    content: str = ".cmt-content, .readmore-content"

    @property
    def container(self) -> str:
        """Selector matching every feedback container."""
        return ", ".join(
            f'{self.container_tag}[id^="{prefix}"]' for prefix in self.id_prefixes
        )


class CrawlerConfig(BaseModel):
    """Crawler configuration for one target site."""

    base_url: str = "https://congtytui1.com"

    # Browser settings
    headless: bool = True
    user_agent: str | None = None
    extra_args: list[str] = Field(
        default_factory=lambda: ["--no-sandbox", "--disable-setuid-sandbox"]
    )

    # Navigation
    wait_until: str = "networkidle"
    page_timeout_ms: int = 60000

    selectors: SelectorConfig = Field(default_factory=SelectorConfig)

    def listing_url(self, company_slug: str) -> str:
        return f"{self.base_url.rstrip('/')}/companies/{company_slug}"

    def page_url(self, company_slug: str, page_index: int) -> str:
        return f"{self.listing_url(company_slug)}?page={page_index}"

    @classmethod
    def from_settings(cls, crawler_settings: CrawlerSettings) -> "CrawlerConfig":
        """Build the config from environment settings.

        Environment values are applied on top of the YAML file named by
        ``CRAWLER_CONFIG_FILE``, when one is set.
        """
        data: dict = {}
        if crawler_settings.config_file:
            data = load_crawler_config(crawler_settings.config_file).model_dump()

        data.update(
            base_url=crawler_settings.base_url,
            headless=crawler_settings.headless,
            wait_until=crawler_settings.wait_until,
            page_timeout_ms=crawler_settings.page_timeout_ms,
        )
        if crawler_settings.user_agent:
            data["user_agent"] = crawler_settings.user_agent

        return cls(**data)


def load_crawler_config(config_path: Path | str) -> CrawlerConfig:
    """Load crawler configuration from YAML file."""
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ConfigError(f"Config file must contain a mapping: {config_path}")

    try:
        return CrawlerConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid crawler config in {config_path}: {e}") from e
