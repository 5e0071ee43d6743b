#!/usr/bin/env python3
"""
CLI for crawling a company's feedback.

Usage:
    # Crawl and upsert into Supabase
    python scripts/crawl.py --company acme-corp

    # Crawl without writing anything
    python scripts/crawl.py --company acme-corp --dry-run

    # Print the items as JSON, with a custom selector config
    python scripts/crawl.py --company acme-corp --config site.yaml --json
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from feedback_crawler.config import settings  # noqa: E402
from feedback_crawler.persistence import FeedbackPersistence  # noqa: E402
from feedback_crawler.scraper import (  # noqa: E402
    CrawlerConfig,
    CrawlSummary,
    FeedbackCrawler,
    ScraperError,
    load_crawler_config,
)
from feedback_crawler.utils.supabase_client import SupabaseRestClient  # noqa: E402

logger = logging.getLogger("crawl")


async def run(config: CrawlerConfig, company: str, dry_run: bool) -> CrawlSummary:
    """Crawl one company, owning the storage client for the duration."""
    if dry_run:
        return await FeedbackCrawler(config).crawl_company(company)

    client = SupabaseRestClient()
    await client.initialize()
    try:
        crawler = FeedbackCrawler(config, persistence=FeedbackPersistence(client))
        return await crawler.crawl_company(company)
    finally:
        await client.close()


def print_summary(summary: CrawlSummary, dry_run: bool) -> None:
    print()
    print("=" * 50)
    print(f"Crawl completed: {summary.company}")
    print(f"  Pages: {summary.total_pages}")
    print(f"  Skipped pages: {', '.join(map(str, summary.skipped_pages)) or 'none'}")
    print(f"  Items: {summary.total}")
    print(f"  Saved: {'no (dry run)' if dry_run else 'yes'}")
    print(f"  Duration: {summary.duration_seconds:.1f}s")


def main():
    parser = argparse.ArgumentParser(
        description="Crawl comments and reviews for a company",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        "--company",
        "-c",
        required=True,
        help="Company slug as it appears in the listing URL",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a crawler YAML config file",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Crawl without writing to Supabase",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the crawled items as JSON",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        if args.config:
            config = load_crawler_config(args.config)
        else:
            config = CrawlerConfig.from_settings(settings.crawler)

        summary = asyncio.run(run(config, args.company, args.dry_run))
    except (ScraperError, ValueError) as e:
        logger.error(f"Crawl failed: {e}")
        sys.exit(1)

    if args.json:
        print(summary.model_dump_json(by_alias=True, indent=2))
    else:
        print_summary(summary, args.dry_run)


if __name__ == "__main__":
    main()
