"""
Company feedback crawler.

Crawls the paginated company listing of a public review site, extracts
comments and reviews, and upserts them into Supabase.
"""

from .__version__ import __version__

__all__ = ["__version__"]
