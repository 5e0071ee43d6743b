"""
Shared utilities for the feedback crawler.
"""

from .supabase_client import SupabaseRestClient

__all__ = [
    "SupabaseRestClient",
]
