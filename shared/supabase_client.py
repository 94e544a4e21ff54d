"""
Supabase client singleton for query-builder database access.
"""

import os
import logging
from typing import Optional
from supabase import create_client, Client

logger = logging.getLogger(__name__)

# Singleton instance
_supabase_client: Optional[Client] = None


def get_supabase_url() -> str:
    """Get the Supabase URL from environment variables."""
    url = os.environ.get("SUPABASE_URL")
    if not url:
        raise ValueError("SUPABASE_URL environment variable not set")
    return url


def get_supabase_service_key() -> str:
    """Get the Supabase service key from environment variables."""
    key = os.environ.get("SUPABASE_SERVICE_KEY")
    if not key:
        raise ValueError("SUPABASE_SERVICE_KEY environment variable not set")
    return key


def get_supabase_client() -> Client:
    """
    Get the Supabase client singleton.
    Uses service role key for full database access.

    Returns:
        Supabase Client instance
    """
    global _supabase_client

    if _supabase_client is None:
        url = get_supabase_url()
        key = get_supabase_service_key()
        _supabase_client = create_client(url, key)
        logger.info("Supabase client initialized")

    return _supabase_client


def set_supabase_client(client: Optional[Client]) -> None:
    """Replace the singleton (used by tests and local tooling)."""
    global _supabase_client
    _supabase_client = client
