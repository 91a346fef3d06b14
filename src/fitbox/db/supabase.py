"""Supabase client for the delivery service."""

import logging
from functools import lru_cache

from supabase import Client, create_client

from ..config import settings


@lru_cache()
def get_supabase_client() -> Client | None:
    """Get cached Supabase client instance.

    Returns:
        Supabase Client instance if configured, None otherwise.
        Note: This does not test the connection - actual queries may fail with network errors.
    """
    if not settings.database_configured:
        logging.info("Supabase credentials not configured (missing URL or key)")
        return None

    try:
        return create_client(settings.supabase_url, settings.supabase_key)
    except Exception as e:
        logging.error(f"Failed to create Supabase client: {e}")
        return None


# Example queries against the tables this service reads:
#
# supabase.table('delivery_zones') \
#     .select('*') \
#     .eq('is_active', True) \
#     .order('id') \
#     .execute()
#
# supabase.table('orders') \
#     .select('id', count='exact') \
#     .eq('delivery_zone_id', 'zone-downtown') \
#     .eq('delivery_date', '2026-10-18') \
#     .neq('status', 'CANCELLED') \
#     .execute()
