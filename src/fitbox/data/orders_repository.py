"""Order counts per zone and delivery date, used for slot capacity."""

from __future__ import annotations

from datetime import date
from typing import Any, Optional, Protocol

from ..db.supabase import get_supabase_client
from ..errors import StoreUnavailableError

ORDERS_TABLE = "orders"


class OrderCounter(Protocol):
    def count_orders(self, zone_id: str, delivery_date: date) -> int:
        ...


class SupabaseOrderCounter:
    """Counts non-cancelled orders booked for a zone on a delivery date."""

    def __init__(self, client: Any) -> None:
        self.client = client

    def count_orders(self, zone_id: str, delivery_date: date) -> int:
        try:
            response = (
                self.client.table(ORDERS_TABLE)
                .select("id", count="exact")
                .eq("delivery_zone_id", zone_id)
                .eq("delivery_date", delivery_date.isoformat())
                .neq("status", "CANCELLED")
                .execute()
            )
        except Exception as exc:
            raise StoreUnavailableError(f"Order counter unavailable: {exc}") from exc
        if response.count is not None:
            return int(response.count)
        return len(response.data or [])


def get_order_counter() -> Optional[OrderCounter]:
    """Order counter backed by Supabase, or None when no database is configured."""
    client = get_supabase_client()
    if client is None:
        return None
    return SupabaseOrderCounter(client)
