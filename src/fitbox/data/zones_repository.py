"""Delivery zone registry with a database-first approach, falling back to a JSON file."""

from __future__ import annotations

import functools
import json
import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Iterable, Optional, Protocol, Sequence

from ..config import settings
from ..db.supabase import get_supabase_client
from ..errors import InvalidPostalCodeError, StoreUnavailableError
from ..models.domain import DeliveryDay, DeliveryZone

logger = logging.getLogger(__name__)

ZONES_TABLE = "delivery_zones"


class ZoneRegistry(Protocol):
    """Read-only source of delivery zones."""

    def list_zones(self, *, active_only: bool = True) -> Sequence[DeliveryZone]:
        ...


def _first(row: dict, *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in row and row[key] is not None:
            return row[key]
    return default


def _coerce_decimal(value: Any) -> Decimal:
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ValueError(f"Unable to parse delivery fee from value '{value}'") from exc
    if amount < 0:
        raise ValueError(f"Delivery fee must be non-negative, got {amount}")
    return amount


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"true", "t", "1", "yes", "y"}
    return bool(value)


def _coerce_datetime(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def _coerce_prefixes(values: Iterable[str], zone_id: str) -> tuple[str, ...]:
    # Imported here to keep the data layer free of a service-level import cycle.
    from ..services.delivery.postal_codes import normalize_prefix

    prefixes: list[str] = []
    for value in values:
        try:
            prefix = normalize_prefix(str(value))
        except InvalidPostalCodeError:
            logger.warning(f"Skipping malformed postal prefix '{value}' on zone {zone_id}")
            continue
        if prefix not in prefixes:
            prefixes.append(prefix)
    return tuple(prefixes)


def zone_from_record(row: dict) -> DeliveryZone:
    """Build a DeliveryZone from a database row or JSON record (snake or camel case)."""
    zone_id = str(row["id"])
    max_orders = _first(row, "max_orders", "maxOrders")
    return DeliveryZone(
        id=zone_id,
        name=str(row["name"]).strip(),
        postal_code_prefixes=_coerce_prefixes(
            _first(row, "postal_code_list", "postalCodeList", "postal_code_prefixes", default=()),
            zone_id,
        ),
        delivery_fee=_coerce_decimal(_first(row, "delivery_fee", "deliveryFee", default="0")),
        delivery_days=frozenset(
            DeliveryDay(str(day).upper()) for day in _first(row, "delivery_days", "deliveryDays", default=())
        ),
        is_active=_coerce_bool(_first(row, "is_active", "isActive", default=True)),
        max_orders=int(max_orders) if max_orders is not None else None,
        created_at=_coerce_datetime(_first(row, "created_at", "createdAt")),
        updated_at=_coerce_datetime(_first(row, "updated_at", "updatedAt")),
    )


def _zones_from_records(rows: Iterable[dict]) -> tuple[DeliveryZone, ...]:
    zones: list[DeliveryZone] = []
    for row in rows:
        try:
            zones.append(zone_from_record(row))
        except (KeyError, ValueError, TypeError) as e:
            # Skip invalid rows but continue processing
            logger.warning(f"Skipping invalid delivery zone row: {e}")
            continue
    return tuple(zones)


class FileZoneRegistry:
    """Zones loaded once from a JSON array on disk."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or settings.zones_file
        self._zones: tuple[DeliveryZone, ...] | None = None

    def _load(self) -> tuple[DeliveryZone, ...]:
        if not self.path.exists():
            raise StoreUnavailableError(f"Delivery zone file not found: {self.path}")
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreUnavailableError(f"Unable to read delivery zone file '{self.path}': {exc}") from exc
        records = payload.get("zones", []) if isinstance(payload, dict) else payload
        zones = _zones_from_records(records)
        logger.info(f"Loaded {len(zones)} delivery zones from {self.path}")
        return zones

    def list_zones(self, *, active_only: bool = True) -> Sequence[DeliveryZone]:
        if self._zones is None:
            self._zones = self._load()
        if active_only:
            return tuple(zone for zone in self._zones if zone.is_active)
        return self._zones


class SupabaseZoneRegistry:
    """Zones read from the ``delivery_zones`` table on every call."""

    def __init__(self, client: Any) -> None:
        self.client = client

    def list_zones(self, *, active_only: bool = True) -> Sequence[DeliveryZone]:
        try:
            query = self.client.table(ZONES_TABLE).select("*")
            if active_only:
                query = query.eq("is_active", True)
            response = query.order("id").execute()
        except Exception as exc:
            raise StoreUnavailableError(f"Delivery zone registry unavailable: {exc}") from exc
        return _zones_from_records(response.data or [])


class InMemoryZoneRegistry:
    """Registry over a fixed sequence of zones; used by tooling and tests."""

    def __init__(self, zones: Iterable[DeliveryZone] = ()) -> None:
        self._zones = tuple(zones)

    def list_zones(self, *, active_only: bool = True) -> Sequence[DeliveryZone]:
        if active_only:
            return tuple(zone for zone in self._zones if zone.is_active)
        return self._zones


@functools.lru_cache(maxsize=1)
def get_zone_registry() -> ZoneRegistry:
    """Supabase-backed registry when configured, otherwise the bundled zones file."""
    client = get_supabase_client()
    if client is not None:
        return SupabaseZoneRegistry(client)
    logger.info("Supabase not configured - reading delivery zones from file")
    return FileZoneRegistry()
