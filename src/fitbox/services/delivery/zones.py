"""Delivery zone lookup over a zone registry."""

from __future__ import annotations

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Optional, Sequence

from ...data.zones_repository import ZoneRegistry
from ...errors import ZoneNotFoundError
from ...models.domain import DeliveryZone
from .postal_codes import normalize_prefix

logger = logging.getLogger(__name__)


def _zone_sort_key(zone: DeliveryZone) -> tuple:
    # Numeric ids (integer primary keys) order numerically and ahead of text ids.
    if zone.id.isascii() and zone.id.isdigit():
        return (0, int(zone.id), "")
    return (1, 0, zone.id)


def find_zone_for_prefix(registry: ZoneRegistry, fsa: str) -> Optional[DeliveryZone]:
    """Active zone covering ``fsa``, or None when the area is not serviced.

    Overlapping coverage is a data problem; when it happens the zone with the
    lowest id wins so the answer stays deterministic.
    """
    matches = sorted(
        (zone for zone in registry.list_zones(active_only=True) if zone.is_active and zone.covers(fsa)),
        key=_zone_sort_key,
    )
    if not matches:
        return None
    if len(matches) > 1:
        logger.warning(
            f"FSA {fsa} is claimed by {len(matches)} active zones "
            f"({', '.join(zone.id for zone in matches)}); using {matches[0].id}"
        )
    return matches[0]


def get_zone(registry: ZoneRegistry, zone_id: str) -> DeliveryZone:
    for zone in registry.list_zones(active_only=False):
        if zone.id == zone_id:
            return zone
    raise ZoneNotFoundError(zone_id)


def list_zones_for_prefix(registry: ZoneRegistry, prefix: str | None = None) -> list[DeliveryZone]:
    """Active zones sorted by name, optionally only those covering ``prefix``."""
    fsa = normalize_prefix(prefix) if prefix else None
    zones = [
        zone
        for zone in registry.list_zones(active_only=True)
        if zone.is_active and (fsa is None or zone.covers(fsa))
    ]
    return sorted(zones, key=lambda zone: zone.name)


def find_overlapping_prefixes(zones: Sequence[DeliveryZone]) -> dict[str, list[str]]:
    """Map of FSA -> zone ids for every FSA claimed by more than one active zone."""
    claims: dict[str, list[str]] = defaultdict(list)
    for zone in sorted(zones, key=_zone_sort_key):
        if not zone.is_active:
            continue
        for fsa in dict.fromkeys(zone.postal_code_prefixes):
            claims[fsa].append(zone.id)
    return {fsa: ids for fsa, ids in sorted(claims.items()) if len(ids) > 1}


def zone_statistics(zones: Sequence[DeliveryZone]) -> dict:
    active = [zone for zone in zones if zone.is_active]
    average_fee = (
        sum((zone.delivery_fee for zone in active), Decimal("0")) / len(active) if active else Decimal("0")
    )
    return {
        "total": len(zones),
        "active": len(active),
        "total_postal_codes": sum(len(zone.postal_code_prefixes) for zone in zones),
        "average_delivery_fee": average_fee.quantize(Decimal("0.01")),
    }
