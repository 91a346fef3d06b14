"""Postal code availability checks combining zone lookup and slot scheduling."""

from __future__ import annotations

import logging
from datetime import datetime, tzinfo
from typing import Optional

from ...data.orders_repository import OrderCounter
from ...data.zones_repository import ZoneRegistry
from ...errors import PostalCodeNotServiceableError
from ...models.domain import (
    AvailabilityResult,
    DeliveryDay,
    DeliverySlot,
    DeliveryZone,
    SlotAvailability,
    ValidationResult,
)
from .postal_codes import normalize_postal_code
from .schedule import build_slot, estimated_delivery_dates, is_past_cutoff, next_orderable_slot
from .zones import find_zone_for_prefix

logger = logging.getLogger(__name__)


def remaining_capacity(max_orders: int, current_orders: int) -> int:
    return max(0, max_orders - current_orders)


def _slots_remaining(
    zone: DeliveryZone,
    slot: DeliverySlot,
    order_counter: Optional[OrderCounter],
) -> Optional[int]:
    if zone.max_orders is None or order_counter is None or not zone.delivers_on(slot.day):
        return None
    return remaining_capacity(zone.max_orders, order_counter.count_orders(zone.id, slot.delivery_date))


def _slot_availability(
    zone: DeliveryZone,
    day: DeliveryDay,
    now: datetime,
    order_counter: Optional[OrderCounter],
    tz: tzinfo | None,
) -> SlotAvailability:
    slot = build_slot(day, now, tz)
    serviced = zone.delivers_on(day)
    past_cutoff = is_past_cutoff(slot.cutoff, now, tz)
    availability = SlotAvailability(
        slot=slot,
        is_serviced=serviced,
        is_past_cutoff=past_cutoff,
        slots_remaining=_slots_remaining(zone, slot, order_counter),
    )
    if serviced:
        availability.next_orderable_date = (
            slot.delivery_date if not past_cutoff else next_orderable_slot(day, now, tz).delivery_date
        )
    return availability


def check_availability(
    postal_code: str,
    now: datetime,
    *,
    registry: ZoneRegistry,
    order_counter: Optional[OrderCounter] = None,
    tz: tzinfo | None = None,
) -> AvailabilityResult:
    """Zone, fee and Sunday/Wednesday slot availability for ``postal_code``.

    Raises:
        InvalidPostalCodeError: the input is not a Canadian postal code.
        PostalCodeNotServiceableError: no active zone covers its FSA.
        StoreUnavailableError: the registry or order counter failed.
    """
    code = normalize_postal_code(postal_code)
    zone = find_zone_for_prefix(registry, code.fsa)
    if zone is None:
        logger.info(f"No active delivery zone for {code}")
        raise PostalCodeNotServiceableError(code.value)

    return AvailabilityResult(
        postal_code=code,
        zone=zone,
        sunday=_slot_availability(zone, DeliveryDay.SUNDAY, now, order_counter, tz),
        wednesday=_slot_availability(zone, DeliveryDay.WEDNESDAY, now, order_counter, tz),
    )


def validate_postal_code(
    postal_code: str,
    now: datetime,
    *,
    registry: ZoneRegistry,
    tz: tzinfo | None = None,
) -> ValidationResult:
    """Format check plus zone match; an unserviced code yields a result with no zone."""
    code = normalize_postal_code(postal_code)
    zone = find_zone_for_prefix(registry, code.fsa)
    if zone is None:
        return ValidationResult(postal_code=code)
    return ValidationResult(
        postal_code=code,
        zone=zone,
        estimated_delivery_dates=estimated_delivery_dates(now, tz=tz),
    )
