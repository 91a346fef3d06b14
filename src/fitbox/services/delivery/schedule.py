"""Delivery slot and order cutoff calculations.

Deliveries run on Sundays and Wednesdays. Orders for a Sunday delivery close
the preceding Tuesday at the cutoff hour, orders for a Wednesday delivery
close the preceding Saturday. All arithmetic happens on local calendar dates
in the configured delivery timezone; ``now`` is the only external input.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, tzinfo
from functools import lru_cache
from typing import Sequence
from zoneinfo import ZoneInfo

from ...config import settings
from ...models.domain import DeliveryDay, DeliverySlot

CUTOFF_DAYS_BEFORE: dict[DeliveryDay, int] = {
    DeliveryDay.SUNDAY: 5,  # Tuesday
    DeliveryDay.WEDNESDAY: 4,  # Saturday
}


@lru_cache(maxsize=8)
def _zone(name: str) -> ZoneInfo:
    return ZoneInfo(name)


def delivery_tz() -> tzinfo:
    return _zone(settings.delivery_timezone)


def localize(now: datetime, tz: tzinfo | None = None) -> datetime:
    """Express ``now`` in the delivery timezone; naive values are taken as local."""
    tz = tz or delivery_tz()
    if now.tzinfo is None:
        return now.replace(tzinfo=tz)
    return now.astimezone(tz)


def next_occurrence(day: DeliveryDay, now: datetime, tz: tzinfo | None = None) -> date:
    """Next calendar date after today falling on ``day``.

    Same-day delivery is never offered: when today already is ``day`` the
    result is one full week ahead.
    """
    today = localize(now, tz).date()
    offset = (day.weekday - today.weekday()) % 7
    return today + timedelta(days=offset or 7)


def cutoff_for(
    delivery_date: date,
    day: DeliveryDay,
    tz: tzinfo | None = None,
    cutoff_hour: int | None = None,
) -> datetime:
    """Latest moment an order may be placed for ``delivery_date``."""
    tz = tz or delivery_tz()
    hour = settings.cutoff_hour if cutoff_hour is None else cutoff_hour
    cutoff_date = delivery_date - timedelta(days=CUTOFF_DAYS_BEFORE[day])
    return datetime.combine(cutoff_date, time(hour=hour), tzinfo=tz)


def is_past_cutoff(cutoff: datetime, now: datetime, tz: tzinfo | None = None) -> bool:
    return localize(now, tz) > cutoff


def build_slot(day: DeliveryDay, now: datetime, tz: tzinfo | None = None) -> DeliverySlot:
    delivery_date = next_occurrence(day, now, tz)
    return DeliverySlot(day=day, delivery_date=delivery_date, cutoff=cutoff_for(delivery_date, day, tz))


def upcoming_slots(
    day: DeliveryDay,
    now: datetime,
    count: int = 2,
    tz: tzinfo | None = None,
) -> list[DeliverySlot]:
    """The next ``count`` weekly occurrences of ``day``, earliest first."""
    if count < 1:
        raise ValueError("count must be >= 1")
    first = next_occurrence(day, now, tz)
    slots: list[DeliverySlot] = []
    for week in range(count):
        delivery_date = first + timedelta(weeks=week)
        slots.append(DeliverySlot(day=day, delivery_date=delivery_date, cutoff=cutoff_for(delivery_date, day, tz)))
    return slots


def next_orderable_slot(day: DeliveryDay, now: datetime, tz: tzinfo | None = None) -> DeliverySlot:
    """First upcoming ``day`` slot whose cutoff has not passed yet."""
    # Cutoffs are at most six days before delivery, so two weeks always suffices.
    for slot in upcoming_slots(day, now, count=2, tz=tz):
        if not is_past_cutoff(slot.cutoff, now, tz):
            return slot
    raise RuntimeError(f"No orderable {day.value} slot found")  # pragma: no cover


def estimated_delivery_dates(
    now: datetime,
    days: Sequence[DeliveryDay] = (DeliveryDay.SUNDAY, DeliveryDay.WEDNESDAY),
    tz: tzinfo | None = None,
) -> dict[DeliveryDay, date]:
    return {day: next_occurrence(day, now, tz) for day in days}
