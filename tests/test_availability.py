from datetime import date, datetime, timedelta
from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest

from src.fitbox.data.zones_repository import InMemoryZoneRegistry
from src.fitbox.errors import (
    InvalidPostalCodeError,
    PostalCodeNotServiceableError,
    StoreUnavailableError,
)
from src.fitbox.models.domain import DeliveryDay, DeliveryZone
from src.fitbox.services.delivery.availability import (
    check_availability,
    remaining_capacity,
    validate_postal_code,
)

VANCOUVER = ZoneInfo("America/Vancouver")
FRIDAY_NOON = datetime(2026, 10, 16, 12, 0, tzinfo=VANCOUVER)


def _downtown(days=(DeliveryDay.SUNDAY, DeliveryDay.WEDNESDAY), max_orders=50) -> DeliveryZone:
    return DeliveryZone(
        id="zone-downtown",
        name="Downtown Vancouver",
        postal_code_prefixes=("V6B",),
        delivery_fee=Decimal("5.99"),
        delivery_days=frozenset(days),
        is_active=True,
        max_orders=max_orders,
    )


class FakeOrderCounter:
    def __init__(self, counts: dict[date, int]):
        self.counts = counts
        self.calls: list[tuple[str, date]] = []

    def count_orders(self, zone_id: str, delivery_date: date) -> int:
        self.calls.append((zone_id, delivery_date))
        return self.counts.get(delivery_date, 0)


class BrokenRegistry:
    def list_zones(self, *, active_only: bool = True):
        raise StoreUnavailableError("connection refused")


def test_check_availability_end_to_end():
    registry = InMemoryZoneRegistry([_downtown()])
    counter = FakeOrderCounter({date(2026, 10, 21): 12})

    result = check_availability("v6b1a1", FRIDAY_NOON, registry=registry, order_counter=counter, tz=VANCOUVER)

    assert result.postal_code.value == "V6B 1A1"
    assert result.zone.id == "zone-downtown"
    assert result.delivery_fee == Decimal("5.99")

    for availability in (result.sunday, result.wednesday):
        days_ahead = (availability.slot.delivery_date - FRIDAY_NOON.date()).days
        assert 1 <= days_ahead <= 7
        assert availability.slot.cutoff.hour == 18

    assert result.sunday.slot.delivery_date == date(2026, 10, 18)
    assert result.sunday.slot.cutoff == datetime(2026, 10, 13, 18, 0, tzinfo=VANCOUVER)
    assert result.sunday.is_past_cutoff
    assert not result.sunday.is_available
    assert result.sunday.next_orderable_date == date(2026, 10, 25)

    assert result.wednesday.slot.delivery_date == date(2026, 10, 21)
    assert result.wednesday.slot.cutoff == datetime(2026, 10, 17, 18, 0, tzinfo=VANCOUVER)
    assert result.wednesday.is_available
    assert result.wednesday.next_orderable_date == date(2026, 10, 21)
    assert result.wednesday.slots_remaining == 38
    assert result.sunday.slots_remaining == 50

    assert counter.calls == [("zone-downtown", date(2026, 10, 18)), ("zone-downtown", date(2026, 10, 21))]


def test_check_availability_wednesday_evening_rolls_a_week():
    registry = InMemoryZoneRegistry([_downtown()])
    now = datetime(2026, 10, 14, 19, 0, tzinfo=VANCOUVER)

    result = check_availability("V6B 1A1", now, registry=registry, tz=VANCOUVER)

    assert result.wednesday.slot.delivery_date == now.date() + timedelta(days=7)
    assert not result.wednesday.is_past_cutoff
    assert result.wednesday.is_available


def test_check_availability_day_not_serviced_by_zone():
    registry = InMemoryZoneRegistry([_downtown(days=(DeliveryDay.WEDNESDAY,))])
    counter = FakeOrderCounter({date(2026, 10, 14): 12})

    result = check_availability(
        "V6B 1A1",
        datetime(2026, 10, 12, 9, 0, tzinfo=VANCOUVER),
        registry=registry,
        order_counter=counter,
        tz=VANCOUVER,
    )

    assert not result.sunday.is_past_cutoff
    assert not result.sunday.is_serviced
    assert not result.sunday.is_available
    assert result.sunday.next_orderable_date is None
    assert result.sunday.slots_remaining is None
    assert counter.calls == [("zone-downtown", date(2026, 10, 14))]
    assert result.wednesday.slots_remaining == 38
    # Saturday's cutoff for Wednesday the 14th has already gone by.
    assert result.wednesday.slot.delivery_date == date(2026, 10, 14)
    assert result.wednesday.is_past_cutoff
    assert not result.wednesday.is_available
    assert result.wednesday.next_orderable_date == date(2026, 10, 21)


def test_check_availability_without_counter_reports_unknown_capacity():
    registry = InMemoryZoneRegistry([_downtown()])
    result = check_availability("V6B 1A1", FRIDAY_NOON, registry=registry, tz=VANCOUVER)
    assert result.sunday.slots_remaining is None
    assert result.wednesday.slots_remaining is None


def test_check_availability_without_zone_capacity_reports_unknown():
    registry = InMemoryZoneRegistry([_downtown(max_orders=None)])
    counter = FakeOrderCounter({})
    result = check_availability("V6B 1A1", FRIDAY_NOON, registry=registry, order_counter=counter, tz=VANCOUVER)
    assert result.wednesday.slots_remaining is None
    assert counter.calls == []


def test_full_slot_has_zero_capacity():
    registry = InMemoryZoneRegistry([_downtown(max_orders=50)])
    counter = FakeOrderCounter({date(2026, 10, 21): 50, date(2026, 10, 18): 61})

    result = check_availability("V6B 1A1", FRIDAY_NOON, registry=registry, order_counter=counter, tz=VANCOUVER)

    assert result.wednesday.slots_remaining == 0
    assert result.sunday.slots_remaining == 0


def test_remaining_capacity_never_negative():
    assert remaining_capacity(50, 50) == 0
    assert remaining_capacity(50, 75) == 0
    assert remaining_capacity(50, 10) == 40


def test_valid_format_but_not_serviceable():
    registry = InMemoryZoneRegistry([_downtown()])
    with pytest.raises(PostalCodeNotServiceableError) as excinfo:
        check_availability("K1A 0A1", FRIDAY_NOON, registry=registry, tz=VANCOUVER)
    assert excinfo.value.postal_code == "K1A 0A1"


def test_malformed_postal_code_is_rejected_before_lookup():
    with pytest.raises(InvalidPostalCodeError):
        check_availability("12345", FRIDAY_NOON, registry=BrokenRegistry(), tz=VANCOUVER)


def test_store_failures_propagate():
    with pytest.raises(StoreUnavailableError):
        check_availability("V6B 1A1", FRIDAY_NOON, registry=BrokenRegistry(), tz=VANCOUVER)


def test_validate_postal_code_serviceable():
    registry = InMemoryZoneRegistry([_downtown()])

    result = validate_postal_code(" v6b 1a1 ", FRIDAY_NOON, registry=registry, tz=VANCOUVER)

    assert result.is_valid
    assert result.postal_code.value == "V6B 1A1"
    assert result.estimated_delivery_dates == {
        DeliveryDay.SUNDAY: date(2026, 10, 18),
        DeliveryDay.WEDNESDAY: date(2026, 10, 21),
    }


def test_validate_postal_code_not_serviceable_is_not_an_error():
    registry = InMemoryZoneRegistry([_downtown()])

    result = validate_postal_code("K1A0A1", FRIDAY_NOON, registry=registry, tz=VANCOUVER)

    assert not result.is_valid
    assert result.zone is None
    assert result.postal_code.value == "K1A 0A1"
    assert result.estimated_delivery_dates == {}
