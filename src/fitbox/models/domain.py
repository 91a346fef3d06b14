"""Domain models for delivery zones, slots and availability answers."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class DeliveryDay(str, Enum):
    SUNDAY = "SUNDAY"
    WEDNESDAY = "WEDNESDAY"

    @property
    def weekday(self) -> int:
        """Python weekday number (Monday == 0)."""
        return _WEEKDAYS[self]


_WEEKDAYS = {DeliveryDay.SUNDAY: 6, DeliveryDay.WEDNESDAY: 2}


@dataclass(frozen=True, slots=True)
class PostalCode:
    """Canonical ``A1A 1A1`` Canadian postal code."""

    value: str

    @property
    def fsa(self) -> str:
        return self.value[:3]

    @property
    def compact(self) -> str:
        return self.value.replace(" ", "")

    def __str__(self) -> str:
        return self.value


@dataclass(slots=True)
class DeliveryZone:
    """Represents a serviced region and the FSAs it covers."""

    id: str
    name: str
    postal_code_prefixes: tuple[str, ...]
    delivery_fee: Decimal
    delivery_days: frozenset[DeliveryDay]
    is_active: bool = True
    max_orders: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def covers(self, fsa: str) -> bool:
        return fsa in self.postal_code_prefixes

    def delivers_on(self, day: DeliveryDay) -> bool:
        return day in self.delivery_days


@dataclass(frozen=True, slots=True)
class DeliverySlot:
    day: DeliveryDay
    delivery_date: date
    cutoff: datetime


@dataclass(slots=True)
class SlotAvailability:
    slot: DeliverySlot
    is_serviced: bool
    is_past_cutoff: bool
    slots_remaining: Optional[int] = None
    next_orderable_date: Optional[date] = None

    @property
    def is_available(self) -> bool:
        return self.is_serviced and not self.is_past_cutoff


@dataclass(slots=True)
class AvailabilityResult:
    """Full answer for a serviceable postal code."""

    postal_code: PostalCode
    zone: DeliveryZone
    sunday: SlotAvailability
    wednesday: SlotAvailability

    @property
    def delivery_fee(self) -> Decimal:
        return self.zone.delivery_fee

    def for_day(self, day: DeliveryDay) -> SlotAvailability:
        return self.sunday if day is DeliveryDay.SUNDAY else self.wednesday


@dataclass(slots=True)
class ValidationResult:
    """Lightweight serviceability answer; ``zone`` is None when not serviced."""

    postal_code: PostalCode
    zone: Optional[DeliveryZone] = None
    estimated_delivery_dates: dict[DeliveryDay, date] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return self.zone is not None
