"""Delivery fee quotes."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from ...config import settings
from ...models.domain import DeliveryZone

INSULATED_BAG_MIN_ITEMS = 5
_CENTS = Decimal("0.01")


@dataclass(slots=True)
class FeeAdjustment:
    type: str
    amount: Decimal
    reason: str


@dataclass(slots=True)
class FeeQuote:
    base_fee: Decimal
    adjustments: list[FeeAdjustment] = field(default_factory=list)

    @property
    def total_fee(self) -> Decimal:
        total = self.base_fee + sum((item.amount for item in self.adjustments), Decimal("0"))
        return max(Decimal("0"), total).quantize(_CENTS)


def calculate_delivery_fee(
    zone: DeliveryZone,
    order_value: Decimal,
    item_count: int,
    free_delivery_threshold: Decimal | None = None,
) -> FeeQuote:
    """Quote the delivery fee for an order in ``zone``.

    Orders at or above the free-delivery threshold ship free. Five or more
    items come with an insulated bag at no charge.
    """
    if order_value < 0:
        raise ValueError("order_value must be >= 0")
    if item_count < 0:
        raise ValueError("item_count must be >= 0")

    threshold = settings.free_delivery_threshold if free_delivery_threshold is None else free_delivery_threshold
    quote = FeeQuote(base_fee=zone.delivery_fee)
    if order_value >= threshold:
        quote.adjustments.append(
            FeeAdjustment(type="discount", amount=-zone.delivery_fee, reason=f"Free delivery over ${threshold}")
        )
        return quote
    if item_count >= INSULATED_BAG_MIN_ITEMS:
        quote.adjustments.append(
            FeeAdjustment(
                type="service",
                amount=Decimal("0"),
                reason=f"Insulated bag included for {INSULATED_BAG_MIN_ITEMS}+ meals",
            )
        )
    return quote
