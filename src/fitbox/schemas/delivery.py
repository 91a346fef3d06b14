"""Pydantic request/response models for delivery zone endpoints."""

from __future__ import annotations

import datetime as dt
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

from ..models.domain import (
    AvailabilityResult,
    DeliveryDay,
    DeliveryZone,
    SlotAvailability,
    ValidationResult,
)
from ..services.delivery.fees import FeeQuote

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    success: bool = True
    data: T


class ZoneModel(BaseModel):
    id: str
    name: str
    postalCodeList: List[str]
    deliveryFee: float
    deliveryDays: List[str]
    isActive: bool
    maxOrders: Optional[int] = None
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None

    @classmethod
    def from_zone(cls, zone: DeliveryZone, *, admin: bool = False) -> "ZoneModel":
        model = cls(
            id=zone.id,
            name=zone.name,
            postalCodeList=list(zone.postal_code_prefixes),
            deliveryFee=float(zone.delivery_fee),
            deliveryDays=sorted(day.value for day in zone.delivery_days),
            isActive=zone.is_active,
        )
        if admin:
            model.maxOrders = zone.max_orders
            model.createdAt = zone.created_at.isoformat() if zone.created_at else None
            model.updatedAt = zone.updated_at.isoformat() if zone.updated_at else None
        return model


class ZoneRefModel(BaseModel):
    id: str
    name: str
    deliveryFee: float


class ValidateRequest(BaseModel):
    postalCode: str = Field(..., min_length=1, description="Postal code to validate, e.g. 'V6B 1A1'.")


class EstimatedDeliveryDates(BaseModel):
    sunday: Optional[dt.date] = None
    wednesday: Optional[dt.date] = None


class ValidationData(BaseModel):
    isValid: bool
    postalCode: str
    formattedPostalCode: Optional[str] = None
    deliveryZone: Optional[ZoneModel] = None
    estimatedDeliveryDates: Optional[EstimatedDeliveryDates] = None

    @classmethod
    def from_result(cls, result: ValidationResult) -> "ValidationData":
        if result.zone is None:
            return cls(isValid=False, postalCode=result.postal_code.value)
        dates = result.estimated_delivery_dates
        return cls(
            isValid=True,
            postalCode=result.postal_code.value,
            formattedPostalCode=result.postal_code.value,
            deliveryZone=ZoneModel.from_zone(result.zone),
            estimatedDeliveryDates=EstimatedDeliveryDates(
                sunday=dates.get(DeliveryDay.SUNDAY),
                wednesday=dates.get(DeliveryDay.WEDNESDAY),
            ),
        )


class SlotModel(BaseModel):
    date: dt.date
    isAvailable: bool
    isServiced: bool
    isPastCutoff: bool
    cutoffTime: str
    slotsRemaining: Optional[int] = None
    nextOrderableDate: Optional[dt.date] = None

    @classmethod
    def from_availability(cls, availability: SlotAvailability) -> "SlotModel":
        return cls(
            date=availability.slot.delivery_date,
            isAvailable=availability.is_available,
            isServiced=availability.is_serviced,
            isPastCutoff=availability.is_past_cutoff,
            cutoffTime=availability.slot.cutoff.isoformat(),
            slotsRemaining=availability.slots_remaining,
            nextOrderableDate=availability.next_orderable_date,
        )


class SlotsModel(BaseModel):
    sunday: SlotModel
    wednesday: SlotModel


class AvailabilityData(BaseModel):
    isValid: bool
    postalCode: str
    zone: Optional[ZoneRefModel] = None
    deliveryFee: Optional[float] = None
    availability: Optional[SlotsModel] = None

    @classmethod
    def from_result(cls, result: AvailabilityResult) -> "AvailabilityData":
        return cls(
            isValid=True,
            postalCode=result.postal_code.value,
            zone=ZoneRefModel(id=result.zone.id, name=result.zone.name, deliveryFee=float(result.delivery_fee)),
            deliveryFee=float(result.delivery_fee),
            availability=SlotsModel(
                sunday=SlotModel.from_availability(result.sunday),
                wednesday=SlotModel.from_availability(result.wednesday),
            ),
        )

    @classmethod
    def not_serviceable(cls, postal_code: str) -> "AvailabilityData":
        return cls(isValid=False, postalCode=postal_code)


class FeeAdjustmentModel(BaseModel):
    type: str
    amount: float
    reason: str


class FeeQuoteData(BaseModel):
    zoneId: str
    baseFee: float
    adjustments: List[FeeAdjustmentModel]
    totalFee: float

    @classmethod
    def from_quote(cls, zone_id: str, quote: FeeQuote) -> "FeeQuoteData":
        return cls(
            zoneId=zone_id,
            baseFee=float(quote.base_fee),
            adjustments=[
                FeeAdjustmentModel(type=item.type, amount=float(item.amount), reason=item.reason)
                for item in quote.adjustments
            ],
            totalFee=float(quote.total_fee),
        )


class ZoneStatsData(BaseModel):
    total: int
    active: int
    totalPostalCodes: int
    averageDeliveryFee: float
