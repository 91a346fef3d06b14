"""API routes for delivery zone lookup, validation and availability."""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ...data.orders_repository import OrderCounter
from ...data.zones_repository import ZoneRegistry
from ...errors import (
    InvalidPostalCodeError,
    PostalCodeNotServiceableError,
    StoreUnavailableError,
    ZoneNotFoundError,
)
from ...schemas.delivery import (
    AvailabilityData,
    Envelope,
    FeeQuoteData,
    ValidateRequest,
    ValidationData,
    ZoneModel,
    ZoneStatsData,
)
from ...services.delivery import (
    calculate_delivery_fee,
    check_availability,
    get_zone,
    list_zones_for_prefix,
    validate_postal_code,
    zone_statistics,
)
from ..dependencies import current_time, order_counter, rate_limit, zone_registry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/delivery-zones", tags=["delivery-zones"])

LIST_CACHE_CONTROL = "public, max-age=1800, s-maxage=3600"
AVAILABILITY_CACHE_CONTROL = "public, max-age=300, s-maxage=600"
VALIDATE_CACHE_CONTROL = "public, max-age=3600, s-maxage=7200"


def _store_unavailable(exc: StoreUnavailableError) -> HTTPException:
    logger.error(f"Delivery zone store unavailable: {exc}")
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Delivery zone data is temporarily unavailable. Please try again.",
    )


@router.get(
    "",
    response_model=Envelope[List[ZoneModel]],
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(rate_limit("delivery-zones", "rate_limit_list"))],
)
def list_delivery_zones(
    response: Response,
    prefix: Optional[str] = Query(default=None, description="Only zones covering this FSA, e.g. V6B"),
    admin: bool = Query(default=False, description="Include capacity and audit fields"),
    registry: ZoneRegistry = Depends(zone_registry),
) -> Envelope[List[ZoneModel]]:
    try:
        zones = list_zones_for_prefix(registry, prefix)
    except InvalidPostalCodeError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except StoreUnavailableError as exc:
        raise _store_unavailable(exc) from exc

    response.headers["Cache-Control"] = LIST_CACHE_CONTROL
    return Envelope[List[ZoneModel]](data=[ZoneModel.from_zone(zone, admin=admin) for zone in zones])


@router.get(
    "/stats",
    response_model=Envelope[ZoneStatsData],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(rate_limit("delivery-zones", "rate_limit_list"))],
)
def get_zone_stats(registry: ZoneRegistry = Depends(zone_registry)) -> Envelope[ZoneStatsData]:
    try:
        stats = zone_statistics(registry.list_zones(active_only=False))
    except StoreUnavailableError as exc:
        raise _store_unavailable(exc) from exc
    return Envelope[ZoneStatsData](
        data=ZoneStatsData(
            total=stats["total"],
            active=stats["active"],
            totalPostalCodes=stats["total_postal_codes"],
            averageDeliveryFee=float(stats["average_delivery_fee"]),
        )
    )


@router.post(
    "/validate",
    response_model=Envelope[ValidationData],
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(rate_limit("delivery-validate", "rate_limit_validate"))],
)
def validate_delivery_zone(
    payload: ValidateRequest,
    response: Response,
    registry: ZoneRegistry = Depends(zone_registry),
    now: datetime = Depends(current_time),
) -> Envelope[ValidationData]:
    """Postal code validation, zone lookup and fee.

    An unserviced but well-formed postal code is a normal answer
    (``isValid: false``), not an error.
    """
    try:
        result = validate_postal_code(payload.postalCode, now, registry=registry)
    except InvalidPostalCodeError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except StoreUnavailableError as exc:
        raise _store_unavailable(exc) from exc

    response.headers["Cache-Control"] = VALIDATE_CACHE_CONTROL
    return Envelope[ValidationData](data=ValidationData.from_result(result))


@router.get(
    "/availability",
    response_model=Envelope[AvailabilityData],
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(rate_limit("delivery-availability", "rate_limit_availability"))],
)
def get_delivery_availability(
    response: Response,
    postal_code: Optional[str] = Query(default=None, alias="postalCode"),
    registry: ZoneRegistry = Depends(zone_registry),
    counter: Optional[OrderCounter] = Depends(order_counter),
    now: datetime = Depends(current_time),
) -> Envelope[AvailabilityData]:
    if not postal_code:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="postalCode parameter is required")

    try:
        result = check_availability(postal_code, now, registry=registry, order_counter=counter)
    except InvalidPostalCodeError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except PostalCodeNotServiceableError as exc:
        return Envelope[AvailabilityData](data=AvailabilityData.not_serviceable(exc.postal_code))
    except StoreUnavailableError as exc:
        raise _store_unavailable(exc) from exc

    response.headers["Cache-Control"] = AVAILABILITY_CACHE_CONTROL
    return Envelope[AvailabilityData](data=AvailabilityData.from_result(result))


@router.get(
    "/{zone_id}/fee",
    response_model=Envelope[FeeQuoteData],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(rate_limit("delivery-zones", "rate_limit_list"))],
)
def get_delivery_fee(
    zone_id: str,
    order_value: Decimal = Query(default=Decimal("0"), alias="orderValue", ge=0),
    item_count: int = Query(default=0, alias="itemCount", ge=0),
    registry: ZoneRegistry = Depends(zone_registry),
) -> Envelope[FeeQuoteData]:
    try:
        zone = get_zone(registry, zone_id)
    except ZoneNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except StoreUnavailableError as exc:
        raise _store_unavailable(exc) from exc

    quote = calculate_delivery_fee(zone, order_value, item_count)
    return Envelope[FeeQuoteData](data=FeeQuoteData.from_quote(zone.id, quote))
