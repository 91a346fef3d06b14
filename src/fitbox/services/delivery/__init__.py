"""Delivery zone, schedule and availability services."""

from .availability import check_availability, remaining_capacity, validate_postal_code
from .fees import calculate_delivery_fee
from .postal_codes import normalize_postal_code, normalize_prefix, postal_code_prefix
from .schedule import build_slot, cutoff_for, is_past_cutoff, next_occurrence
from .zones import (
    find_overlapping_prefixes,
    find_zone_for_prefix,
    get_zone,
    list_zones_for_prefix,
    zone_statistics,
)

__all__ = [
    "check_availability",
    "validate_postal_code",
    "remaining_capacity",
    "calculate_delivery_fee",
    "normalize_postal_code",
    "normalize_prefix",
    "postal_code_prefix",
    "next_occurrence",
    "cutoff_for",
    "is_past_cutoff",
    "build_slot",
    "find_zone_for_prefix",
    "find_overlapping_prefixes",
    "get_zone",
    "list_zones_for_prefix",
    "zone_statistics",
]
