"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...config import settings
from ...data.zones_repository import ZoneRegistry
from ...errors import StoreUnavailableError
from ...services.delivery import find_overlapping_prefixes
from ..dependencies import zone_registry

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/zones", status_code=status.HTTP_200_OK)
def check_zone_registry(registry: ZoneRegistry = Depends(zone_registry)) -> dict:
    """Check that the zone registry answers and that no FSA is claimed twice."""
    source = "database" if settings.database_configured else "file"
    try:
        zones = registry.list_zones(active_only=False)
    except StoreUnavailableError as exc:
        return {
            "source": source,
            "connected": False,
            "error": str(exc),
            "message": f"Delivery zone registry error: {exc}",
        }

    overlaps = find_overlapping_prefixes(zones)
    return {
        "source": source,
        "connected": True,
        "zones_count": len(zones),
        "active_zones_count": sum(1 for zone in zones if zone.is_active),
        "overlapping_prefixes": overlaps,
        "message": (
            f"Found {len(overlaps)} postal prefix(es) claimed by more than one active zone."
            if overlaps
            else f"Registry reachable. Found {len(zones)} zones."
        ),
    }
