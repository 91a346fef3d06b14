"""Route group exports."""

from . import delivery_zones, health

__all__ = ["delivery_zones", "health"]
