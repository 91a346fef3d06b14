"""FastAPI dependencies shared by the route modules."""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Callable, Optional

from fastapi import HTTPException, Request, status

from ..config import settings
from ..data.orders_repository import OrderCounter, get_order_counter
from ..data.zones_repository import ZoneRegistry, get_zone_registry
from ..errors import RateLimitExceededError
from ..services.rate_limit import RateLimiter


def zone_registry() -> ZoneRegistry:
    return get_zone_registry()


def order_counter() -> Optional[OrderCounter]:
    return get_order_counter()


def current_time() -> datetime:
    return datetime.now(timezone.utc)


def client_identifier(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    return request.client.host if request.client else "unknown"


def rate_limit(scope: str, limit_setting: str) -> Callable[[Request], None]:
    """Dependency enforcing ``settings.<limit_setting>`` requests per window for ``scope``."""

    def dependency(request: Request) -> None:
        limiter = RateLimiter(
            request.app.state.rate_limit_store,
            limit=getattr(settings, limit_setting),
            window_seconds=settings.rate_limit_window_seconds,
            namespace=scope,
        )
        try:
            limiter.check(client_identifier(request))
        except RateLimitExceededError as exc:
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail=str(exc),
                headers={"Retry-After": str(math.ceil(exc.retry_after))},
            ) from exc

    return dependency
