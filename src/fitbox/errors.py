"""Exceptions raised by the delivery availability services.

Each one subclasses the builtin the API layer already maps to an HTTP status,
so callers that only know about ``ValueError``/``LookupError``/``ConnectionError``
still behave correctly.
"""

from __future__ import annotations


class InvalidPostalCodeError(ValueError):
    """Input does not match the Canadian postal code pattern."""

    def __init__(self, raw: str, message: str | None = None) -> None:
        self.raw = raw
        super().__init__(message or "Invalid Canadian postal code format. Please use format: A1A 1A1")


class PostalCodeNotServiceableError(LookupError):
    """Well-formed postal code that no active delivery zone covers."""

    def __init__(self, postal_code: str) -> None:
        self.postal_code = postal_code
        super().__init__(f"Postal code {postal_code} is not serviceable")


class ZoneNotFoundError(LookupError):
    def __init__(self, zone_id: str) -> None:
        self.zone_id = zone_id
        super().__init__(f"Delivery zone '{zone_id}' not found")


class StoreUnavailableError(ConnectionError):
    """The zone registry or order counter did not answer."""


class RateLimitExceededError(RuntimeError):
    def __init__(self, key: str, retry_after: float) -> None:
        self.key = key
        self.retry_after = retry_after
        super().__init__("Rate limit exceeded")
