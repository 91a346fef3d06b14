import pytest

from src.fitbox.errors import RateLimitExceededError
from src.fitbox.services.rate_limit import MemoryRateLimitStore, RateLimiter


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def test_limit_enforced_within_window():
    clock = FakeClock()
    limiter = RateLimiter(MemoryRateLimitStore(clock=clock), limit=3, window_seconds=60)

    assert [limiter.check("1.2.3.4") for _ in range(3)] == [2, 1, 0]
    with pytest.raises(RateLimitExceededError) as excinfo:
        limiter.check("1.2.3.4")
    assert excinfo.value.retry_after == pytest.approx(60)


def test_window_resets_after_ttl():
    clock = FakeClock()
    limiter = RateLimiter(MemoryRateLimitStore(clock=clock), limit=1, window_seconds=60)

    limiter.check("client")
    clock.advance(30)
    with pytest.raises(RateLimitExceededError) as excinfo:
        limiter.check("client")
    assert excinfo.value.retry_after == pytest.approx(30)

    clock.advance(30)
    assert limiter.check("client") == 0


def test_keys_and_namespaces_are_independent():
    store = MemoryRateLimitStore(clock=FakeClock())
    validate = RateLimiter(store, limit=1, namespace="validate")
    availability = RateLimiter(store, limit=1, namespace="availability")

    validate.check("a")
    validate.check("b")
    availability.check("a")
    with pytest.raises(RateLimitExceededError):
        validate.check("a")


def test_expired_windows_are_swept():
    clock = FakeClock()
    store = MemoryRateLimitStore(clock=clock, sweep_every=2)

    store.increment("old", 10)
    clock.advance(11)
    store.increment("new", 10)

    assert len(store) == 1


def test_limit_must_be_positive():
    with pytest.raises(ValueError):
        RateLimiter(MemoryRateLimitStore(), limit=0)
