from __future__ import annotations

import pytest

from src.bulkpost.scheduling.constants import RateLimitTier
from src.bulkpost.scheduling.rate_limiter import GlobalRateLimiter, RateLimiterStatus
from tests.helpers.timing import FakeClock, RecordingSleep


def build_limiter(limit: int, clock: FakeClock, sleep: RecordingSleep) -> GlobalRateLimiter:
    return GlobalRateLimiter(limit, clock=clock, sleep=sleep)


def test_defaults_to_build_tier() -> None:
    limiter = GlobalRateLimiter()

    assert limiter.limit == RateLimitTier.BUILD == 120
    assert limiter.get_available_slots() == 120


@pytest.mark.asyncio
async def test_slots_within_limit_do_not_wait(clock: FakeClock, sleep: RecordingSleep) -> None:
    limiter = build_limiter(5, clock, sleep)

    for _ in range(3):
        await limiter.wait_for_slot()

    assert limiter.get_available_slots() == 2
    assert sleep.calls == []


@pytest.mark.asyncio
async def test_waits_until_oldest_request_leaves_window(
    clock: FakeClock, sleep: RecordingSleep
) -> None:
    limiter = build_limiter(2, clock, sleep)
    await limiter.wait_for_slot()
    await limiter.wait_for_slot()

    await limiter.wait_for_slot()

    assert sleep.calls == [pytest.approx(60.1)]
    assert limiter.get_available_slots() == 1


@pytest.mark.asyncio
async def test_slots_free_up_one_at_a_time(clock: FakeClock, sleep: RecordingSleep) -> None:
    limiter = build_limiter(2, clock, sleep)
    await limiter.wait_for_slot()
    clock.advance(10)
    await limiter.wait_for_slot()

    await limiter.wait_for_slot()

    assert sleep.calls == [pytest.approx(50.1)]
    assert limiter.get_available_slots() == 0


@pytest.mark.asyncio
async def test_available_slots_recover_after_window(
    clock: FakeClock, sleep: RecordingSleep
) -> None:
    limiter = build_limiter(3, clock, sleep)
    for _ in range(3):
        await limiter.wait_for_slot()
    assert limiter.get_available_slots() == 0

    clock.advance(60)

    assert limiter.get_available_slots() == 3


def test_set_limit_switches_tier(clock: FakeClock, sleep: RecordingSleep) -> None:
    limiter = build_limiter(RateLimitTier.FREE, clock, sleep)

    limiter.set_limit(RateLimitTier.ACCELERATE)

    assert limiter.limit == 600
    assert limiter.status() == RateLimiterStatus(available_slots=600, limit=600)


def test_set_limit_rejects_zero() -> None:
    limiter = GlobalRateLimiter()

    with pytest.raises(ValueError):
        limiter.set_limit(0)


@pytest.mark.asyncio
async def test_reset_forgets_requests(clock: FakeClock, sleep: RecordingSleep) -> None:
    limiter = build_limiter(2, clock, sleep)
    await limiter.wait_for_slot()

    limiter.reset()

    assert limiter.get_available_slots() == 2
