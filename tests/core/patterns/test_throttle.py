"""Tests for the sliding window throttle and its cleaner."""

import asyncio

import pytest

from pricehist.core.exceptions import ConfigurationError
from pricehist.core.patterns import Throttle, ThrottleCleaner


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


@pytest.mark.parametrize("kwargs", [{"max_events_per_window": 0}, {"max_events_per_window": 1, "window": 0}])
def test_invalid_throttle(kwargs):
    with pytest.raises(ConfigurationError):
        Throttle(**kwargs)


def test_invalid_cleaner_interval():
    with pytest.raises(ConfigurationError):
        ThrottleCleaner(Throttle(1), interval=0)


@pytest.mark.asyncio
async def test_admits_up_to_limit_then_waits():
    clock = FakeClock()
    throttle = Throttle(2, window=1.0, clock=clock)

    await throttle.add()
    await throttle.add()
    assert throttle.admitted == 2

    blocked = asyncio.create_task(throttle.add())
    await asyncio.sleep(0.01)
    assert not blocked.done()

    # nothing has aged out yet
    assert await throttle.clean() == 0
    await asyncio.sleep(0.01)
    assert not blocked.done()

    clock.now += 1.0
    assert await throttle.clean() == 2
    await asyncio.wait_for(blocked, timeout=1.0)
    assert throttle.admitted == 1


@pytest.mark.asyncio
async def test_clean_keeps_recent_events():
    clock = FakeClock()
    throttle = Throttle(5, window=1.0, clock=clock)

    await throttle.add()
    clock.now += 0.6
    await throttle.add()
    clock.now += 0.5

    assert await throttle.clean() == 1
    assert throttle.admitted == 1


@pytest.mark.asyncio
async def test_cleaner_releases_waiters():
    throttle = Throttle(1, window=0.02)

    async with ThrottleCleaner(throttle, interval=0.01) as cleaner:
        assert cleaner.running
        await asyncio.wait_for(asyncio.gather(*(throttle.add() for _ in range(3))), timeout=2.0)

    assert not cleaner.running


@pytest.mark.asyncio
async def test_cleaner_start_and_stop_are_idempotent():
    cleaner = ThrottleCleaner(Throttle(1), interval=0.01)

    await cleaner.stop()
    cleaner.start()
    cleaner.start()
    assert cleaner.running

    await cleaner.stop()
    await cleaner.stop()
    assert not cleaner.running


@pytest.mark.asyncio
async def test_window_bounds_admission_rate():
    loop = asyncio.get_running_loop()
    throttle = Throttle(2, window=0.1)

    async with ThrottleCleaner(throttle, interval=0.01):
        started = loop.time()
        for _ in range(6):
            await throttle.add()
        elapsed = loop.time() - started

    # six events at two per window need at least two further windows
    assert elapsed >= 0.2
