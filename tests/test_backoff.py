"""
Тест политики задержек и повторов.
"""

import asyncio

import pytest

from core.backoff import Backoff, retry_async
from fakes import RecordingSleep


def test_backoff_grows_plateaus_and_resets():
    backoff = Backoff(seed=5, multiplier=2, ceiling=60)

    delays = [backoff.next_delay() for _ in range(7)]
    assert delays == [5, 10, 20, 40, 60, 60, 60]

    backoff.reset()
    assert backoff.current == 5
    assert backoff.next_delay() == 5


def test_backoff_jitter_stays_in_bounds():
    backoff = Backoff(seed=10, multiplier=1, ceiling=10, jitter=0.2)
    for _ in range(50):
        assert 8 <= backoff.next_delay() <= 12


def test_backoff_rejects_bad_parameters():
    with pytest.raises(ValueError):
        Backoff(seed=0)
    with pytest.raises(ValueError):
        Backoff(seed=10, ceiling=5)


def test_retry_async_succeeds_after_failures():
    calls = []

    async def flaky():
        calls.append(1)
        if len(calls) < 3:
            raise ConnectionError("down")
        return "ok"

    sleep = RecordingSleep()
    result = asyncio.run(retry_async(flaky, attempts=5, backoff=Backoff(seed=1, ceiling=30), sleep=sleep))

    assert result == "ok"
    assert len(calls) == 3
    assert sleep.delays == [1, 2]


def test_retry_async_gives_up():
    async def broken():
        raise ConnectionError("down")

    sleep = RecordingSleep()
    with pytest.raises(ConnectionError):
        asyncio.run(retry_async(broken, attempts=3, backoff=Backoff(seed=1, ceiling=30), sleep=sleep))
    assert sleep.delays == [1, 2]
