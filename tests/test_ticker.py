import asyncio
from datetime import timedelta

import pytest

from dogstory.ticker import Ticker


@pytest.mark.asyncio
async def test_ticks_and_stops():
    deltas = []
    ticker = Ticker(timedelta(milliseconds=10), deltas.append)
    ticker.start()
    await asyncio.sleep(0.1)
    ticker.stop()
    count = len(deltas)
    assert count >= 2
    assert all(d >= timedelta(0) for d in deltas)
    await asyncio.sleep(0.05)
    assert len(deltas) == count


@pytest.mark.asyncio
async def test_period_in_milliseconds():
    deltas = []
    ticker = Ticker(20, deltas.append)
    ticker.start()
    await asyncio.sleep(0.15)
    ticker.stop()
    assert deltas
    assert all(d >= timedelta(milliseconds=15) for d in deltas)


@pytest.mark.asyncio
async def test_double_start_raises():
    ticker = Ticker(10, lambda delta: None)
    ticker.start()
    try:
        with pytest.raises(RuntimeError):
            ticker.start()
    finally:
        ticker.stop()


@pytest.mark.asyncio
async def test_restart_after_stop():
    deltas = []
    ticker = Ticker(10, deltas.append)
    ticker.start()
    ticker.stop()
    await asyncio.sleep(0.03)
    assert deltas == []
    ticker.start()
    await asyncio.sleep(0.06)
    ticker.stop()
    assert len(deltas) >= 1


def test_negative_period_rejected():
    with pytest.raises(ValueError):
        Ticker(-1, lambda delta: None)