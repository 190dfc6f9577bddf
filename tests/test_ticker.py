"""
Ticker Tests
============

Tests for the asyncio periodic scheduler: idempotent start, synchronous
stop, stop from inside the callback and callback failures.
"""

import asyncio
import logging

import pytest

from breath_practice.ticker import Ticker

INTERVAL = 0.01


class Counter:
    def __init__(self):
        self.deltas = []

    def __call__(self, delta):
        self.deltas.append(delta)

    @property
    def calls(self):
        return len(self.deltas)


class TestTicker:

    def test_interval_must_be_positive(self):
        with pytest.raises(ValueError):
            Ticker(Counter(), interval=0)

    def test_start_requires_running_loop(self):
        ticker = Ticker(Counter(), INTERVAL)

        with pytest.raises(RuntimeError):
            ticker.start()
        assert not ticker.is_running

    def test_stop_when_not_started(self):
        ticker = Ticker(Counter(), INTERVAL)

        ticker.stop()

        assert not ticker.is_running

    @pytest.mark.asyncio
    async def test_ticks_with_fixed_delta(self):
        counter = Counter()
        ticker = Ticker(counter, INTERVAL)

        ticker.start()
        await asyncio.sleep(0.1)
        ticker.stop()

        assert counter.calls >= 3
        assert set(counter.deltas) == {INTERVAL}

    @pytest.mark.asyncio
    async def test_double_start_is_idempotent(self):
        counter = Counter()
        ticker = Ticker(counter, INTERVAL)

        ticker.start()
        task = ticker._task
        ticker.start()

        assert ticker._task is task
        await asyncio.sleep(0.05)
        ticker.stop()
        assert not ticker.is_running

    @pytest.mark.asyncio
    async def test_no_callback_after_stop(self):
        counter = Counter()
        ticker = Ticker(counter, INTERVAL)
        ticker.start()
        await asyncio.sleep(0.05)

        ticker.stop()
        calls = counter.calls
        await asyncio.sleep(0.05)

        assert counter.calls == calls
        assert not ticker.is_running

    @pytest.mark.asyncio
    async def test_stop_from_callback(self):
        ticker = None
        calls = []

        def callback(delta):
            calls.append(delta)
            if len(calls) == 3:
                ticker.stop()

        ticker = Ticker(callback, INTERVAL)
        ticker.start()
        await asyncio.sleep(0.1)

        assert len(calls) == 3
        assert not ticker.is_running

    @pytest.mark.asyncio
    async def test_restart_after_stop(self):
        counter = Counter()
        ticker = Ticker(counter, INTERVAL)
        ticker.start()
        await asyncio.sleep(0.03)
        ticker.stop()
        calls = counter.calls

        ticker.start()
        await asyncio.sleep(0.05)
        ticker.stop()

        assert counter.calls > calls

    @pytest.mark.asyncio
    async def test_callback_error_stops_ticker(self, caplog):
        calls = []

        def callback(delta):
            calls.append(delta)
            raise RuntimeError("boom")

        ticker = Ticker(callback, INTERVAL)
        with caplog.at_level(logging.ERROR, logger="breath_practice.ticker"):
            ticker.start()
            await asyncio.sleep(0.05)

        assert len(calls) == 1
        assert not ticker.is_running
        assert "Tick callback failed" in caplog.text
