"""
Pytest Configuration and Fixtures
===================================

Fixtures:
    - haptics: Recording haptic sink
    - ticker: Manually driven ticker
    - session: BreathSession wired to both (10 breaths, 3.0s)
    - default_session: BreathSession with default settings
    - fake_ble: FakeBleakClient patched into breath_practice.sensor
"""

import pytest

from breath_practice import BreathSession
from breath_practice import sensor

from tests.mocks import FakeBleakClient, ManualTicker, RecordingHaptics


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "slow: Tests that simulate whole sessions"
    )
    config.addinivalue_line(
        "markers", "ble: Tests involving the BLE heart rate feed"
    )


@pytest.fixture
def haptics():
    """
    Provide RecordingHaptics for testing.

    Usage:
        def test_start_cue(session, haptics):
            ...
            assert haptics.count(HapticCue.START) == 1
    """
    return RecordingHaptics()


@pytest.fixture
def ticker():
    """Provide a ManualTicker; tests call session.advance() themselves."""
    return ManualTicker()


@pytest.fixture
def session(haptics, ticker):
    """Short session (10 breaths of 3s) for fast end-to-end runs."""
    return BreathSession(total_breaths=10, breath_length=3.0, haptics=haptics, ticker=ticker)


@pytest.fixture
def default_session(haptics, ticker):
    """Session with default settings (30 breaths, 5.5s)."""
    return BreathSession(haptics=haptics, ticker=ticker)


@pytest.fixture
def fake_ble(monkeypatch):
    """
    Patch FakeBleakClient into the sensor module.

    Usage:
        async def test_connect(fake_ble):
            monitor = HeartRateMonitor("AA:BB")
            await monitor.connect()
            client = fake_ble.instances[-1]
    """
    FakeBleakClient.reset()
    monkeypatch.setattr(sensor, "BleakClient", FakeBleakClient)
    yield FakeBleakClient
    FakeBleakClient.reset()
