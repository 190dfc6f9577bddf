"""
Breath Practice test suite

Modules:
    mocks.haptics: Recording and failing haptic sinks
    mocks.ticker: Manually driven ticker
    mocks.ble: Fake bleak client and scanner results
    fixtures.sessions: Prebuilt session snapshots and tick helpers
    conftest: Pytest configuration and fixtures
"""
