"""
Mock collaborators for session tests
"""

from .haptics import RecordingHaptics, FailingHaptics
from .ticker import ManualTicker
from .ble import FakeBleakClient, fake_scan_results

__all__ = [
    "RecordingHaptics",
    "FailingHaptics",
    "ManualTicker",
    "FakeBleakClient",
    "fake_scan_results",
]
