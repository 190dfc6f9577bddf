"""
Breath Practice
Guided three-round breathing sessions driven by a tick-based state machine
"""

from .session import BreathSession
from .state import BreathPhase, BreathState
from .haptics import HapticCue, HapticSink, NullHaptics, TerminalHaptics, AsyncHapticSink
from .ticker import Ticker
from .exceptions import (
    BreathPracticeError,
    ConfigurationError,
    SensorError,
    ConnectionError,
    SensorNotFoundError,
    TimeoutError
)

__version__ = "1.0.0"
__all__ = [
    "BreathSession",
    "BreathPhase",
    "BreathState",
    "HapticCue",
    "HapticSink",
    "NullHaptics",
    "TerminalHaptics",
    "AsyncHapticSink",
    "Ticker",
    "BreathPracticeError",
    "ConfigurationError",
    "SensorError",
    "ConnectionError",
    "SensorNotFoundError",
    "TimeoutError"
]
