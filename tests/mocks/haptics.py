"""
Mock haptic sinks
"""

from typing import List

from breath_practice.haptics import HapticCue, HapticSink


class RecordingHaptics(HapticSink):
    """
    Records every cue in order

    Usage:
        haptics = RecordingHaptics()
        session = BreathSession(haptics=haptics, ticker=ManualTicker())
        ...
        assert haptics.count(HapticCue.START) == 1
    """

    def __init__(self):
        self.cues: List[HapticCue] = []

    def play(self, cue: HapticCue) -> None:
        self.cues.append(cue)

    def count(self, cue: HapticCue) -> int:
        return self.cues.count(cue)

    def clear(self) -> None:
        self.cues.clear()


class FailingHaptics(HapticSink):
    """Raises on every cue, like a motor driver that has gone away"""

    def __init__(self):
        self.attempts = 0

    def play(self, cue: HapticCue) -> None:
        self.attempts += 1
        raise RuntimeError(f"motor unavailable for {cue.value}")
