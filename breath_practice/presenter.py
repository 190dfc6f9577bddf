"""
Breath Practice - Terminal presenter

Renders each published snapshot as a single status line.
"""

import sys
from typing import Optional, TextIO

from .sensor import HeartRateReading
from .state import BreathPhase, BreathState

BAR_WIDTH = 24


class TerminalPresenter:
    """
    One-line terminal readout of a session

    Usage:
        presenter = TerminalPresenter()
        session.on_update(presenter.show)
    """

    def __init__(self, stream: Optional[TextIO] = None, width: int = BAR_WIDTH, monitor=None):
        """
        Args:
            stream: Output stream (default: stdout)
            width: Breath bar width in characters
            monitor: Optional HeartRateMonitor whose reading is appended
        """
        self._stream = stream
        self._width = width
        self._monitor = monitor
        self._last_length = 0

    def render(self, state: BreathState, reading: Optional[HeartRateReading] = None) -> str:
        """Build the status line for a snapshot"""
        parts = [state.phase_display]
        if state.timer_display:
            parts.append(state.timer_display)
        if state.phase in (BreathPhase.BREATHING, BreathPhase.PRE_RECOVERY):
            parts.append(self._bar(state))
        if state.is_paused:
            parts.append("(paused)")
        if reading is not None:
            parts.append(f"HR {reading.heart_rate:.0f}")
        return "  ".join(parts)

    def show(self, state: BreathState) -> None:
        """Rewrite the current terminal line"""
        reading = self._monitor.reading if self._monitor and self._monitor.is_connected else None
        line = self.render(state, reading)
        padding = " " * max(0, self._last_length - len(line))
        self._last_length = len(line)
        stream = self._stream or sys.stdout
        stream.write(f"\r{line}{padding}")
        stream.flush()

    def _bar(self, state: BreathState) -> str:
        filled = int(round(state.breath_scale * self._width))
        arrow = "in " if state.is_inhale or state.phase is BreathPhase.PRE_RECOVERY else "out"
        return f"{arrow} [{'#' * filled}{' ' * (self._width - filled)}]"
