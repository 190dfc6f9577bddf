"""
Breath Practice - Session state

BreathState is an immutable snapshot of a session. Every command and every
tick produces a new snapshot, so a presenter always reads a complete tick.
"""

import math
from dataclasses import dataclass
from enum import Enum

from .constants import (
    COUNTDOWN_DURATION,
    DEFAULT_BREATH_LENGTH,
    DEFAULT_BREATHS,
    EPSILON,
    MIN_BREATH_SCALE,
    RECOVERY_DURATION,
    TOTAL_ROUNDS,
)


class BreathPhase(Enum):
    """Phases of a breathing round"""
    IDLE = "idle"
    STARTING = "starting"
    BREATHING = "breathing"
    HOLDING = "holding"
    PRE_RECOVERY = "pre_recovery"
    RECOVERY = "recovery"

    @property
    def label(self) -> str:
        return _PHASE_LABELS[self]


_PHASE_LABELS = {
    BreathPhase.IDLE: "Ready to start",
    BreathPhase.STARTING: "Starting",
    BreathPhase.BREATHING: "Breathing",
    BreathPhase.HOLDING: "Holding",
    BreathPhase.PRE_RECOVERY: "Inhale",
    BreathPhase.RECOVERY: "Recovery",
}


@dataclass(frozen=True)
class BreathState:
    """
    Snapshot of a breathing session

    Attributes:
        phase: Current phase
        round: Current round, 1-3
        total_breaths: Configured breaths per round
        breath_length: Full inhale + exhale duration in seconds
        breath_count: Half-breaths completed in the current round
        breath_progress: Fraction (0-1) of the current half-breath
        is_inhale: Direction of the current half-breath
        hold_time: Seconds spent in the hold
        recovery_time: Seconds left in recovery
        start_countdown: Seconds left in the starting/pre-recovery countdown
        is_active: Whether the tick loop should be running
        breath_scale: Visual pulse value, 0.01-1.0
    """
    phase: BreathPhase = BreathPhase.IDLE
    round: int = 1
    total_breaths: int = DEFAULT_BREATHS
    breath_length: float = DEFAULT_BREATH_LENGTH
    breath_count: int = 0
    breath_progress: float = 0.0
    is_inhale: bool = True
    hold_time: float = 0.0
    recovery_time: float = RECOVERY_DURATION
    start_countdown: float = COUNTDOWN_DURATION
    is_active: bool = False
    breath_scale: float = MIN_BREATH_SCALE

    @property
    def current_breath_number(self) -> int:
        """1-based number of the breath in progress"""
        return self.breath_count // 2 + 1

    @property
    def is_idle(self) -> bool:
        return self.phase is BreathPhase.IDLE

    @property
    def is_paused(self) -> bool:
        return not self.is_active and not self.is_idle

    @property
    def title(self) -> str:
        if self.is_idle:
            return "Breath Practice"
        return f"Round {self.round}/{TOTAL_ROUNDS}"

    @property
    def phase_display(self) -> str:
        if self.is_idle:
            return self.phase.label
        return f"Round {self.round}/{TOTAL_ROUNDS}: {self.phase.label}"

    @property
    def timer_display(self) -> str:
        phase = self.phase
        if phase is BreathPhase.STARTING:
            return str(_ceil_seconds(self.start_countdown))
        if phase is BreathPhase.BREATHING:
            return f"{self.current_breath_number}/{self.total_breaths}"
        if phase is BreathPhase.HOLDING:
            return f"{int(self.hold_time + EPSILON)}s"
        if phase is BreathPhase.PRE_RECOVERY:
            return "Inhale"
        if phase is BreathPhase.RECOVERY:
            return f"{_ceil_seconds(self.recovery_time)}s"
        return ""


def _ceil_seconds(value: float) -> int:
    return max(0, math.ceil(value - EPSILON))
