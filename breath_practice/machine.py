"""
Breath Practice - Session state machine

Pure transition functions over BreathState. Nothing here keeps state,
schedules work or plays haptics: each function takes a snapshot and returns
the next one, and advance() also returns the cues the tick produced.

Phases:
    IDLE -> STARTING -> BREATHING -> HOLDING -> PRE_RECOVERY -> RECOVERY
                ^                                                 |
                +------------------ next round -------------------+
    After the third RECOVERY the session returns to IDLE on its own.
"""

import math
from dataclasses import replace
from typing import List, Tuple

from .constants import (
    BREATH_LENGTH_STEP,
    BREATHS_STEP,
    COUNTDOWN_DURATION,
    CRESCENDO_CLICK,
    CRESCENDO_RETRY,
    CRESCENDO_START,
    EPSILON,
    HOLD_MILESTONE,
    MAX_BREATH_LENGTH,
    MAX_BREATH_SCALE,
    MAX_BREATHS,
    MIN_BREATH_LENGTH,
    MIN_BREATH_SCALE,
    MIN_BREATHS,
    RECOVERY_DURATION,
    TOTAL_ROUNDS,
)
from .haptics import HapticCue
from .state import BreathPhase, BreathState

Tick = Tuple[BreathState, List[HapticCue]]


# -------------------------------------------------------------------------
# Commands
# -------------------------------------------------------------------------

def start_stop(state: BreathState) -> BreathState:
    """
    Start, pause or resume

    An active session is paused without touching any counter. Otherwise
    the current round restarts from the 3s starting countdown: round 1
    from IDLE, the paused round when resuming. The breath count is cleared
    once breathing begins again.
    """
    if state.is_active:
        return replace(state, is_active=False)
    return replace(
        state,
        phase=BreathPhase.STARTING,
        start_countdown=COUNTDOWN_DURATION,
        is_active=True,
    )


def reset(state: BreathState) -> BreathState:
    """Back to IDLE with every counter cleared; configuration is kept"""
    return BreathState(
        total_breaths=state.total_breaths,
        breath_length=state.breath_length,
    )


def finish_holding(state: BreathState) -> BreathState:
    """End the hold and start the deep-inhale countdown (HOLDING only)"""
    if state.phase is not BreathPhase.HOLDING:
        return state
    return replace(
        state,
        phase=BreathPhase.PRE_RECOVERY,
        start_countdown=COUNTDOWN_DURATION,
    )


def increase_breaths(state: BreathState) -> BreathState:
    if state.is_active:
        return state
    return replace(state, total_breaths=min(MAX_BREATHS, state.total_breaths + BREATHS_STEP))


def decrease_breaths(state: BreathState) -> BreathState:
    if state.is_active:
        return state
    return replace(state, total_breaths=max(MIN_BREATHS, state.total_breaths - BREATHS_STEP))


def increase_length(state: BreathState) -> BreathState:
    if state.is_active:
        return state
    return replace(
        state, breath_length=min(MAX_BREATH_LENGTH, state.breath_length + BREATH_LENGTH_STEP)
    )


def decrease_length(state: BreathState) -> BreathState:
    if state.is_active:
        return state
    return replace(
        state, breath_length=max(MIN_BREATH_LENGTH, state.breath_length - BREATH_LENGTH_STEP)
    )


# -------------------------------------------------------------------------
# Tick
# -------------------------------------------------------------------------

def advance(state: BreathState, delta: float) -> Tick:
    """
    Advance a session by one tick

    Applies exactly one delta and at most one phase transition. Ticks on an
    idle or paused session change nothing.

    Args:
        state: Current snapshot
        delta: Seconds elapsed since the previous tick

    Returns:
        (next snapshot, haptic cues to play, in order)

    Example:
        state = start_stop(BreathState())
        state, cues = advance(state, 0.05)
    """
    if not state.is_active or state.is_idle:
        return state, []

    handler = _PHASE_HANDLERS[state.phase]
    return handler(state, delta)


def _tick_starting(state: BreathState, delta: float) -> Tick:
    countdown = state.start_countdown - delta
    if countdown > EPSILON:
        return replace(state, start_countdown=countdown), []

    return replace(
        state,
        phase=BreathPhase.BREATHING,
        start_countdown=countdown,
        breath_count=0,
        is_inhale=True,
        breath_progress=0.0,
    ), [HapticCue.START]


def _tick_breathing(state: BreathState, delta: float) -> Tick:
    progress = state.breath_progress + delta / (state.breath_length / 2)
    if progress < 1.0 - EPSILON:
        return replace(
            state,
            breath_progress=progress,
            breath_scale=breath_scale(state.is_inhale, progress),
        ), []

    # Half-breath done; the overshoot is dropped rather than carried over.
    count = state.breath_count + 1
    if count >= state.total_breaths * 2:
        return replace(
            state,
            phase=BreathPhase.HOLDING,
            breath_count=count,
            is_inhale=not state.is_inhale,
            breath_progress=0.0,
            hold_time=0.0,
            breath_scale=MIN_BREATH_SCALE,
        ), [HapticCue.SUCCESS]

    inhale = not state.is_inhale
    cues = [HapticCue.CLICK] if inhale else []
    return replace(
        state,
        breath_count=count,
        is_inhale=inhale,
        breath_progress=0.0,
        breath_scale=breath_scale(inhale, 0.0),
    ), cues


def _tick_holding(state: BreathState, delta: float) -> Tick:
    hold_time = state.hold_time + delta
    cues = []
    if _milestones(hold_time) > _milestones(state.hold_time):
        cues.append(HapticCue.NOTIFICATION)
    return replace(state, hold_time=hold_time), cues


def _tick_pre_recovery(state: BreathState, delta: float) -> Tick:
    countdown = state.start_countdown - delta
    progress = 1.0 - countdown / COUNTDOWN_DURATION
    scale = _clamp_scale(MIN_BREATH_SCALE + (MAX_BREATH_SCALE - MIN_BREATH_SCALE) * progress)

    if countdown > EPSILON:
        return replace(state, start_countdown=countdown, breath_scale=scale), []

    return replace(
        state,
        phase=BreathPhase.RECOVERY,
        start_countdown=countdown,
        breath_scale=scale,
        recovery_time=RECOVERY_DURATION,
    ), [HapticCue.START]


def _tick_recovery(state: BreathState, delta: float) -> Tick:
    remaining = state.recovery_time - delta
    if remaining > EPSILON:
        return replace(state, recovery_time=remaining), _crescendo(state.recovery_time, remaining)

    if state.round < TOTAL_ROUNDS:
        return replace(
            state,
            phase=BreathPhase.STARTING,
            round=state.round + 1,
            recovery_time=remaining,
            start_countdown=COUNTDOWN_DURATION,
        ), [HapticCue.NOTIFICATION]

    return reset(state), [HapticCue.STOP]


_PHASE_HANDLERS = {
    BreathPhase.STARTING: _tick_starting,
    BreathPhase.BREATHING: _tick_breathing,
    BreathPhase.HOLDING: _tick_holding,
    BreathPhase.PRE_RECOVERY: _tick_pre_recovery,
    BreathPhase.RECOVERY: _tick_recovery,
}


# -------------------------------------------------------------------------
# Helpers
# -------------------------------------------------------------------------

def breath_scale(is_inhale: bool, progress: float) -> float:
    """
    Visual pulse value for a point in a half-breath

    Grows from 0.01 to 1.0 over an inhale and shrinks back over an exhale.
    """
    span = MAX_BREATH_SCALE - MIN_BREATH_SCALE
    if is_inhale:
        return _clamp_scale(MIN_BREATH_SCALE + span * progress)
    return _clamp_scale(MAX_BREATH_SCALE - span * progress)


def _clamp_scale(value: float) -> float:
    return max(MIN_BREATH_SCALE, min(MAX_BREATH_SCALE, value))


def _milestones(hold_time: float) -> int:
    return math.floor((hold_time + EPSILON) / HOLD_MILESTONE)


def _crescendo(before: float, after: float) -> List[HapticCue]:
    """Pulses for the last seconds of recovery, faster as the end nears"""
    if after > CRESCENDO_START + EPSILON:
        return []

    retry_limit, retry_spacing = CRESCENDO_RETRY
    click_limit, click_spacing = CRESCENDO_CLICK
    if after <= retry_limit + EPSILON:
        cue, spacing = HapticCue.RETRY, retry_spacing
    elif after <= click_limit + EPSILON:
        cue, spacing = HapticCue.CLICK, click_spacing
    else:
        return []

    # Fire on the tick that reaches or passes a spacing boundary.
    if math.floor((after - EPSILON) / spacing) < math.floor((before - EPSILON) / spacing):
        return [cue]
    return []
