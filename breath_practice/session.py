"""
Breath Practice - Session controller

BreathSession owns the current snapshot and wires the pure state machine to
its collaborators: a ticker that drives advance(), a haptic sink that plays
the cues, and any number of listeners (presenters) that read each snapshot.
"""

import logging
from typing import Callable, List, Optional

from . import machine
from .config import validate_breaths, validate_length
from .constants import DEFAULT_BREATH_LENGTH, DEFAULT_BREATHS, TICK_INTERVAL
from .haptics import HapticCue, HapticSink, NullHaptics
from .state import BreathPhase, BreathState
from .ticker import Ticker

logger = logging.getLogger(__name__)

UpdateCallback = Callable[[BreathState], None]
PhaseCallback = Callable[[BreathPhase, BreathPhase], None]


class BreathSession:
    """
    Guided breathing session: three rounds of paced breathing, a hold and a
    short recovery

    Commands and ticks run on one scheduling context (the asyncio loop the
    ticker lives on). Each one replaces the snapshot, notifies listeners,
    then hands any haptic cues to the sink. Sink and listener failures are
    logged and never reach the state machine.

    Usage:
        session = BreathSession(haptics=TerminalHaptics())
        session.on_update(presenter.show)
        session.start_stop()      # needs a running event loop
        ...
        session.finish_holding()  # user ends the hold
    """

    def __init__(
        self,
        total_breaths: int = DEFAULT_BREATHS,
        breath_length: float = DEFAULT_BREATH_LENGTH,
        haptics: Optional[HapticSink] = None,
        ticker=None,
        interval: float = TICK_INTERVAL,
    ):
        """
        Initialize session in IDLE

        Args:
            total_breaths: Breaths per round (10-50, step 5)
            breath_length: Inhale + exhale seconds (3.0-8.0, step 0.5)
            haptics: Sink for haptic cues (default: discard)
            ticker: Scheduler with start()/stop(); default is an asyncio
                Ticker calling advance() every `interval` seconds
            interval: Tick interval for the default ticker

        Raises:
            ConfigurationError: If a setting is out of range
        """
        self._state = BreathState(
            total_breaths=validate_breaths(total_breaths),
            breath_length=validate_length(breath_length),
        )
        self._haptics = haptics or NullHaptics()
        self._ticker = ticker if ticker is not None else Ticker(self.advance, interval)
        self._update_callbacks: List[UpdateCallback] = []
        self._phase_callbacks: List[PhaseCallback] = []

    # -------------------------------------------------------------------------
    # Published state
    # -------------------------------------------------------------------------

    @property
    def state(self) -> BreathState:
        """Latest snapshot"""
        return self._state

    @property
    def phase(self) -> BreathPhase:
        return self._state.phase

    @property
    def is_active(self) -> bool:
        return self._state.is_active

    @property
    def ticker(self):
        return self._ticker

    def on_update(self, callback: UpdateCallback) -> None:
        """Register callback(state) called after every command and tick"""
        if callback not in self._update_callbacks:
            self._update_callbacks.append(callback)

    def on_phase_change(self, callback: PhaseCallback) -> None:
        """Register callback(old_phase, new_phase) called on phase transitions"""
        if callback not in self._phase_callbacks:
            self._phase_callbacks.append(callback)

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def start_stop(self) -> None:
        """Start from IDLE, pause when running, restart the round countdown when paused"""
        self._apply(machine.start_stop(self._state))

    def reset(self) -> None:
        """Stop the tick loop and return to IDLE"""
        self._apply(machine.reset(self._state))

    def finish_holding(self) -> None:
        """End the breath hold; ignored outside HOLDING"""
        self._apply(machine.finish_holding(self._state))

    def increase_breaths(self) -> None:
        self._apply(machine.increase_breaths(self._state))

    def decrease_breaths(self) -> None:
        self._apply(machine.decrease_breaths(self._state))

    def increase_length(self) -> None:
        self._apply(machine.increase_length(self._state))

    def decrease_length(self) -> None:
        self._apply(machine.decrease_length(self._state))

    # -------------------------------------------------------------------------
    # Tick
    # -------------------------------------------------------------------------

    def advance(self, delta: float) -> List[HapticCue]:
        """
        Tick entry point

        Args:
            delta: Seconds since the previous tick

        Returns:
            Haptic cues emitted by this tick
        """
        new_state, cues = machine.advance(self._state, delta)
        self._apply(new_state, cues)
        return cues

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _apply(self, new_state: BreathState, cues: Optional[List[HapticCue]] = None) -> None:
        old_state = self._state
        if new_state is old_state and not cues:
            return

        self._sync_ticker(old_state, new_state)
        self._state = new_state

        if new_state.phase is not old_state.phase:
            logger.info(
                "Phase %s -> %s (round %d)",
                old_state.phase.value, new_state.phase.value, new_state.round,
            )
            for callback in list(self._phase_callbacks):
                try:
                    callback(old_state.phase, new_state.phase)
                except Exception as e:
                    logger.error("Phase callback failed: %s", e)

        for callback in list(self._update_callbacks):
            try:
                callback(new_state)
            except Exception as e:
                logger.error("Update callback failed: %s", e)

        for cue in cues or ():
            self._play(cue)

    def _sync_ticker(self, old_state: BreathState, new_state: BreathState) -> None:
        if new_state.is_active:
            if not old_state.is_active:
                self._ticker.start()
        else:
            self._ticker.stop()

    def _play(self, cue: HapticCue) -> None:
        try:
            self._haptics.play(cue)
        except Exception as e:
            logger.warning("Haptic sink failed on %s: %s", cue.value, e)
