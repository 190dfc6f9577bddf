"""
Breath Practice - Haptic cues and sinks

The session never plays haptics itself. It hands HapticCue values to a
HapticSink after each state update and does not wait for, or react to, the
result.
"""

import asyncio
import logging
import sys
from enum import Enum
from typing import Awaitable, Callable, Optional, Set, TextIO

logger = logging.getLogger(__name__)


class HapticCue(Enum):
    """Named haptic patterns, matching the watch's built-in set"""
    START = "start"
    CLICK = "click"
    SUCCESS = "success"
    NOTIFICATION = "notification"
    STOP = "stop"
    RETRY = "retry"


class HapticSink:
    """
    Receiver for haptic cues

    Subclasses override play(). It is called on the session's scheduling
    context and must not block.
    """

    def play(self, cue: HapticCue) -> None:
        raise NotImplementedError


class NullHaptics(HapticSink):
    """Discards every cue"""

    def play(self, cue: HapticCue) -> None:
        pass


class TerminalHaptics(HapticSink):
    """
    Terminal stand-in for a vibration motor

    Rings the terminal bell for the cues that mark a phase boundary and logs
    every cue at debug level.
    """

    BELL_CUES = (HapticCue.START, HapticCue.SUCCESS, HapticCue.NOTIFICATION, HapticCue.STOP)

    def __init__(self, stream: Optional[TextIO] = None, bell: bool = True):
        self._stream = stream
        self._bell = bell

    def play(self, cue: HapticCue) -> None:
        logger.debug("Haptic cue: %s", cue.value)
        if self._bell and cue in self.BELL_CUES:
            stream = self._stream or sys.stdout
            stream.write("\a")
            stream.flush()


class AsyncHapticSink(HapticSink):
    """
    Fire-and-forget adapter for coroutine-based players

    Each cue is scheduled as a task on the running event loop. Failures are
    logged from the task's done callback and never reach the session.

    Usage:
        async def buzz(cue):
            await motor.pulse(PATTERNS[cue])

        session = BreathSession(haptics=AsyncHapticSink(buzz))
    """

    def __init__(self, player: Callable[[HapticCue], Awaitable[None]]):
        self._player = player
        self._pending: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        """Number of cues still playing"""
        return len(self._pending)

    def play(self, cue: HapticCue) -> None:
        loop = asyncio.get_running_loop()
        task = loop.create_task(self._player(cue))
        self._pending.add(task)
        task.add_done_callback(self._finished)

    def _finished(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.warning("Haptic playback failed: %s", exc)

    async def drain(self) -> None:
        """Wait for every scheduled cue to finish"""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
