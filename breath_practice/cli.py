#!/usr/bin/env python3
"""
Breath Practice CLI
Guided three-round breathing session in the terminal

Usage:
    breath-practice run                 # 30 breaths, 5.5s per breath
    breath-practice run 40 6.0          # 40 breaths, 6s per breath
    breath-practice run 30 5.5 --hr     # show heart rate from a BLE sensor
    breath-practice simulate 10 3.0     # run a whole session instantly
    breath-practice scan                # find heart rate sensors
    breath-practice heart-rate 30       # stream heart rate for 30s
"""

import asyncio
import logging
import sys
import threading
from typing import List, Optional

from . import machine
from .constants import DEFAULT_BREATH_LENGTH, DEFAULT_BREATHS, TICK_INTERVAL
from .config import validate_breaths, validate_length
from .haptics import HapticCue, TerminalHaptics
from .presenter import TerminalPresenter
from .sensor import HeartRateMonitor
from .session import BreathSession
from .state import BreathPhase, BreathState

logger = logging.getLogger(__name__)

KEYS_HELP = """Keys (press Enter after each):
  <Enter>   finish the breath hold
  p         pause / resume
  r         reset to the start
  s         start again after a reset
  b+ / b-   more / fewer breaths (while paused or idle)
  l+ / l-   longer / shorter breaths (while paused or idle)
  q         quit
"""


def _start_input_thread(loop: asyncio.AbstractEventLoop, queue: asyncio.Queue) -> None:
    """Forward stdin lines to the event loop without blocking it"""
    def reader():
        try:
            for line in sys.stdin:
                loop.call_soon_threadsafe(queue.put_nowait, line.strip().lower())
            loop.call_soon_threadsafe(queue.put_nowait, "q")
        except RuntimeError:
            # Loop closed while waiting for input
            return

    threading.Thread(target=reader, name="breath-practice-input", daemon=True).start()


def _handle_key(session: BreathSession, key: str) -> None:
    if key == "":
        session.finish_holding()
    elif key == "p":
        if not session.state.is_idle:
            session.start_stop()
    elif key == "s":
        if session.state.is_idle:
            session.start_stop()
    elif key == "r":
        session.reset()
    elif key == "b+":
        session.increase_breaths()
    elif key == "b-":
        session.decrease_breaths()
    elif key == "l+":
        session.increase_length()
    elif key == "l-":
        session.decrease_length()
    else:
        print(f"\nUnknown key: {key!r}")


async def cmd_run(breaths: int, length: float, use_hr: bool = False, address: Optional[str] = None):
    """Run an interactive session"""
    monitor = None
    if use_hr:
        print("Connecting to heart rate sensor...")
        monitor = HeartRateMonitor(address)
        await monitor.connect()
        print(f"Connected to {monitor.address}")

    session = BreathSession(breaths, length, haptics=TerminalHaptics())
    presenter = TerminalPresenter(monitor=monitor)
    session.on_update(presenter.show)

    completed = asyncio.Event()

    def on_phase(old: BreathPhase, new: BreathPhase):
        if old is BreathPhase.RECOVERY and new is BreathPhase.IDLE:
            completed.set()
        elif new is BreathPhase.HOLDING:
            print("\nHold your breath. Press Enter when you need to breathe.")

    session.on_phase_change(on_phase)

    print(f"{breaths} breaths per round, {length:.1f}s per breath, 3 rounds")
    print(KEYS_HELP)

    loop = asyncio.get_running_loop()
    keys: asyncio.Queue = asyncio.Queue()
    _start_input_thread(loop, keys)

    session.start_stop()
    try:
        while True:
            key_task = asyncio.ensure_future(keys.get())
            done_task = asyncio.ensure_future(completed.wait())
            done, pending = await asyncio.wait(
                {key_task, done_task}, return_when=asyncio.FIRST_COMPLETED
            )
            for task in pending:
                task.cancel()

            if done_task in done:
                print("\n\nSession complete. Well done.")
                break

            key = key_task.result()
            if key == "q":
                print()
                break
            _handle_key(session, key)
    finally:
        session.reset()
        if monitor:
            await monitor.disconnect()


def cmd_simulate(breaths: int, length: float, hold: float = 30.0):
    """Run a whole session without waiting and print what happens"""
    state = machine.start_stop(BreathState(total_breaths=breaths, breath_length=length))
    elapsed = 0.0

    print(f"Simulating {breaths} breaths x {length:.1f}s, {hold:.0f}s holds")
    print(f"{elapsed:8.2f}s  {state.phase_display}")

    while state.is_active:
        previous = state.phase
        state, cues = machine.advance(state, TICK_INTERVAL)
        elapsed += TICK_INTERVAL

        for cue in cues:
            if cue is not HapticCue.CLICK:
                print(f"{elapsed:8.2f}s    haptic: {cue.value}")
        if state.phase is not previous:
            print(f"{elapsed:8.2f}s  {state.phase_display}")

        if state.phase is BreathPhase.HOLDING and state.hold_time >= hold:
            state = machine.finish_holding(state)
            print(f"{elapsed:8.2f}s  {state.phase_display}")

    print(f"Finished after {elapsed / 60:.1f} minutes")


async def cmd_scan():
    """Scan for heart rate sensors"""
    print("Scanning for heart rate sensors...")
    devices = await HeartRateMonitor.scan(timeout=5.0)

    if not devices:
        print("No sensors found.")
        return

    print(f"Found {len(devices)} sensor(s):")
    for i, d in enumerate(devices):
        print(f"  {i+1}. {d.name} [{d.address}] RSSI: {d.rssi}")


async def cmd_heart_rate(seconds: float, address: Optional[str] = None):
    """Stream smoothed heart rate"""
    async with HeartRateMonitor(address) as monitor:
        print(f"Connected to {monitor.address}")
        remaining = seconds
        while remaining > 0:
            await asyncio.sleep(1.0)
            remaining -= 1.0
            r = monitor.reading
            print(f"  HR {r.heart_rate:5.1f} BPM  HRV {r.hrv:5.1f} ms")


def print_help():
    print(__doc__)
    print("Commands:")
    print("  run [breaths] [length] [--hr[=ADDR]]  Guided session (breaths 10-50, length 3.0-8.0)")
    print("  simulate [breaths] [length]           Run a session instantly")
    print("  scan                                  Scan for heart rate sensors")
    print("  heart-rate [seconds] [address]        Stream heart rate")
    print()
    print("Options:")
    print("  -h, --help                            Show this help")
    print("  -v, --verbose                         Debug logging")


def _split_args(argv: List[str]):
    flags = [a for a in argv if a.startswith("-")]
    positional = [a for a in argv if not a.startswith("-")]
    return positional, flags


def _hr_flag(flags: List[str]):
    for flag in flags:
        if flag == "--hr":
            return True, None
        if flag.startswith("--hr="):
            return True, flag.split("=", 1)[1] or None
    return False, None


async def main(argv: Optional[List[str]] = None):
    argv = sys.argv[1:] if argv is None else argv
    positional, flags = _split_args(argv)

    if "-v" in flags or "--verbose" in flags:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")

    if not positional or "-h" in flags or "--help" in flags:
        print_help()
        return

    cmd = positional[0].lower()
    args = positional[1:]

    try:
        if cmd == "run":
            breaths = validate_breaths(args[0]) if len(args) > 0 else DEFAULT_BREATHS
            length = validate_length(args[1]) if len(args) > 1 else DEFAULT_BREATH_LENGTH
            use_hr, address = _hr_flag(flags)
            await cmd_run(breaths, length, use_hr, address)

        elif cmd == "simulate":
            breaths = validate_breaths(args[0]) if len(args) > 0 else DEFAULT_BREATHS
            length = validate_length(args[1]) if len(args) > 1 else DEFAULT_BREATH_LENGTH
            cmd_simulate(breaths, length)

        elif cmd == "scan":
            await cmd_scan()

        elif cmd == "heart-rate":
            seconds = float(args[0]) if len(args) > 0 else 30.0
            await cmd_heart_rate(seconds, args[1] if len(args) > 1 else None)

        elif cmd == "help":
            print_help()

        else:
            print(f"Unknown command: {cmd}")
            print_help()

    except Exception as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}")
        sys.exit(1)


def cli_main():
    """Synchronous entry point for CLI"""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nStopped!")


if __name__ == "__main__":
    cli_main()
