"""
Heart-Rate Breathing Example
Guided session with live heart rate from a BLE sensor

Requires a chest strap or watch that exposes the standard Heart Rate
Service (Polar H10, Wahoo TICKR, Garmin HRM, ...).
"""

import asyncio
from breath_practice import BreathPhase, BreathSession, TerminalHaptics
from breath_practice.presenter import TerminalPresenter
from breath_practice.sensor import HeartRateMonitor


async def main():
    print("Connecting to heart rate sensor...")
    async with HeartRateMonitor() as monitor:
        print(f"Connected to {monitor.address}")

        session = BreathSession(haptics=TerminalHaptics())
        session.on_update(TerminalPresenter(monitor=monitor).show)
        finished = asyncio.Event()
        session.on_phase_change(
            lambda old, new: finished.set() if new is BreathPhase.IDLE else None
        )

        # Holds end automatically after 60s in this example
        async def end_holds():
            while not finished.is_set():
                state = session.state
                if state.phase is BreathPhase.HOLDING and state.hold_time >= 60:
                    session.finish_holding()
                await asyncio.sleep(0.5)

        session.start_stop()
        await asyncio.gather(finished.wait(), end_holds())

        reading = monitor.reading
        print()
        print(f"Final HR {reading.heart_rate:.0f} BPM, HRV {reading.hrv:.0f} ms")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nStopped!")
