"""
Basic Breath Practice Example
Runs a short session and prints each phase change and haptic cue
"""

import asyncio
from breath_practice import BreathPhase, BreathSession, HapticCue, HapticSink


class PrintHaptics(HapticSink):
    def play(self, cue: HapticCue) -> None:
        print(f"    * {cue.value}")


async def main():
    session = BreathSession(total_breaths=10, breath_length=3.0, haptics=PrintHaptics())
    done = asyncio.Event()

    def on_phase(old, new):
        print(f"{session.state.phase_display}")
        if new is BreathPhase.HOLDING:
            # Hold for five seconds, then breathe
            asyncio.get_running_loop().call_later(5.0, session.finish_holding)
        if new is BreathPhase.IDLE:
            done.set()

    session.on_phase_change(on_phase)
    session.start_stop()
    await done.wait()
    print("Done!")


if __name__ == "__main__":
    asyncio.run(main())
