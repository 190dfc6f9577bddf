"""
Test fixtures: prebuilt session snapshots and tick helpers
"""

from .sessions import (
    DELTA,
    breathing_state,
    holding_state,
    pre_recovery_state,
    recovery_state,
    tick,
    run_session,
)

__all__ = [
    "DELTA",
    "breathing_state",
    "holding_state",
    "pre_recovery_state",
    "recovery_state",
    "tick",
    "run_session",
]
