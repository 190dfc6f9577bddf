"""
Breath Practice - Session constants

Bounds, defaults and timings shared by the state machine, the CLI and the
sensor feed. None of these are user-configurable beyond the breath count and
breath length adjusters.
"""

# Scheduler
TICK_INTERVAL = 0.05  # seconds, ~20 Hz

# Rounds
TOTAL_ROUNDS = 3

# Breaths per round
MIN_BREATHS = 10
MAX_BREATHS = 50
BREATHS_STEP = 5
DEFAULT_BREATHS = 30

# Full inhale + exhale cycle (seconds)
MIN_BREATH_LENGTH = 3.0
MAX_BREATH_LENGTH = 8.0
BREATH_LENGTH_STEP = 0.5
DEFAULT_BREATH_LENGTH = 5.5

# Phase timings (seconds)
COUNTDOWN_DURATION = 3.0
RECOVERY_DURATION = 15.0
HOLD_MILESTONE = 60.0

# Recovery crescendo: (upper bound of remaining time, pulse spacing)
CRESCENDO_START = 3.0
CRESCENDO_CLICK = (2.0, 0.5)
CRESCENDO_RETRY = (1.0, 0.25)

# Breath indicator
MIN_BREATH_SCALE = 0.01
MAX_BREATH_SCALE = 1.0

# Float tolerance for countdown and progress comparisons
EPSILON = 1e-9

# Heart-rate smoothing
INITIAL_HEART_RATE = 60.0
INITIAL_HRV = 50.0
HEART_RATE_SMOOTHING = 0.7  # weight kept from the previous value
HRV_SMOOTHING = 0.8
HEART_RATE_RANGE = (40.0, 180.0)
RR_WINDOW = 120  # RR intervals kept for HRV (roughly the last minute)
MIN_RR_FOR_HRV = 10
