"""
Breath Practice - Setting validation

Adjusters on a running session clamp silently. Values that arrive from
outside (constructor arguments, command line) are validated here instead,
so a typo is reported rather than quietly rounded.
"""

from .constants import (
    BREATH_LENGTH_STEP,
    BREATHS_STEP,
    EPSILON,
    MAX_BREATH_LENGTH,
    MAX_BREATHS,
    MIN_BREATH_LENGTH,
    MIN_BREATHS,
)
from .exceptions import ConfigurationError


def _on_step(value: float, start: float, step: float) -> bool:
    steps = (value - start) / step
    return abs(steps - round(steps)) < EPSILON


def validate_breaths(value) -> int:
    """
    Validate a breaths-per-round setting

    Args:
        value: Breath count (int or numeric string)

    Returns:
        The breath count as an int

    Raises:
        ConfigurationError: If not a whole number in 10-50 on a step of 5

    Example:
        validate_breaths("35")  # 35
        validate_breaths(33)    # raises ConfigurationError
    """
    try:
        breaths = int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"breaths must be a whole number, got {value!r}")
    if isinstance(value, float) and value != breaths:
        raise ConfigurationError(f"breaths must be a whole number, got {value!r}")

    if not (MIN_BREATHS <= breaths <= MAX_BREATHS):
        raise ConfigurationError(
            f"breaths must be between {MIN_BREATHS} and {MAX_BREATHS}, got {breaths}"
        )
    if not _on_step(breaths, MIN_BREATHS, BREATHS_STEP):
        raise ConfigurationError(
            f"breaths must be a multiple of {BREATHS_STEP}, got {breaths}"
        )
    return breaths


def validate_length(value) -> float:
    """
    Validate a breath length (full inhale + exhale) in seconds

    Args:
        value: Length in seconds (float or numeric string)

    Returns:
        The length as a float

    Raises:
        ConfigurationError: If outside 3.0-8.0 or not on a 0.5s step
    """
    try:
        length = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"breath length must be a number, got {value!r}")

    if not (MIN_BREATH_LENGTH <= length <= MAX_BREATH_LENGTH):
        raise ConfigurationError(
            f"breath length must be between {MIN_BREATH_LENGTH} and "
            f"{MAX_BREATH_LENGTH} seconds, got {length}"
        )
    if not _on_step(length, MIN_BREATH_LENGTH, BREATH_LENGTH_STEP):
        raise ConfigurationError(
            f"breath length must be a multiple of {BREATH_LENGTH_STEP}s, got {length}"
        )
    return length
