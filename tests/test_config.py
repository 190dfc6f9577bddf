"""
Setting Validation Tests
"""

import pytest

from breath_practice.config import validate_breaths, validate_length
from breath_practice.exceptions import BreathPracticeError, ConfigurationError


class TestValidateBreaths:

    @pytest.mark.parametrize("value,expected", [(10, 10), (30, 30), ("45", 45), (50, 50)])
    def test_valid(self, value, expected):
        assert validate_breaths(value) == expected

    @pytest.mark.parametrize("value", [5, 55, 12, "abc", None, "3.5"])
    def test_invalid(self, value):
        with pytest.raises(ConfigurationError):
            validate_breaths(value)

    @pytest.mark.parametrize("value", [35.9, 30.5, 10.01])
    def test_fractional_rejected(self, value):
        with pytest.raises(ConfigurationError, match="whole number"):
            validate_breaths(value)

    def test_whole_float_accepted(self):
        assert validate_breaths(35.0) == 35

    def test_error_is_package_error(self):
        with pytest.raises(BreathPracticeError, match="between 10 and 50"):
            validate_breaths(60)


class TestValidateLength:

    @pytest.mark.parametrize("value,expected", [(3, 3.0), ("5.5", 5.5), (8.0, 8.0), (6.5, 6.5)])
    def test_valid(self, value, expected):
        assert validate_length(value) == expected

    @pytest.mark.parametrize("value", [2.5, 8.5, 4.2, "slow", None])
    def test_invalid(self, value):
        with pytest.raises(ConfigurationError):
            validate_length(value)

    def test_step_message(self):
        with pytest.raises(ConfigurationError, match="multiple of 0.5"):
            validate_length(4.25)
