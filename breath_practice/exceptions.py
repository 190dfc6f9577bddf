"""
Breath Practice - Exceptions
"""


class BreathPracticeError(Exception):
    """Base exception for Breath Practice"""
    pass


class ConfigurationError(BreathPracticeError):
    """Session setting outside its allowed range or step"""
    pass


class SensorError(BreathPracticeError):
    """Base exception for heart-rate sensor failures"""
    pass


class ConnectionError(SensorError):
    """Failed to connect to sensor"""
    pass


class SensorNotFoundError(SensorError):
    """No heart-rate sensor found"""
    pass


class TimeoutError(SensorError):
    """Operation timed out"""
    pass
