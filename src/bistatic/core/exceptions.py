"""
Custom exception classes for the bistatic Doppler core.

Only caller contract violations are raised. Missing kinematics and short
position histories are reported as DopplerUnavailable values instead.
"""


class BistaticError(Exception):
    """Base exception for all bistatic Doppler exceptions."""

    pass


class InvalidGeodeticInputError(BistaticError):
    """Exception raised for out-of-range latitude or non-finite coordinates."""

    pass


class InvalidFrequencyError(BistaticError):
    """Exception raised when the carrier frequency is not positive and finite."""

    pass


class DegenerateGeometryError(BistaticError):
    """Exception raised when a direction is requested between co-located points."""

    pass


class DegenerateTimingError(BistaticError):
    """Exception raised when the differencing pair shares a timestamp."""

    pass


class HistoryOrderError(BistaticError):
    """Exception raised when a position sample is not strictly newer than the history."""

    pass


class DopplerComputationError(BistaticError):
    """Exception raised when a Doppler result would be NaN or infinite."""

    pass


class ConfigurationError(BistaticError):
    """Exception raised for configuration errors."""

    pass
