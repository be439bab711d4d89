"""Services module for the bistatic Doppler core."""

from .doppler_tracker import CrossCheck, DopplerTracker, TargetReport
from .doppler_validation import ComparisonReport, ValidationVerdict, compare_doppler
from .position_doppler import PositionDopplerEstimator
from .position_history import PositionHistory, PositionHistoryStore
from .trajectory_simulator import simulate_track
from .velocity_doppler import VelocityDopplerEstimator

__all__ = [
    "ComparisonReport",
    "CrossCheck",
    "DopplerTracker",
    "PositionDopplerEstimator",
    "PositionHistory",
    "PositionHistoryStore",
    "TargetReport",
    "ValidationVerdict",
    "VelocityDopplerEstimator",
    "compare_doppler",
    "simulate_track",
]
