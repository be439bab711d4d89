"""Bistatic range and line-of-sight geometry shared by both estimators."""

import numpy as np

from src.bistatic.core.exceptions import DegenerateGeometryError
from src.bistatic.models.schemas import ECEFPosition, StationGeometry
from src.bistatic.utils.coordinates import vector_norm


def range_between(a: ECEFPosition, b: ECEFPosition) -> float:
    """Straight-line distance between two ECEF points in meters."""
    return vector_norm(b - a)


def unit_direction(
    origin: ECEFPosition, target: ECEFPosition, distance: float | None = None
) -> np.ndarray:
    """
    Unit vector pointing from origin toward target.

    Args:
        origin: Start point
        target: End point
        distance: Precomputed range between the points, if the caller has it

    Returns:
        ECEF unit 3-vector

    Raises:
        DegenerateGeometryError: If the points are co-located
    """
    if distance is None:
        distance = range_between(origin, target)
    if distance == 0.0:
        raise DegenerateGeometryError(f"No direction between co-located points {origin}")
    return (target - origin) / distance


def bistatic_range(target: ECEFPosition, station: StationGeometry) -> float:
    """Total path length Tx -> target -> Rx."""
    return range_between(station.rx, target) + range_between(station.tx, target)


def bistatic_delay(
    target: ECEFPosition, station: StationGeometry, baseline_m: float | None = None
) -> float:
    """Excess bistatic path over the direct Rx-Tx baseline, in meters."""
    if baseline_m is None:
        baseline_m = station.baseline_m
    return bistatic_range(target, station) - baseline_m
