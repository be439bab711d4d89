"""
Physical and unit-conversion constants for bistatic Doppler estimation.

Shared by the coordinate helpers and both estimators.
"""

from typing import Final

# Speed of light in vacuum (m/s)
SPEED_OF_LIGHT: Final[float] = 299_792_458.0


class WGS84:
    """WGS84 reference ellipsoid parameters."""

    SEMI_MAJOR_AXIS_M: Final[float] = 6_378_137.0
    FLATTENING: Final[float] = 1.0 / 298.257223563
    ECCENTRICITY_SQUARED: Final[float] = FLATTENING * (2.0 - FLATTENING)


class UnitConversion:
    """Multiplicative factors from tracking-feed units to SI."""

    FEET_TO_METERS: Final[float] = 0.3048
    KNOTS_TO_MPS: Final[float] = 0.514444
    FPM_TO_MPS: Final[float] = 0.00508
    MHZ_TO_HZ: Final[float] = 1e6


# Geodetic validity limits
LATITUDE_MIN_DEG: Final[float] = -90.0
LATITUDE_MAX_DEG: Final[float] = 90.0
