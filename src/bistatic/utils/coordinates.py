"""Geodetic, ECEF and local-tangent-plane coordinate transforms.

All ellipsoid parameters and unit factors come from
src.bistatic.constants.physical.
"""

import math
from collections.abc import Sequence

import numpy as np

from src.bistatic.constants.physical import (
    LATITUDE_MAX_DEG,
    LATITUDE_MIN_DEG,
    WGS84,
    UnitConversion,
)
from src.bistatic.core.exceptions import InvalidGeodeticInputError
from src.bistatic.models.schemas import ECEFPosition


def wrap_longitude(lon_deg: float) -> float:
    """Wrap a longitude into [-180, 180)."""
    return (lon_deg + 180.0) % 360.0 - 180.0


def _validate_geodetic(lat_deg: float, lon_deg: float, alt_m: float = 0.0) -> None:
    if not all(math.isfinite(v) for v in (lat_deg, lon_deg, alt_m)):
        raise InvalidGeodeticInputError(
            f"Non-finite geodetic input: lat={lat_deg}, lon={lon_deg}, alt={alt_m}"
        )
    if not LATITUDE_MIN_DEG <= lat_deg <= LATITUDE_MAX_DEG:
        raise InvalidGeodeticInputError(f"Latitude must be within [-90, 90], got {lat_deg}")


def geodetic_to_ecef(lat_deg: float, lon_deg: float, alt_m: float) -> ECEFPosition:
    """
    Convert WGS84 geodetic coordinates to ECEF.

    Args:
        lat_deg: Latitude in degrees, [-90, 90]
        lon_deg: Longitude in degrees, any value (wrapped modulo 360)
        alt_m: Height above the ellipsoid in meters

    Returns:
        ECEF position in meters

    Raises:
        InvalidGeodeticInputError: If latitude is out of range or any input is non-finite
    """
    _validate_geodetic(lat_deg, lon_deg, alt_m)

    lat = math.radians(lat_deg)
    lon = math.radians(wrap_longitude(lon_deg))
    sin_lat = math.sin(lat)
    cos_lat = math.cos(lat)

    # Prime vertical radius of curvature
    n = WGS84.SEMI_MAJOR_AXIS_M / math.sqrt(1.0 - WGS84.ECCENTRICITY_SQUARED * sin_lat**2)

    x = (n + alt_m) * cos_lat * math.cos(lon)
    y = (n + alt_m) * cos_lat * math.sin(lon)
    z = (n * (1.0 - WGS84.ECCENTRICITY_SQUARED) + alt_m) * sin_lat
    return ECEFPosition(x, y, z)


def feet_to_meters(ft: float) -> float:
    return ft * UnitConversion.FEET_TO_METERS


def knots_to_mps(kn: float) -> float:
    return kn * UnitConversion.KNOTS_TO_MPS


def fpm_to_mps(fpm: float) -> float:
    return fpm * UnitConversion.FPM_TO_MPS


def vector_norm(v: Sequence[float] | np.ndarray) -> float:
    """Euclidean length of a 3-vector."""
    return float(np.linalg.norm(np.asarray(v, dtype=float)))


def enu_to_ecef_matrix(lat_deg: float, lon_deg: float) -> np.ndarray:
    """
    Rotation from the local East-North-Up frame to ECEF.

    Columns are the East, North and Up unit vectors expressed in ECEF at the
    given geodetic latitude and longitude.

    Raises:
        InvalidGeodeticInputError: If latitude is out of range or either angle is non-finite
    """
    _validate_geodetic(lat_deg, lon_deg)

    lat = math.radians(lat_deg)
    lon = math.radians(lon_deg)
    sl, cl = math.sin(lat), math.cos(lat)
    slon, clon = math.sin(lon), math.cos(lon)

    return np.array(
        [
            [-slon, -sl * clon, cl * clon],
            [clon, -sl * slon, cl * slon],
            [0.0, cl, sl],
        ]
    )


def enu_to_ecef(east: float, north: float, up: float, lat_deg: float, lon_deg: float) -> np.ndarray:
    """Rotate a local ENU vector into the ECEF frame."""
    return enu_to_ecef_matrix(lat_deg, lon_deg) @ np.array([east, north, up], dtype=float)
