"""Data models and schemas for the bistatic Doppler core."""

import math
from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from src.bistatic.core.exceptions import DopplerComputationError


@dataclass(frozen=True)
class GeodeticPosition:
    """WGS84 geodetic position."""

    latitude_deg: float
    longitude_deg: float
    altitude_m: float = 0.0  # Height above the ellipsoid

    def to_ecef(self) -> "ECEFPosition":
        """Convert to Earth-centered Earth-fixed coordinates."""
        from src.bistatic.utils.coordinates import geodetic_to_ecef

        return geodetic_to_ecef(self.latitude_deg, self.longitude_deg, self.altitude_m)


@dataclass(frozen=True)
class ECEFPosition:
    """Earth-centered Earth-fixed position in meters."""

    x: float
    y: float
    z: float

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)

    @classmethod
    def from_array(cls, vector: np.ndarray) -> "ECEFPosition":
        return cls(float(vector[0]), float(vector[1]), float(vector[2]))

    def __sub__(self, other: "ECEFPosition") -> np.ndarray:
        return self.as_array() - other.as_array()


@dataclass(frozen=True)
class AircraftState:
    """Target kinematics from one tracking report.

    Ground speed and track are both needed for velocity-based Doppler; the
    vertical rate is optional and treated as level flight when absent.
    """

    id: str
    position: GeodeticPosition
    ground_speed_kn: float | None = None
    track_deg: float | None = None
    vertical_rate_fpm: float | None = None

    @property
    def has_velocity(self) -> bool:
        """Whether the report carries enough kinematics for velocity Doppler."""
        return self.ground_speed_kn is not None and self.track_deg is not None

    def to_ecef(self) -> "ECEFPosition":
        return self.position.to_ecef()

    @classmethod
    def from_report(
        cls,
        target_id: str,
        latitude_deg: float,
        longitude_deg: float,
        altitude_ft: float,
        ground_speed_kn: float | None = None,
        track_deg: float | None = None,
        vertical_rate_fpm: float | None = None,
    ) -> "AircraftState":
        """Build a state from tracking-feed units (altitude in feet).

        Args:
            target_id: Target identifier (e.g. ICAO hex address)
            latitude_deg: Latitude in degrees
            longitude_deg: Longitude in degrees
            altitude_ft: Geometric altitude in feet
            ground_speed_kn: Ground speed in knots
            track_deg: Ground track, degrees clockwise from true north
            vertical_rate_fpm: Vertical rate in feet per minute

        Returns:
            AircraftState with altitude converted to meters
        """
        from src.bistatic.utils.coordinates import feet_to_meters

        return cls(
            id=target_id,
            position=GeodeticPosition(latitude_deg, longitude_deg, feet_to_meters(altitude_ft)),
            ground_speed_kn=ground_speed_kn,
            track_deg=track_deg,
            vertical_rate_fpm=vertical_rate_fpm,
        )


@dataclass(frozen=True)
class StationGeometry:
    """Receiver and illuminator positions, fixed for a computation session."""

    rx: ECEFPosition
    tx: ECEFPosition
    baseline_m: float = field(init=False)  # Direct Rx-Tx range

    def __post_init__(self) -> None:
        from src.bistatic.utils.coordinates import vector_norm

        object.__setattr__(self, "baseline_m", vector_norm(self.tx - self.rx))

    @classmethod
    def from_geodetic(cls, rx: GeodeticPosition, tx: GeodeticPosition) -> "StationGeometry":
        return cls(rx=rx.to_ecef(), tx=tx.to_ecef())


@dataclass(frozen=True)
class PositionSample:
    """Target ECEF position at a monotonic timestamp (seconds)."""

    position: ECEFPosition
    timestamp: float


class DopplerMethod(str, Enum):
    """Provenance of a Doppler estimate."""

    VELOCITY = "velocity"
    POSITION = "position"


class UnavailableReason(str, Enum):
    """Why an estimator could not produce a value."""

    MISSING_KINEMATICS = "missing_kinematics"
    INSUFFICIENT_HISTORY = "insufficient_history"


@dataclass(frozen=True)
class DopplerResult:
    """A computed Doppler shift."""

    frequency_hz: float
    method: DopplerMethod
    range_rate_mps: float  # Rate of change of the bistatic path length

    available = True

    def __post_init__(self) -> None:
        if not (math.isfinite(self.frequency_hz) and math.isfinite(self.range_rate_mps)):
            raise DopplerComputationError(
                f"Non-finite {self.method.value} Doppler: "
                f"frequency={self.frequency_hz}, range_rate={self.range_rate_mps}"
            )


@dataclass(frozen=True)
class DopplerUnavailable:
    """Explicit absence of a Doppler estimate."""

    method: DopplerMethod
    reason: UnavailableReason

    available = False


DopplerOutcome = DopplerResult | DopplerUnavailable
