"""Instantaneous bistatic Doppler from reported target kinematics."""

import math

import numpy as np

from src.bistatic.models.schemas import (
    AircraftState,
    DopplerMethod,
    DopplerOutcome,
    DopplerUnavailable,
    ECEFPosition,
    StationGeometry,
    UnavailableReason,
)
from src.bistatic.utils.coordinates import enu_to_ecef, fpm_to_mps, knots_to_mps
from src.bistatic.utils.doppler import carrier_wavelength, doppler_from_range_rate
from src.bistatic.utils.geometry import range_between, unit_direction
from src.bistatic.utils.logging import get_logger

logger = get_logger(__name__)


def velocity_ecef(aircraft: AircraftState) -> np.ndarray:
    """
    Target velocity vector in ECEF (m/s).

    Ground speed and track give the horizontal East/North components, the
    vertical rate the Up component (zero when not reported). The ENU frame
    is the tangent plane at the aircraft's own position.

    Args:
        aircraft: State with ground speed and track present

    Returns:
        ECEF velocity 3-vector
    """
    speed = knots_to_mps(aircraft.ground_speed_kn)
    track = math.radians(aircraft.track_deg)
    east = speed * math.sin(track)
    north = speed * math.cos(track)
    up = fpm_to_mps(aircraft.vertical_rate_fpm) if aircraft.vertical_rate_fpm is not None else 0.0

    return enu_to_ecef(
        east,
        north,
        up,
        aircraft.position.latitude_deg,
        aircraft.position.longitude_deg,
    )


class VelocityDopplerEstimator:
    """Doppler from ground speed, track and vertical rate."""

    method = DopplerMethod.VELOCITY

    def estimate(
        self,
        aircraft: AircraftState,
        target_ecef: ECEFPosition,
        station: StationGeometry,
        d_rx_target: float,
        d_tx_target: float,
        carrier_freq_mhz: float,
    ) -> DopplerOutcome:
        """
        Estimate Doppler from the aircraft's reported velocity.

        Args:
            aircraft: Tracking report for the target
            target_ecef: Target position in ECEF
            station: Rx/Tx geometry
            d_rx_target: Precomputed Rx-target range (m)
            d_tx_target: Precomputed Tx-target range (m)
            carrier_freq_mhz: Illuminator carrier frequency (MHz)

        Returns:
            DopplerResult, or DopplerUnavailable when ground speed or track is missing

        Raises:
            InvalidFrequencyError: If the carrier frequency is not positive
            InvalidGeodeticInputError: If the aircraft latitude is out of range
            DegenerateGeometryError: If the target coincides with a station
        """
        # Validate the frequency before looking at kinematics
        carrier_wavelength(carrier_freq_mhz)

        if not aircraft.has_velocity:
            logger.debug(f"{aircraft.id}: ground speed or track missing")
            return DopplerUnavailable(self.method, UnavailableReason.MISSING_KINEMATICS)

        velocity = velocity_ecef(aircraft)
        u_rx = unit_direction(target_ecef, station.rx, d_rx_target)
        u_tx = unit_direction(target_ecef, station.tx, d_tx_target)

        # Rate of change of (Rx leg + Tx leg)
        range_rate = -float(np.dot(velocity, u_rx + u_tx))
        return doppler_from_range_rate(range_rate, carrier_freq_mhz, self.method)

    def estimate_for(
        self, aircraft: AircraftState, station: StationGeometry, carrier_freq_mhz: float
    ) -> DopplerOutcome:
        """Estimate using ranges derived from the aircraft's own position."""
        target_ecef = aircraft.to_ecef()
        return self.estimate(
            aircraft,
            target_ecef,
            station,
            range_between(station.rx, target_ecef),
            range_between(station.tx, target_ecef),
            carrier_freq_mhz,
        )
