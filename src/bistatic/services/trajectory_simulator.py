"""Synthetic constant-velocity target trajectories.

Generates position histories for exercising the estimators without a live
tracking feed.
"""

import numpy as np

from src.bistatic.models.schemas import ECEFPosition, GeodeticPosition, PositionSample
from src.bistatic.utils.coordinates import enu_to_ecef, fpm_to_mps, knots_to_mps


def simulate_track(
    start: GeodeticPosition,
    ground_speed_kn: float,
    track_deg: float,
    vertical_rate_fpm: float = 0.0,
    duration_s: float = 10.0,
    interval_s: float = 1.0,
    start_time: float = 0.0,
    position_noise_m: float = 0.0,
    seed: int | None = None,
) -> list[PositionSample]:
    """
    Sample a straight-line ECEF trajectory at a fixed interval.

    The velocity is fixed in the tangent plane at ``start`` and held constant
    in ECEF, which matches what the velocity estimator computes for a report
    at the start point.

    Args:
        start: Initial position
        ground_speed_kn: Ground speed in knots
        track_deg: Ground track, degrees clockwise from true north
        vertical_rate_fpm: Vertical rate in feet per minute
        duration_s: Time span covered; samples at 0, interval, ..., duration
        interval_s: Sampling interval in seconds
        start_time: Timestamp of the first sample
        position_noise_m: Standard deviation of Gaussian jitter per axis
        seed: Random seed for reproducible jitter

    Returns:
        Samples ordered by ascending timestamp
    """
    if interval_s <= 0:
        raise ValueError(f"Sampling interval must be positive, got {interval_s}")
    if duration_s < 0:
        raise ValueError(f"Duration must not be negative, got {duration_s}")

    speed = knots_to_mps(ground_speed_kn)
    track = np.radians(track_deg)
    velocity = enu_to_ecef(
        speed * np.sin(track),
        speed * np.cos(track),
        fpm_to_mps(vertical_rate_fpm),
        start.latitude_deg,
        start.longitude_deg,
    )
    origin = start.to_ecef().as_array()
    rng = np.random.default_rng(seed)

    n_samples = int(round(duration_s / interval_s)) + 1
    samples = []
    for i in range(n_samples):
        elapsed = i * interval_s
        position = origin + velocity * elapsed
        if position_noise_m > 0:
            position = position + rng.normal(0.0, position_noise_m, size=3)
        samples.append(PositionSample(ECEFPosition.from_array(position), start_time + elapsed))

    return samples
