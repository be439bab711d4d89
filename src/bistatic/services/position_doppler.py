"""Bistatic Doppler by finite differencing a short position history.

Smoothing policy: when ``smoothing_window`` > 1, a sliding median is taken
over the derived bistatic delays and, over the same windows, over the sample
timestamps. The rate is then differenced between the two newest smoothed
points. Medianing both series keeps the rate unbiased for steady motion; the
estimate refers to the median epoch of the window rather than the newest
sample. Windows shorter than ``smoothing_window`` are used as-is at the start
of a history.
"""

from collections.abc import Sequence

import numpy as np

from src.bistatic.core.exceptions import DegenerateTimingError
from src.bistatic.models.schemas import (
    DopplerMethod,
    DopplerOutcome,
    DopplerUnavailable,
    PositionSample,
    StationGeometry,
    UnavailableReason,
)
from src.bistatic.services.position_history import PositionHistory
from src.bistatic.utils.doppler import carrier_wavelength, doppler_from_range_rate
from src.bistatic.utils.geometry import bistatic_delay
from src.bistatic.utils.logging import get_logger

logger = get_logger(__name__)


def _sliding_median(values: np.ndarray, index: int, window: int) -> float:
    start = max(0, index - window + 1)
    return float(np.median(values[start : index + 1]))


class PositionDopplerEstimator:
    """Doppler from the rate of change of bistatic delay over recent positions."""

    method = DopplerMethod.POSITION

    def __init__(self, smoothing_window: int = 1):
        """
        Initialize estimator.

        Args:
            smoothing_window: Median window over delays and timestamps; 1 disables smoothing
        """
        if smoothing_window < 1:
            raise ValueError(f"Smoothing window must be >= 1, got {smoothing_window}")
        self.smoothing_window = smoothing_window

    def estimate(
        self,
        history: PositionHistory | Sequence[PositionSample],
        station: StationGeometry,
        baseline_rx_tx: float,
        carrier_freq_mhz: float,
    ) -> DopplerOutcome:
        """
        Estimate Doppler from a target's position history.

        Args:
            history: Samples ordered oldest first
            station: Rx/Tx geometry
            baseline_rx_tx: Direct Rx-Tx range (m)
            carrier_freq_mhz: Illuminator carrier frequency (MHz)

        Returns:
            DopplerResult, or DopplerUnavailable with fewer than two samples

        Raises:
            InvalidFrequencyError: If the carrier frequency is not positive
            DegenerateTimingError: If the two newest samples are not strictly ordered in time
        """
        carrier_wavelength(carrier_freq_mhz)

        samples = history.snapshot() if isinstance(history, PositionHistory) else tuple(history)
        if len(samples) < 2:
            return DopplerUnavailable(self.method, UnavailableReason.INSUFFICIENT_HISTORY)

        last, prev = samples[-1], samples[-2]
        if last.timestamp <= prev.timestamp:
            raise DegenerateTimingError(
                f"Cannot difference samples at t={prev.timestamp} and t={last.timestamp}"
            )

        delays = np.array([bistatic_delay(s.position, station, baseline_rx_tx) for s in samples])
        timestamps = np.array([s.timestamp for s in samples], dtype=float)

        n = len(samples)
        if self.smoothing_window > 1:
            d_last = _sliding_median(delays, n - 1, self.smoothing_window)
            d_prev = _sliding_median(delays, n - 2, self.smoothing_window)
            t_last = _sliding_median(timestamps, n - 1, self.smoothing_window)
            t_prev = _sliding_median(timestamps, n - 2, self.smoothing_window)
        else:
            d_last, d_prev = float(delays[-1]), float(delays[-2])
            t_last, t_prev = float(timestamps[-1]), float(timestamps[-2])

        dt = t_last - t_prev
        if dt <= 0.0:
            raise DegenerateTimingError(f"Smoothed timestamps do not advance (dt={dt})")

        range_rate = (d_last - d_prev) / dt
        logger.debug(
            f"Position range-rate {range_rate:.3f} m/s over {n} samples "
            f"(window={self.smoothing_window})"
        )
        return doppler_from_range_rate(range_rate, carrier_freq_mhz, self.method)
