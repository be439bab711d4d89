"""Per-target Doppler tracking session.

Keeps each target's position history up to date from tracking reports and
selects between the velocity and position estimators, falling back to the
other method when the preferred one has no data.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from src.bistatic.core.exceptions import HistoryOrderError
from src.bistatic.models.schemas import (
    AircraftState,
    DopplerOutcome,
    ECEFPosition,
    PositionSample,
    StationGeometry,
)
from src.bistatic.services.doppler_validation import (
    DEFAULT_PASS_THRESHOLD_PCT,
    DEFAULT_WARN_THRESHOLD_PCT,
    ComparisonReport,
    compare_outcomes,
)
from src.bistatic.services.position_doppler import PositionDopplerEstimator
from src.bistatic.services.position_history import PositionHistory, PositionHistoryStore
from src.bistatic.services.velocity_doppler import VelocityDopplerEstimator
from src.bistatic.utils.doppler import carrier_wavelength
from src.bistatic.utils.geometry import bistatic_delay, range_between
from src.bistatic.utils.logging import TargetContext, get_logger, log_with_context

if TYPE_CHECKING:
    from src.bistatic.core.config import Config

logger = get_logger(__name__)


@dataclass(frozen=True)
class TargetReport:
    """Delay and Doppler for one target at one update."""

    target_id: str
    timestamp: float
    delay_m: float  # Excess bistatic path over the baseline
    doppler: DopplerOutcome


@dataclass(frozen=True)
class CrossCheck:
    """Both estimators evaluated on the same target."""

    target_id: str
    velocity: DopplerOutcome
    position: DopplerOutcome
    comparison: ComparisonReport | None  # Position against velocity; None if either is missing


class DopplerTracker:
    """Tracks targets against a fixed Rx/Tx pair."""

    def __init__(
        self,
        station: StationGeometry,
        carrier_freq_mhz: float,
        history_capacity: int = 10,
        smoothing_window: int = 1,
        prefer_velocity: bool = True,
        pass_threshold_pct: float = DEFAULT_PASS_THRESHOLD_PCT,
        warn_threshold_pct: float = DEFAULT_WARN_THRESHOLD_PCT,
    ):
        """
        Initialize tracker.

        Args:
            station: Rx/Tx geometry for the session
            carrier_freq_mhz: Illuminator carrier frequency (MHz)
            history_capacity: Samples retained per target
            smoothing_window: Median window for the position estimator
            prefer_velocity: Try the velocity estimator first
            pass_threshold_pct: Cross-check PASS bound (percent)
            warn_threshold_pct: Cross-check WARN bound (percent)
        """
        carrier_wavelength(carrier_freq_mhz)
        if smoothing_window > history_capacity:
            raise ValueError(
                f"Smoothing window ({smoothing_window}) exceeds history capacity "
                f"({history_capacity})"
            )
        if not 0 < pass_threshold_pct < warn_threshold_pct:
            raise ValueError(
                f"Thresholds must satisfy 0 < pass ({pass_threshold_pct}) "
                f"< warn ({warn_threshold_pct})"
            )

        self.station = station
        self.carrier_freq_mhz = carrier_freq_mhz
        self.prefer_velocity = prefer_velocity
        self.pass_threshold_pct = pass_threshold_pct
        self.warn_threshold_pct = warn_threshold_pct
        self.velocity_estimator = VelocityDopplerEstimator()
        self.position_estimator = PositionDopplerEstimator(smoothing_window)
        self._histories = PositionHistoryStore(history_capacity)

        logger.info(
            f"Doppler tracker ready: baseline={station.baseline_m / 1000:.2f} km, "
            f"fc={carrier_freq_mhz} MHz, capacity={history_capacity}, "
            f"window={smoothing_window}, prefer_velocity={prefer_velocity}"
        )

    @classmethod
    def from_config(cls, config: "Config") -> "DopplerTracker":
        app = config.app
        logger.info(f"Starting {app.APP_NAME} {app.APP_VERSION} ({app.APP_ENV})")
        return cls(
            station=config.station.to_geometry(),
            carrier_freq_mhz=config.station.STATION_CARRIER_FREQ_MHZ,
            history_capacity=config.estimator.ESTIMATOR_HISTORY_CAPACITY,
            smoothing_window=config.estimator.ESTIMATOR_SMOOTHING_WINDOW,
            prefer_velocity=config.estimator.ESTIMATOR_PREFER_VELOCITY,
            pass_threshold_pct=config.validation.VALIDATION_PASS_THRESHOLD_PCT,
            warn_threshold_pct=config.validation.VALIDATION_WARN_THRESHOLD_PCT,
        )

    def _record(self, target_id: str, target_ecef: ECEFPosition, timestamp: float) -> None:
        history = self._histories.get_or_create(target_id)
        try:
            history.append(PositionSample(target_ecef, timestamp))
        except HistoryOrderError:
            # Feeds repeat the last known position between updates
            logger.warning(f"Dropped stale position at t={timestamp}")

    def _estimate_velocity(
        self, aircraft: AircraftState, target_ecef: ECEFPosition
    ) -> DopplerOutcome:
        return self.velocity_estimator.estimate(
            aircraft,
            target_ecef,
            self.station,
            range_between(self.station.rx, target_ecef),
            range_between(self.station.tx, target_ecef),
            self.carrier_freq_mhz,
        )

    def _estimate_position(self, target_id: str) -> DopplerOutcome:
        history = self._histories.get(target_id)
        return self.position_estimator.estimate(
            history if history is not None else (),
            self.station,
            self.station.baseline_m,
            self.carrier_freq_mhz,
        )

    def observe(self, aircraft: AircraftState, timestamp: float) -> TargetReport:
        """
        Ingest a tracking report and estimate delay and Doppler.

        Args:
            aircraft: Latest report for the target
            timestamp: Monotonic time of the report's position (seconds)

        Returns:
            TargetReport with the preferred estimate, or the fallback when the
            preferred method is unavailable
        """
        with TargetContext(aircraft.id):
            target_ecef = aircraft.to_ecef()
            self._record(aircraft.id, target_ecef, timestamp)
            delay = bistatic_delay(target_ecef, self.station)

            estimators = [
                lambda: self._estimate_velocity(aircraft, target_ecef),
                lambda: self._estimate_position(aircraft.id),
            ]
            if not self.prefer_velocity:
                estimators.reverse()

            doppler = estimators[0]()
            if not doppler.available:
                logger.debug(
                    f"{doppler.method.value} unavailable ({doppler.reason.value}), falling back"
                )
                doppler = estimators[1]()

            log_with_context(
                logger,
                logging.DEBUG,
                "Target update",
                t=timestamp,
                delay_m=f"{delay:.1f}",
                method=doppler.method.value,
                available=doppler.available,
            )
            return TargetReport(aircraft.id, timestamp, delay, doppler)

    def cross_check(self, aircraft: AircraftState) -> CrossCheck:
        """
        Evaluate both estimators for a target without recording a new sample.

        The position estimate is compared against the velocity estimate using
        the tracker's PASS/WARN thresholds.
        """
        with TargetContext(aircraft.id):
            target_ecef = aircraft.to_ecef()
            velocity = self._estimate_velocity(aircraft, target_ecef)
            position = self._estimate_position(aircraft.id)
            comparison = compare_outcomes(
                velocity, position, self.pass_threshold_pct, self.warn_threshold_pct
            )
            if comparison is not None:
                logger.debug(f"Cross-check verdict: {comparison.verdict.value}")
            return CrossCheck(aircraft.id, velocity, position, comparison)

    def history(self, target_id: str) -> PositionHistory | None:
        return self._histories.get(target_id)

    def forget(self, target_id: str) -> bool:
        """Stop tracking a target and release its history."""
        removed = self._histories.remove(target_id)
        if removed:
            logger.info(f"Forgot target {target_id}")
        return removed

    def prune_stale(self, now: float, max_age_s: float) -> list[str]:
        """Forget targets with no position newer than ``now - max_age_s``."""
        removed = self._histories.prune(now - max_age_s)
        if removed:
            logger.info(f"Pruned {len(removed)} targets without updates for {max_age_s}s")
        return removed

    def tracked_targets(self) -> list[str]:
        return self._histories.target_ids()
