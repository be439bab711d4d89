"""Unit tests for the position finite-difference Doppler estimator."""

import pytest

from src.bistatic.core.exceptions import DegenerateTimingError, InvalidFrequencyError
from src.bistatic.models.schemas import (
    DopplerMethod,
    DopplerResult,
    DopplerUnavailable,
    ECEFPosition,
    GeodeticPosition,
    PositionSample,
    UnavailableReason,
)
from src.bistatic.services.position_doppler import PositionDopplerEstimator
from src.bistatic.services.position_history import PositionHistory
from src.bistatic.services.trajectory_simulator import simulate_track
from src.bistatic.utils.doppler import carrier_wavelength
from src.bistatic.utils.geometry import bistatic_delay, unit_direction

START = GeodeticPosition(-34.9, 138.62, 9174.48)


@pytest.fixture
def estimator():
    return PositionDopplerEstimator()


@pytest.fixture
def track_samples():
    return simulate_track(START, ground_speed_kn=250.0, track_deg=135.0, duration_s=9.0)


class TestAvailability:
    def test_empty_history_is_unavailable(self, estimator, station):
        result = estimator.estimate([], station, station.baseline_m, 204.64)

        assert isinstance(result, DopplerUnavailable)
        assert result.method is DopplerMethod.POSITION
        assert result.reason is UnavailableReason.INSUFFICIENT_HISTORY

    def test_single_sample_is_unavailable(self, estimator, station, track_samples):
        history = PositionHistory("abc123", capacity=10)
        history.append(track_samples[0])

        result = estimator.estimate(history, station, station.baseline_m, 204.64)
        assert result.available is False

    def test_two_samples_are_enough(self, estimator, station, track_samples):
        result = estimator.estimate(track_samples[:2], station, station.baseline_m, 204.64)
        assert isinstance(result, DopplerResult)

    def test_invalid_frequency_fails_fast(self, estimator, station, track_samples):
        with pytest.raises(InvalidFrequencyError):
            estimator.estimate(track_samples, station, station.baseline_m, 0.0)


class TestDegenerateTiming:
    def test_equal_timestamps_fail_explicitly(self, estimator, station, track_samples):
        duplicate = PositionSample(track_samples[1].position, track_samples[0].timestamp)

        with pytest.raises(DegenerateTimingError):
            estimator.estimate([track_samples[0], duplicate], station, station.baseline_m, 204.64)

    def test_reversed_timestamps_fail(self, estimator, station, track_samples):
        with pytest.raises(DegenerateTimingError):
            estimator.estimate(
                [track_samples[1], track_samples[0]], station, station.baseline_m, 204.64
            )

    def test_only_newest_pair_matters(self, estimator, station, track_samples):
        """Older duplicates do not block differencing of the newest pair."""
        duplicate = PositionSample(track_samples[0].position, track_samples[0].timestamp)
        samples = [track_samples[0], duplicate, track_samples[1], track_samples[2]]

        result = estimator.estimate(samples, station, station.baseline_m, 204.64)
        assert result.available is True


class TestFiniteDifference:
    def test_rate_from_two_newest_samples(self, estimator, station, track_samples):
        prev, last = track_samples[-2], track_samples[-1]
        d_prev = bistatic_delay(prev.position, station)
        d_last = bistatic_delay(last.position, station)
        expected_rate = (d_last - d_prev) / (last.timestamp - prev.timestamp)

        result = estimator.estimate(track_samples, station, station.baseline_m, 204.64)

        assert result.range_rate_mps == pytest.approx(expected_rate)
        assert result.frequency_hz == pytest.approx(-expected_rate / carrier_wavelength(204.64))

    def test_stationary_target_has_zero_doppler(self, estimator, station):
        p = START.to_ecef()
        samples = [PositionSample(p, 0.0), PositionSample(p, 1.0)]

        result = estimator.estimate(samples, station, station.baseline_m, 204.64)
        assert result.frequency_hz == 0

    def test_baseline_offset_cancels(self, estimator, station, track_samples):
        """The baseline shifts every delay equally and drops out of the rate."""
        with_baseline = estimator.estimate(track_samples, station, station.baseline_m, 204.64)
        without = estimator.estimate(track_samples, station, 0.0, 204.64)

        assert with_baseline.frequency_hz == pytest.approx(without.frequency_hz, rel=1e-6)

    def test_history_and_sequence_agree(self, estimator, station, track_samples):
        history = PositionHistory("abc123", capacity=len(track_samples))
        for sample in track_samples:
            history.append(sample)

        assert estimator.estimate(
            history, station, station.baseline_m, 204.64
        ) == estimator.estimate(track_samples, station, station.baseline_m, 204.64)

    def test_repeat_is_bit_identical(self, estimator, station, track_samples):
        first = estimator.estimate(track_samples, station, station.baseline_m, 204.64)
        second = estimator.estimate(track_samples, station, station.baseline_m, 204.64)

        assert first.frequency_hz == second.frequency_hz
        assert first == second


class TestSmoothing:
    def test_window_must_be_positive(self):
        with pytest.raises(ValueError):
            PositionDopplerEstimator(smoothing_window=0)

    def test_window_one_is_raw_difference(self, station, track_samples):
        raw = PositionDopplerEstimator(1).estimate(track_samples, station, station.baseline_m, 204.64)
        assert raw == PositionDopplerEstimator().estimate(
            track_samples, station, station.baseline_m, 204.64
        )

    def test_median_rejects_single_position_spike(self, station):
        """One corrupted position barely moves the smoothed estimate."""
        clean = simulate_track(START, 250.0, 135.0, duration_s=9.0)
        spiked = list(clean)
        bad = clean[-2].position
        # Push the point 300 m further from the receiver so its delay jumps
        jump = 300.0 * unit_direction(station.rx, bad)
        spiked[-2] = PositionSample(
            ECEFPosition.from_array(bad.as_array() + jump), clean[-2].timestamp
        )

        smoothing = PositionDopplerEstimator(smoothing_window=5)
        reference = smoothing.estimate(clean, station, station.baseline_m, 204.64)
        smoothed = smoothing.estimate(spiked, station, station.baseline_m, 204.64)
        raw = PositionDopplerEstimator().estimate(spiked, station, station.baseline_m, 204.64)

        assert abs(smoothed.frequency_hz - reference.frequency_hz) < 0.05 * abs(
            reference.frequency_hz
        )
        assert abs(raw.frequency_hz - reference.frequency_hz) > abs(
            smoothed.frequency_hz - reference.frequency_hz
        )

    def test_smoothed_rate_matches_steady_motion(self, station):
        """Medianing delays and timestamps together keeps steady-motion rates."""
        samples = simulate_track(START, 250.0, 135.0, duration_s=9.0)

        raw = PositionDopplerEstimator().estimate(samples, station, station.baseline_m, 204.64)
        smoothed = PositionDopplerEstimator(5).estimate(
            samples, station, station.baseline_m, 204.64
        )

        assert smoothed.frequency_hz == pytest.approx(raw.frequency_hz, rel=0.05)

    def test_window_larger_than_history_is_truncated(self, station, track_samples):
        result = PositionDopplerEstimator(smoothing_window=50).estimate(
            track_samples[:3], station, station.baseline_m, 204.64
        )
        assert result.available is True
