"""Unit tests for synthetic trajectory generation."""

import pytest

from src.bistatic.models.schemas import GeodeticPosition
from src.bistatic.services.trajectory_simulator import simulate_track
from src.bistatic.utils.coordinates import knots_to_mps, vector_norm

START = GeodeticPosition(-35.0, 138.65, 9174.48)


class TestSimulateTrack:
    def test_sample_count_and_timestamps(self):
        samples = simulate_track(START, 88.5, 270.0, duration_s=10.0, start_time=100.0)

        assert len(samples) == 11
        assert [s.timestamp for s in samples] == [100.0 + i for i in range(11)]

    def test_first_sample_is_start(self):
        samples = simulate_track(START, 88.5, 270.0)
        assert samples[0].position == START.to_ecef()

    def test_constant_speed(self):
        samples = simulate_track(START, 250.0, 45.0, vertical_rate_fpm=0.0, interval_s=0.5)

        for prev, last in zip(samples, samples[1:]):
            step = vector_norm(last.position - prev.position)
            assert step == pytest.approx(knots_to_mps(250.0) * 0.5)

    def test_zero_duration_gives_single_sample(self):
        assert len(simulate_track(START, 100.0, 0.0, duration_s=0.0)) == 1

    def test_stationary_target(self):
        samples = simulate_track(START, 0.0, 0.0, duration_s=3.0)
        assert all(s.position == START.to_ecef() for s in samples)

    def test_seeded_noise_is_reproducible(self):
        a = simulate_track(START, 88.5, 270.0, position_noise_m=5.0, seed=7)
        b = simulate_track(START, 88.5, 270.0, position_noise_m=5.0, seed=7)
        clean = simulate_track(START, 88.5, 270.0)

        assert a == b
        assert a != clean

    @pytest.mark.parametrize("interval", [0.0, -1.0])
    def test_rejects_non_positive_interval(self, interval):
        with pytest.raises(ValueError):
            simulate_track(START, 88.5, 270.0, interval_s=interval)

    def test_rejects_negative_duration(self):
        with pytest.raises(ValueError):
            simulate_track(START, 88.5, 270.0, duration_s=-1.0)
