"""Unit tests for geodetic/ECEF coordinate transforms."""

import math

import numpy as np
import pytest

from src.bistatic.constants.physical import WGS84
from src.bistatic.core.exceptions import InvalidGeodeticInputError
from src.bistatic.utils.coordinates import (
    enu_to_ecef,
    enu_to_ecef_matrix,
    feet_to_meters,
    fpm_to_mps,
    geodetic_to_ecef,
    knots_to_mps,
    vector_norm,
    wrap_longitude,
)

POLAR_RADIUS_M = WGS84.SEMI_MAJOR_AXIS_M * (1.0 - WGS84.FLATTENING)


class TestGeodeticToECEF:
    """Test suite for WGS84 geodetic to ECEF conversion."""

    def test_equator_prime_meridian_is_semi_major_axis(self):
        """Zero altitude on the equator at 0° longitude sits on the x axis at a."""
        p = geodetic_to_ecef(0.0, 0.0, 0.0)

        assert abs(p.x - 6378137.0) < 1.0
        assert abs(p.y) < 1e-6
        assert abs(p.z) < 1e-6

    def test_equator_90_east_lies_on_y_axis(self):
        p = geodetic_to_ecef(0.0, 90.0, 0.0)

        assert abs(p.x) < 1e-6
        assert abs(p.y - WGS84.SEMI_MAJOR_AXIS_M) < 1e-6

    def test_north_pole_is_polar_radius(self):
        p = geodetic_to_ecef(90.0, 0.0, 0.0)

        assert abs(p.z - POLAR_RADIUS_M) < 1e-3
        assert math.hypot(p.x, p.y) < 1e-6

    def test_altitude_extends_along_normal(self):
        """At the equator the ellipsoid normal is radial, so altitude adds to x."""
        p = geodetic_to_ecef(0.0, 0.0, 1000.0)
        assert p.x == pytest.approx(WGS84.SEMI_MAJOR_AXIS_M + 1000.0)

    def test_southern_hemisphere_has_negative_z(self):
        p = geodetic_to_ecef(-35.0, 138.7, 50.0)

        assert p.z < 0
        assert p.x < 0  # longitude beyond 90° east
        assert p.y > 0

    def test_deterministic(self):
        assert geodetic_to_ecef(-35.0, 138.65, 9174.48) == geodetic_to_ecef(
            -35.0, 138.65, 9174.48
        )

    def test_longitude_wraps_modulo_360(self):
        a = geodetic_to_ecef(10.0, -170.0, 100.0)
        b = geodetic_to_ecef(10.0, 190.0, 100.0)
        c = geodetic_to_ecef(10.0, 550.0, 100.0)

        assert np.allclose(a.as_array(), b.as_array(), atol=1e-6)
        assert np.allclose(a.as_array(), c.as_array(), atol=1e-6)

    @pytest.mark.parametrize("latitude", [90.0001, -90.0001, 180.0, -400.0])
    def test_latitude_out_of_range_rejected(self, latitude):
        with pytest.raises(InvalidGeodeticInputError, match="Latitude"):
            geodetic_to_ecef(latitude, 0.0, 0.0)

    @pytest.mark.parametrize(
        "lat, lon, alt",
        [
            (math.nan, 0.0, 0.0),
            (0.0, math.inf, 0.0),
            (0.0, 0.0, -math.inf),
        ],
    )
    def test_non_finite_input_rejected(self, lat, lon, alt):
        with pytest.raises(InvalidGeodeticInputError, match="Non-finite"):
            geodetic_to_ecef(lat, lon, alt)


class TestUnitConversions:
    def test_feet_to_meters(self):
        assert feet_to_meters(1.0) == 0.3048
        assert feet_to_meters(30100.0) == pytest.approx(9174.48)
        assert feet_to_meters(0.0) == 0.0

    def test_knots_to_mps(self):
        assert knots_to_mps(88.5) == pytest.approx(45.528294)

    def test_fpm_to_mps(self):
        assert fpm_to_mps(1000.0) == pytest.approx(5.08)
        assert fpm_to_mps(-1000.0) == pytest.approx(-5.08)

    def test_wrap_longitude(self):
        assert wrap_longitude(180.0) == -180.0
        assert wrap_longitude(-180.0) == -180.0
        assert wrap_longitude(359.0) == pytest.approx(-1.0)
        assert wrap_longitude(138.65) == pytest.approx(138.65)


class TestVectorNorm:
    def test_zero_vector(self):
        assert vector_norm([0.0, 0.0, 0.0]) == 0.0

    def test_pythagorean_triple(self):
        assert vector_norm([3.0, 4.0, 12.0]) == 13.0

    def test_negation_symmetric(self):
        v = np.array([1234.5, -0.001, 9.8e6])
        assert vector_norm(v) == vector_norm(-v)

    def test_accepts_numpy_and_sequences(self):
        assert vector_norm(np.array([1.0, 0.0, 0.0])) == vector_norm((1.0, 0.0, 0.0))


class TestENURotation:
    """Test suite for the local tangent-plane rotation."""

    def test_matrix_is_orthonormal(self):
        r = enu_to_ecef_matrix(-35.0, 138.65)
        assert np.allclose(r.T @ r, np.eye(3), atol=1e-12)
        assert np.linalg.det(r) == pytest.approx(1.0)

    @pytest.mark.parametrize("lat, lon", [(91.0, 0.0), (-120.0, 10.0), (0.0, math.inf)])
    def test_rotation_rejects_invalid_angles(self, lat, lon):
        with pytest.raises(InvalidGeodeticInputError):
            enu_to_ecef_matrix(lat, lon)

    def test_equator_prime_meridian_axes(self):
        """At (0, 0): East is +y, North is +z, Up is +x."""
        assert np.allclose(enu_to_ecef(1.0, 0.0, 0.0, 0.0, 0.0), [0.0, 1.0, 0.0])
        assert np.allclose(enu_to_ecef(0.0, 1.0, 0.0, 0.0, 0.0), [0.0, 0.0, 1.0])
        assert np.allclose(enu_to_ecef(0.0, 0.0, 1.0, 0.0, 0.0), [1.0, 0.0, 0.0])

    def test_up_matches_geodetic_normal(self):
        """Up is the direction of increasing altitude."""
        lat, lon = -35.0, 138.65
        low = geodetic_to_ecef(lat, lon, 0.0).as_array()
        high = geodetic_to_ecef(lat, lon, 1000.0).as_array()

        up = enu_to_ecef(0.0, 0.0, 1.0, lat, lon)
        assert np.allclose((high - low) / 1000.0, up, atol=1e-9)

    def test_east_matches_increasing_longitude(self):
        lat, lon = -35.0, 138.65
        here = geodetic_to_ecef(lat, lon, 0.0).as_array()
        east_of_here = geodetic_to_ecef(lat, lon + 1e-5, 0.0).as_array()

        step = east_of_here - here
        east = enu_to_ecef(1.0, 0.0, 0.0, lat, lon)
        assert np.dot(step / np.linalg.norm(step), east) == pytest.approx(1.0, abs=1e-6)

    def test_preserves_speed(self):
        v = enu_to_ecef(30.0, -40.0, 5.0, 51.5, -0.12)
        assert np.linalg.norm(v) == pytest.approx(math.sqrt(30**2 + 40**2 + 5**2))
