"""
Shared pytest fixtures for the bistatic Doppler test suite.
These fixtures are available to all test files automatically.
"""

import pytest

from src.bistatic.models.schemas import GeodeticPosition, StationGeometry

# Passive radar pair used throughout: receiver and illuminator near Adelaide
RX_POSITION = GeodeticPosition(-35.0, 138.7, 50.0)
TX_POSITION = GeodeticPosition(-35.0, 138.6, 50.0)
CARRIER_FREQ_MHZ = 204.64


def pytest_configure(config):
    """Register custom pytest markers for test categorization."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test (<100ms, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as integration test (multiple components together)"
    )
    config.addinivalue_line("markers", "property: mark test as property-based test (hypothesis)")
    config.addinivalue_line("markers", "slow: mark test as slow (>1s execution time)")


def pytest_collection_modifyitems(config, items):
    """Add markers to test items based on their location."""
    for item in items:
        path = str(item.fspath)
        if "unit" in path:
            item.add_marker(pytest.mark.unit)
        elif "integration" in path:
            item.add_marker(pytest.mark.integration)
        elif "property" in path:
            item.add_marker(pytest.mark.property)


@pytest.fixture(scope="session")
def station() -> StationGeometry:
    """Adelaide Rx/Tx pair in ECEF."""
    return StationGeometry.from_geodetic(RX_POSITION, TX_POSITION)


@pytest.fixture
def carrier_freq_mhz() -> float:
    return CARRIER_FREQ_MHZ
