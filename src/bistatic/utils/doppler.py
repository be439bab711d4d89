"""Doppler conversion utilities shared by the velocity and position estimators.

Sign convention: a shrinking bistatic path (negative range-rate) is a
positive Doppler shift, i.e. a target closing on both stations raises the
received frequency.
"""

import math

from src.bistatic.constants.physical import SPEED_OF_LIGHT, UnitConversion
from src.bistatic.core.exceptions import InvalidFrequencyError
from src.bistatic.models.schemas import DopplerMethod, DopplerResult


def carrier_wavelength(carrier_freq_mhz: float) -> float:
    """
    Wavelength of the illuminator carrier.

    Args:
        carrier_freq_mhz: Carrier frequency in MHz

    Returns:
        Wavelength in meters

    Raises:
        InvalidFrequencyError: If the frequency is zero, negative or non-finite
    """
    if not math.isfinite(carrier_freq_mhz) or carrier_freq_mhz <= 0:
        raise InvalidFrequencyError(
            f"Carrier frequency must be positive and finite, got {carrier_freq_mhz} MHz"
        )
    return SPEED_OF_LIGHT / (carrier_freq_mhz * UnitConversion.MHZ_TO_HZ)


def doppler_from_range_rate(
    range_rate_mps: float, carrier_freq_mhz: float, method: DopplerMethod
) -> DopplerResult:
    """Convert a bistatic range-rate into a tagged Doppler result."""
    wavelength = carrier_wavelength(carrier_freq_mhz)
    return DopplerResult(
        frequency_hz=-range_rate_mps / wavelength,
        method=method,
        range_rate_mps=range_rate_mps,
    )
