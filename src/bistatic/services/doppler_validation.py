"""Comparison policy for cross-checking two Doppler estimates.

A candidate value (e.g. from an external service or the other estimator) is
compared against a reference and classified by relative difference.
"""

import math
from dataclasses import dataclass
from enum import Enum

from src.bistatic.models.schemas import DopplerOutcome
from src.bistatic.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_PASS_THRESHOLD_PCT = 1.0
DEFAULT_WARN_THRESHOLD_PCT = 5.0


class ValidationVerdict(str, Enum):
    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"


@dataclass(frozen=True)
class ComparisonReport:
    """Outcome of comparing a candidate Doppler value against a reference."""

    reference_hz: float
    candidate_hz: float
    difference_hz: float  # |candidate - reference|
    percent_difference: float | None  # None when the reference is zero
    verdict: ValidationVerdict

    @property
    def same_sign(self) -> bool:
        return math.copysign(1.0, self.reference_hz) == math.copysign(1.0, self.candidate_hz)


def compare_doppler(
    reference_hz: float,
    candidate_hz: float,
    pass_threshold_pct: float = DEFAULT_PASS_THRESHOLD_PCT,
    warn_threshold_pct: float = DEFAULT_WARN_THRESHOLD_PCT,
) -> ComparisonReport:
    """
    Classify the relative difference between two Doppler values.

    Args:
        reference_hz: Value treated as ground truth
        candidate_hz: Value under test
        pass_threshold_pct: Below this percentage the values match
        warn_threshold_pct: Below this percentage the values differ noticeably

    Returns:
        ComparisonReport with PASS, WARN or FAIL verdict
    """
    if not 0 < pass_threshold_pct < warn_threshold_pct:
        raise ValueError(
            f"Thresholds must satisfy 0 < pass ({pass_threshold_pct}) "
            f"< warn ({warn_threshold_pct})"
        )

    difference = abs(candidate_hz - reference_hz)

    if reference_hz == 0.0:
        verdict = ValidationVerdict.PASS if candidate_hz == 0.0 else ValidationVerdict.FAIL
        return ComparisonReport(reference_hz, candidate_hz, difference, None, verdict)

    percent = difference / abs(reference_hz) * 100.0
    if percent < pass_threshold_pct:
        verdict = ValidationVerdict.PASS
    elif percent < warn_threshold_pct:
        verdict = ValidationVerdict.WARN
    else:
        verdict = ValidationVerdict.FAIL

    logger.debug(
        f"Doppler comparison: ref={reference_hz:.5f} Hz cand={candidate_hz:.5f} Hz "
        f"diff={difference:.5f} Hz ({percent:.2f}%) -> {verdict.value}"
    )
    return ComparisonReport(reference_hz, candidate_hz, difference, percent, verdict)


def compare_outcomes(
    reference: DopplerOutcome,
    candidate: DopplerOutcome,
    pass_threshold_pct: float = DEFAULT_PASS_THRESHOLD_PCT,
    warn_threshold_pct: float = DEFAULT_WARN_THRESHOLD_PCT,
) -> ComparisonReport | None:
    """Compare two estimator outcomes; None if either is unavailable."""
    if not (reference.available and candidate.available):
        return None
    return compare_doppler(
        reference.frequency_hz,
        candidate.frequency_hz,
        pass_threshold_pct,
        warn_threshold_pct,
    )
