"""Risk classification of anomaly confidence."""

from collections.abc import Sequence
from enum import StrEnum

import numpy as np

from deep_rupture.profile import InvalidConfigurationError

DEFAULT_RISK_BANDS = (30.0, 50.0, 70.0)


class RiskLevel(StrEnum):
    """Ordered risk levels, from LOW to CRITICAL."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:  # numpydoc ignore=RT01
        """int: The position of the risk level in the ordering LOW < MEDIUM < HIGH < CRITICAL."""
        return list(RiskLevel).index(self)

    # The str comparisons inherited from StrEnum are lexicographic, so all
    # four orderings are overridden.
    def __lt__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank >= other.rank


def check_risk_bands(bands: Sequence[float]) -> tuple[float, float, float]:
    """Validate risk band lower bounds.

    Parameters
    ----------
    bands : Sequence[float]
        Lower bounds of the MEDIUM, HIGH and CRITICAL bands.

    Returns
    -------
    tuple[float, float, float]
        The validated bands.

    Raises
    ------
    InvalidConfigurationError
        If there are not three finite, strictly increasing bounds.
    """
    bands = tuple(float(bound) for bound in bands)
    if len(bands) != 3:
        raise InvalidConfigurationError(
            f"Expected three risk band bounds, got {len(bands)}."
        )
    if not np.all(np.isfinite(bands)) or not np.all(np.diff(bands) > 0):
        raise InvalidConfigurationError(
            f"Risk band bounds must be finite and strictly increasing, got {bands}."
        )
    return bands


def classify_risk(
    confidence: float,
    bands: Sequence[float] = DEFAULT_RISK_BANDS,
    distinguish_critical: bool = True,
) -> RiskLevel:
    """Classify a confidence (on the [0, 100] scale) into a risk level.

    Parameters
    ----------
    confidence : float
        The anomaly confidence.
    bands : Sequence[float], optional
        Lower bounds (inclusive) of the MEDIUM, HIGH and CRITICAL bands.
        Default is (30, 50, 70).
    distinguish_critical : bool, optional
        If False, the CRITICAL band is reported as HIGH. Default is True.

    Returns
    -------
    RiskLevel
        The risk level of the confidence.

    Raises
    ------
    InvalidConfigurationError
        If the bands are not three finite, strictly increasing bounds.
    """
    bands = check_risk_bands(bands)
    levels = list(RiskLevel)
    risk_level = levels[int(np.searchsorted(bands, confidence, side="right"))]
    if risk_level == RiskLevel.CRITICAL and not distinguish_critical:
        return RiskLevel.HIGH
    return risk_level


def to_unit_confidence(confidence: float) -> float:
    """Convert a [0, 100] confidence to the [0, 1] scale."""
    return confidence / 100


def from_unit_confidence(confidence: float) -> float:
    """Convert a [0, 1] confidence to the [0, 100] scale."""
    return confidence * 100
