import numpy as np
import pytest
from hypothesis import given
from hypothesis import strategies as st

from deep_rupture import risk
from deep_rupture.profile import InvalidConfigurationError
from deep_rupture.risk import RiskLevel


@pytest.mark.parametrize(
    "confidence, expected",
    [
        (0.0, RiskLevel.LOW),
        (29.999, RiskLevel.LOW),
        (30.0, RiskLevel.MEDIUM),
        (49.999, RiskLevel.MEDIUM),
        (50.0, RiskLevel.HIGH),
        (69.999, RiskLevel.HIGH),
        (70.0, RiskLevel.CRITICAL),
        (100.0, RiskLevel.CRITICAL),
    ],
)
def test_classify_risk(confidence: float, expected: RiskLevel):
    assert risk.classify_risk(confidence) == expected


@pytest.mark.parametrize(
    "confidence, expected",
    [(69.999, RiskLevel.HIGH), (70.0, RiskLevel.HIGH), (100.0, RiskLevel.HIGH)],
)
def test_classify_risk_without_critical(confidence: float, expected: RiskLevel):
    assert risk.classify_risk(confidence, distinguish_critical=False) == expected


def test_classify_risk_custom_bands():
    bands = (10.0, 20.0, 90.0)
    assert risk.classify_risk(15.0, bands) == RiskLevel.MEDIUM
    assert risk.classify_risk(75.0, bands) == RiskLevel.HIGH
    assert risk.classify_risk(90.0, bands) == RiskLevel.CRITICAL


@given(
    confidence=st.floats(0, 100),
    increase=st.floats(0, 100),
    distinguish_critical=st.booleans(),
)
def test_classify_risk_monotonic(
    confidence: float, increase: float, distinguish_critical: bool
):
    """A higher confidence never yields a lower risk level."""
    higher_confidence = min(confidence + increase, 100.0)
    assert risk.classify_risk(
        higher_confidence, distinguish_critical=distinguish_critical
    ) >= risk.classify_risk(confidence, distinguish_critical=distinguish_critical)


def test_risk_level_order():
    assert RiskLevel.LOW < RiskLevel.MEDIUM < RiskLevel.HIGH < RiskLevel.CRITICAL
    assert RiskLevel.CRITICAL > RiskLevel.LOW
    assert RiskLevel.HIGH >= RiskLevel.HIGH
    assert RiskLevel.MEDIUM <= RiskLevel.HIGH
    # Lexicographically "critical" < "low", but not as risk levels.
    assert max(RiskLevel) == RiskLevel.CRITICAL
    assert [level.rank for level in RiskLevel] == [0, 1, 2, 3]


def test_risk_level_values():
    assert [str(level) for level in RiskLevel] == ["low", "medium", "high", "critical"]
    assert RiskLevel("critical") == RiskLevel.CRITICAL


@pytest.mark.parametrize(
    "bands, message",
    [
        ((30.0, 50.0), "Expected three risk band bounds, got 2."),
        ((30.0, 50.0, 70.0, 90.0), "Expected three risk band bounds, got 4."),
        ((30.0, 30.0, 70.0), "strictly increasing"),
        ((50.0, 30.0, 70.0), "strictly increasing"),
        ((30.0, 50.0, np.nan), "finite"),
    ],
)
def test_invalid_risk_bands(bands: tuple[float, ...], message: str):
    with pytest.raises(InvalidConfigurationError, match=message):
        risk.check_risk_bands(bands)


def test_check_risk_bands():
    assert risk.check_risk_bands([10, 20, 30]) == (10.0, 20.0, 30.0)


@pytest.mark.parametrize("confidence", [0.0, 25.0, 70.0, 100.0])
def test_unit_confidence(confidence: float):
    assert risk.to_unit_confidence(confidence) == pytest.approx(confidence / 100)
    assert risk.from_unit_confidence(
        risk.to_unit_confidence(confidence)
    ) == pytest.approx(confidence)


@pytest.mark.parametrize("bands", [(70.0, 50.0, 30.0), (30.0, 50.0), (30.0, np.inf, 70.0)])
def test_classify_risk_rejects_invalid_bands(bands: tuple[float, ...]):
    with pytest.raises(InvalidConfigurationError):
        risk.classify_risk(50.0, bands)
