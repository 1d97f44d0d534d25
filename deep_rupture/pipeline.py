"""The analysis pipeline: derive, score and classify seismic events.

An `AnalysisPipeline` validates an event against its geological
profile, derives the rupture pattern of the event, scores the pattern
against the indicator rules and classifies the resulting confidence.

`is_unexpected` and `recommendations` derive follow-up advice from an
analysed pattern and its verdict.

Pipelines hold only immutable configuration, so a single pipeline may be
shared between threads.

Example
-------
>>> pipeline = AnalysisPipeline(DEFAULT_PROFILE)
>>> result = pipeline.analyse(event)
>>> result.risk_level
<RiskLevel.LOW: 'low'>
"""

import dataclasses
import functools
import warnings
from collections.abc import Iterable, Sequence
from typing import Optional

import numpy as np
import pandas as pd

from deep_rupture import risk, rupture_pattern, scoring
from deep_rupture.events import SeismicEvent
from deep_rupture.profile import GeologicalProfile, InvalidConfigurationError
from deep_rupture.risk import RiskLevel
from deep_rupture.rupture_pattern import OutOfRangeDepthError, RupturePattern
from deep_rupture.scoring import IndicatorName, IndicatorRule, ScoringConfig
from deep_rupture.stress import StressState


class OutOfRangeDepthWarning(UserWarning):
    """Warning issued when a lenient pipeline analyses an out of range event."""

    pass


@dataclasses.dataclass(frozen=True)
class AnalysisConfig:
    """Configuration of an analysis pipeline."""

    strict: bool = True
    """If True, events outside the profile depth range raise `OutOfRangeDepthError`.
    Otherwise they are scored with a warning."""
    anomaly_threshold: float = 0.0
    """Events with confidence strictly above this threshold are anomalous."""
    risk_bands: tuple[float, float, float] = risk.DEFAULT_RISK_BANDS
    """Lower bounds of the medium, high and critical risk bands."""
    distinguish_critical: bool = True
    """If False, critical risk is reported as high."""
    scoring: ScoringConfig = dataclasses.field(default_factory=ScoringConfig)
    """Thresholds and weights of the indicator rules."""
    rock_density: float = rupture_pattern.ROCK_DENSITY
    """Density of the overlying rock (g/cm^3)."""
    pore_fluid_density: float = rupture_pattern.PORE_FLUID_DENSITY
    """Density of the pore fluid (g/cm^3)."""
    friction_coefficient: float = rupture_pattern.FRICTION_COEFFICIENT
    """Coefficient of friction of faults."""

    def __post_init__(self) -> None:
        if not (
            np.isfinite(self.anomaly_threshold)
            and scoring.MIN_CONFIDENCE <= self.anomaly_threshold < scoring.MAX_CONFIDENCE
        ):
            raise InvalidConfigurationError(
                f"Anomaly threshold must lie in [0, 100), got {self.anomaly_threshold}."
            )
        object.__setattr__(self, "risk_bands", risk.check_risk_bands(self.risk_bands))
        for label in ("rock_density", "pore_fluid_density", "friction_coefficient"):
            value = getattr(self, label)
            if not np.isfinite(value) or value < 0:
                raise InvalidConfigurationError(
                    f"'{label}' must be finite and non-negative, got {value}."
                )


@dataclasses.dataclass(frozen=True)
class AnalysisResult:
    """The anomaly verdict for a seismic event."""

    is_anomalous: bool
    """True if the confidence exceeds the anomaly threshold."""
    confidence: float
    """Anomaly confidence, in [0, 100]."""
    indicators: tuple[IndicatorName, ...]
    """Triggered indicators, in rule evaluation order."""
    risk_level: RiskLevel
    """Risk level of the confidence."""


UNEXPECTED_DEPTH = 60.0
UNEXPECTED_MAGNITUDE = 7.0
UNEXPECTED_CONFIDENCE = 70.0
FAST_RUPTURE_VELOCITY = 3.0

DEEP_FOCUS_RECOMMENDATIONS = (
    "Investigate potential deep-focus rupture mechanisms",
    "Monitor for possible aftershock sequences",
    "Validate with additional seismic stations",
)
HIGH_STRESS_RECOMMENDATION = (
    "High stress concentration detected - increased monitoring recommended"
)
FAST_RUPTURE_RECOMMENDATION = (
    "Unusually fast rupture velocity - potential for larger magnitude event"
)
NO_CONCERNS_RECOMMENDATION = "No immediate concerns identified"


def is_unexpected(pattern: RupturePattern, result: AnalysisResult) -> bool:
    """Check if an event is unexpected seismic activity.

    An event is unexpected if it is a deep focus (deeper than
    `UNEXPECTED_DEPTH`), significant (magnitude above
    `UNEXPECTED_MAGNITUDE`) event with a strongly anomalous rupture
    pattern (confidence above `UNEXPECTED_CONFIDENCE`).

    Parameters
    ----------
    pattern : RupturePattern
        The rupture pattern of the event.
    result : AnalysisResult
        The anomaly verdict for the pattern.

    Returns
    -------
    bool
        True if the event is unexpected.
    """
    return (
        pattern.depth > UNEXPECTED_DEPTH
        and pattern.magnitude > UNEXPECTED_MAGNITUDE
        and result.confidence > UNEXPECTED_CONFIDENCE
    )


def recommendations(
    pattern: RupturePattern, result: AnalysisResult
) -> tuple[str, ...]:
    """Recommend follow-up actions for an analysed event.

    Parameters
    ----------
    pattern : RupturePattern
        The rupture pattern of the event.
    result : AnalysisResult
        The anomaly verdict for the pattern.

    Returns
    -------
    tuple[str, ...]
        The recommendations, in order: deep focus follow-up for
        unexpected events, monitoring for unstable stress states and a
        warning for ruptures faster than `FAST_RUPTURE_VELOCITY`. If
        none apply, a single no concerns recommendation.
    """
    advice: list[str] = []
    if is_unexpected(pattern, result):
        advice.extend(DEEP_FOCUS_RECOMMENDATIONS)
    if pattern.stress and pattern.stress.stress_state == StressState.UNSTABLE:
        advice.append(HIGH_STRESS_RECOMMENDATION)
    if pattern.rupture_velocity > FAST_RUPTURE_VELOCITY:
        advice.append(FAST_RUPTURE_RECOMMENDATION)
    return tuple(advice) or (NO_CONCERNS_RECOMMENDATION,)


@dataclasses.dataclass(frozen=True)
class AnalysisPipeline:
    """Analyse seismic events against a geological profile.

    Attributes
    ----------
    profile : GeologicalProfile
        The profile events are analysed against.
    config : AnalysisConfig
        The pipeline configuration.
    rules : Sequence[IndicatorRule] or None
        The indicator rules to evaluate. If None, the canonical rules
        built from `config.scoring` are used.
    """

    profile: GeologicalProfile
    config: AnalysisConfig = dataclasses.field(default_factory=AnalysisConfig)
    rules: Optional[Sequence[IndicatorRule]] = None

    def __post_init__(self) -> None:
        if self.rules is None:
            rules = scoring.build_rules(self.config.scoring)
        else:
            rules = scoring.validate_rules(self.rules)
        object.__setattr__(self, "rules", rules)

    def derive(self, event: SeismicEvent) -> RupturePattern:
        """Derive the rupture pattern of an event.

        Parameters
        ----------
        event : SeismicEvent
            The event to derive.

        Returns
        -------
        RupturePattern
            The derived rupture pattern.

        Raises
        ------
        OutOfRangeDepthError
            If the pipeline is strict and the event lies outside the
            profile depth range.

        Warns
        -----
        OutOfRangeDepthWarning
            If the pipeline is lenient and the event lies outside the
            profile depth range.
        """
        derive_pattern = functools.partial(
            rupture_pattern.derive_rupture_pattern,
            event,
            self.profile,
            rock_density=self.config.rock_density,
            pore_fluid_density=self.config.pore_fluid_density,
            friction_coefficient=self.config.friction_coefficient,
        )
        try:
            return derive_pattern(check_depth=True)
        except OutOfRangeDepthError as error:
            if self.config.strict:
                raise
            warnings.warn(
                f"{error} Scoring the event without depth validation.",
                OutOfRangeDepthWarning,
                stacklevel=2,
            )
        return derive_pattern(check_depth=False)

    def classify(self, pattern: RupturePattern) -> AnalysisResult:
        """Score and classify a rupture pattern.

        Parameters
        ----------
        pattern : RupturePattern
            The pattern to classify.

        Returns
        -------
        AnalysisResult
            The anomaly verdict for the pattern.
        """
        score = scoring.score_pattern(pattern, self.profile, self.rules)
        return AnalysisResult(
            is_anomalous=score.confidence > self.config.anomaly_threshold,
            confidence=score.confidence,
            indicators=tuple(indicator.name for indicator in score.indicators),
            risk_level=risk.classify_risk(
                score.confidence,
                self.config.risk_bands,
                self.config.distinguish_critical,
            ),
        )

    def analyse(self, event: SeismicEvent) -> AnalysisResult:
        """Analyse a seismic event.

        Parameters
        ----------
        event : SeismicEvent
            The event to analyse.

        Returns
        -------
        AnalysisResult
            The anomaly verdict for the event.

        Raises
        ------
        OutOfRangeDepthError
            If the pipeline is strict and the event lies outside the
            profile depth range.
        """
        return self.classify(self.derive(event))

    def analyse_many(self, events: Iterable[SeismicEvent]) -> list[AnalysisResult]:
        """Analyse a collection of seismic events.

        Parameters
        ----------
        events : Iterable[SeismicEvent]
            The events to analyse.

        Returns
        -------
        list[AnalysisResult]
            The verdict for each event, in the order given.
        """
        return [self.analyse(event) for event in events]

    def analysis_dataframe(self, events: Iterable[SeismicEvent]) -> pd.DataFrame:
        """Tabulate the derived quantities and verdicts of seismic events.

        Parameters
        ----------
        events : Iterable[SeismicEvent]
            The events to analyse.

        Returns
        -------
        pd.DataFrame
            A dataframe with one row per event and columns 'magnitude',
            'depth', 'duration', 'fault_orientation', 'rupture_velocity',
            'max_rupture_velocity', 'energy_release', 'temperature',
            'pressure', 'gradient_class', 'stress_state',
            'stress_intensity', 'is_anomalous', 'confidence',
            'indicators', 'risk_level', 'is_unexpected' and
            'recommendations' (joined with "; ").
        """
        rows = []
        for event in events:
            pattern = self.derive(event)
            result = self.classify(pattern)
            rows.append(
                {
                    "magnitude": pattern.magnitude,
                    "depth": pattern.depth,
                    "duration": pattern.duration,
                    "fault_orientation": pattern.fault_orientation,
                    "rupture_velocity": pattern.rupture_velocity,
                    "max_rupture_velocity": pattern.max_rupture_velocity,
                    "energy_release": pattern.energy_release,
                    "temperature": pattern.temperature,
                    "pressure": pattern.pressure,
                    "gradient_class": str(pattern.gradient_class),
                    "stress_state": str(pattern.stress.stress_state)
                    if pattern.stress
                    else None,
                    "stress_intensity": pattern.stress.stress_intensity
                    if pattern.stress
                    else np.nan,
                    "is_anomalous": result.is_anomalous,
                    "confidence": result.confidence,
                    "indicators": ", ".join(result.indicators),
                    "risk_level": str(result.risk_level),
                    "is_unexpected": is_unexpected(pattern, result),
                    "recommendations": "; ".join(recommendations(pattern, result)),
                }
            )
        return pd.DataFrame(rows, columns=ANALYSIS_COLUMNS)


ANALYSIS_COLUMNS = [
    "magnitude",
    "depth",
    "duration",
    "fault_orientation",
    "rupture_velocity",
    "max_rupture_velocity",
    "energy_release",
    "temperature",
    "pressure",
    "gradient_class",
    "stress_state",
    "stress_intensity",
    "is_anomalous",
    "confidence",
    "indicators",
    "risk_level",
    "is_unexpected",
    "recommendations",
]
