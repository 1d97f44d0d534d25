"""Rule-based anomaly scoring of rupture patterns.

The scorer evaluates an ordered table of indicator rules against a
rupture pattern. Each rule is a predicate over the pattern and the
geological profile, together with a positive weight. The confidence
of an analysis is the sum of the weights of the triggered rules, clamped
to [0, 100].

The canonical rule table (`build_rules`) evaluates, in order:

1. Depth outside the profile depth range (20),
2. Thermal gradient above the profile temperature threshold (25),
3. High magnitude with low duration at great depth (30),
4. Rupture velocity above the physical ceiling (20),
5. Rock composition disjoint from the profile (10),
6. Unusual fault orientation at great depth (15),
7. Excessive energy release (30).

Callers expecting confidence on a [0, 1] scale should divide by 100
(see `deep_rupture.risk.to_unit_confidence`).
"""

import dataclasses
import functools
import types
from collections.abc import Callable, Mapping, Sequence
from enum import StrEnum
from typing import Any, NamedTuple, Self

import numpy as np

from deep_rupture import rupture_velocity
from deep_rupture.profile import GeologicalProfile, InvalidConfigurationError
from deep_rupture.rupture_pattern import RupturePattern

MIN_CONFIDENCE = 0.0
MAX_CONFIDENCE = 100.0


class IndicatorName(StrEnum):
    """The closed vocabulary of anomaly indicators."""

    UNUSUAL_DEPTH = "unusual depth range"
    EXTREME_THERMAL_GRADIENT = "extreme thermal gradient"
    HIGH_MAGNITUDE_LOW_DURATION = "high magnitude with low duration at great depth"
    HIGH_RUPTURE_VELOCITY = "abnormally high rupture velocity"
    UNUSUAL_ROCK_COMPOSITION = "unusual rock composition"
    UNUSUAL_FAULT_ORIENTATION = "unusual fault orientation at great depth"
    EXCESSIVE_ENERGY_RELEASE = "excessive energy release"


DEFAULT_WEIGHTS = types.MappingProxyType(
    {
        IndicatorName.UNUSUAL_DEPTH: 20.0,
        IndicatorName.EXTREME_THERMAL_GRADIENT: 25.0,
        IndicatorName.HIGH_MAGNITUDE_LOW_DURATION: 30.0,
        IndicatorName.HIGH_RUPTURE_VELOCITY: 20.0,
        IndicatorName.UNUSUAL_ROCK_COMPOSITION: 10.0,
        IndicatorName.UNUSUAL_FAULT_ORIENTATION: 15.0,
        IndicatorName.EXCESSIVE_ENERGY_RELEASE: 30.0,
    }
)


class Indicator(NamedTuple):
    """A triggered indicator rule."""

    name: IndicatorName
    """The name of the indicator."""
    weight: float
    """The contribution of the indicator to the confidence."""


Predicate = Callable[[RupturePattern, GeologicalProfile], bool]


class IndicatorRule(NamedTuple):
    """An indicator rule: a named, weighted predicate."""

    name: IndicatorName
    """The indicator reported when the rule triggers."""
    predicate: Predicate
    """The rule condition."""
    weight: float
    """The contribution of the rule to the confidence when triggered."""


class Score(NamedTuple):
    """The outcome of scoring a rupture pattern."""

    confidence: float
    """Sum of the triggered weights, clamped to [0, 100]."""
    indicators: tuple[Indicator, ...]
    """Triggered indicators, in rule evaluation order."""


def _check_weight(name: str, weight: float) -> float:
    """Validate an indicator weight.

    Parameters
    ----------
    name : str
        The indicator name, for error messages.
    weight : float
        The weight to validate.

    Returns
    -------
    float
        The weight as a float.

    Raises
    ------
    InvalidConfigurationError
        If the weight is not a finite, positive number.
    """
    weight = float(weight)
    # Every triggered rule must contribute to the confidence.
    if not np.isfinite(weight) or weight <= 0:
        raise InvalidConfigurationError(
            f"Weight for indicator '{name}' must be finite and positive, got {weight}."
        )
    return weight


@dataclasses.dataclass(frozen=True)
class ScoringConfig:
    """Thresholds and weights of the canonical indicator rules."""

    high_magnitude: float = 7.0
    """Magnitude above which an event is considered high magnitude."""
    great_depth: float = 50.0
    """Depth (km) below which a high magnitude event is considered deep."""
    low_duration: float = 30.0
    """Duration (s) under which a high magnitude event is considered short."""
    velocity_ceiling: float = rupture_velocity.MAX_RUPTURE_VELOCITY
    """Rupture velocity (km/s) above which a rupture is abnormally fast."""
    velocity_ratio_trigger: bool = False
    """If True, also trigger on the ratio of rupture velocity to the maximum rupture velocity."""
    velocity_ratio_threshold: float = rupture_velocity.ANOMALOUS_VELOCITY_RATIO
    """The velocity ratio above which a rupture is abnormally fast."""
    unusual_orientations: frozenset[str] = frozenset({"north-south", "vertical"})
    """Fault orientation patterns considered unusual at depth."""
    orientation_depth: float = 60.0
    """Depth (km) below which an unusual fault orientation is reported."""
    energy_threshold: float = 1e18
    """Energy release (J) above which a rupture releases excessive energy."""
    weights: Mapping[IndicatorName, float] = dataclasses.field(
        default_factory=lambda: dict(DEFAULT_WEIGHTS), hash=False
    )
    """Weights of each indicator. Missing indicators take their default weight.
    Stored as a read-only mapping."""

    def __post_init__(self) -> None:
        weights = dict(DEFAULT_WEIGHTS)
        for name, weight in self.weights.items():
            try:
                indicator = IndicatorName(name)
            except ValueError:
                raise InvalidConfigurationError(f"Unknown indicator '{name}'.")
            weights[indicator] = _check_weight(indicator, weight)
        object.__setattr__(self, "weights", types.MappingProxyType(weights))
        orientations = self.unusual_orientations
        # A bare string would otherwise become a set of single letters.
        if isinstance(orientations, str):
            raise InvalidConfigurationError(
                f"Unusual orientations must be a collection of strings, got {orientations!r}."
            )
        orientations = tuple(orientations)
        if not all(isinstance(pattern, str) for pattern in orientations):
            raise InvalidConfigurationError(
                f"Unusual orientations must be strings, got {orientations!r}."
            )
        object.__setattr__(
            self,
            "unusual_orientations",
            frozenset(pattern.lower() for pattern in orientations),
        )
        for label in (
            "great_depth",
            "low_duration",
            "velocity_ceiling",
            "velocity_ratio_threshold",
            "orientation_depth",
            "energy_threshold",
        ):
            value = getattr(self, label)
            if not np.isfinite(value) or value < 0:
                raise InvalidConfigurationError(
                    f"Scoring threshold '{label}' must be finite and non-negative, got {value}."
                )

    @classmethod
    def from_dict(cls, config: Mapping[str, Any]) -> Self:
        """Build a scoring configuration from a dictionary.

        Parameters
        ----------
        config : Mapping[str, Any]
            Configuration values keyed by field name. Weights are given
            as a mapping from indicator name to weight.

        Returns
        -------
        ScoringConfig
            The scoring configuration.

        Raises
        ------
        InvalidConfigurationError
            If the dictionary contains unknown keys or invalid values.
        """
        known_fields = {field.name for field in dataclasses.fields(cls)}
        unknown_fields = set(config) - known_fields
        if unknown_fields:
            raise InvalidConfigurationError(
                f"Unknown scoring configuration keys: {sorted(unknown_fields)}."
            )
        return cls(**config)


def depth_outside_range(pattern: RupturePattern, profile: GeologicalProfile) -> bool:
    """Check if the pattern lies outside the profile depth range (inclusive bounds)."""
    return not profile.contains_depth(pattern.depth)


def extreme_thermal_gradient(
    pattern: RupturePattern, profile: GeologicalProfile
) -> bool:
    """Check if the thermal gradient exceeds the profile temperature threshold."""
    return pattern.thermal_gradient > profile.temperature_threshold


def high_magnitude_low_duration(
    pattern: RupturePattern, profile: GeologicalProfile, config: ScoringConfig
) -> bool:
    """Check for a high magnitude, short duration rupture at great depth."""
    return (
        pattern.magnitude > config.high_magnitude
        and pattern.depth > config.great_depth
        and pattern.duration < config.low_duration
    )


def high_rupture_velocity(
    pattern: RupturePattern, profile: GeologicalProfile, config: ScoringConfig
) -> bool:
    """Check for a rupture faster than the physical ceiling.

    If `config.velocity_ratio_trigger` is set, ruptures exceeding the
    maximum plausible velocity for their conditions by more than
    `config.velocity_ratio_threshold` also trigger.
    """
    if pattern.rupture_velocity > config.velocity_ceiling:
        return True
    return config.velocity_ratio_trigger and rupture_velocity.is_anomalous_velocity(
        pattern.rupture_velocity,
        pattern.max_rupture_velocity,
        config.velocity_ratio_threshold,
    )


def unusual_rock_composition(
    pattern: RupturePattern, profile: GeologicalProfile
) -> bool:
    """Check if the rock composition shares no rock type with the profile.

    Patterns without a known rock composition never trigger.
    """
    if pattern.rock_composition is None:
        return False
    return pattern.rock_composition.isdisjoint(profile.rock_composition)


def unusual_fault_orientation(
    pattern: RupturePattern, profile: GeologicalProfile, config: ScoringConfig
) -> bool:
    """Check for an unusual fault orientation at great depth."""
    orientation = pattern.fault_orientation.lower()
    return pattern.depth > config.orientation_depth and any(
        unusual in orientation for unusual in config.unusual_orientations
    )


def excessive_energy_release(
    pattern: RupturePattern, profile: GeologicalProfile, config: ScoringConfig
) -> bool:
    """Check if the energy release exceeds the configured threshold."""
    return pattern.energy_release > config.energy_threshold


def build_rules(config: ScoringConfig | None = None) -> tuple[IndicatorRule, ...]:
    """Build the canonical indicator rule table.

    Parameters
    ----------
    config : ScoringConfig or None, optional
        The thresholds and weights of the rules. If None, the default
        configuration is used.

    Returns
    -------
    tuple[IndicatorRule, ...]
        The rules, in evaluation order.
    """
    config = config or ScoringConfig()
    predicates: list[tuple[IndicatorName, Predicate]] = [
        (IndicatorName.UNUSUAL_DEPTH, depth_outside_range),
        (IndicatorName.EXTREME_THERMAL_GRADIENT, extreme_thermal_gradient),
        (
            IndicatorName.HIGH_MAGNITUDE_LOW_DURATION,
            functools.partial(high_magnitude_low_duration, config=config),
        ),
        (
            IndicatorName.HIGH_RUPTURE_VELOCITY,
            functools.partial(high_rupture_velocity, config=config),
        ),
        (IndicatorName.UNUSUAL_ROCK_COMPOSITION, unusual_rock_composition),
        (
            IndicatorName.UNUSUAL_FAULT_ORIENTATION,
            functools.partial(unusual_fault_orientation, config=config),
        ),
        (
            IndicatorName.EXCESSIVE_ENERGY_RELEASE,
            functools.partial(excessive_energy_release, config=config),
        ),
    ]
    return tuple(
        IndicatorRule(name, predicate, config.weights[name])
        for name, predicate in predicates
    )


def validate_rules(rules: Sequence[IndicatorRule]) -> tuple[IndicatorRule, ...]:
    """Validate a custom indicator rule table.

    Parameters
    ----------
    rules : Sequence[IndicatorRule]
        The rules to validate.

    Returns
    -------
    tuple[IndicatorRule, ...]
        The rules, in evaluation order.

    Raises
    ------
    InvalidConfigurationError
        If any rule has an invalid weight, or two rules report the same indicator.
    """
    seen: set[str] = set()
    for rule in rules:
        _check_weight(rule.name, rule.weight)
        if rule.name in seen:
            raise InvalidConfigurationError(f"Duplicate indicator rule '{rule.name}'.")
        seen.add(rule.name)
    return tuple(rules)


def clamp_confidence(confidence: float) -> float:
    """Clamp a confidence to [0, 100]."""
    return float(np.clip(confidence, MIN_CONFIDENCE, MAX_CONFIDENCE))


def score_pattern(
    pattern: RupturePattern,
    profile: GeologicalProfile,
    rules: Sequence[IndicatorRule] | None = None,
) -> Score:
    """Score a rupture pattern against a rule table.

    Parameters
    ----------
    pattern : RupturePattern
        The pattern to score.
    profile : GeologicalProfile
        The profile to score the pattern against.
    rules : Sequence[IndicatorRule] or None, optional
        The rules to evaluate, in order. If None, the canonical rules
        with default configuration are used.

    Returns
    -------
    Score
        The clamped confidence and the triggered indicators, in rule order.
    """
    if rules is None:
        rules = build_rules()
    indicators = tuple(
        Indicator(rule.name, rule.weight)
        for rule in rules
        if rule.predicate(pattern, profile)
    )
    confidence = clamp_confidence(sum(indicator.weight for indicator in indicators))
    return Score(confidence, indicators)
