import dataclasses

import numpy as np
import pytest
from hypothesis import given
from hypothesis import strategies as st

from deep_rupture import scoring
from deep_rupture.events import SeismicEvent
from deep_rupture.profile import (
    DEFAULT_PROFILE,
    GeologicalProfile,
    InvalidConfigurationError,
)
from deep_rupture.rupture_pattern import RupturePattern, derive_rupture_pattern
from deep_rupture.scoring import IndicatorName, IndicatorRule, ScoringConfig
from deep_rupture.thermal import GradientClass


# Triggers no canonical indicator under the default profile.
QUIET_PATTERN = RupturePattern(
    magnitude=5.0,
    depth=50.0,
    duration=60.0,
    fault_orientation="east-west",
    rupture_velocity=1.425,
    energy_release=1e16,
    thermal_gradient=20.0,
    temperature=1015.0,
    pressure=2400.0,
    max_rupture_velocity=1.0,
    gradient_class=GradientClass.MODERATE,
    thermally_anomalous=True,
    rock_composition=frozenset({"basalt"}),
)


def always(pattern: RupturePattern, profile: GeologicalProfile) -> bool:
    return True


def test_quiet_pattern():
    score = scoring.score_pattern(QUIET_PATTERN, DEFAULT_PROFILE)
    assert score.confidence == 0.0
    assert score.indicators == ()


@pytest.mark.parametrize(
    "changes, indicator",
    [
        ({"depth": 29.999}, IndicatorName.UNUSUAL_DEPTH),
        ({"depth": 70.001}, IndicatorName.UNUSUAL_DEPTH),
        ({"thermal_gradient": 800.1}, IndicatorName.EXTREME_THERMAL_GRADIENT),
        (
            {"magnitude": 7.1, "depth": 50.1, "duration": 29.9},
            IndicatorName.HIGH_MAGNITUDE_LOW_DURATION,
        ),
        ({"rupture_velocity": 4.01}, IndicatorName.HIGH_RUPTURE_VELOCITY),
        (
            {"rock_composition": frozenset({"peridotite"})},
            IndicatorName.UNUSUAL_ROCK_COMPOSITION,
        ),
        ({"rock_composition": frozenset()}, IndicatorName.UNUSUAL_ROCK_COMPOSITION),
        (
            {"fault_orientation": "North-South", "depth": 60.1},
            IndicatorName.UNUSUAL_FAULT_ORIENTATION,
        ),
        (
            {"fault_orientation": "near vertical", "depth": 65.0},
            IndicatorName.UNUSUAL_FAULT_ORIENTATION,
        ),
        ({"energy_release": 1.1e18}, IndicatorName.EXCESSIVE_ENERGY_RELEASE),
    ],
)
def test_single_indicator(changes: dict, indicator: IndicatorName):
    pattern = dataclasses.replace(QUIET_PATTERN, **changes)
    score = scoring.score_pattern(pattern, DEFAULT_PROFILE)
    assert [triggered.name for triggered in score.indicators] == [indicator]
    assert score.confidence == scoring.DEFAULT_WEIGHTS[indicator]


@pytest.mark.parametrize(
    "changes",
    [
        {"depth": 30.0},
        {"depth": 70.0},
        {"thermal_gradient": 800.0},
        {"magnitude": 7.0, "depth": 55.0, "duration": 20.0},
        {"magnitude": 7.5, "depth": 50.0, "duration": 20.0},
        {"magnitude": 7.5, "depth": 55.0, "duration": 30.0},
        {"rupture_velocity": 4.0},
        {"rock_composition": None},
        {"rock_composition": frozenset({"andesite", "peridotite"})},
        {"fault_orientation": "north-south", "depth": 60.0},
        {"energy_release": 1e18},
    ],
)
def test_indicator_boundaries(changes: dict):
    """Indicators do not trigger on their boundaries."""
    pattern = dataclasses.replace(QUIET_PATTERN, **changes)
    assert scoring.score_pattern(pattern, DEFAULT_PROFILE).indicators == ()


def test_velocity_ratio_trigger():
    # The quiet pattern is 1.425 times faster than its maximum velocity.
    rules = scoring.build_rules(ScoringConfig(velocity_ratio_trigger=True))
    score = scoring.score_pattern(QUIET_PATTERN, DEFAULT_PROFILE, rules)
    assert [indicator.name for indicator in score.indicators] == [
        IndicatorName.HIGH_RUPTURE_VELOCITY
    ]


def test_indicator_order():
    """Indicators are reported in rule evaluation order."""
    pattern = dataclasses.replace(
        QUIET_PATTERN,
        depth=75.0,
        thermal_gradient=900.0,
        energy_release=1e19,
        fault_orientation="vertical",
        rock_composition=frozenset({"peridotite"}),
    )
    score = scoring.score_pattern(pattern, DEFAULT_PROFILE)
    assert [indicator.name for indicator in score.indicators] == [
        IndicatorName.UNUSUAL_DEPTH,
        IndicatorName.EXTREME_THERMAL_GRADIENT,
        IndicatorName.UNUSUAL_ROCK_COMPOSITION,
        IndicatorName.UNUSUAL_FAULT_ORIENTATION,
        IndicatorName.EXCESSIVE_ENERGY_RELEASE,
    ]
    # 20 + 25 + 10 + 15 + 30 = 100
    assert score.confidence == 100.0


def test_build_rules_order():
    assert [rule.name for rule in scoring.build_rules()] == list(IndicatorName)
    assert [rule.weight for rule in scoring.build_rules()] == [
        20.0,
        25.0,
        30.0,
        20.0,
        10.0,
        15.0,
        30.0,
    ]


@given(weights=st.lists(st.floats(0, 100), max_size=20))
def test_confidence_bounds(weights: list[float]):
    """Confidence stays within [0, 100] however many rules fire."""
    rules = [
        IndicatorRule(IndicatorName.UNUSUAL_DEPTH, always, weight) for weight in weights
    ]
    score = scoring.score_pattern(QUIET_PATTERN, DEFAULT_PROFILE, rules)
    assert scoring.MIN_CONFIDENCE <= score.confidence <= scoring.MAX_CONFIDENCE
    assert len(score.indicators) == len(weights)


@given(
    triggered=st.lists(st.booleans(), min_size=7, max_size=7),
    extra=st.integers(0, 6),
)
def test_confidence_monotonic(triggered: list[bool], extra: int):
    """Satisfying an additional rule never lowers the confidence."""
    names = list(IndicatorName)

    def rules_for(flags: list[bool]) -> list[IndicatorRule]:
        return [
            IndicatorRule(
                name,
                (lambda pattern, profile, flag=flag: flag),
                scoring.DEFAULT_WEIGHTS[name],
            )
            for name, flag in zip(names, flags)
        ]

    more_triggered = list(triggered)
    more_triggered[extra] = True
    confidence = scoring.score_pattern(
        QUIET_PATTERN, DEFAULT_PROFILE, rules_for(triggered)
    ).confidence
    more_confidence = scoring.score_pattern(
        QUIET_PATTERN, DEFAULT_PROFILE, rules_for(more_triggered)
    ).confidence
    assert more_confidence >= confidence


def test_scoring_config_weights():
    config = ScoringConfig(weights={"unusual depth range": 50})
    assert config.weights[IndicatorName.UNUSUAL_DEPTH] == 50.0
    assert config.weights[IndicatorName.EXTREME_THERMAL_GRADIENT] == 25.0
    rules = scoring.build_rules(config)
    assert rules[0].weight == 50.0


def test_scoring_config_weights_read_only():
    config = ScoringConfig()
    with pytest.raises(TypeError):
        config.weights[IndicatorName.UNUSUAL_DEPTH] = -500.0
    with pytest.raises(TypeError):
        scoring.DEFAULT_WEIGHTS[IndicatorName.UNUSUAL_DEPTH] = -500.0
    assert scoring.build_rules(config)[0].weight == 20.0


def test_scoring_config_hashable():
    assert hash(ScoringConfig()) == hash(ScoringConfig())
    assert ScoringConfig(weights={"unusual depth range": 50}) != ScoringConfig()


@pytest.mark.parametrize(
    "weights, message",
    [
        ({"unusual depth range": -1}, "must be finite and positive"),
        ({"unusual depth range": 0}, "must be finite and positive"),
        ({"unusual depth range": np.inf}, "must be finite and positive"),
        ({"not an indicator": 10}, "Unknown indicator 'not an indicator'"),
    ],
)
def test_invalid_weights(weights: dict, message: str):
    with pytest.raises(InvalidConfigurationError, match=message):
        ScoringConfig(weights=weights)


def test_invalid_threshold():
    with pytest.raises(InvalidConfigurationError, match="energy_threshold"):
        ScoringConfig(energy_threshold=-1.0)


def test_scoring_config_from_dict():
    config = ScoringConfig.from_dict(
        {
            "energy_threshold": 1e16,
            "unusual_orientations": ["Vertical"],
            "weights": {"excessive energy release": 5},
        }
    )
    assert config.energy_threshold == 1e16
    assert config.unusual_orientations == frozenset({"vertical"})
    assert config.weights[IndicatorName.EXCESSIVE_ENERGY_RELEASE] == 5.0


@pytest.mark.parametrize("orientations", ["vertical", ["vertical", 3]])
def test_invalid_unusual_orientations(orientations):
    with pytest.raises(InvalidConfigurationError, match="Unusual orientations must be"):
        ScoringConfig.from_dict({"unusual_orientations": orientations})


def test_unusual_orientations_from_generator():
    config = ScoringConfig(
        unusual_orientations=(orientation for orientation in ["Vertical", "dipping"])
    )
    assert config.unusual_orientations == frozenset({"vertical", "dipping"})
    east_west = dataclasses.replace(QUIET_PATTERN, depth=65.0)
    assert not scoring.unusual_fault_orientation(east_west, DEFAULT_PROFILE, config)


def test_scoring_config_from_dict_unknown_key():
    with pytest.raises(InvalidConfigurationError, match="Unknown scoring configuration keys"):
        ScoringConfig.from_dict({"energy_limit": 1e16})


def test_validate_rules():
    with pytest.raises(InvalidConfigurationError, match="Duplicate indicator rule"):
        scoring.validate_rules(
            [
                IndicatorRule(IndicatorName.UNUSUAL_DEPTH, always, 10),
                IndicatorRule(IndicatorName.UNUSUAL_DEPTH, always, 10),
            ]
        )
    with pytest.raises(InvalidConfigurationError):
        scoring.validate_rules([IndicatorRule(IndicatorName.UNUSUAL_DEPTH, always, -5)])


def test_score_derived_pattern():
    """The high magnitude, short duration example event saturates the confidence."""
    event = SeismicEvent(
        magnitude=7.5,
        depth=65.0,
        duration=20.0,
        fault_orientation="north-south",
        thermal_gradient=850.0,
    )
    score = scoring.score_pattern(
        derive_rupture_pattern(event, DEFAULT_PROFILE), DEFAULT_PROFILE
    )
    assert score.confidence == 100.0
    assert [indicator.name for indicator in score.indicators] == [
        IndicatorName.EXTREME_THERMAL_GRADIENT,
        IndicatorName.HIGH_MAGNITUDE_LOW_DURATION,
        IndicatorName.UNUSUAL_FAULT_ORIENTATION,
        IndicatorName.EXCESSIVE_ENERGY_RELEASE,
    ]
