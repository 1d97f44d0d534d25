"""Geological profiles describing the operating envelope of an analysis.

A `GeologicalProfile` is created once (either `DEFAULT_PROFILE` or read
from a JSON file with `deep_rupture.records.read_profile`) and shared
read-only by every analysis that uses it.

Exceptions
----------
- InvalidConfigurationError: Raised for invalid profiles or analysis settings.
"""

import dataclasses
from collections.abc import Iterable

import numpy as np


class InvalidConfigurationError(ValueError):
    """Exception raised for invalid profile or analysis configuration."""

    pass


def normalise_rock_labels(rocks: Iterable[str]) -> frozenset[str]:
    """Normalise rock type labels for set comparisons.

    Parameters
    ----------
    rocks : Iterable[str]
        Rock type labels, e.g. ["Basalt", " andesite"].

    Returns
    -------
    frozenset[str]
        Stripped, lower case labels.
    """
    return frozenset(rock.strip().lower() for rock in rocks)


@dataclasses.dataclass(frozen=True)
class GeologicalProfile:
    """The geological envelope used to validate and score seismic events.

    Attributes
    ----------
    depth_range : tuple[float, float]
        Minimum and maximum valid depth of an event (km, inclusive).
    temperature_threshold : float
        Thermal gradient above which an event is considered extreme (°C/km).
    pressure_factor : float
        Scaling applied to the lithostatic pressure when an event does
        not report a pressure (dimensionless).
    rock_composition : frozenset[str]
        Rock types accepted by this profile.
    """

    depth_range: tuple[float, float]
    temperature_threshold: float
    pressure_factor: float
    rock_composition: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        if len(self.depth_range) != 2:
            raise InvalidConfigurationError(
                f"Depth range must have exactly two values, got {self.depth_range}."
            )
        min_depth, max_depth = (float(depth) for depth in self.depth_range)
        if not (np.isfinite(min_depth) and np.isfinite(max_depth)):
            raise InvalidConfigurationError("Depth range must be finite.")
        if min_depth < 0:
            raise InvalidConfigurationError(
                f"Depth range must be non-negative, got minimum depth {min_depth}."
            )
        if min_depth > max_depth:
            raise InvalidConfigurationError(
                f"Minimum depth {min_depth} exceeds maximum depth {max_depth}."
            )
        if not np.isfinite(self.temperature_threshold) or self.temperature_threshold < 0:
            raise InvalidConfigurationError(
                f"Temperature threshold must be a non-negative number, got {self.temperature_threshold}."
            )
        if not np.isfinite(self.pressure_factor) or self.pressure_factor < 0:
            raise InvalidConfigurationError(
                f"Pressure factor must be a non-negative number, got {self.pressure_factor}."
            )
        # Frozen dataclasses must bypass __setattr__ to normalise fields.
        object.__setattr__(self, "depth_range", (min_depth, max_depth))
        object.__setattr__(
            self, "rock_composition", normalise_rock_labels(self.rock_composition)
        )

    @property
    def min_depth(self) -> float:  # numpydoc ignore=RT01
        """float: The shallowest valid event depth (km)."""
        return self.depth_range[0]

    @property
    def max_depth(self) -> float:  # numpydoc ignore=RT01
        """float: The deepest valid event depth (km)."""
        return self.depth_range[1]

    def contains_depth(self, depth: float) -> bool:
        """Check if a depth lies within the profile depth range.

        Both ends of the range are inclusive.

        Parameters
        ----------
        depth : float
            Depth to check (km).

        Returns
        -------
        bool
            True if `min_depth <= depth <= max_depth`.
        """
        return self.min_depth <= depth <= self.max_depth


DEFAULT_PROFILE = GeologicalProfile(
    depth_range=(30.0, 70.0),
    temperature_threshold=800.0,
    pressure_factor=1.5,
    rock_composition=frozenset({"basalt", "andesite"}),
)
