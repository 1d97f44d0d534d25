"""Seismic event records consumed by the analysis pipeline.

Exceptions
----------
- InvalidEventError: Raised when an event holds invalid measurements.
"""

import dataclasses
from typing import Optional

import numpy as np

from deep_rupture.profile import normalise_rock_labels


class InvalidEventError(ValueError):
    """Exception raised for seismic events with invalid measurements."""

    pass


def _check_finite(label: str, value: Optional[float], minimum: Optional[float] = None):
    """Validate an optional measurement.

    Parameters
    ----------
    label : str
        Name of the measurement, for error messages.
    value : Optional[float]
        The measurement, or None if it was not supplied.
    minimum : Optional[float]
        The smallest valid value, or None for no lower bound.

    Raises
    ------
    InvalidEventError
        If the value is not finite or is below `minimum`.
    """
    if value is None:
        return
    if not np.isfinite(value):
        raise InvalidEventError(f"Event {label} must be finite, got {value}.")
    if minimum is not None and value < minimum:
        raise InvalidEventError(
            f"Event {label} must be at least {minimum}, got {value}."
        )


@dataclasses.dataclass(frozen=True)
class StressField:
    """The stress field acting on a fault."""

    magnitude: float
    """The shear stress acting on the fault (MPa)."""
    direction: str
    """The direction of the stress field, e.g. "north-south"."""

    def __post_init__(self) -> None:
        _check_finite("stress field magnitude", self.magnitude, minimum=0.0)


@dataclasses.dataclass(frozen=True)
class SeismicEvent:
    """Raw measurements of a seismic event.

    Optional measurements are None when not supplied. The magnitude and
    duration are estimated from the geological conditions of the event
    when absent (see `deep_rupture.rupture_pattern`).
    """

    depth: float
    """Depth of the hypocentre (km)."""
    fault_orientation: str
    """Orientation of the fault, e.g. "north-south"."""
    thermal_gradient: float
    """Thermal gradient at the hypocentre (°C/km)."""
    magnitude: Optional[float] = None
    """Magnitude of the event."""
    duration: Optional[float] = None
    """Duration of the event (s)."""
    stress_field: Optional[StressField] = None
    """Stress field acting on the fault."""
    temperature: Optional[float] = None
    """Measured temperature at the hypocentre (°C)."""
    pressure: Optional[float] = None
    """Measured pressure at the hypocentre (MPa)."""
    rupture_velocity: Optional[float] = None
    """Observed rupture velocity (km/s)."""
    rock_composition: Optional[frozenset[str]] = None
    """Rock types present at the hypocentre."""

    def __post_init__(self) -> None:
        _check_finite("depth", self.depth, minimum=0.0)
        _check_finite("thermal gradient", self.thermal_gradient)
        _check_finite("magnitude", self.magnitude)
        _check_finite("duration", self.duration, minimum=0.0)
        _check_finite("temperature", self.temperature)
        _check_finite("pressure", self.pressure, minimum=0.0)
        _check_finite("rupture velocity", self.rupture_velocity, minimum=0.0)
        if not isinstance(self.fault_orientation, str):
            raise InvalidEventError(
                f"Fault orientation must be a string, got {self.fault_orientation!r}."
            )
        if self.rock_composition is not None:
            object.__setattr__(
                self, "rock_composition", normalise_rock_labels(self.rock_composition)
            )
