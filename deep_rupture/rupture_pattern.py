"""Derivation of rupture patterns from raw seismic events.

A `RupturePattern` holds the raw measurements of an event alongside the
quantities derived from them by the thermal, stress and rupture velocity
calculators. Measurements missing from the event are filled in with the
empirical estimates in this module:

- Temperature from the thermal gradient of the event,
- Pressure from the lithostatic pressure, scaled by the profile pressure factor,
- Magnitude from the depth, temperature and pressure,
- Duration from an approximate rupture length and the maximum rupture velocity.

Exceptions
----------
- OutOfRangeDepthError: Raised when an event lies outside the profile depth range.

Example
-------
>>> event = SeismicEvent(depth=65, fault_orientation="north-south", thermal_gradient=30, magnitude=7.5, duration=20)
>>> pattern = derive_rupture_pattern(event, DEFAULT_PROFILE)
>>> pattern.rupture_velocity
4.0
"""

import dataclasses
from typing import Optional

import numpy as np

from deep_rupture import rupture_velocity, stress, thermal
from deep_rupture.events import SeismicEvent
from deep_rupture.numerics import EPSILON
from deep_rupture.profile import GeologicalProfile
from deep_rupture.stress import StressResult
from deep_rupture.thermal import GradientClass

ROCK_DENSITY = 3.3
PORE_FLUID_DENSITY = 1.0
FRICTION_COEFFICIENT = 0.6

_MPA_TO_GPA = 1e-3


class OutOfRangeDepthError(ValueError):
    """Exception raised for events outside of the profile depth range."""

    def __init__(self, depth: float, depth_range: tuple[float, float]):
        self.depth = depth
        self.depth_range = depth_range
        super().__init__(
            f"Depth {depth}km is outside the valid range {depth_range[0]}-{depth_range[1]}km."
        )


@dataclasses.dataclass(frozen=True)
class RupturePattern:
    """A seismic event with its derived rupture quantities."""

    magnitude: float
    """Magnitude of the event (measured or estimated)."""
    depth: float
    """Depth of the event (km)."""
    duration: float
    """Duration of the event (s, measured or estimated)."""
    fault_orientation: str
    """Orientation of the fault."""
    rupture_velocity: float
    """Rupture velocity (km/s, observed or derived)."""
    energy_release: float
    """Energy released by the rupture (J)."""
    thermal_gradient: float
    """Thermal gradient at the hypocentre (°C/km)."""
    temperature: float
    """Temperature at the hypocentre (°C, measured or estimated)."""
    pressure: float
    """Pressure at the hypocentre (MPa, measured or estimated)."""
    max_rupture_velocity: float
    """The maximum plausible rupture velocity for the conditions (km/s)."""
    gradient_class: GradientClass
    """Classification of the thermal gradient."""
    thermally_anomalous: bool
    """True if the temperature deviates from a standard geotherm."""
    stress: Optional[StressResult] = None
    """Stress state of the fault, if the event has a stress field."""
    rock_composition: Optional[frozenset[str]] = None
    """Rock types at the hypocentre, if known."""

    @property
    def velocity_ratio(self) -> float:  # numpydoc ignore=RT01
        """float: The ratio of the rupture velocity to the maximum rupture velocity."""
        return rupture_velocity.velocity_ratio(
            self.rupture_velocity, self.max_rupture_velocity
        )


def energy_release(depth: float, temperature: float, pressure: float) -> float:
    """Estimate the energy released by a rupture.

    Parameters
    ----------
    depth : float
        Depth (km).
    temperature : float
        Temperature (°C).
    pressure : float
        Pressure (MPa).

    Returns
    -------
    float
        Energy release (J). Zero for temperatures at or below 600°C.

    Notes
    -----
    The energy release is

        E = ln(depth + 1) * max(0, (T - 600) / 100) * (P / 1000) * 1e15.
    """
    depth_factor = np.log(depth + 1)
    temperature_factor = max(0.0, temperature - 600) / 100
    pressure_factor = pressure / 1000
    return float(depth_factor * temperature_factor * pressure_factor * 1e15)


def estimate_magnitude(
    depth: float, temperature: float, pressure: float, profile: GeologicalProfile
) -> float:
    """Estimate the magnitude of an event from its geological conditions.

    Parameters
    ----------
    depth : float
        Depth (km).
    temperature : float
        Temperature (°C).
    pressure : float
        Pressure (MPa).
    profile : GeologicalProfile
        The profile the event is analysed against.

    Returns
    -------
    float
        Estimated magnitude,

            5 + max(0, (max_depth - depth) / 10) + max(0, (T - 500) / 100) + P_GPa / 500.
    """
    depth_effect = max(0.0, (profile.max_depth - depth) / 10)
    temperature_effect = max(0.0, (temperature - 500) / 100)
    pressure_effect = pressure * _MPA_TO_GPA / 500
    return 5.0 + depth_effect + temperature_effect + pressure_effect


def estimate_duration(depth: float, velocity: float) -> float:
    """Estimate the duration of an event.

    The rupture length is approximated as twice the depth of the event.

    Parameters
    ----------
    depth : float
        Depth (km).
    velocity : float
        Rupture velocity (km/s), floored at `EPSILON`.

    Returns
    -------
    float
        Estimated duration (s).
    """
    return 2 * depth / max(velocity, EPSILON)


def derive_rupture_pattern(
    event: SeismicEvent,
    profile: GeologicalProfile,
    check_depth: bool = True,
    rock_density: float = ROCK_DENSITY,
    pore_fluid_density: float = PORE_FLUID_DENSITY,
    friction_coefficient: float = FRICTION_COEFFICIENT,
) -> RupturePattern:
    """Derive the rupture pattern of a seismic event.

    Parameters
    ----------
    event : SeismicEvent
        The event to derive a pattern for.
    profile : GeologicalProfile
        The profile to analyse the event against.
    check_depth : bool, optional
        If True, reject events outside the profile depth range. Default is True.
    rock_density : float, optional
        Density of the overlying rock (g/cm^3). Default is 3.3.
    pore_fluid_density : float, optional
        Density of the pore fluid (g/cm^3). Default is 1.0.
    friction_coefficient : float, optional
        Coefficient of friction of the fault. Default is 0.6.

    Returns
    -------
    RupturePattern
        The derived rupture pattern.

    Raises
    ------
    OutOfRangeDepthError
        If `check_depth` is True and the event depth lies outside the
        profile depth range.
    """
    depth = event.depth
    if check_depth and not profile.contains_depth(depth):
        raise OutOfRangeDepthError(depth, profile.depth_range)

    lithostatic_pressure = stress.hydrostatic_pressure(rock_density, depth)
    temperature = (
        event.temperature
        if event.temperature is not None
        else thermal.expected_temperature(
            depth, geothermal_gradient=event.thermal_gradient
        )
    )
    pressure = (
        event.pressure
        if event.pressure is not None
        else lithostatic_pressure * profile.pressure_factor
    )
    max_velocity = rupture_velocity.max_rupture_velocity(
        depth, temperature, pressure * _MPA_TO_GPA
    )
    magnitude = (
        event.magnitude
        if event.magnitude is not None
        else estimate_magnitude(depth, temperature, pressure, profile)
    )
    duration = (
        event.duration
        if event.duration is not None
        else estimate_duration(depth, max_velocity)
    )
    velocity = (
        event.rupture_velocity
        if event.rupture_velocity is not None
        else rupture_velocity.rupture_velocity(magnitude, depth, duration)
    )

    stress_result = None
    if event.stress_field is not None:
        stress_result = stress.stress_state(
            normal_stress=lithostatic_pressure,
            shear_stress=event.stress_field.magnitude,
            density=pore_fluid_density,
            depth=depth,
            friction_coefficient=friction_coefficient,
        )

    return RupturePattern(
        magnitude=magnitude,
        depth=depth,
        duration=duration,
        fault_orientation=event.fault_orientation,
        rupture_velocity=velocity,
        energy_release=energy_release(depth, temperature, pressure),
        thermal_gradient=event.thermal_gradient,
        temperature=temperature,
        pressure=pressure,
        max_rupture_velocity=max_velocity,
        gradient_class=thermal.classify_gradient(event.thermal_gradient),
        thermally_anomalous=thermal.is_thermally_anomalous(
            depth, temperature, thermal.expected_temperature(depth)
        ),
        stress=stress_result,
        rock_composition=event.rock_composition,
    )
