"""Thermal relationships for deep rupture analysis.

Functions
---------
expected_temperature
    Temperature at depth from a linear geothermal gradient.
thermal_stress
    Thermal stress factor from a temperature difference.
is_thermally_anomalous
    Check a temperature against the expected temperature at depth.
heat_flux
    Conductive heat flux through a layer.
thermal_energy
    Thermal energy from a temperature change.
classify_gradient
    Classify a thermal gradient.
"""

from enum import StrEnum

from deep_rupture.numerics import floor_divisor

SURFACE_TEMPERATURE = 15.0
GEOTHERMAL_GRADIENT = 25.0
THERMAL_EXPANSION_COEFFICIENT = 2.5e-6
THERMAL_ANOMALY_THRESHOLD = 100.0
EXTREME_GRADIENT = 50.0


class GradientClass(StrEnum):
    """Classification of thermal gradients."""

    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"
    EXTREME = "Extreme"


# Upper bounds (exclusive) for each class, checked in order.
GRADIENT_CLASS_BOUNDS = (
    (10.0, GradientClass.LOW),
    (30.0, GradientClass.MODERATE),
    (EXTREME_GRADIENT, GradientClass.HIGH),
)


def expected_temperature(
    depth: float,
    surface_temperature: float = SURFACE_TEMPERATURE,
    geothermal_gradient: float = GEOTHERMAL_GRADIENT,
) -> float:
    """Calculate the expected temperature at depth.

    Parameters
    ----------
    depth : float
        Depth (km).
    surface_temperature : float, optional
        Temperature at the surface (°C). Default is 15°C.
    geothermal_gradient : float, optional
        Geothermal gradient (°C/km). Default is 25°C/km.

    Returns
    -------
    float
        Expected temperature at `depth` (°C).
    """
    return surface_temperature + depth * geothermal_gradient


def thermal_stress(
    temperature: float,
    reference_temperature: float,
    thermal_expansion_coefficient: float = THERMAL_EXPANSION_COEFFICIENT,
) -> float:
    """Calculate the thermal stress factor of a temperature difference.

    Parameters
    ----------
    temperature : float
        Current temperature (°C).
    reference_temperature : float
        Reference temperature (°C).
    thermal_expansion_coefficient : float, optional
        Coefficient of thermal expansion. Default is 2.5e-6.

    Returns
    -------
    float
        The (non-negative) thermal stress factor.
    """
    return abs(temperature - reference_temperature) * thermal_expansion_coefficient


def is_thermally_anomalous(
    depth: float,
    temperature: float,
    expected: float,
    threshold: float = THERMAL_ANOMALY_THRESHOLD,
) -> bool:
    """Check if a temperature deviates from the expected temperature at depth.

    Parameters
    ----------
    depth : float
        Depth of the measurement (km). Kept for call-site symmetry with
        `expected_temperature`; the comparison does not depend on it.
    temperature : float
        Measured temperature (°C).
    expected : float
        Expected temperature at `depth` (°C).
    threshold : float, optional
        Maximum tolerated deviation (°C). Default is 100°C.

    Returns
    -------
    bool
        True if the temperature deviates by more than `threshold`.
    """
    return abs(temperature - expected) > threshold


def heat_flux(
    temperature_difference: float, thickness: float, thermal_conductivity: float
) -> float:
    """Calculate conductive heat flux through a geological layer.

    Parameters
    ----------
    temperature_difference : float
        Temperature difference across the layer (°C).
    thickness : float
        Thickness of the layer (m).
    thermal_conductivity : float
        Thermal conductivity of the layer (W/(m·K)).

    Returns
    -------
    float
        Heat flux (W/m^2).

    Warns
    -----
    DegenerateInputWarning
        If the thickness is zero (or negligible), in which case it is
        floored at `deep_rupture.numerics.EPSILON`.
    """
    thickness = floor_divisor(thickness, "layer thickness")
    return thermal_conductivity * temperature_difference / thickness


def thermal_energy(
    mass: float, specific_heat: float, temperature_change: float
) -> float:
    """Calculate thermal energy released by a temperature change.

    Parameters
    ----------
    mass : float
        Mass of ruptured material (kg).
    specific_heat : float
        Specific heat capacity (J/(kg·K)).
    temperature_change : float
        Change in temperature (K).

    Returns
    -------
    float
        Thermal energy (J).
    """
    return mass * specific_heat * temperature_change


def classify_gradient(gradient: float) -> GradientClass:
    """Classify a thermal gradient.

    Parameters
    ----------
    gradient : float
        Thermal gradient (°C/km).

    Returns
    -------
    GradientClass
        LOW below 10, MODERATE below 30, HIGH below 50 and EXTREME otherwise.
    """
    for upper_bound, gradient_class in GRADIENT_CLASS_BOUNDS:
        if gradient < upper_bound:
            return gradient_class
    return GradientClass.EXTREME


def is_extreme_gradient(gradient: float) -> bool:
    """Check if a thermal gradient (°C/km) exceeds 50°C/km."""
    return gradient > EXTREME_GRADIENT
