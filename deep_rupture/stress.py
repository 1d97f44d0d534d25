"""Stress state calculations for geological formations.

Stresses are in MPa, densities in g/cm^3 and depths in km throughout.
"""

import dataclasses
from enum import StrEnum

import numpy as np
import scipy as sp

from deep_rupture.numerics import EPSILON

_G_PER_CM3_TO_KG_PER_M3 = 1000
_KM_TO_M = 1000
_PA_TO_MPA = 1e-6

STABLE_SAFETY_FACTOR = 2.0
CRITICAL_SAFETY_FACTOR = 1.0


class StressState(StrEnum):
    """Qualitative stress state of a fault."""

    STABLE = "stable"
    CRITICAL = "critical"
    UNSTABLE = "unstable"


@dataclasses.dataclass(frozen=True)
class StressResult:
    """Result of a stress state analysis.

    Attributes
    ----------
    stress_state : StressState
        Qualitative stress state.
    safety_factor : float
        Ratio of resisting shear strength to applied shear stress.
    shear_stress_threshold : float
        Shear stress the fault can resist (MPa).
    normal_stress : float
        Applied normal stress (MPa).
    shear_stress : float
        Applied shear stress (MPa).
    effective_normal_stress : float
        Normal stress less the fluid pressure (MPa).
    stress_intensity : float
        Composite of effective normal and shear stress (MPa).
    """

    stress_state: StressState
    safety_factor: float
    shear_stress_threshold: float
    normal_stress: float
    shear_stress: float
    effective_normal_stress: float
    stress_intensity: float


def hydrostatic_pressure(density: float, depth: float) -> float:
    """Calculate the pressure of a column of material.

    Parameters
    ----------
    density : float
        Density of the column (g/cm^3). Use a fluid density for pore
        pressure and a rock density for lithostatic pressure.
    depth : float
        Height of the column (km).

    Returns
    -------
    float
        Pressure at the base of the column (MPa).
    """
    pressure_pa = (
        density * _G_PER_CM3_TO_KG_PER_M3 * sp.constants.g * depth * _KM_TO_M
    )
    return pressure_pa * _PA_TO_MPA


def effective_normal_stress(normal_stress: float, density: float, depth: float) -> float:
    """Calculate normal stress less the hydrostatic pressure at depth.

    Parameters
    ----------
    normal_stress : float
        Applied normal stress (MPa).
    density : float
        Density of the pore fluid column (g/cm^3).
    depth : float
        Depth (km).

    Returns
    -------
    float
        Effective normal stress (MPa).
    """
    return normal_stress - hydrostatic_pressure(density, depth)


def maximum_shear_stress(normal_stress: float, friction_coefficient: float) -> float:
    """Calculate the maximum shear stress a fault resists.

    Parameters
    ----------
    normal_stress : float
        (Effective) normal stress on the fault (MPa).
    friction_coefficient : float
        Coefficient of friction of the fault.

    Returns
    -------
    float
        Maximum allowable shear stress (MPa).
    """
    return normal_stress * friction_coefficient


def safety_factor(shear_stress_threshold: float, shear_stress: float) -> float:
    """Calculate the ratio of resisting strength to applied shear stress.

    Parameters
    ----------
    shear_stress_threshold : float
        Shear stress the fault can resist (MPa).
    shear_stress : float
        Applied shear stress (MPa), floored at `EPSILON`.

    Returns
    -------
    float
        The safety factor.
    """
    return shear_stress_threshold / max(shear_stress, EPSILON)


def classify_stress_state(factor: float) -> StressState:
    """Classify a safety factor.

    Parameters
    ----------
    factor : float
        Safety factor.

    Returns
    -------
    StressState
        STABLE above 2, CRITICAL above 1, and UNSTABLE otherwise.
    """
    if factor > STABLE_SAFETY_FACTOR:
        return StressState.STABLE
    elif factor > CRITICAL_SAFETY_FACTOR:
        return StressState.CRITICAL
    return StressState.UNSTABLE


def stress_intensity(
    normal_stress: float, shear_stress: float, density: float, depth: float
) -> float:
    """Calculate a simplified stress intensity for rupture propagation analysis.

    Parameters
    ----------
    normal_stress : float
        Applied normal stress (MPa).
    shear_stress : float
        Applied shear stress (MPa).
    density : float
        Density of the pore fluid column (g/cm^3).
    depth : float
        Depth (km).

    Returns
    -------
    float
        sqrt(effective_normal_stress^2 + 3 * shear_stress^2)
    """
    effective = effective_normal_stress(normal_stress, density, depth)
    return float(np.sqrt(effective**2 + 3 * shear_stress**2))


def stress_state(
    normal_stress: float,
    shear_stress: float,
    density: float,
    depth: float,
    friction_coefficient: float,
) -> StressResult:
    """Analyse the stress state of a fault at depth.

    Parameters
    ----------
    normal_stress : float
        Applied normal stress (MPa).
    shear_stress : float
        Applied shear stress (MPa).
    density : float
        Density of the pore fluid column (g/cm^3).
    depth : float
        Depth (km).
    friction_coefficient : float
        Coefficient of friction of the fault.

    Returns
    -------
    StressResult
        The stress analysis.
    """
    effective = effective_normal_stress(normal_stress, density, depth)
    threshold = maximum_shear_stress(effective, friction_coefficient)
    factor = safety_factor(threshold, shear_stress)
    return StressResult(
        stress_state=classify_stress_state(factor),
        safety_factor=factor,
        shear_stress_threshold=threshold,
        normal_stress=normal_stress,
        shear_stress=shear_stress,
        effective_normal_stress=effective,
        stress_intensity=stress_intensity(normal_stress, shear_stress, density, depth),
    )
