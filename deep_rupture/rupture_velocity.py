"""Empirical rupture velocity relationships.

All velocities are in km/s. Velocities from `rupture_velocity` are
capped at `MAX_RUPTURE_VELOCITY`, the physical upper bound on rupture
propagation used throughout the package.
"""

import numpy as np

from deep_rupture.numerics import EPSILON

MAX_RUPTURE_VELOCITY = 4.0
MIN_RUPTURE_VELOCITY = 0.5
ANOMALOUS_VELOCITY_RATIO = 1.2


def rupture_velocity(magnitude: float, depth: float, duration: float) -> float:
    """Calculate the rupture velocity of an event.

    Parameters
    ----------
    magnitude : float
        Magnitude of the event.
    depth : float
        Depth of the event (km).
    duration : float
        Duration of the event (s). Negative durations are treated as zero.

    Returns
    -------
    float
        Rupture velocity (km/s), in the range [0, `MAX_RUPTURE_VELOCITY`].

    Notes
    -----
    The velocity is

        v = 10^(0.5 M - 2.5) * max(0.5, 1 - depth / 1000) * min(1.5, 1 + duration / 100)

    reflecting slower ruptures at depth and longer ruptures having more
    time to accelerate.
    """
    # The depth and duration factors are at least 0.5, so any exponent
    # above 1 saturates the cap. Limiting it avoids float overflow.
    base_velocity = 10 ** min(0.5 * magnitude - 2.5, 1.0)
    depth_factor = max(0.5, 1.0 - depth / 1000)
    duration_factor = min(1.5, 1.0 + max(duration, 0.0) / 100)
    velocity = base_velocity * depth_factor * duration_factor
    return float(np.clip(velocity, 0.0, MAX_RUPTURE_VELOCITY))


def max_rupture_velocity(depth: float, temperature: float, pressure: float) -> float:
    """Calculate the maximum plausible rupture velocity for the given conditions.

    Parameters
    ----------
    depth : float
        Depth (km).
    temperature : float
        Temperature (°C).
    pressure : float
        Pressure (GPa).

    Returns
    -------
    float
        Maximum rupture velocity (km/s), at least `MIN_RUPTURE_VELOCITY`.
    """
    thermal_effect = np.exp(-temperature / 1000)
    pressure_effect = 1.0 / (1.0 + pressure / 10)
    depth_effect = max(0.1, 1.0 - depth / 500)
    return float(
        max(MIN_RUPTURE_VELOCITY, 3.5 * thermal_effect * pressure_effect * depth_effect)
    )


def velocity_ratio(observed_velocity: float, maximum_velocity: float) -> float:
    """Calculate the ratio of observed to maximum rupture velocity.

    Parameters
    ----------
    observed_velocity : float
        Observed rupture velocity (km/s).
    maximum_velocity : float
        Maximum plausible rupture velocity (km/s), floored at `EPSILON`.

    Returns
    -------
    float
        The velocity ratio.
    """
    return observed_velocity / max(maximum_velocity, EPSILON)


def is_anomalous_velocity(
    observed_velocity: float,
    maximum_velocity: float,
    ratio_threshold: float = ANOMALOUS_VELOCITY_RATIO,
) -> bool:
    """Check if an observed rupture velocity exceeds the plausible maximum.

    Parameters
    ----------
    observed_velocity : float
        Observed rupture velocity (km/s).
    maximum_velocity : float
        Maximum plausible rupture velocity (km/s).
    ratio_threshold : float, optional
        Ratio above which the velocity is anomalous. Default is 1.2.

    Returns
    -------
    bool
        True if the observed velocity exceeds `ratio_threshold` times the maximum.
    """
    return velocity_ratio(observed_velocity, maximum_velocity) > ratio_threshold
