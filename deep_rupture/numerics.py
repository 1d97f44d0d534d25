"""Numeric guards shared by the calculators."""

import warnings

EPSILON = 1e-10


class DegenerateInputWarning(UserWarning):
    """Warning issued when a degenerate physical input is floored at `EPSILON`."""

    pass


def floor_divisor(value: float, label: str) -> float:
    """Floor a divisor at `EPSILON`, warning if the floor is applied.

    Parameters
    ----------
    value : float
        The divisor.
    label : str
        A human friendly label for the divisor, used in the warning message.

    Returns
    -------
    float
        `value` if it is at least `EPSILON`, otherwise `EPSILON`.

    Warns
    -----
    DegenerateInputWarning
        If `value` is below `EPSILON`.
    """
    if value < EPSILON:
        warnings.warn(
            f"Degenerate {label} ({value}), using {EPSILON} instead.",
            DegenerateInputWarning,
            stacklevel=3,
        )
        return EPSILON
    return value
