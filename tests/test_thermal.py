import numpy as np
import pytest
from hypothesis import given
from hypothesis import strategies as st

from deep_rupture import thermal
from deep_rupture.numerics import EPSILON, DegenerateInputWarning


@pytest.mark.parametrize(
    "depth, surface_temperature, gradient, expected",
    [
        (0.0, 15.0, 25.0, 15.0),
        (10.0, 15.0, 25.0, 265.0),
        (65.0, 15.0, 850.0, 55265.0),
        (50.0, 0.0, 20.0, 1000.0),
    ],
)
def test_expected_temperature(
    depth: float, surface_temperature: float, gradient: float, expected: float
):
    assert thermal.expected_temperature(
        depth, surface_temperature, gradient
    ) == pytest.approx(expected)


def test_expected_temperature_defaults():
    assert thermal.expected_temperature(40.0) == pytest.approx(1015.0)


@given(
    temperature=st.floats(-1000, 5000), reference_temperature=st.floats(-1000, 5000)
)
def test_thermal_stress_symmetric(temperature: float, reference_temperature: float):
    """Thermal stress depends only on the magnitude of the temperature difference."""
    stress = thermal.thermal_stress(temperature, reference_temperature)
    assert stress >= 0
    assert stress == pytest.approx(
        thermal.thermal_stress(reference_temperature, temperature)
    )


def test_thermal_stress():
    assert thermal.thermal_stress(500.0, 100.0) == pytest.approx(1e-3)
    assert thermal.thermal_stress(100.0, 500.0, 1e-5) == pytest.approx(4e-3)


@pytest.mark.parametrize(
    "temperature, expected_temperature, threshold, expected",
    [
        (1000.0, 1000.0, 100.0, False),
        (1100.0, 1000.0, 100.0, False),
        (1100.1, 1000.0, 100.0, True),
        (899.9, 1000.0, 100.0, True),
        (1050.0, 1000.0, 25.0, True),
    ],
)
def test_is_thermally_anomalous(
    temperature: float, expected_temperature: float, threshold: float, expected: bool
):
    assert (
        thermal.is_thermally_anomalous(
            40.0, temperature, expected_temperature, threshold
        )
        == expected
    )


def test_heat_flux():
    assert thermal.heat_flux(100.0, 2.0, 3.0) == pytest.approx(150.0)


def test_heat_flux_zero_thickness():
    """Zero thickness layers are floored at epsilon rather than dividing by zero."""
    with pytest.warns(DegenerateInputWarning):
        flux = thermal.heat_flux(100.0, 0.0, 3.0)
    assert np.isfinite(flux)
    assert flux == pytest.approx(300.0 / EPSILON)


def test_thermal_energy():
    assert thermal.thermal_energy(2.0, 1000.0, 5.0) == pytest.approx(10000.0)


@pytest.mark.parametrize(
    "gradient, expected",
    [
        (-5.0, thermal.GradientClass.LOW),
        (0.0, thermal.GradientClass.LOW),
        (9.99, thermal.GradientClass.LOW),
        (10.0, thermal.GradientClass.MODERATE),
        (29.99, thermal.GradientClass.MODERATE),
        (30.0, thermal.GradientClass.HIGH),
        (49.99, thermal.GradientClass.HIGH),
        (50.0, thermal.GradientClass.EXTREME),
        (850.0, thermal.GradientClass.EXTREME),
    ],
)
def test_classify_gradient(gradient: float, expected: thermal.GradientClass):
    assert thermal.classify_gradient(gradient) == expected


def test_is_extreme_gradient():
    assert not thermal.is_extreme_gradient(50.0)
    assert thermal.is_extreme_gradient(50.1)
