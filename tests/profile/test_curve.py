"""
test_curve.py

Unit tests for the closed Catmull-Rom curve.
"""

from __future__ import annotations

import numpy as np
import pytest

from cone_racer.profile.curve import ClosedCatmullRom


def _circle(count: int, radius: float = 10.0) -> np.ndarray:
    angles = np.linspace(0.0, 2.0 * np.pi, count, endpoint=False)
    return np.column_stack((radius * np.cos(angles), radius * np.sin(angles)))


def test_interpolates_control_points() -> None:
    control = np.array([[0.0, 0.0], [4.0, 0.0], [4.0, 3.0], [0.0, 3.0]])
    curve = ClosedCatmullRom(control)

    np.testing.assert_allclose(curve.evaluate(np.arange(4) / 4.0), control, atol=1e-12)


def test_parameter_one_wraps_to_start() -> None:
    control = _circle(8)
    curve = ClosedCatmullRom(control)

    np.testing.assert_allclose(curve.evaluate(np.array([1.0]))[0], control[0], atol=1e-12)


def test_constant_channel_carried() -> None:
    control = np.column_stack((_circle(12), np.full(12, 1.5)))
    samples = ClosedCatmullRom(control).evaluate(np.linspace(0.0, 1.0, 97))

    np.testing.assert_allclose(samples[:, 2], 1.5)


def test_circle_length() -> None:
    curve = ClosedCatmullRom(_circle(32))
    assert curve.length == pytest.approx(2.0 * np.pi * 10.0, rel=1e-2)


def test_spaced_points_closed_and_uniform() -> None:
    curve = ClosedCatmullRom(_circle(16))
    samples = curve.spaced_points(100)

    assert samples.shape == (101, 2)
    np.testing.assert_array_equal(samples[0], samples[-1])

    steps = np.linalg.norm(np.diff(samples, axis=0), axis=1)
    assert steps.max() / steps.min() < 1.02


def test_spaced_points_starts_at_first_control() -> None:
    control = _circle(10)
    samples = ClosedCatmullRom(control).spaced_points(50)

    np.testing.assert_allclose(samples[0], control[0], atol=1e-12)


def test_invalid_inputs() -> None:
    with pytest.raises(ValueError):
        ClosedCatmullRom(np.zeros((1, 2)))
    with pytest.raises(ValueError):
        ClosedCatmullRom(np.zeros((5, 1)))
    with pytest.raises(ValueError):
        ClosedCatmullRom(_circle(5)).spaced_points(0)
