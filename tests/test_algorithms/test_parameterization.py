"""
Tests for parameterization functions and bounding boxes.
"""

import math

import numpy as np
import pytest

from correlation_mining.algorithms.parameterization import (
    ExtremumType,
    HyperBoundingBox,
    ParameterizationFunction,
    full_angle_box,
    normal_vector,
)


# ------------------------------------------------------------------
# HyperBoundingBox
# ------------------------------------------------------------------


def test_box_centroid_and_contains():
    """Centroid is the midpoint; contains is inclusive on the bounds."""
    box = HyperBoundingBox([0.0, 1.0], [2.0, 3.0])
    np.testing.assert_allclose(box.centroid(), [1.0, 2.0])
    assert box.dimensionality == 2
    assert box.contains([0.0, 3.0])
    assert box.contains([1.5, 2.5])
    assert not box.contains([2.1, 2.0])


def test_box_rejects_inverted_corners():
    """Lower corner must not exceed the upper corner."""
    with pytest.raises(ValueError, match="exceeds"):
        HyperBoundingBox([1.0, 0.0], [0.0, 1.0])


def test_box_rejects_shape_mismatch():
    """Corners must have equal length."""
    with pytest.raises(ValueError, match="equal length"):
        HyperBoundingBox([0.0, 0.0], [1.0])


def test_box_corners_are_frozen():
    """Mutating the source arrays does not change the box."""
    lower = np.zeros(2)
    box = HyperBoundingBox(lower, np.ones(2))
    lower[0] = 5.0
    assert box.lower[0] == 0.0
    with pytest.raises(ValueError):
        box.lower[0] = 1.0


def test_full_angle_box():
    """The full domain is [0, pi] in every angle."""
    box = full_angle_box(3)
    np.testing.assert_array_equal(box.lower, np.zeros(3))
    np.testing.assert_allclose(box.upper, np.full(3, math.pi))


# ------------------------------------------------------------------
# normal_vector
# ------------------------------------------------------------------


def test_normal_vector_is_unit_length():
    """n(alpha) has norm 1 for any angles."""
    rng = np.random.default_rng(42)
    for _ in range(20):
        alpha = rng.uniform(0.0, math.pi, size=4)
        assert np.linalg.norm(normal_vector(alpha)) == pytest.approx(1.0)


def test_normal_vector_known_values():
    """Angles of pi/2 rotate the normal onto the last axis."""
    np.testing.assert_allclose(normal_vector([0.0]), [1.0, 0.0])
    np.testing.assert_allclose(normal_vector([math.pi / 2]), [0.0, 1.0], atol=1e-12)
    np.testing.assert_allclose(
        normal_vector([math.pi / 2, math.pi / 2]), [0.0, 0.0, 1.0], atol=1e-12
    )


# ------------------------------------------------------------------
# ParameterizationFunction
# ------------------------------------------------------------------


def test_function_values():
    """f(alpha) is the dot product of the point with n(alpha)."""
    f = ParameterizationFunction([1.0, 2.0])
    assert f.function([0.0]) == pytest.approx(1.0)
    assert f.function([math.pi / 2]) == pytest.approx(2.0)

    g = ParameterizationFunction([1.0, 2.0, 3.0])
    assert g.function([math.pi / 2, math.pi / 2]) == pytest.approx(3.0)


def test_function_rejects_invalid_points():
    """Points must be 1-D, at least 2-dimensional and finite."""
    with pytest.raises(ValueError, match="at least 2 coordinates"):
        ParameterizationFunction([1.0])
    with pytest.raises(ValueError, match="at least 2 coordinates"):
        ParameterizationFunction([[1.0, 2.0]])
    with pytest.raises(ValueError, match="finite"):
        ParameterizationFunction([1.0, float("nan")])


def test_coordinates_are_copied():
    """The function keeps its own read-only copy of the point."""
    p = np.array([3.0, 4.0])
    f = ParameterizationFunction(p, id=7)
    p[0] = 100.0
    assert f.coordinates[0] == 3.0
    assert f.id == 7
    assert f.dimensionality == 2


def test_global_maximum_2d():
    """A 2-D point reaches +|p| at its global extremum."""
    f = ParameterizationFunction([3.0, 4.0])
    assert f.extremum_type is ExtremumType.MAXIMUM
    assert f.function(f.alpha_extremum) == pytest.approx(5.0)
    assert 0.0 <= f.alpha_extremum[0] < math.pi


def test_global_minimum_2d():
    """A point whose extremum is -|p| is typed as a minimum."""
    f = ParameterizationFunction([3.0, -4.0])
    assert f.extremum_type is ExtremumType.MINIMUM
    assert f.function(f.alpha_extremum) == pytest.approx(-5.0)


def test_global_extremum_3d():
    """The extremum of a 3-D point has absolute value |p|."""
    f = ParameterizationFunction([1.0, 2.0, 2.0])
    assert f.extremum_type is ExtremumType.MAXIMUM
    assert f.function(f.alpha_extremum) == pytest.approx(3.0)
    assert full_angle_box(2).contains(f.alpha_extremum)


def test_origin_is_constant():
    """The origin maps to the constant zero function."""
    f = ParameterizationFunction([0.0, 0.0, 0.0])
    assert f.extremum_type is ExtremumType.CONSTANT
    assert f.min_max_value(full_angle_box(2)) == (0.0, 0.0)


def test_min_max_value_full_domain_2d():
    """Over [0, pi] the range of (3, 4) is [-3, 5]."""
    f = ParameterizationFunction([3.0, 4.0])
    f_min, f_max = f.min_max_value(full_angle_box(1))
    assert f_min == pytest.approx(-3.0)
    assert f_max == pytest.approx(5.0)


def test_min_max_value_matches_sampling_2d():
    """In 2-D the box range equals a dense sampling of the curve."""
    rng = np.random.default_rng(42)
    for _ in range(25):
        f = ParameterizationFunction(rng.uniform(-2.0, 2.0, size=2))
        lo, hi = np.sort(rng.uniform(0.0, math.pi, size=2))
        box = HyperBoundingBox([lo], [hi])
        samples = [f.function([a]) for a in np.linspace(lo, hi, 2001)]
        f_min, f_max = f.min_max_value(box)
        assert f_min == pytest.approx(min(samples), abs=1e-5)
        assert f_max == pytest.approx(max(samples), abs=1e-5)


def test_alpha_min_max_stay_inside_box_3d():
    """The returned angles lie in the box and order the values."""
    rng = np.random.default_rng(42)
    box = HyperBoundingBox([0.3, 1.0], [1.2, 2.5])
    for _ in range(25):
        f = ParameterizationFunction(rng.uniform(-1.0, 1.0, size=3))
        alpha_min, alpha_max = f.determine_alpha_min_max(box)
        assert box.contains(alpha_min)
        assert box.contains(alpha_max)
        f_min, f_max = f.min_max_value(box)
        assert f_min <= f_max


def test_box_dimension_mismatch():
    """The box must have one dimension per angle."""
    f = ParameterizationFunction([1.0, 2.0, 3.0])
    with pytest.raises(ValueError, match="does not match"):
        f.min_max_value(full_angle_box(1))
