import math

import numpy as np
import pytest

from vector import (
    as_vec3, dot, lerp, magnitude, normalize, random_unit_vectors, reflect,
    rotate_about_axis, rotate_y, rotate_y_many, vec3
)


def test_magnitude_and_dot():
    v = vec3(3.0, 4.0, 12.0)
    assert magnitude(v) == pytest.approx(13.0)
    assert dot(v, vec3(1.0, 0.0, 0.0)) == pytest.approx(3.0)


def test_normalize_returns_unit_vector():
    n = normalize(vec3(0.0, -5.0, 0.0))
    assert np.allclose(n, [0.0, -1.0, 0.0])


def test_normalize_zero_vector_raises():
    with pytest.raises(ValueError):
        normalize(vec3())


def test_as_vec3_rejects_wrong_shape():
    with pytest.raises(ValueError):
        as_vec3([1.0, 2.0])


def test_lerp_moves_fraction_of_the_way():
    result = lerp(vec3(0.0, 0.0, 0.0), vec3(10.0, -10.0, 100.0), 0.02)
    assert np.allclose(result, [0.2, -0.2, 2.0])


def test_reflect_inverts_normal_component_and_keeps_speed():
    v = vec3(2.0, -3.0, 1.0)
    n = vec3(0.0, 1.0, 0.0)
    r = reflect(v, n)
    assert np.allclose(r, [2.0, 3.0, 1.0])
    assert magnitude(r) == pytest.approx(magnitude(v))


def test_rotate_y_quarter_turn():
    # x' = x cos - z sin, z' = x sin + z cos
    r = rotate_y(vec3(1.0, 2.0, 0.0), math.pi / 2)
    assert np.allclose(r, [0.0, 2.0, 1.0])


def test_rotate_y_matches_axis_rotation_with_negated_angle():
    v = vec3(1.5, -0.5, 2.0)
    theta = 0.7
    assert np.allclose(rotate_y(v, theta), rotate_about_axis(v, vec3(0.0, 1.0, 0.0), -theta))


def test_rotate_y_many_matches_single():
    points = np.array([[1.0, 2.0, 3.0], [-4.0, 0.5, 1.0]])
    rotated = rotate_y_many(points, 1.1)
    for point, expected in zip(points, rotated):
        assert np.allclose(rotate_y(point, 1.1), expected)


def test_rotate_about_axis_preserves_length_and_axis_component():
    v = vec3(1.0, 2.0, 3.0)
    axis = vec3(1.0, 1.0, 0.0)
    r = rotate_about_axis(v, axis, 2.3)
    k = normalize(axis)
    assert magnitude(r) == pytest.approx(magnitude(v))
    assert dot(r, k) == pytest.approx(dot(v, k))


def test_random_unit_vectors_are_unit_length():
    rng = np.random.default_rng(0)
    dirs = random_unit_vectors(rng, 500)
    assert dirs.shape == (500, 3)
    assert np.allclose(np.linalg.norm(dirs, axis=1), 1.0)
