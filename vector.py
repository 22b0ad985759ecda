# vector.py
"""
Small 3D vector helpers shared by the physics, camera and picking code.

Vectors are plain NumPy float64 arrays of shape (3,). The helpers never
mutate their arguments; each returns a new array.
"""
import numpy as np
from typing import Iterable

# --- Data Contracts ---
#
# vec3(x, y, z) -> np.ndarray
#   - Outputs: float64 array of shape (3,).
#
# normalize(v) -> np.ndarray
#   - Raises: ValueError if |v| is below EPSILON. Callers that must not
#     fail check magnitude() first.
#
# rotate_y(v, theta) -> np.ndarray
#   - The scene-orbit rotation: x' = x cos - z sin, z' = x sin + z cos.
#   - Equivalent to rotate_about_axis(v, (0, 1, 0), -theta).

EPSILON = 1e-12


def vec3(x: float = 0.0, y: float = 0.0, z: float = 0.0) -> np.ndarray:
    return np.array([x, y, z], dtype=np.float64)


def as_vec3(values: Iterable[float]) -> np.ndarray:
    """Copies any 3-element sequence into a fresh float64 vector."""
    v = np.array(values, dtype=np.float64)
    if v.shape != (3,):
        raise ValueError(f"Expected a 3-component vector, got shape {v.shape}.")
    return v


def magnitude(v: np.ndarray) -> float:
    return float(np.sqrt(np.dot(v, v)))


def dot(a: np.ndarray, b: np.ndarray) -> float:
    return float(np.dot(a, b))


def normalize(v: np.ndarray) -> np.ndarray:
    mag = magnitude(v)
    if mag < EPSILON:
        raise ValueError("Cannot normalize a zero-length vector.")
    return v / mag


def lerp(a: np.ndarray, b: np.ndarray, amount: float) -> np.ndarray:
    """Linear interpolation a + (b - a) * amount."""
    return a + (b - a) * amount


def reflect(v: np.ndarray, normal: np.ndarray) -> np.ndarray:
    """
    Mirrors v across the plane with the given unit normal.

    The tangential component is kept and the normal component inverted,
    so |v| is unchanged.
    """
    return v - 2.0 * np.dot(v, normal) * normal


def rotate_y(v: np.ndarray, theta: float) -> np.ndarray:
    c = np.cos(theta)
    s = np.sin(theta)
    return np.array([v[0] * c - v[2] * s, v[1], v[0] * s + v[2] * c], dtype=np.float64)


def rotate_y_many(points: np.ndarray, theta: float) -> np.ndarray:
    """Vectorized rotate_y for an (N, 3) array of points."""
    c = np.cos(theta)
    s = np.sin(theta)
    rotated = np.empty_like(points, dtype=np.float64)
    rotated[:, 0] = points[:, 0] * c - points[:, 2] * s
    rotated[:, 1] = points[:, 1]
    rotated[:, 2] = points[:, 0] * s + points[:, 2] * c
    return rotated


def rotate_about_axis(v: np.ndarray, axis: np.ndarray, theta: float) -> np.ndarray:
    """
    Rotates v by theta radians about axis (right-hand rule), using
    Rodrigues' rotation formula. The axis need not be unit length.
    """
    k = normalize(np.asarray(axis, dtype=np.float64))
    c = np.cos(theta)
    s = np.sin(theta)
    return v * c + np.cross(k, v) * s + k * np.dot(k, v) * (1.0 - c)


def random_unit_vectors(rng: np.random.Generator, count: int) -> np.ndarray:
    """
    Samples directions uniformly on the unit sphere.

    Uses the cylindrical projection: z uniform in [-1, 1], azimuth
    uniform in [0, 2*pi).
    """
    z = rng.uniform(-1.0, 1.0, size=count)
    phi = rng.uniform(0.0, 2.0 * np.pi, size=count)
    r = np.sqrt(1.0 - z * z)
    return np.stack([r * np.cos(phi), r * np.sin(phi), z], axis=1)
