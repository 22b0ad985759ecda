# picking.py
"""
Selects a particle from a screen click by casting a ray from the default
camera and intersecting it with an enlarged sphere around every particle.

The ray is always built for the default orbiting camera (fixed eye on the
+Z axis, 60 degree field of view). Picking is only used while the follow
camera is inactive, so the follow camera's pose never enters here.
"""
import logging
import math
from typing import Any, Dict, Optional, Tuple

import numpy as np
from numba import jit

from constants import BALL_RADIUS, FIELD_OF_VIEW, PICKING_MULTIPLIER
from particle import Particle, ParticleSet
from vector import EPSILON, rotate_y_many, vec3

# --- Data Contracts ---
#
# class Picker:
#   - __init__(self, params: Optional[Dict[str, Any]] = None, particle_radius: float = BALL_RADIUS):
#     - Inputs:
#       - params: the "picking" section of config.json.
#         - "fov": float, degrees
#         - "picking_multiplier": float
#
#   - pick(self, mouse_x, mouse_y, screen_width, screen_height, orbit_angle,
#          particle_set) -> Optional[Particle]:
#     - Outputs: The nearest particle hit by the ray, or None.
#     - Side Effects: None. Mode changes are left to the caller.


def default_eye_distance(screen_height: float) -> float:
    """Distance of the default camera from the origin along +Z."""
    return (screen_height / 2.0) / math.tan(math.pi / 6.0)


@jit(nopython=True)
def _ray_sphere_t(ox, oy, oz, dx, dy, dz, cx, cy, cz, radius):
    """
    Numba-jitted ray-sphere intersection.

    Returns the smaller root of the quadratic, or the larger one if the
    smaller is negative (ray origin inside the sphere). NaN means no hit.
    """
    ocx = ox - cx
    ocy = oy - cy
    ocz = oz - cz
    a = dx * dx + dy * dy + dz * dz
    if a == 0.0:
        return np.nan
    b = 2.0 * (ocx * dx + ocy * dy + ocz * dz)
    c = ocx * ocx + ocy * ocy + ocz * ocz - radius * radius
    discriminant = b * b - 4.0 * a * c
    if discriminant < 0.0:
        return np.nan
    root = np.sqrt(discriminant)
    t = (-b - root) / (2.0 * a)
    if t < 0.0:
        t = (-b + root) / (2.0 * a)
    return t


@jit(nopython=True)
def _nearest_hit_numba(origin, direction, centers, radius):
    """
    Numba-jitted scan over an (N, 3) array of sphere centers.

    Returns (index, t) of the closest non-negative hit, or (-1, inf).
    """
    best_index = -1
    best_t = np.inf
    for i in range(centers.shape[0]):
        t = _ray_sphere_t(
            origin[0], origin[1], origin[2],
            direction[0], direction[1], direction[2],
            centers[i, 0], centers[i, 1], centers[i, 2],
            radius
        )
        if not np.isnan(t) and t >= 0.0 and t < best_t:
            best_t = t
            best_index = i
    return best_index, best_t


def ray_sphere_intersection(
    origin: np.ndarray, direction: np.ndarray, center: np.ndarray, radius: float
) -> Optional[float]:
    """Returns the ray parameter t of the intersection, or None on a miss."""
    t = _ray_sphere_t(
        float(origin[0]), float(origin[1]), float(origin[2]),
        float(direction[0]), float(direction[1]), float(direction[2]),
        float(center[0]), float(center[1]), float(center[2]),
        float(radius)
    )
    if np.isnan(t):
        return None
    return float(t)


class Picker:
    """
    Casts rays from the default camera to find clicked particles.
    """
    def __init__(self, params: Optional[Dict[str, Any]] = None, particle_radius: float = BALL_RADIUS):
        params = params or {}
        fov_degrees = params.get('fov')
        self.fov = math.radians(fov_degrees) if fov_degrees is not None else FIELD_OF_VIEW
        self.picking_multiplier = float(params.get('picking_multiplier', PICKING_MULTIPLIER))
        self.particle_radius = float(particle_radius)

    @property
    def picking_radius(self) -> float:
        return self.particle_radius * self.picking_multiplier

    def build_ray(
        self, mouse_x: float, mouse_y: float, screen_width: float, screen_height: float
    ) -> Optional[Tuple[np.ndarray, np.ndarray]]:
        """
        Builds the (origin, unit direction) ray through a pixel.

        Returns None for a degenerate viewport or direction.
        """
        if screen_width <= 0 or screen_height <= 0:
            logging.warning(f"Cannot build a picking ray for viewport {screen_width}x{screen_height}.")
            return None

        aspect = screen_width / screen_height
        tan_half_fov = math.tan(self.fov / 2.0)
        ndc_x = (mouse_x - screen_width / 2.0) / (screen_width / 2.0)
        ndc_y = (mouse_y - screen_height / 2.0) / (screen_height / 2.0)

        direction = vec3(ndc_x * aspect * tan_half_fov, -ndc_y * tan_half_fov, -1.0)
        length = float(np.linalg.norm(direction))
        if length < EPSILON:
            return None
        origin = vec3(0.0, 0.0, default_eye_distance(screen_height))
        return origin, direction / length

    def pick_nearest(
        self,
        mouse_x: float,
        mouse_y: float,
        screen_width: float,
        screen_height: float,
        orbit_angle: float,
        particle_set: ParticleSet,
    ) -> Optional[Tuple[Particle, float]]:
        """
        Finds the nearest particle along the click ray.

        Returns:
            Optional[Tuple[Particle, float]]: The particle and its ray
            parameter t, or None if nothing was hit.
        """
        if len(particle_set) == 0:
            return None
        ray = self.build_ray(mouse_x, mouse_y, screen_width, screen_height)
        if ray is None:
            return None
        origin, direction = ray

        # Particles are stored in scene space; the renderer rotates the
        # whole scene by orbit_angle, so rotate them into world space.
        world_positions = rotate_y_many(particle_set.positions(), orbit_angle)
        index, t = _nearest_hit_numba(origin, direction, world_positions, self.picking_radius)
        if index < 0:
            logging.debug(f"Pick at ({mouse_x}, {mouse_y}) hit nothing.")
            return None

        particle = particle_set[index]
        logging.debug(f"Pick at ({mouse_x}, {mouse_y}) hit particle {particle.particle_id} at t={t:.2f}.")
        return particle, float(t)

    def pick(
        self,
        mouse_x: float,
        mouse_y: float,
        screen_width: float,
        screen_height: float,
        orbit_angle: float,
        particle_set: ParticleSet,
    ) -> Optional[Particle]:
        hit = self.pick_nearest(mouse_x, mouse_y, screen_width, screen_height, orbit_angle, particle_set)
        return hit[0] if hit is not None else None
