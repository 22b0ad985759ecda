# simulation.py
"""
Owns the complete simulation state and advances it one frame at a time.

This module defines the Simulation class, the single context object that
holds the particle set, the container, the orbit angle, the follow camera
and the current control values. The surrounding application calls step()
once per frame and forwards clicks, viewport changes and slider changes
between frames.
"""
import logging
from typing import Any, Dict, NamedTuple, Optional, Tuple

import numpy as np

from camera import CameraFollowController, CameraMode, OrbitState
from constants import (
    PARTICLE_COUNT_SLIDER, ROTATION_SLIDER, SPEED_SLIDER, UI_RESERVED_HEIGHT, UP_VECTOR
)
from particle import Container, Particle, ParticleSet
from picking import Picker, default_eye_distance
from utils import config_section
from vector import as_vec3, vec3

# --- Data Contracts ---
#
# class Simulation:
#   - __init__(self, params: Dict[str, Any], width: int, height: int):
#     - Inputs:
#       - params: the full configuration dictionary from config.json. The
#         "simulation_parameters", "camera", "picking" and "visualization"
#         sections are read; all are optional.
#       - width, height: viewport size in pixels.
#     - Side Effects: Creates the initial particles.
#
#   - step(self) -> None:
#     - Side Effects: Advances every particle, then either the follow
#       camera (FOLLOWING) or the orbit angle (INACTIVE).
#
#   - handle_click(self, x: float, y: float) -> Optional[Particle]:
#     - Outputs: The newly followed particle, or None.
#     - Side Effects: Toggles the camera mode.
#
#   - camera_view(self) -> CameraView


class CameraView(NamedTuple):
    """Everything the renderer needs to place the eye for this frame."""
    mode: CameraMode
    eye: np.ndarray
    target: np.ndarray
    up: np.ndarray
    # Scene rotation about Y; always 0 while following.
    orbit_angle: float


def _clip_to_slider(name: str, value: float, slider: Tuple[float, float, float, float]) -> float:
    low, high = slider[0], slider[1]
    clipped = float(np.clip(value, low, high))
    if clipped != value:
        logging.warning(f"{name} {value} outside [{low}, {high}]; clipped to {clipped}.")
    return clipped


class Simulation:
    """
    The simulation context: all mutable state plus the per-frame tick.
    """
    def __init__(self, params: Dict[str, Any], width: int, height: int):
        """
        Initializes the simulation environment.

        Args:
            params (Dict[str, Any]): Full configuration dictionary.
            width (int): Viewport width in pixels.
            height (int): Viewport height in pixels.
        """
        sim_params = dict(config_section(params, 'simulation_parameters'))
        camera_params = config_section(params, 'camera')
        picking_params = config_section(params, 'picking')
        vis_params = config_section(params, 'visualization')

        self.width = width
        self.height = height
        self.container = Container.from_viewport(width, height)
        self.ui_reserved_height = float(vis_params.get('ui_reserved_height', UI_RESERVED_HEIGHT))

        self.speed_factor = _clip_to_slider(
            "Speed factor", sim_params.get('speed_factor', SPEED_SLIDER[2]), SPEED_SLIDER
        )
        self.rotation_speed = _clip_to_slider(
            "Rotation speed", sim_params.get('rotation_speed', ROTATION_SLIDER[2]), ROTATION_SLIDER
        )
        sim_params['particle_count'] = int(_clip_to_slider(
            "Particle count", sim_params.get('particle_count', PARTICLE_COUNT_SLIDER[2]),
            PARTICLE_COUNT_SLIDER
        ))

        self.particles = ParticleSet(sim_params, self.container)
        self.orbit = OrbitState()
        self.follow_camera = CameraFollowController(camera_params)
        self.picker = Picker(picking_params, particle_radius=self.particles.particle_radius)
        self.step_count = 0

        logging.info(
            f"Simulation initialized for a {width}x{height} viewport: "
            f"speed {self.speed_factor}, rotation {self.rotation_speed}, "
            f"{len(self.particles)} particles."
        )

    @property
    def mode(self) -> CameraMode:
        return self.follow_camera.mode

    def step(self) -> None:
        """Executes one frame of the simulation."""
        self.particles.advance(self.speed_factor)
        if self.follow_camera.is_following:
            self.follow_camera.update()
        else:
            self.orbit.advance(self.rotation_speed)
        self.step_count += 1

    def handle_click(self, x: float, y: float) -> Optional[Particle]:
        """
        Applies a click in the simulation area.

        While following, any click returns to the orbiting view. Otherwise
        the click is used to pick a particle to follow.
        """
        if y < self.ui_reserved_height:
            return None

        if self.follow_camera.is_following:
            self.follow_camera.release()
            return None

        selected = self.picker.pick(x, y, self.width, self.height, self.orbit.angle, self.particles)
        if selected is not None:
            self.follow_camera.follow(selected)
        return selected

    def resize_viewport(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.container = Container.from_viewport(width, height)
        self.particles.container = self.container
        logging.info(f"Viewport resized to {width}x{height}; container radius {self.container.radius:.1f}.")

    def set_particle_count(self, count: int) -> None:
        count = int(_clip_to_slider("Particle count", count, PARTICLE_COUNT_SLIDER))
        self.particles.resize(count)
        tracked = self.follow_camera.tracked
        if tracked is not None and tracked not in self.particles:
            logging.info(f"Followed particle {tracked.particle_id} was removed.")
            self.follow_camera.release()

    def set_speed_factor(self, value: float) -> None:
        self.speed_factor = _clip_to_slider("Speed factor", value, SPEED_SLIDER)

    def set_rotation_speed(self, value: float) -> None:
        self.rotation_speed = _clip_to_slider("Rotation speed", value, ROTATION_SLIDER)

    def camera_view(self) -> CameraView:
        up = as_vec3(UP_VECTOR)
        camera = self.follow_camera
        if camera.is_following and camera.camera_position is not None:
            return CameraView(
                CameraMode.FOLLOWING,
                camera.camera_position.copy(),
                camera.camera_target.copy(),
                up,
                0.0,
            )
        return CameraView(
            CameraMode.INACTIVE,
            vec3(0.0, 0.0, default_eye_distance(self.height)),
            vec3(),
            up,
            self.orbit.angle,
        )
