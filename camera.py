# camera.py
"""
Camera state for the two viewing modes.

OrbitState holds the scene rotation used by the default view.
CameraFollowController is the state machine that tracks a selected
particle and produces a smoothed eye/look-at pair every frame.
"""
import logging
from enum import Enum
from typing import Any, Dict, Optional, Tuple

import numpy as np

from constants import (
    CAMERA_LERP, FOLLOW_DISTANCE, MIN_FOLLOW_SPEED, REFERENCE_FPS, VELOCITY_LERP
)
from particle import Particle
from vector import lerp, magnitude, vec3

# --- Data Contracts ---
#
# class CameraFollowController:
#   - __init__(self, params: Optional[Dict[str, Any]] = None):
#     - Inputs:
#       - params: the "camera" section of config.json.
#         - "follow_distance": float
#         - "velocity_lerp": float
#         - "camera_lerp": float
#         - "min_follow_speed": float
#         - "reference_fps": float
#
#   - follow(self, particle: Particle) -> None
#   - release(self) -> None
#     - Side Effects: Both clear smoothed_velocity, camera_position and
#       camera_target so the next update starts fresh.
#
#   - update(self, dt: Optional[float] = None) -> Tuple[np.ndarray, np.ndarray]:
#     - Outputs: (camera_position, camera_target) copies.
#     - Raises: RuntimeError when not following.
#     - Invariants: The first update after follow() snaps to the desired
#       pose; later updates move a fixed fraction of the remaining distance.


class CameraMode(Enum):
    INACTIVE = "inactive"
    FOLLOWING = "following"


def smoothing_factor(per_frame: float, dt: Optional[float], reference_fps: float) -> float:
    """
    Converts a per-frame lerp factor into one for an elapsed time dt.

    With dt=None (or dt equal to one reference frame) the per-frame factor
    is returned unchanged.
    """
    if dt is None:
        return per_frame
    frames = max(dt, 0.0) * reference_fps
    return 1.0 - (1.0 - per_frame) ** frames


class OrbitState:
    """Cumulative rotation of the scene about the Y axis."""

    def __init__(self, angle: float = 0.0):
        self.angle = float(angle)

    def advance(self, rotation_speed: float) -> float:
        self.angle += rotation_speed
        return self.angle


class CameraFollowController:
    """
    Smoothly tracks a particle from behind its direction of travel.
    """
    def __init__(self, params: Optional[Dict[str, Any]] = None):
        params = params or {}
        self.follow_distance = float(params.get('follow_distance', FOLLOW_DISTANCE))
        self.velocity_lerp = float(params.get('velocity_lerp', VELOCITY_LERP))
        self.camera_lerp = float(params.get('camera_lerp', CAMERA_LERP))
        self.min_follow_speed = float(params.get('min_follow_speed', MIN_FOLLOW_SPEED))
        self.reference_fps = float(params.get('reference_fps', REFERENCE_FPS))

        for name in ('velocity_lerp', 'camera_lerp'):
            value = getattr(self, name)
            if not 0.0 < value <= 1.0:
                msg = f"Configuration error: camera {name} must be in (0, 1], got {value}."
                logging.critical(msg)
                raise ValueError(msg)

        self.mode = CameraMode.INACTIVE
        self.tracked: Optional[Particle] = None
        self._clear()

    def _clear(self) -> None:
        self.smoothed_velocity: Optional[np.ndarray] = None
        self.camera_position: Optional[np.ndarray] = None
        self.camera_target: Optional[np.ndarray] = None

    @property
    def is_following(self) -> bool:
        return self.mode is CameraMode.FOLLOWING

    def follow(self, particle: Particle) -> None:
        self.mode = CameraMode.FOLLOWING
        self.tracked = particle
        self._clear()
        logging.info(f"Camera now following particle {particle.particle_id}.")

    def release(self) -> None:
        if self.tracked is not None:
            logging.info(f"Camera released particle {self.tracked.particle_id}.")
        self.mode = CameraMode.INACTIVE
        self.tracked = None
        self._clear()

    def update(self, dt: Optional[float] = None) -> Tuple[np.ndarray, np.ndarray]:
        """
        Advances the smoothing by one frame.

        Args:
            dt (Optional[float]): Elapsed seconds since the previous update.
                None uses the per-frame factors as they are.

        Returns:
            Tuple[np.ndarray, np.ndarray]: The camera position and look-at target.
        """
        if not self.is_following or self.tracked is None:
            raise RuntimeError("CameraFollowController.update called while not following a particle.")

        particle = self.tracked
        vel_amount = smoothing_factor(self.velocity_lerp, dt, self.reference_fps)
        cam_amount = smoothing_factor(self.camera_lerp, dt, self.reference_fps)

        if self.smoothed_velocity is None:
            self.smoothed_velocity = particle.velocity.copy()
        else:
            self.smoothed_velocity = lerp(self.smoothed_velocity, particle.velocity, vel_amount)

        speed = magnitude(self.smoothed_velocity)
        if speed > self.min_follow_speed:
            offset = self.smoothed_velocity / speed * -self.follow_distance
        else:
            offset = vec3(0.0, 0.0, -self.follow_distance)

        desired_position = particle.position + offset
        desired_target = particle.position.copy()

        if self.camera_position is None or self.camera_target is None:
            self.camera_position = desired_position
            self.camera_target = desired_target
        else:
            self.camera_position = lerp(self.camera_position, desired_position, cam_amount)
            self.camera_target = lerp(self.camera_target, desired_target, cam_amount)

        return self.camera_position.copy(), self.camera_target.copy()
