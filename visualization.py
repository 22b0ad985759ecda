# visualization.py
"""
Handles the visualization of the bouncing particles using Pygame.

Pygame only draws in 2D, so particles, trails and the container wireframe
are projected with the same perspective model the picker uses (60 degree
field of view, eye on the +Z axis at the default distance). A particle is
therefore picked by clicking where it is drawn.
"""
import logging
import math
from typing import Any, Callable, Dict, List, Optional, Tuple

import numpy as np
import pygame

from camera import CameraMode
from constants import (
    BACKGROUND_COLOR, CONTAINER_COLOR, FIELD_OF_VIEW, FPS, MOTION_BLUR_ALPHA,
    PARTICLE_COUNT_SLIDER, ROTATION_SLIDER, SPEED_SLIDER, TRAIL_MAX_ALPHA,
    TRAIL_MIN_ALPHA, WINDOW_HEIGHT, WINDOW_WIDTH
)
from vector import EPSILON, rotate_y_many

# Forward reference for type hinting to avoid circular import
from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from simulation import CameraView, Simulation


# --- Data Contracts ---
#
# project_points(points, view, width, height, fov) -> (screen, depth, visible):
#   - Inputs:
#     - points: (N, 3) array of scene positions.
#     - view: CameraView. In the orbiting view the points are first rotated
#       by view.orbit_angle about Y.
#   - Outputs:
#     - screen: (N, 2) pixel coordinates.
#     - depth: (N,) distance in front of the eye along the view axis.
#     - visible: (N,) bool, True where depth is above NEAR_PLANE.
#
# class Visualizer:
#   - __init__(self, vis_params: Optional[Dict[str, Any]] = None):
#     - Side Effects: Initializes Pygame and opens a resizable window.
#
#   - draw(self, simulation: "Simulation") -> bool:
#     - Outputs: False if the user has quit, True otherwise.
#     - Side Effects: Routes clicks, slider changes and window resizes to
#       the simulation, then renders the current state.

NEAR_PLANE = 1e-3
WIREFRAME_RINGS = 6
WIREFRAME_SEGMENTS = 48


def _view_basis(eye: np.ndarray, target: np.ndarray, up: np.ndarray) -> np.ndarray:
    """Rows are the camera's right, up and backward axes in world space."""
    forward = target - eye
    norm = np.linalg.norm(forward)
    forward = forward / norm if norm > EPSILON else np.array([0.0, 0.0, -1.0])
    right = np.cross(forward, up)
    if np.linalg.norm(right) < EPSILON:
        # Looking straight along the up vector; any perpendicular will do.
        right = np.cross(forward, np.array([0.0, 0.0, 1.0]))
    right = right / np.linalg.norm(right)
    true_up = np.cross(right, forward)
    return np.stack([right, true_up, -forward])


def project_points(
    points: np.ndarray, view: "CameraView", width: int, height: int, fov: float = FIELD_OF_VIEW
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Perspective-projects scene points into pixel coordinates."""
    points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    if view.mode is CameraMode.INACTIVE:
        points = rotate_y_many(points, view.orbit_angle)

    camera_space = (points - view.eye) @ _view_basis(view.eye, view.target, view.up).T
    depth = -camera_space[:, 2]
    visible = depth > NEAR_PLANE
    safe_depth = np.where(visible, depth, 1.0)

    tan_half_fov = math.tan(fov / 2.0)
    aspect = width / height
    screen = np.empty((points.shape[0], 2), dtype=np.float64)
    screen[:, 0] = width / 2.0 + (camera_space[:, 0] / safe_depth) / (aspect * tan_half_fov) * (width / 2.0)
    screen[:, 1] = height / 2.0 - (camera_space[:, 1] / safe_depth) / tan_half_fov * (height / 2.0)
    return screen, depth, visible


def projected_radius(radius: float, depth: np.ndarray, height: int, fov: float = FIELD_OF_VIEW) -> np.ndarray:
    """On-screen radius in pixels of a sphere at the given depth."""
    return radius / np.maximum(depth, NEAR_PLANE) / math.tan(fov / 2.0) * (height / 2.0)


def container_wireframe(radius: float) -> List[np.ndarray]:
    """Latitude rings and meridians of the container sphere as closed polylines."""
    theta = np.linspace(0.0, 2.0 * np.pi, WIREFRAME_SEGMENTS + 1)
    lines = []
    for i in range(1, WIREFRAME_RINGS):
        lat = np.pi * i / WIREFRAME_RINGS - np.pi / 2.0
        ring_r = radius * np.cos(lat)
        y = radius * np.sin(lat)
        lines.append(np.stack([ring_r * np.cos(theta), np.full_like(theta, y), ring_r * np.sin(theta)], axis=1))
    for i in range(WIREFRAME_RINGS):
        lon = np.pi * i / WIREFRAME_RINGS
        lines.append(np.stack([
            radius * np.cos(theta) * np.cos(lon),
            radius * np.sin(theta),
            radius * np.cos(theta) * np.sin(lon),
        ], axis=1))
    return lines


def _fade(color, alpha: float) -> Tuple[int, int, int]:
    """Blends a color toward the (black) background by alpha in [0, 255]."""
    scale = max(0.0, min(alpha, 255.0)) / 255.0
    return tuple(int(c * scale) for c in color[:3])


class Slider:
    """A labelled horizontal slider with a fixed step."""

    def __init__(
        self, label: str, spec: Tuple[float, float, float, float], pos: Tuple[int, int],
        on_change: Callable[[float], None], width: int = 160
    ):
        self.label = label
        self.min_value, self.max_value, self.value, self.step = spec
        self.rect = pygame.Rect(pos[0], pos[1], width, 14)
        self.on_change = on_change
        self.dragging = False

    def _value_at(self, x: int) -> float:
        fraction = min(max((x - self.rect.left) / self.rect.width, 0.0), 1.0)
        raw = self.min_value + fraction * (self.max_value - self.min_value)
        stepped = self.min_value + round((raw - self.min_value) / self.step) * self.step
        return float(min(max(stepped, self.min_value), self.max_value))

    def handle_event(self, event) -> bool:
        """Returns True if the event was consumed by this slider."""
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.inflate(0, 12).collidepoint(event.pos):
                self.dragging = True
                self._set(self._value_at(event.pos[0]))
                return True
        elif event.type == pygame.MOUSEMOTION and self.dragging:
            self._set(self._value_at(event.pos[0]))
            return True
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1 and self.dragging:
            self.dragging = False
            return True
        return False

    def _set(self, value: float) -> None:
        if value != self.value:
            self.value = value
            self.on_change(value)

    def draw(self, screen: pygame.Surface, font: pygame.font.Font) -> None:
        label_surf = font.render(f"{self.label}: {self.value:g}", True, (255, 255, 255))
        screen.blit(label_surf, (self.rect.left, self.rect.top - 24))
        pygame.draw.rect(screen, (80, 80, 80), self.rect, border_radius=7)
        fraction = (self.value - self.min_value) / (self.max_value - self.min_value)
        knob_x = self.rect.left + int(fraction * self.rect.width)
        pygame.draw.circle(screen, (230, 230, 230), (knob_x, self.rect.centery), 9)


class Visualizer:
    """
    Renders the simulation state and provides the slider controls.
    """
    def __init__(self, vis_params: Optional[Dict[str, Any]] = None):
        """
        Initializes Pygame and the display window.
        """
        vis_params = vis_params or {}
        pygame.init()
        pygame.font.init()

        self.width = int(vis_params.get('window_width', WINDOW_WIDTH))
        self.height = int(vis_params.get('window_height', WINDOW_HEIGHT))
        self.fps = int(vis_params.get('fps', FPS))
        self.motion_blur_alpha = int(vis_params.get('motion_blur_alpha', MOTION_BLUR_ALPHA))

        self.screen = pygame.display.set_mode((self.width, self.height), pygame.RESIZABLE)
        pygame.display.set_caption("Bouncing Odyssey")
        self.clock = pygame.time.Clock()
        self._build_surfaces()

        self.font_main = pygame.font.SysFont(None, 22)
        self.simulation: Optional["Simulation"] = None
        self.fov = FIELD_OF_VIEW
        self.sliders = [
            Slider("Ball Speed", SPEED_SLIDER, (10, 40), self._on_speed),
            Slider("Number of Balls", PARTICLE_COUNT_SLIDER, (10, 110), self._on_count),
            Slider("Rotation Speed", ROTATION_SLIDER, (10, 180), self._on_rotation),
        ]
        self._wireframe_radius: Optional[float] = None
        self._wireframe: List[np.ndarray] = []

        logging.info(f"Visualizer initialized with Pygame display ({self.width}x{self.height}).")

    def _build_surfaces(self) -> None:
        # A translucent fill over the previous frame fades old drawings into
        # a short afterimage.
        self.blur_surface = pygame.Surface((self.width, self.height), pygame.SRCALPHA)
        self.blur_surface.fill((*BACKGROUND_COLOR, self.motion_blur_alpha))
        self.screen.fill(BACKGROUND_COLOR)

    def _on_speed(self, value: float) -> None:
        if self.simulation is not None:
            self.simulation.set_speed_factor(value)

    def _on_count(self, value: float) -> None:
        if self.simulation is not None:
            self.simulation.set_particle_count(int(value))

    def _on_rotation(self, value: float) -> None:
        if self.simulation is not None:
            self.simulation.set_rotation_speed(value)

    def _sync_sliders(self, simulation: "Simulation") -> None:
        speed, count, rotation = self.sliders
        if not speed.dragging:
            speed.value = simulation.speed_factor
        if not count.dragging:
            count.value = len(simulation.particles)
        if not rotation.dragging:
            rotation.value = simulation.rotation_speed

    def _handle_events(self, simulation: "Simulation") -> bool:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down visualizer.")
                return False

            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                logging.info("ESC key pressed. Shutting down visualizer.")
                return False

            if event.type == pygame.VIDEORESIZE:
                self.width, self.height = max(event.w, 1), max(event.h, 1)
                self.screen = pygame.display.set_mode((self.width, self.height), pygame.RESIZABLE)
                self._build_surfaces()
                simulation.resize_viewport(self.width, self.height)
                continue

            if any(slider.handle_event(event) for slider in self.sliders):
                continue

            if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                selected = simulation.handle_click(*event.pos)
                if selected is not None:
                    logging.info(f"Selected particle {selected.particle_id} at {event.pos}.")
        return True

    def _draw_container(self, view: "CameraView", radius: float) -> None:
        if radius != self._wireframe_radius:
            self._wireframe = container_wireframe(radius)
            self._wireframe_radius = radius
        color = _fade(CONTAINER_COLOR, CONTAINER_COLOR[3])
        for line in self._wireframe:
            screen, _, visible = project_points(line, view, self.width, self.height, self.fov)
            for i in range(len(line) - 1):
                if visible[i] and visible[i + 1]:
                    pygame.draw.line(self.screen, color, tuple(screen[i]), tuple(screen[i + 1]))

    def _draw_particles(self, view: "CameraView", simulation: "Simulation") -> None:
        particles = simulation.particles
        if len(particles) == 0:
            return
        screen, depth, visible = project_points(particles.positions(), view, self.width, self.height, self.fov)
        radii = projected_radius(particles.particle_radius, depth, self.height, self.fov)

        # Far particles first so near ones overdraw them.
        for i in np.argsort(-depth):
            particle = particles[i]
            trail = list(particle.trail)
            if len(trail) > 1:
                trail_screen, _, trail_visible = project_points(
                    np.array(trail), view, self.width, self.height, self.fov
                )
                count = len(trail)
                for j in range(count - 1):
                    if trail_visible[j] and trail_visible[j + 1]:
                        alpha = TRAIL_MIN_ALPHA + (TRAIL_MAX_ALPHA - TRAIL_MIN_ALPHA) * j / count
                        pygame.draw.line(
                            self.screen, _fade(particle.color, alpha),
                            tuple(trail_screen[j]), tuple(trail_screen[j + 1]), 2
                        )
            if visible[i]:
                pygame.draw.circle(
                    self.screen, _fade(particle.color, 255),
                    (int(screen[i, 0]), int(screen[i, 1])), max(1, int(radii[i]))
                )

    def _draw_status(self, simulation: "Simulation") -> None:
        tracked = simulation.follow_camera.tracked
        if tracked is not None:
            text = f"Following particle {tracked.particle_id} (click to return)"
        else:
            text = "Orbit view (click a ball to follow it)"
        status = self.font_main.render(f"{text}   fps {self.clock.get_fps():.0f}", True, (200, 200, 200))
        self.screen.blit(status, (10, self.height - 28))

    def draw(self, simulation: "Simulation") -> bool:
        """
        Draws the scene and UI, and handles events.

        Returns:
            bool: False if the simulation should exit, True otherwise.
        """
        self.simulation = simulation
        # Draw with the same field of view the picker casts rays with.
        self.fov = simulation.picker.fov
        if not self._handle_events(simulation):
            return False
        self._sync_sliders(simulation)

        self.screen.blit(self.blur_surface, (0, 0))
        view = simulation.camera_view()
        self._draw_container(view, simulation.container.radius)
        self._draw_particles(view, simulation)

        for slider in self.sliders:
            slider.draw(self.screen, self.font_main)
        self._draw_status(simulation)

        pygame.display.flip()
        self.clock.tick(self.fps)
        return True

    def close(self):
        """Shuts down Pygame."""
        pygame.font.quit()
        pygame.quit()
