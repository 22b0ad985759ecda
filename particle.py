# particle.py
"""
Manages the state of all particles in the simulation.

This module defines the Container (the spherical boundary), the Particle
(position, velocity, color and a bounded trail) and the ParticleSet, which
owns the ordered collection of particles and grows or shrinks it on demand.
"""
import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Dict, Iterator, List, Tuple

import numpy as np

from constants import (
    BALL_RADIUS, COLOR_RANGE, CONTAINER_SCALE, DEFAULT_SEED,
    INITIAL_SPEED_RANGE, TRAIL_LENGTH
)
from vector import EPSILON, magnitude, random_unit_vectors, reflect

# --- Data Contracts ---
#
# class Container:
#   - radius: float, the inner radius of the bounding sphere. Immutable;
#     a viewport change produces a new Container.
#
# class Particle:
#   - advance(self, speed_factor: float, container: Container) -> None:
#     - Side Effects: Appends the previous position to the trail (evicting
#       the oldest past trail_length), moves by velocity * speed_factor and
#       reflects off the container wall.
#     - Invariants: |position| + radius <= container.radius afterwards.
#
# class ParticleSet:
#   - __init__(self, params: Dict[str, Any], container: Container):
#     - Inputs:
#       - params: simulation parameters from config.json.
#         - "seed": int
#         - "particle_count": int
#         - "particle_radius": float
#         - "trail_length": int
#   - resize(self, target_count: int) -> None:
#     - Side Effects: Appends fresh particles or drops them from the tail.
#     - Invariants: Surviving particles keep their identity and order.
#   - advance(self, speed_factor: float) -> None


@dataclass(frozen=True)
class Container:
    radius: float

    @classmethod
    def from_viewport(cls, width: int, height: int) -> "Container":
        return cls(radius=min(width, height) * CONTAINER_SCALE)


class Particle:
    """A single ball bouncing inside the container."""

    def __init__(
        self,
        position: np.ndarray,
        velocity: np.ndarray,
        color: Tuple[float, float, float],
        radius: float = BALL_RADIUS,
        trail_length: int = TRAIL_LENGTH,
        particle_id: int = 0,
    ):
        self.position = np.array(position, dtype=np.float64)
        self.velocity = np.array(velocity, dtype=np.float64)
        self._color = tuple(float(c) for c in color)
        self.radius = float(radius)
        self.trail: Deque[np.ndarray] = deque(maxlen=trail_length)
        self.particle_id = particle_id

    @property
    def color(self) -> Tuple[float, float, float]:
        return self._color

    @property
    def speed(self) -> float:
        return magnitude(self.velocity)

    def advance(self, speed_factor: float, container: Container) -> None:
        """
        Moves the particle one frame and resolves the boundary collision.

        Args:
            speed_factor (float): Multiplier applied to the velocity for this step.
            container (Container): The bounding sphere.
        """
        # deque(maxlen) drops the oldest entry once full.
        self.trail.append(self.position.copy())

        self.position += self.velocity * speed_factor

        limit = container.radius - self.radius
        distance = magnitude(self.position)
        if distance + self.radius > container.radius:
            if distance < EPSILON:
                # No defined wall normal at the center; the container is
                # smaller than the particle. Nothing to reflect against.
                logging.debug(
                    f"Particle {self.particle_id} at the container center with "
                    f"container radius {container.radius:.2f}; skipping reflection."
                )
                return
            normal = self.position / distance
            self.velocity = reflect(self.velocity, normal)
            self.position = normal * max(limit, 0.0)

    def __repr__(self) -> str:
        return (
            f"Particle(id={self.particle_id}, position={self.position.tolist()}, "
            f"velocity={self.velocity.tolist()})"
        )


class ParticleSet:
    """
    An ordered collection of particles; insertion order is creation order.
    """
    def __init__(self, params: Dict[str, Any], container: Container):
        """
        Initializes the particle set and creates the initial particles.

        Args:
            params (Dict[str, Any]): Simulation parameters from config.
            container (Container): The initial bounding sphere.
        """
        self.seed = params.get('seed', DEFAULT_SEED)
        self.particle_radius = float(params.get('particle_radius', BALL_RADIUS))
        self.trail_length = int(params.get('trail_length', TRAIL_LENGTH))
        self.speed_range = tuple(params.get('initial_speed_range', INITIAL_SPEED_RANGE))
        self.color_range = tuple(params.get('color_range', COLOR_RANGE))
        initial_count = params.get('particle_count', 100)

        if self.particle_radius <= 0:
            msg = f"Configuration error: particle_radius must be positive, got {self.particle_radius}."
            logging.critical(msg)
            raise ValueError(msg)
        if self.trail_length < 0:
            msg = f"Configuration error: trail_length must be non-negative, got {self.trail_length}."
            logging.critical(msg)
            raise ValueError(msg)
        if container.radius <= self.particle_radius:
            msg = (f"Configuration error: container radius {container.radius:.2f} cannot hold "
                   f"a particle of radius {self.particle_radius}.")
            logging.critical(msg)
            raise ValueError(msg)

        # All randomness in the set comes from one seeded generator.
        self.rng = np.random.default_rng(self.seed)
        self.container = container
        self.particles: List[Particle] = []
        self._next_id = 0

        self.resize(initial_count)
        logging.info(
            f"ParticleSet initialized with {len(self.particles)} particles "
            f"in a container of radius {container.radius:.1f}."
        )

    def _create_particle(self) -> Particle:
        """Creates one particle with a random position, velocity and color."""
        max_distance = max(self.container.radius - self.particle_radius, 0.0)
        direction, heading = random_unit_vectors(self.rng, 2)
        position = direction * self.rng.uniform(0.0, max_distance)
        velocity = heading * self.rng.uniform(*self.speed_range)
        color = tuple(self.rng.uniform(*self.color_range, size=3))

        particle = Particle(
            position, velocity, color,
            radius=self.particle_radius,
            trail_length=self.trail_length,
            particle_id=self._next_id,
        )
        self._next_id += 1
        return particle

    def resize(self, target_count: int) -> None:
        """
        Grows or shrinks the set to exactly target_count particles.

        New particles are appended; excess particles are removed from the
        tail so the oldest particles survive.
        """
        if target_count < 0:
            msg = f"Particle count must be non-negative, got {target_count}."
            logging.error(msg)
            raise ValueError(msg)

        current = len(self.particles)
        if target_count > current:
            self.particles.extend(self._create_particle() for _ in range(target_count - current))
            logging.debug(f"Added {target_count - current} particles (now {target_count}).")
        elif target_count < current:
            del self.particles[target_count:]
            logging.debug(f"Removed {current - target_count} particles (now {target_count}).")

    def advance(self, speed_factor: float) -> None:
        for particle in self.particles:
            particle.advance(speed_factor, self.container)

    def positions(self) -> np.ndarray:
        """Returns an (N, 3) array snapshot of all particle positions."""
        if not self.particles:
            return np.zeros((0, 3), dtype=np.float64)
        return np.stack([p.position for p in self.particles])

    def __contains__(self, particle: object) -> bool:
        return any(candidate is particle for candidate in self.particles)

    def __len__(self) -> int:
        return len(self.particles)

    def __iter__(self) -> Iterator[Particle]:
        return iter(self.particles)

    def __getitem__(self, index: int) -> Particle:
        return self.particles[index]
