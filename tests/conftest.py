import numpy as np
import pytest

from particle import Container, Particle, ParticleSet


@pytest.fixture
def container():
    return Container(radius=100.0)


@pytest.fixture
def set_params():
    return {'seed': 7, 'particle_count': 10, 'particle_radius': 7, 'trail_length': 20}


@pytest.fixture
def particle_set(set_params, container):
    return ParticleSet(set_params, container)


def make_particle(position=(0.0, 0.0, 0.0), velocity=(0.0, 0.0, 0.0), particle_id=0):
    return Particle(np.array(position), np.array(velocity), (200.0, 150.0, 100.0), particle_id=particle_id)


@pytest.fixture
def particle_factory():
    return make_particle
