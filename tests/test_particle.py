import numpy as np
import pytest

from particle import Container, ParticleSet
from vector import magnitude


def test_container_from_viewport_uses_smaller_side():
    assert Container.from_viewport(1000, 500).radius == pytest.approx(200.0)
    assert Container.from_viewport(300, 800).radius == pytest.approx(120.0)


def test_advance_moves_by_scaled_velocity(particle_factory, container):
    p = particle_factory(position=(1.0, 2.0, 3.0), velocity=(1.0, -1.0, 0.5))
    p.advance(2.0, container)
    assert np.allclose(p.position, [3.0, 0.0, 4.0])
    assert len(p.trail) == 1
    assert np.allclose(p.trail[0], [1.0, 2.0, 3.0])


def test_trail_holds_copies_not_references(particle_factory, container):
    p = particle_factory(position=(0.0, 0.0, 0.0), velocity=(1.0, 0.0, 0.0))
    p.advance(1.0, container)
    p.advance(1.0, container)
    assert np.allclose(p.trail[0], [0.0, 0.0, 0.0])
    assert np.allclose(p.trail[1], [1.0, 0.0, 0.0])


def test_trail_is_bounded_and_fifo(particle_factory):
    p = particle_factory(position=(0.0, 0.0, 0.0), velocity=(0.1, 0.0, 0.0))
    big = Container(radius=1000.0)
    for tick in range(1, 31):
        p.advance(1.0, big)
        assert len(p.trail) == min(tick, 20)
    # 30 ticks: positions 0.0 .. 2.9 recorded, the first ten evicted.
    assert p.trail[0][0] == pytest.approx(1.0)
    assert p.trail[-1][0] == pytest.approx(2.9)


def test_boundary_collision_reflects_and_clamps(particle_factory, container):
    p = particle_factory(position=(90.0, 0.0, 0.0), velocity=(5.0, 1.0, 0.0))
    p.advance(1.0, container)
    assert magnitude(p.position) == pytest.approx(container.radius - p.radius)
    # Normal component inverted, so the particle now heads back inward.
    assert np.dot(p.velocity, p.position) < 0


def test_head_on_collision_reverses_velocity(particle_factory, container):
    p = particle_factory(position=(0.0, 0.0, 90.0), velocity=(0.0, 0.0, 4.0))
    p.advance(1.0, container)
    assert np.allclose(p.position, [0.0, 0.0, 93.0])
    assert np.allclose(p.velocity, [0.0, 0.0, -4.0])


def test_exact_contact_is_not_a_penetration(particle_factory, container):
    p = particle_factory(position=(0.0, 92.0, 0.0), velocity=(0.0, 1.0, 0.0))
    p.advance(1.0, container)
    # d + r == R exactly is not a penetration.
    assert np.allclose(p.velocity, [0.0, 1.0, 0.0])
    p.advance(0.5, container)
    assert np.allclose(p.velocity, [0.0, -1.0, 0.0])
    assert np.allclose(p.position, [0.0, 93.0, 0.0])


def test_reflection_preserves_speed(particle_factory, container):
    p = particle_factory(position=(60.0, 60.0, 10.0), velocity=(2.5, 1.5, -0.7))
    speed = p.speed
    for _ in range(200):
        p.advance(3.0, container)
        assert p.speed == pytest.approx(speed)


def test_degenerate_origin_skips_reflection(particle_factory):
    tiny = Container(radius=3.0)
    p = particle_factory(position=(0.0, 0.0, 0.0), velocity=(0.0, 0.0, 0.0))
    p.advance(1.0, tiny)
    assert np.allclose(p.position, [0.0, 0.0, 0.0])
    assert np.allclose(p.velocity, [0.0, 0.0, 0.0])


def test_color_is_immutable(particle_factory):
    p = particle_factory()
    with pytest.raises(AttributeError):
        p.color = (1.0, 2.0, 3.0)


def test_particle_set_initial_particles_respect_sampling_ranges(container):
    ps = ParticleSet({'seed': 1, 'particle_count': 300}, container)
    assert len(ps) == 300
    for p in ps:
        assert magnitude(p.position) < container.radius - p.radius
        assert 1.0 <= p.speed < 3.0
        assert all(100.0 <= c < 255.0 for c in p.color)


def test_particle_set_ids_follow_creation_order(particle_set):
    assert [p.particle_id for p in particle_set] == list(range(10))


def test_all_particles_stay_inside_after_advance(particle_set, container):
    for _ in range(500):
        particle_set.advance(5.0)
        for p in particle_set:
            assert magnitude(p.position) <= container.radius - p.radius + 1e-9


def test_resize_is_idempotent(particle_set):
    particle_set.resize(25)
    first = list(particle_set)
    particle_set.resize(25)
    assert len(particle_set) == 25
    assert all(a is b for a, b in zip(first, particle_set))


def test_shrink_removes_most_recent_particles(particle_set):
    original = list(particle_set)
    particle_set.resize(15)
    assert len(particle_set) == 15
    particle_set.resize(10)
    assert len(particle_set) == 10
    assert all(a is b for a, b in zip(original, particle_set))


def test_grow_after_shrink_creates_fresh_particles(particle_set):
    particle_set.resize(5)
    particle_set.resize(8)
    assert [p.particle_id for p in particle_set] == [0, 1, 2, 3, 4, 10, 11, 12]


def test_resize_to_zero_and_negative(particle_set):
    particle_set.resize(0)
    assert len(particle_set) == 0
    assert particle_set.positions().shape == (0, 3)
    with pytest.raises(ValueError):
        particle_set.resize(-1)


def test_membership_is_by_identity(particle_set, particle_factory):
    assert particle_set[3] in particle_set
    assert particle_factory() not in particle_set


def test_seed_makes_particle_set_reproducible(container):
    a = ParticleSet({'seed': 99, 'particle_count': 5}, container)
    b = ParticleSet({'seed': 99, 'particle_count': 5}, container)
    assert np.allclose(a.positions(), b.positions())


def test_invalid_radius_is_rejected(container):
    with pytest.raises(ValueError):
        ParticleSet({'particle_radius': 0}, container)


def test_container_too_small_for_a_particle_is_rejected():
    with pytest.raises(ValueError):
        ParticleSet({'particle_radius': 7, 'particle_count': 5}, Container(radius=3.0))


def test_new_particles_use_current_container(particle_set):
    particle_set.container = Container(radius=20.0)
    particle_set.resize(40)
    for p in list(particle_set)[10:]:
        assert magnitude(p.position) < 20.0 - p.radius
