import logging

import numpy as np
import pytest
from rope_sim import World, ConfigurationError, RigidBody, Circle, Profiler
from rope_sim.core.invariants import linear_momentum, kinetic_energy


def _rope(world: World, n: int = 6, spacing: float = 0.5, mass: float = 1.0):
    ids = [world.create_particle((i * spacing, 0.0), mass=mass, friction=0.99) for i in range(n)]
    for a, b in zip(ids, ids[1:]):
        world.create_constraint(a, b, rest_length=spacing * 0.8, strength=0.9)
    return ids


def test_every_particle_has_positive_mass():
    world = World()
    world.create_particle((0, 0), mass=0.5)
    with pytest.raises(ConfigurationError):
        world.create_particle((1, 0), mass=0.0)
    with pytest.raises(ConfigurationError):
        world.create_particle((1, 0), mass=-2.0)
    assert all(s.mass > 0 for _, s in world.enumerate_particles())
    assert len(world.enumerate_particles()) == 1


def test_constraint_self_reference_rejected():
    world = World()
    a = world.create_particle((0, 0), mass=1.0)
    with pytest.raises(ConfigurationError):
        world.create_constraint(a, a, rest_length=1.0)
    assert world.enumerate_constraints() == []


@pytest.mark.parametrize("integrator", ["euler", "verlet"])
def test_rest_state_idempotence(integrator):
    """No constraints, no velocity: positions are bit-for-bit unchanged."""
    world = World(integrator=integrator, bounds=(10.0, 10.0))
    for i in range(4):
        world.create_particle((i - 1.5, 0.5 * i), mass=1.0 + i)
    before = [s.position for _, s in world.enumerate_particles()]

    for _ in range(50):
        d = world.advance_tick()
        assert d.ok

    after = [s.position for _, s in world.enumerate_particles()]
    assert after == before


def test_equal_masses_one_tick_preserves_center():
    """Verlet, no boundary, single iteration: opposite, equal displacements."""
    world = World(integrator="verlet", iterations=1)
    a = world.create_particle((-2.0, 1.0), mass=3.0)
    b = world.create_particle((2.0, 1.0), mass=3.0)
    world.create_constraint(a, b, rest_length=1.0)

    world.advance_tick()
    da = np.subtract(world.get_particle(a).position, (-2.0, 1.0))
    db = np.subtract(world.get_particle(b).position, (2.0, 1.0))
    np.testing.assert_allclose(da, -db)
    assert np.linalg.norm(da) == pytest.approx(np.linalg.norm(db))
    assert np.linalg.norm(da) > 0


def test_mass_weighted_tick():
    world = World(integrator="verlet", iterations=1)
    a = world.create_particle((0.0, 0.0), mass=1.0)
    b = world.create_particle((0.0, 5.0), mass=9.0)
    world.create_constraint(a, b, rest_length=2.0)
    world.advance_tick()
    da = np.linalg.norm(world.get_particle(a).position)
    db = np.linalg.norm(np.subtract(world.get_particle(b).position, (0.0, 5.0)))
    assert da == pytest.approx(9.0 * db)


def test_coincident_endpoints_tick():
    world = World(iterations=3)
    a = world.create_particle((1.0, 1.0), mass=1.0)
    b = world.create_particle((1.0, 1.0), mass=1.0)
    world.create_constraint(a, b, rest_length=1.0)

    with np.errstate(all="raise"):
        d = world.advance_tick()

    assert world.get_particle(a).position == (1.0, 1.0)
    assert world.get_particle(b).position == (1.0, 1.0)
    assert d.skipped == [0]
    assert len(d.degenerate) == 3
    assert d.faults == []


def test_data_fault_does_not_abort_tick(caplog):
    world = World(iterations=2)
    a = world.create_particle((0.0, 0.0), mass=1.0)
    b = world.create_particle((3.0, 0.0), mass=1.0)
    world.create_constraint(a, 99, rest_length=1.0)
    world.create_constraint(a, b, rest_length=1.0)

    with caplog.at_level(logging.WARNING):
        d = world.advance_tick()

    assert [f.constraint_id for f in d.faults] == [0]
    assert d.skipped == [0]
    assert not d.ok
    assert world.get_particle(b).position[0] < 3.0
    assert world.tick == 1
    assert any(r.levelno == logging.WARNING for r in caplog.records)


def test_fault_clears_once_particle_exists():
    world = World()
    a = world.create_particle((0.0, 0.0), mass=1.0)
    world.create_constraint(a, 1, rest_length=1.0)
    assert world.advance_tick().faults
    world.create_particle((2.0, 0.0), mass=1.0)
    assert world.advance_tick().ok


def test_boundary_reflection_in_tick():
    world = World(integrator="euler", bounds=(5.0, 5.0))
    p = world.create_particle((4.9, 0.0), mass=1.0, velocity=(12.0, 0.0))
    world.advance_tick(dt=0.1)
    s = world.get_particle(p)
    assert s.position[0] == 5.0
    assert s.velocity[0] == pytest.approx(-12.0)


def test_bounds_override_per_tick():
    world = World(integrator="euler")
    p = world.create_particle((0.0, 0.0), mass=1.0, velocity=(0.0, 30.0))
    world.advance_tick(dt=0.1, bounds=(1.0, 2.0))
    assert world.get_particle(p).position[1] == 2.0


@pytest.mark.parametrize("integrator", ["euler", "verlet"])
def test_determinism(integrator):
    """Identical setups stepped N times produce identical state."""
    def run():
        world = World(integrator=integrator, iterations=3, gravity=(0.0, -9.81), bounds=(3.0, 3.0))
        ids = _rope(world, n=8)
        world.apply_acceleration(ids[-1], (40.0, 0.0))
        for _ in range(200):
            world.advance_tick()
        return np.array([s.position for _, s in world.enumerate_particles()])

    np.testing.assert_allclose(run(), run(), rtol=0, atol=1e-12)


def test_tick_count_not_call_timing_defines_trajectory():
    """Splitting the same number of ticks across several loops changes nothing."""
    w1 = World(gravity=(0.0, -1.0))
    w2 = World(gravity=(0.0, -1.0))
    for w in (w1, w2):
        _rope(w, n=4)

    for _ in range(30):
        w1.advance_tick()
    for _ in range(10):
        w2.advance_tick()
    for _ in range(20):
        w2.advance_tick()

    assert w1.enumerate_particles() == w2.enumerate_particles()
    assert w1.time == pytest.approx(30 * w1.dt)


def test_invalid_tick_arguments_fail_fast():
    world = World()
    p = world.create_particle((0.0, 0.0), mass=1.0, velocity=(1.0, 0.0))
    before = world.get_particle(p)
    with pytest.raises(ConfigurationError):
        world.advance_tick(dt=-0.01)
    with pytest.raises(ConfigurationError):
        world.advance_tick(iterations=-1)
    with pytest.raises(ConfigurationError):
        world.advance_tick(bounds=(-1.0, 1.0))
    assert world.get_particle(p) == before
    assert world.tick == 0


@pytest.mark.parametrize("kwargs", [
    {"dt": 0.0},
    {"dt": -1 / 60},
    {"iterations": -1},
    {"iterations": 1.5},
    {"integrator": "rk4"},
    {"correction": "impulse"},
    {"integrator": "verlet", "correction": "velocity"},
    {"bounds": (1.0, 2.0, 3.0)},
    {"gravity": (0.0, float("nan"))},
])
def test_invalid_configuration(kwargs):
    with pytest.raises(ConfigurationError):
        World(**kwargs)


def test_correction_defaults_follow_integrator():
    assert World(integrator="verlet").correction == "position"
    assert World(integrator="euler").correction == "velocity"
    assert World(integrator="euler", correction="position").correction == "position"


def test_velocity_correction_uses_velocity_scale():
    """Euler world: the solver writes velocities scaled by velocity_scale."""
    w1 = World(integrator="euler", iterations=1, velocity_scale=2.0)
    w2 = World(integrator="euler", iterations=1, velocity_scale=1.0)
    for w in (w1, w2):
        a = w.create_particle((0.0, 0.0), mass=1.0)
        b = w.create_particle((3.0, 0.0), mass=1.0)
        w.create_constraint(a, b, rest_length=1.0)
        w.advance_tick()
    v1 = w1.get_particle(0).velocity
    v2 = w2.get_particle(0).velocity
    np.testing.assert_allclose(v1, np.multiply(v2, 2.0))
    # Internal corrections conserve momentum
    np.testing.assert_allclose(linear_momentum(list(w1.particles)), [0.0, 0.0], atol=1e-12)


def test_queued_acceleration_lasts_one_tick():
    world = World(integrator="euler")
    p = world.create_particle((0.0, 0.0), mass=1.0)
    world.apply_acceleration(p, (60.0, 0.0))
    world.advance_tick()
    v = world.get_particle(p).velocity
    assert v[0] == pytest.approx(1.0)
    world.advance_tick()
    assert world.get_particle(p).velocity[0] == pytest.approx(1.0)
    with pytest.raises(KeyError):
        world.apply_acceleration(5, (1.0, 0.0))


def test_snapshots_are_read_only():
    world = World(integrator="euler")
    p = world.create_particle((1.0, 2.0), mass=1.0)
    s = world.get_particle(p)
    with pytest.raises(Exception):
        s.position = (0.0, 0.0)
    assert isinstance(s.position, tuple)
    world.advance_tick()
    assert world.get_particle(p).position == (1.0, 2.0)


def test_rigid_bodies_ignored_by_tick():
    world = World()
    body = RigidBody(shape=Circle(2.0), mass=10.0, velocity=(1.0, 0.0))
    bid = world.add_body(body)
    for _ in range(10):
        world.advance_tick()
    np.testing.assert_array_equal(body.position, [0.0, 0.0])

    world.apply_impulse(bid, (0.0, 1.0), (-4.0, 0.0))
    np.testing.assert_allclose(body.velocity, [0.6, 0.0])
    assert body.angular_velocity == pytest.approx(0.2)
    assert world.enumerate_bodies() == [body]


def test_profiler_sections():
    prof = Profiler()
    world = World(profiler=prof, bounds=(1.0, 1.0))
    _rope(world, n=3)
    for _ in range(5):
        world.advance_tick()
    summary = prof.stats.summary()
    for name in ("forces", "integrate", "solve", "bounds"):
        assert summary[name]["n"] == 5


def test_debug_info():
    world = World()
    _rope(world, n=3)
    world.advance_tick()
    info = world.debug_info()
    assert info["tick"] == 1
    assert info["particles"] == 3
    assert info["constraints"] == 2


def test_drag_uses_tick_dt():
    """
    Verlet drag reads velocity as (x - x_prev) / dt with the dt of this tick:
      x_prev = -0.1 (created with v = 1 at dt = 0.1)
      tick dt = 0.05: v = 2, a = -2, x' = 0 + 0.1 - 2 * 0.05^2 = 0.095
    """
    world = World(integrator="verlet", dt=0.1, drag_c=1.0)
    p = world.create_particle((0.0, 0.0), mass=1.0, velocity=(1.0, 0.0))
    world.advance_tick(dt=0.05)
    assert world.get_particle(p).position[0] == pytest.approx(0.095)


def test_zero_dt_tick_with_drag_stays_finite():
    world = World(integrator="verlet", drag_c=0.5)
    p = world.create_particle((1.0, 0.0), mass=1.0, velocity=(2.0, 0.0))
    with np.errstate(all="raise"):
        d = world.advance_tick(dt=0.0)
    assert d.ok
    assert np.all(np.isfinite(world.get_particle(p).position))


def test_elastic_bounce_preserves_kinetic_energy():
    """Restitution -1 only flips velocity components, so |v| never changes."""
    world = World(integrator="euler", bounds=(1.0, 1.0), restitution=-1.0)
    world.create_particle((0.0, 0.0), mass=2.0, velocity=(3.0, -2.0))
    ke0 = kinetic_energy(list(world.particles))
    assert ke0 == pytest.approx(13.0)

    for _ in range(200):
        world.advance_tick()
        assert kinetic_energy(list(world.particles)) == pytest.approx(ke0)
