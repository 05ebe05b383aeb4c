import numpy as np
import pytest
from rope_sim.types import Particle
from rope_sim.core.integrators import semi_implicit_euler_step, verlet_step, integrate
from rope_sim.core.forces import apply_gravity, apply_linear_drag


def test_euler_updates_velocity_before_position():
    """
    Semi-implicit Euler:
      v1 = v0 + a dt
      x1 = x0 + v1 dt
    """
    p = Particle(position=(0.0, 10.0), mass=1.0, velocity=(1.0, 0.0))
    apply_gravity(p, np.array([0.0, -10.0]))
    semi_implicit_euler_step(p, dt=0.1)

    np.testing.assert_allclose(p.velocity, [1.0, -1.0])
    np.testing.assert_allclose(p.position, [0.1, 9.9])


def test_euler_freefall_accuracy():
    """Analytic y(T) = y0 + 1/2 g T^2; the first-order scheme overshoots by g dt T / 2."""
    g = -9.81
    dt = 1 / 240
    n = 240
    p = Particle(position=(0.0, 10.0), mass=1.0, velocity=(0.0, 0.0))
    for _ in range(n):
        p.clear_acceleration()
        apply_gravity(p, np.array([0.0, g]))
        semi_implicit_euler_step(p, dt)

    T = n * dt
    y_exp = 10.0 + 0.5 * g * T * T
    assert abs(p.position[1] - y_exp) / abs(y_exp) <= 0.01
    assert p.velocity[1] == pytest.approx(g * T)


def test_verlet_carries_implicit_velocity():
    """x' = x + (x - x_prev) * friction, and x_prev becomes the old x."""
    p = Particle(position=(1.0, 1.0), mass=1.0, previous_position=(0.0, 1.0))
    verlet_step(p, dt=0.1)
    np.testing.assert_allclose(p.position, [2.0, 1.0])
    np.testing.assert_allclose(p.previous_position, [1.0, 1.0])


def test_verlet_damping():
    p = Particle(position=(1.0, 0.0), mass=1.0, friction=0.5, previous_position=(0.0, 0.0))
    verlet_step(p, dt=0.1)
    np.testing.assert_allclose(p.position, [1.5, 0.0])
    verlet_step(p, dt=0.1)
    np.testing.assert_allclose(p.position, [1.75, 0.0])


def test_verlet_acceleration_term():
    p = Particle(position=(0.0, 0.0), mass=1.0, previous_position=(0.0, 0.0))
    apply_gravity(p, np.array([0.0, -10.0]))
    verlet_step(p, dt=0.1)
    # a dt^2 = -10 * 0.01
    np.testing.assert_allclose(p.position, [0.0, -0.1])


def test_rest_state_is_fixed_point():
    """Zero velocity and zero acceleration leave both schemes exactly where they were."""
    e = Particle(position=(3.0, -2.0), mass=1.0, velocity=(0.0, 0.0))
    v = Particle(position=(3.0, -2.0), mass=1.0, previous_position=(3.0, -2.0), friction=0.9)
    for _ in range(100):
        semi_implicit_euler_step(e, 0.01)
        verlet_step(v, 0.01)
    np.testing.assert_array_equal(e.position, [3.0, -2.0])
    np.testing.assert_array_equal(v.position, [3.0, -2.0])


def test_linear_drag_opposes_motion():
    e = Particle(position=(0.0, 0.0), mass=2.0, velocity=(4.0, 0.0))
    apply_linear_drag(e, c=0.5, dt=0.1)
    # a = -c v / m
    np.testing.assert_allclose(e.acceleration, [-1.0, 0.0])

    v = Particle(position=(0.4, 0.0), mass=2.0, previous_position=(0.0, 0.0))
    apply_linear_drag(v, c=0.5, dt=0.1)
    np.testing.assert_allclose(v.acceleration, [-1.0, 0.0])

    # no velocity estimate without a time step
    apply_linear_drag(v, c=0.5, dt=0.0)
    np.testing.assert_allclose(v.acceleration, [-1.0, 0.0])


def test_integrate_dispatch():
    ps = [Particle(position=(0.0, 0.0), mass=1.0, velocity=(1.0, 2.0)) for _ in range(3)]
    integrate(ps, 0.5, "euler")
    for p in ps:
        np.testing.assert_allclose(p.position, [0.5, 1.0])
    with pytest.raises(ValueError):
        integrate(ps, 0.5, "rk4")
