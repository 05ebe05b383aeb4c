# MIT License (see LICENSE)
"""
Numerical integrators for particle state.

Two interchangeable schemes are provided. The owning world picks one by
configuration; particles created in that world carry the matching history
field (velocity or previous position).

Available integrators:
- semi_implicit_euler_step: v += a·dt, then x += v·dt
- verlet_step: x' = x + (x - x_prev)·friction + a·dt², x_prev = x

Both take dt as an argument and never read the clock, so a trajectory only
depends on the number of ticks taken, not on when they ran.

Reference:
    Semi-implicit Euler: https://en.wikipedia.org/wiki/Semi-implicit_Euler_method
    Verlet: https://en.wikipedia.org/wiki/Verlet_integration
"""
from __future__ import annotations

from typing import Iterable

from ..types import Particle


def semi_implicit_euler_step(particle: Particle, dt: float) -> None:
    """
    Advance a velocity-carrying particle by dt.

    Velocity is updated first and the new velocity moves the position,
    which makes the scheme symplectic and stable for stiff springs.

    Args:
        particle: Particle with a stored velocity (modified in-place).
        dt: Timestep in seconds.
    """
    particle.velocity += particle.acceleration * dt
    particle.position += particle.velocity * dt


def verlet_step(particle: Particle, dt: float) -> None:
    """
    Advance a position-history particle by dt.

    The implicit velocity x - x_prev is scaled by particle.friction to
    approximate air/friction loss:

        x' = x + (x - x_prev) * friction + a * dt²

    previous_position is set to the pre-update position before position is
    overwritten.

    Args:
        particle: Particle with a previous_position (modified in-place).
        dt: Timestep in seconds.
    """
    current = particle.position.copy()
    step = (current - particle.previous_position) * particle.friction
    particle.position = current + step + particle.acceleration * (dt * dt)
    particle.previous_position = current


INTEGRATOR_STEPS = {
    "euler": semi_implicit_euler_step,
    "verlet": verlet_step,
}


def integrate(particles: Iterable[Particle], dt: float, integrator: str) -> None:
    """
    Dispatch every particle to the configured integrator.

    Raises:
        ValueError: If integrator is not "euler" or "verlet".
    """
    try:
        step = INTEGRATOR_STEPS[integrator]
    except KeyError:
        raise ValueError(f"Unknown integrator: {integrator}") from None
    for p in particles:
        step(p, dt)
