# MIT License (see LICENSE)
"""
External acceleration generators.

Each function adds to particle.acceleration in-place. They are called during
the accumulation phase at the start of a tick; the integrator consumes the
total and the world clears it once the tick completes.

Key concepts:
- Gravity is mass independent: a = g.
- Linear drag F = -c·v is converted to an acceleration a = -c·v / m.
  Verlet particles have no stored velocity, so their implicit velocity
  (x - x_prev) / dt is used instead.
"""
from __future__ import annotations

import numpy as np

from ..types import Particle


def apply_gravity(particle: Particle, g: np.ndarray) -> None:
    """
    Add a uniform gravitational acceleration.

    Args:
        particle: Particle to accelerate.
        g: Gravitational acceleration vector [gx, gy].
    """
    particle.acceleration += g


def apply_acceleration(particle: Particle, a: np.ndarray) -> None:
    """Add an arbitrary externally supplied acceleration for this tick."""
    particle.acceleration += a


def apply_linear_drag(particle: Particle, c: float, dt: float) -> None:
    """
    Add the acceleration produced by linear drag F = -c * v.

    Args:
        particle: Particle to slow down.
        c: Drag coefficient. Zero disables drag.
        dt: Tick length, needed to turn a position history into a velocity.
    """
    if c == 0.0:
        return
    if particle.velocity is not None:
        v = particle.velocity
    elif dt > 0:
        v = particle.implicit_velocity() / dt
    else:
        return
    particle.acceleration += -c * v * particle.inv_mass
