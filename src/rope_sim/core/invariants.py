# MIT License (see LICENSE)
"""
Utilities for calculating physical invariants and conserved quantities.

Used for verifying simulation correctness and debugging stability issues.
Internal constraint corrections are mass weighted and pairwise opposite, so
they leave the center of mass (and, in velocity mode, the total momentum)
unchanged.
"""
from __future__ import annotations
from typing import Iterable

import numpy as np

from ..types import Particle


def total_mass(particles: Iterable[Particle]) -> float:
    """Sum of particle masses."""
    return float(sum(p.mass for p in particles))


def center_of_mass(particles: list[Particle]) -> np.ndarray:
    """
    Mass-weighted mean position.

    C = Σ (m * x) / Σ m

    Returns:
        [x, y], or the zero vector for an empty list.
    """
    m = total_mass(particles)
    c = np.zeros(2, dtype=np.float64)
    if m == 0.0:
        return c
    for p in particles:
        c += p.mass * p.position
    return c / m


def linear_momentum(particles: list[Particle], dt: float = 1.0) -> np.ndarray:
    """
    Total linear momentum P = Σ (m * v).

    Verlet particles contribute m * (x - x_prev) / dt.
    """
    total = np.zeros(2, dtype=np.float64)
    for p in particles:
        v = p.velocity if p.velocity is not None else p.implicit_velocity() / dt
        total += p.mass * v
    return total


def kinetic_energy(particles: list[Particle], dt: float = 1.0) -> float:
    """
    Total kinetic energy T = Σ (0.5 * m * v²).

    Verlet particles use the implicit velocity (x - x_prev) / dt.
    """
    ke = 0.0
    for p in particles:
        v = p.velocity if p.velocity is not None else p.implicit_velocity() / dt
        ke += 0.5 * p.mass * float(np.dot(v, v))
    return ke
