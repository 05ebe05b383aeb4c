# MIT License (see LICENSE)
"""
Axis-aligned domain boundary response.

The domain is the box [-hx, hx] × [-hy, hy] centered on the origin. The
half-extents are supplied by the caller (typically the viewport size minus a
margin). Each axis is handled independently, so a particle leaving through a
corner is clamped and reflected on both axes in the same tick.

Velocity response uses a signed restitution factor: -1.0 is a perfectly
elastic reflection, 0.0 kills the normal velocity, values in between lose
energy on every bounce.
"""
from __future__ import annotations

from typing import Iterable

import numpy as np

from ..types import Particle


def resolve_particle(
    particle: Particle,
    bounds: np.ndarray,
    restitution: float = -1.0,
    inset_by_radius: bool = False,
) -> bool:
    """
    Clamp one particle into the domain and reflect its velocity.

    For Verlet particles the implicit velocity (x - x_prev), measured before
    the clamp, is reflected by rewriting previous_position.

    Args:
        particle: Particle to resolve (modified in-place).
        bounds: Half-extents [hx, hy].
        restitution: Factor applied to the velocity component on contact.
        inset_by_radius: Shrink the bound by the particle radius.

    Returns:
        True if any axis was in contact.
    """
    implicit = None
    if particle.velocity is None and particle.previous_position is not None:
        implicit = particle.position - particle.previous_position

    hit = False
    for axis in range(2):
        bound = float(bounds[axis])
        if inset_by_radius:
            bound = max(0.0, bound - particle.radius)
        x = particle.position[axis]
        if abs(x) <= bound:
            continue

        hit = True
        particle.position[axis] = bound if x > 0 else -bound
        if particle.velocity is not None:
            particle.velocity[axis] *= restitution
        elif implicit is not None:
            particle.previous_position[axis] = particle.position[axis] - restitution * implicit[axis]
    return hit


def resolve_bounds(
    particles: Iterable[Particle],
    bounds: np.ndarray,
    restitution: float = -1.0,
    inset_by_radius: bool = False,
) -> int:
    """
    Resolve every particle against the domain.

    Returns:
        Number of particles that touched the boundary.
    """
    return sum(
        resolve_particle(p, bounds, restitution, inset_by_radius)
        for p in particles
    )
