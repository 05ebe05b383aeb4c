# MIT License (see LICENSE)
"""
Iterative distance constraint solver.

Constraints are relaxed with repeated local corrections instead of a direct
linear solve. Each pass nudges every constraint part of the way toward its
rest length; repeating the pass a few times (1-4 is typical) gives a stiff
enough rope at interactive rates. Cost is O(iterations × constraints).

Per constraint, with delta = x_b - x_a and d = |delta|:

    diff     = (rest_length - d) / d * strength * scale
    offset   = delta * diff * 0.5
    effect_a = (1/m_a) / (1/m_a + 1/m_b),  effect_b = 1 - effect_a
    x_a -= offset * effect_a
    x_b += offset * effect_b

Heavier particles absorb proportionally less of the correction. In velocity
mode the same split is applied to velocities instead of positions.

Constraints are visited in creation order and each correction is written in
place before the next constraint reads (Gauss-Seidel). A constraint reads
both endpoints right before writing both, so its pairwise read is
consistent, and later constraints sharing an endpoint see the corrected
state. The result therefore depends on creation order.

Velocity mode never moves positions inside a tick, so every iteration reads
the same geometry and adds the same velocity correction again. There the
iteration count acts as a gain on the correction rather than a convergence
knob.
"""
from __future__ import annotations
import logging

import numpy as np

from ..errors import DataFault, DegenerateGeometry
from ..store import ParticleStore, ConstraintStore
from ..types import Particle, DistanceConstraint

logger = logging.getLogger(__name__)

CORRECTION_MODES = ("position", "velocity")


def constraint_correction(
    a: Particle,
    b: Particle,
    c: DistanceConstraint,
    scale: float = 1.0,
) -> tuple[np.ndarray, np.ndarray] | None:
    """
    Compute the correction for one constraint without applying it.

    Returns:
        (correction_a, correction_b) to add to the endpoints' position (or
        velocity), or None when the endpoints coincide and no direction is
        defined.
    """
    delta = b.position - a.position
    dist = float(np.sqrt(delta[0] * delta[0] + delta[1] * delta[1]))
    if dist == 0.0:
        return None

    diff = (c.rest_length - dist) / dist * c.strength * scale
    offset = delta * (diff * 0.5)

    inv_a, inv_b = a.inv_mass, b.inv_mass
    effect_a = inv_a / (inv_a + inv_b)
    effect_b = 1.0 - effect_a
    return -offset * effect_a, offset * effect_b


def solve_distance_constraints(
    particles: ParticleStore,
    constraints: ConstraintStore,
    iterations: int,
    correction: str = "position",
    scale: float = 1.0,
) -> tuple[list[DataFault], list[DegenerateGeometry]]:
    """
    Relax all distance constraints for one tick.

    Args:
        particles: Particle store (modified in-place).
        constraints: Constraints, visited in creation order.
        iterations: Number of passes over all constraints. 0 is a no-op.
        correction: "position" moves endpoints, "velocity" changes their
                    velocities. Velocity mode requires velocity-carrying
                    particles.
        scale: Extra multiplier applied on top of each constraint's strength.

    Returns:
        (faults, degenerate) records for the tick's diagnostics.

    Raises:
        ValueError: If correction is not a known mode.
    """
    if correction not in CORRECTION_MODES:
        raise ValueError(f"Unknown correction mode: {correction}")

    faults: list[DataFault] = []
    degenerate: list[DegenerateGeometry] = []

    # Resolve ids once per tick; unresolvable constraints sit out the whole tick.
    active = []
    for cid, c in constraints.items():
        missing = particles.missing(c.a, c.b)
        if missing:
            logger.warning(f"Constraint {cid} references missing particle(s) {list(missing)}; skipped this tick")
            faults.append(DataFault(constraint_id=cid, missing=missing))
            continue
        a, b = particles.get_pair(c.a, c.b)
        active.append((cid, c, a, b))

    for it in range(iterations):
        for cid, c, a, b in active:
            result = constraint_correction(a, b, c, scale)
            if result is None:
                logger.debug(f"Constraint {cid} endpoints coincide; skipped iteration {it}")
                degenerate.append(DegenerateGeometry(constraint_id=cid, iteration=it))
                continue
            da, db = result
            if correction == "position":
                a.position += da
                b.position += db
            else:
                a.velocity += da
                b.velocity += db

    return faults, degenerate
