# MIT License (see LICENSE)
"""
Core type definitions for the particle simulation.

Defines the fundamental data structures:
- Particle: a mass-bearing point with position and either an explicit
  velocity (semi-implicit Euler) or a position history (Verlet).
- DistanceConstraint: a pairwise rule pulling two particles toward a
  rest separation.
- ParticleState: a frozen snapshot handed to read-only consumers.

Particles and constraints are addressed by dense integer ids assigned by
their stores (see store.py), never by object reference.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import NewType

import numpy as np

from .util import f64, as_tuple


ParticleId = NewType("ParticleId", int)
ConstraintId = NewType("ConstraintId", int)


# =============================================================================
# Particle
# =============================================================================

@dataclass
class Particle:
    """
    A point mass with no rotational state.

    Exactly one of `velocity` and `previous_position` is set, depending on
    the integration mode of the owning store:
      Euler:  x' = x + v·dt                        (velocity stored)
      Verlet: x' = x + (x - x_prev)·friction       (velocity implicit)

    Attributes:
        position: Current position [x, y].
        mass: Mass, always > 0.
        radius: Collision radius, >= 0. Only used by the boundary resolver.
        friction: Damping factor in (0, 1] applied to the implicit velocity
                  in Verlet mode. 1.0 means no loss.
        velocity: Explicit velocity [vx, vy] (Euler mode) or None.
        previous_position: Position before the last step (Verlet mode) or None.
        acceleration: External acceleration accumulated for the current
                      tick; cleared after the tick completes.
    """
    position: np.ndarray | tuple[float, float]
    mass: float
    radius: float = 0.0
    friction: float = 1.0
    velocity: np.ndarray | tuple[float, float] | None = None
    previous_position: np.ndarray | tuple[float, float] | None = None
    acceleration: np.ndarray = field(default_factory=lambda: np.zeros(2, dtype=np.float64))

    def __post_init__(self) -> None:
        """Convert vector fields to float64 arrays for consistent numerics."""
        self.position = f64(self.position)
        if self.velocity is not None:
            self.velocity = f64(self.velocity)
        if self.previous_position is not None:
            self.previous_position = f64(self.previous_position)
        self.acceleration = f64(self.acceleration)

    @property
    def inv_mass(self) -> float:
        """Inverse mass (1/m)."""
        return 1.0 / self.mass

    def implicit_velocity(self) -> np.ndarray:
        """
        Per-step displacement carried into the next step.

        For Verlet particles this is x - x_prev; for Euler particles the
        stored velocity is returned as is.
        """
        if self.velocity is not None:
            return self.velocity.copy()
        if self.previous_position is not None:
            return self.position - self.previous_position
        return np.zeros(2, dtype=np.float64)

    def clear_acceleration(self) -> None:
        """Reset accumulated acceleration to zero for the next tick."""
        self.acceleration[:] = 0.0

    def snapshot(self) -> "ParticleState":
        """Return a frozen copy of the current state."""
        return ParticleState(
            position=as_tuple(self.position),
            velocity=as_tuple(self.velocity),
            previous_position=as_tuple(self.previous_position),
            radius=self.radius,
            mass=self.mass,
            friction=self.friction,
        )


@dataclass(frozen=True)
class ParticleState:
    """Read-only view of a particle, safe to hand to rendering or inspection code."""
    position: tuple[float, float]
    velocity: tuple[float, float] | None
    previous_position: tuple[float, float] | None
    radius: float
    mass: float
    friction: float


# =============================================================================
# Constraints
# =============================================================================

@dataclass(frozen=True)
class DistanceConstraint:
    """
    Pulls two particles toward a fixed separation.

    Attributes:
        a: Id of the first particle.
        b: Id of the second particle (never equal to a).
        rest_length: Target distance, >= 0.
        strength: Fraction in (0, 1] of the error corrected per iteration.
    """
    a: int
    b: int
    rest_length: float
    strength: float = 1.0
