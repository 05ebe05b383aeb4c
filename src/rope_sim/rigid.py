# MIT License (see LICENSE)
"""
Minimal rigid body impulse model.

Rigid bodies live beside the particle system but are never touched by the
tick. They change only through instantaneous impulses:

  Linear:  Δv = F / m
  Angular: Δω = τ / I

Impulses are not scaled by dt.

Torque from an off-center push is computed as

  τ = (r × F) · |r|,   r = point - position

The extra |r| factor makes torque grow with the square of the lever arm
instead of linearly as in r × F. See DESIGN.md before changing it.
"""
from __future__ import annotations
from dataclasses import dataclass, field

import numpy as np

from .errors import ConfigurationError
from .util import f64, norm, cross2


# =============================================================================
# Shape Definitions
# =============================================================================

@dataclass(frozen=True)
class Circle:
    """
    Circular shape defined by radius.

    Attributes:
        radius: Distance from center to edge.
    """
    radius: float = 1.0


@dataclass(frozen=True)
class Rectangle:
    """Axis-aligned rectangle given by its full width and height."""
    width: float
    height: float


Shape2D = Circle | Rectangle


# =============================================================================
# Rigid Body
# =============================================================================

@dataclass
class RigidBody:
    """
    A 2D body with orientation and mass.

    Attributes:
        shape: Circle or Rectangle; selects the inertia formula.
        position: Center of mass [x, y].
        velocity: Linear velocity [vx, vy].
        rotation: Angle in radians, counterclockwise from +x.
        angular_velocity: Radians per second, counterclockwise positive.
        mass: Must be > 0.
        id: Assigned by World.add_body().
    """
    shape: Shape2D = field(default_factory=Circle)
    position: np.ndarray | tuple[float, float] = (0.0, 0.0)
    velocity: np.ndarray | tuple[float, float] = (0.0, 0.0)
    rotation: float = 0.0
    angular_velocity: float = 0.0
    mass: float = 1.0
    id: int = -1

    def __post_init__(self) -> None:
        """Validate mass and shape, convert vectors to float64 arrays."""
        if not self.mass > 0:
            raise ConfigurationError(f"Rigid body mass must be positive, got {self.mass}")
        if isinstance(self.shape, Circle):
            if not self.shape.radius > 0:
                raise ConfigurationError(f"Circle radius must be positive, got {self.shape.radius}")
        elif isinstance(self.shape, Rectangle):
            if not (self.shape.width > 0 and self.shape.height > 0):
                raise ConfigurationError(
                    f"Rectangle size must be positive, got ({self.shape.width}, {self.shape.height})"
                )
        else:
            raise ConfigurationError(f"Unknown shape type: {type(self.shape)}")
        self.position = f64(self.position)
        self.velocity = f64(self.velocity)

    @property
    def inertia(self) -> float:
        """Moment of inertia about the center of mass."""
        return moment_of_inertia(self)


@dataclass(frozen=True)
class ForceTorque:
    """Transient impulse produced by get_displacement and consumed by apply_displacement."""
    force: np.ndarray
    torque: float


def moment_of_inertia(body: RigidBody) -> float:
    """
    Moment of inertia for the body's shape.

    Formulas for solid 2D shapes:
      Circle:    I = (1/2) m r²
      Rectangle: I = (1/12) m (w² + h²)

    Reference: https://en.wikipedia.org/wiki/List_of_moments_of_inertia
    """
    shape = body.shape
    if isinstance(shape, Circle):
        return body.mass * shape.radius * shape.radius / 2.0
    if isinstance(shape, Rectangle):
        return body.mass * (shape.width * shape.width + shape.height * shape.height) / 12.0
    raise TypeError(f"Unknown shape type: {type(shape)}")


def get_displacement(body: RigidBody, application_point, force) -> ForceTorque:
    """
    Turn a force applied at a world point into a force/torque pair.

    Args:
        body: Body being pushed.
        application_point: World-space point where the force acts.
        force: Force vector [Fx, Fy].
    """
    force = f64(force)
    delta = f64(application_point) - body.position
    torque = cross2(delta, force) * norm(delta)
    return ForceTorque(force=force, torque=torque)


def apply_displacement(body: RigidBody, ft: ForceTorque) -> None:
    """Apply an instantaneous impulse to the body's linear and angular velocity."""
    body.velocity = body.velocity + ft.force / body.mass
    body.angular_velocity += ft.torque / moment_of_inertia(body)
