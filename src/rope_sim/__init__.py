# MIT License (see LICENSE)
"""
rope_sim - A deterministic 2D particle and distance-constraint simulator.

This package advances point masses joined by distance constraints through
fixed time steps, giving rope and soft-body like behavior, plus a minimal
rigid body impulse model.

Main entry points:
    - World: Owns particles and constraints and exposes advance_tick().
    - RigidBody, Circle, Rectangle: Impulse-driven rigid bodies.
    - ConfigurationError, Diagnostics: Error and per-tick report types.

Submodules:
    - core: Accelerations, integrators, boundary response, invariants.
    - constraints: Iterative distance constraint solver.
    - store: Creation-ordered particle and constraint containers.
    - rigid: Moment of inertia and force/torque impulses.

Example:
    from rope_sim import World

    world = World(dt=1/60, iterations=4, gravity=(0, -9.81), bounds=(10, 10))
    a = world.create_particle((0, 0), mass=1.0)
    b = world.create_particle((1, 0), mass=1.0)
    world.create_constraint(a, b, rest_length=1.0)
    diagnostics = world.advance_tick()
"""
from .world import World
from .errors import ConfigurationError, DataFault, DegenerateGeometry, Diagnostics
from .types import Particle, ParticleState, DistanceConstraint, ParticleId, ConstraintId
from .rigid import (
    RigidBody,
    Circle,
    Rectangle,
    ForceTorque,
    moment_of_inertia,
    get_displacement,
    apply_displacement,
)
from .profiler import Profiler

__all__ = [
    # Simulation
    "World",
    "Particle",
    "ParticleState",
    "DistanceConstraint",
    "ParticleId",
    "ConstraintId",
    # Errors and diagnostics
    "ConfigurationError",
    "DataFault",
    "DegenerateGeometry",
    "Diagnostics",
    # Rigid bodies
    "RigidBody",
    "Circle",
    "Rectangle",
    "ForceTorque",
    "moment_of_inertia",
    "get_displacement",
    "apply_displacement",
    # Profiling
    "Profiler",
]
