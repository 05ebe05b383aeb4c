# MIT License (see LICENSE)
"""
Core particle simulation components.

This subpackage provides:
    - Acceleration generators: gravity, per-particle pushes, linear drag.
    - Integrators: semi-implicit Euler and position-history Verlet.
    - Boundary response: clamp to an axis-aligned domain and reflect.
    - Invariants: center of mass, momentum, kinetic energy.

Typical usage:
    from rope_sim.core import apply_gravity, verlet_step

    apply_gravity(particle, np.array([0, -9.81]))
    verlet_step(particle, dt=1/60)
"""
from .forces import apply_gravity, apply_acceleration, apply_linear_drag
from .integrators import semi_implicit_euler_step, verlet_step, integrate
from .boundary import resolve_particle, resolve_bounds
from .invariants import center_of_mass, linear_momentum, kinetic_energy, total_mass

__all__ = [
    # Accelerations
    "apply_gravity",
    "apply_acceleration",
    "apply_linear_drag",
    # Integrators
    "semi_implicit_euler_step",
    "verlet_step",
    "integrate",
    # Boundary
    "resolve_particle",
    "resolve_bounds",
    # Invariants
    "center_of_mass",
    "linear_momentum",
    "kinetic_energy",
    "total_mass",
]
